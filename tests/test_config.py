import pytest
from pydantic import ValidationError

from xchannel.channel import Channel
from xchannel.config import Settings, load_settings
from xchannel.protocol import Base64Framing, SeparatorFraming
from xchannel.serializers import JSONSerializer, PickleSerializer


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("SERIALIZER", "FRAMING", "SEPARATOR", "TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv(f"XCHANNEL_{name}", raising=False)


def test_defaults():
    s = load_settings()
    assert s.serializer == "pickle"
    assert s.framing == "base64"
    assert s.separator_bytes == b"_$_"
    assert s.timeout == 0.1


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("XCHANNEL_SERIALIZER", "json")
    monkeypatch.setenv("XCHANNEL_FRAMING", "separator")
    monkeypatch.setenv("XCHANNEL_SEPARATOR", "##")
    monkeypatch.setenv("XCHANNEL_TIMEOUT", "0.5")
    s = load_settings()
    assert (s.serializer, s.framing, s.separator, s.timeout) == ("json", "separator", "##", 0.5)


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("XCHANNEL_FRAMING=separator\n")
    assert load_settings().framing == "separator"


def test_invalid_values_rejected():
    with pytest.raises(ValidationError):
        Settings(framing="length")
    with pytest.raises(ValidationError):
        Settings(timeout=-1)
    with pytest.raises(ValidationError):
        Settings(separator="")


def test_channel_from_settings():
    with Channel.from_settings(Settings(serializer="json", framing="separator", separator="##", timeout=0.2)) as ch:
        assert isinstance(ch.serializer, JSONSerializer)
        assert isinstance(ch.framing, SeparatorFraming)
        assert ch.framing.delimiter == b"##"
        assert ch.timeout == 0.2
        ch.send({"id": 1, "tag": "x"})
        assert ch.recv_timeout() == {"id": 1, "tag": "x"}


def test_channel_from_environment():
    with Channel.from_settings() as ch:
        assert isinstance(ch.serializer, PickleSerializer)
        assert isinstance(ch.framing, Base64Framing)


def test_log_level_is_case_insensitive(monkeypatch):
    monkeypatch.setenv("XCHANNEL_LOG_LEVEL", "debug")
    assert load_settings().log_level == "DEBUG"


def test_unknown_log_level_rejected():
    with pytest.raises(ValidationError):
        Settings(log_level="loud")
