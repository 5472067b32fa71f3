import pytest

from xchannel.serializers import JSONSerializer, PickleSerializer, get_serializer


def test_pickle_serializer_handles_python_objects():
    s = PickleSerializer()
    value = {"set": {1, 2}, "tuple": (1, "a"), "bytes": b"\x00"}
    assert s.load(s.dump(value)) == value


def test_json_serializer_returns_bytes():
    s = JSONSerializer()
    data = s.dump({"id": 1, "tag": "x"})
    assert isinstance(data, bytes)
    assert s.load(data) == {"id": 1, "tag": "x"}


def test_json_serializer_rejects_unsupported_values():
    with pytest.raises(TypeError):
        JSONSerializer().dump({1, 2})


def test_get_serializer():
    assert isinstance(get_serializer("pickle"), PickleSerializer)
    assert isinstance(get_serializer("json"), JSONSerializer)
    with pytest.raises(ValueError):
        get_serializer("yaml")
