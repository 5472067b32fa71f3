from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "XCHANNEL_", "env_file": ".env", "extra": "ignore"}

    # Codec
    serializer: Literal["pickle", "json"] = "pickle"
    framing: Literal["base64", "separator"] = "base64"
    separator: str = Field(default="_$_", min_length=1)

    # Default deadline (seconds) for send_timeout/recv_timeout
    timeout: float = Field(default=0.1, ge=0)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @property
    def separator_bytes(self) -> bytes:
        return self.separator.encode("utf-8")


def load_settings(**overrides) -> Settings:
    """Read settings from the environment / .env; keyword overrides win."""
    return Settings(**overrides)
