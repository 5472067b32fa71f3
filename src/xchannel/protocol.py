"""
xchannel.protocol
Message framing (delimiter-terminated): one Framing interface, two variants.

Wire format per message: <framed-bytes><delimiter>, no length prefix, no header.
"""
from __future__ import annotations

import base64
import binascii
from abc import ABC, abstractmethod
from typing import Optional, Tuple

NULL_BYTE = b"\x00"
DEFAULT_SEPARATOR = b"_$_"


class Framing(ABC):
    """Turns serialized payloads into self-delimiting frames and back."""

    name = "abstract"
    delimiter = b""

    @abstractmethod
    def encode(self, payload: bytes) -> bytes:
        """Return the frame body for `payload`, without the delimiter."""

    @abstractmethod
    def decode(self, body: bytes) -> bytes:
        """Reverse `encode` for a frame body with the delimiter stripped."""

    def frame(self, payload: bytes) -> bytes:
        return self.encode(payload) + self.delimiter

    def deframe(self, buf: bytes) -> Tuple[Optional[bytes], bytes]:
        """
        Split one frame off the buffer: return (body_or_none, remaining_buf).
        The body still needs `decode`; the delimiter is consumed.
        """
        idx = buf.find(self.delimiter)
        if idx < 0:
            return None, buf
        return buf[:idx], buf[idx + len(self.delimiter):]

    def has_frame(self, buf: bytes) -> bool:
        return self.delimiter in buf

    def __repr__(self) -> str:
        return f"{type(self).__name__}(delimiter={self.delimiter!r})"


class Base64Framing(Framing):
    """
    Text-safe framing: strict base64 body terminated by a NUL byte.
    The base64 alphabet never produces NUL, so frames can't collide with the delimiter.
    """

    name = "base64"
    delimiter = NULL_BYTE

    def encode(self, payload: bytes) -> bytes:
        return base64.b64encode(payload)

    def decode(self, body: bytes) -> bytes:
        try:
            return base64.b64decode(body, validate=True)
        except binascii.Error as e:
            raise ValueError(f"corrupted base64 frame: {e}") from e


class SeparatorFraming(Framing):
    """
    Raw framing: payload bytes as-is, terminated by a multi-byte separator.

    There is no collision guarantee. If a serialized payload contains the
    separator, the frame is split early and the stream desynchronizes.
    Use Base64Framing unless the serializer's output is known not to
    contain the separator.
    """

    name = "separator"

    def __init__(self, separator: bytes = DEFAULT_SEPARATOR):
        if isinstance(separator, str):
            separator = separator.encode("utf-8")
        if not separator:
            raise ValueError("separator must not be empty")
        self.delimiter = separator

    def encode(self, payload: bytes) -> bytes:
        return payload

    def decode(self, body: bytes) -> bytes:
        return body


FRAMINGS = {
    Base64Framing.name: Base64Framing,
    SeparatorFraming.name: SeparatorFraming,
}


def get_framing(name: str, separator: Optional[bytes] = None) -> Framing:
    if name not in FRAMINGS:
        raise ValueError(f"unknown framing {name!r}, expected one of {sorted(FRAMINGS)}")
    if name == SeparatorFraming.name and separator is not None:
        return SeparatorFraming(separator)
    return FRAMINGS[name]()
