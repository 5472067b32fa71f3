"""
xchannel.errors
Error kinds raised by a Channel.
"""
from __future__ import annotations

from typing import Optional


class ChannelError(Exception):
    """Base class for all channel errors."""


class ClosedChannelError(ChannelError, OSError):
    """An operation was attempted on an endpoint that is already closed."""

    def __init__(self, message: str = "closed channel"):
        super().__init__(message)


class ChannelTimeout(ChannelError, TimeoutError):
    """A readiness wait expired. Nothing was read or written, so retrying is safe."""

    def __init__(self, message: str, timeout: Optional[float] = None):
        super().__init__(message)
        self.timeout = timeout


class TransportError(ChannelError):
    """The underlying read or write failed after readiness was confirmed."""


class ConnectionClosed(TransportError, EOFError):
    """The peer closed the stream before a full frame arrived."""


class SerializationError(ChannelError, ValueError):
    """dump/load failed, or a frame could not be decoded."""
