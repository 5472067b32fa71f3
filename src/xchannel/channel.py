"""
xchannel.channel
Message channel over a local socketpair: serializer + delimiter framing + selector-based timeouts.

Both endpoints live in one Channel object; a peer (forked process or another
thread) sends on the writer and the other side receives from the reader.
"""
from __future__ import annotations

import logging
import socket
from typing import Any, Optional

from .config import Settings, load_settings
from .errors import ChannelTimeout, ClosedChannelError, SerializationError
from .protocol import Base64Framing, Framing, get_framing
from .serializers import PickleSerializer, Serializer, get_serializer
from .transport import FramedSocket

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 0.1

# send_timeout/recv_timeout called without a timeout: use the channel's own
_DEFAULT = object()


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


# last_message() before anything has been received
UNSET = _Unset()


class Channel:
    def __init__(
        self,
        serializer: Optional[Serializer] = None,
        framing: Optional[Framing] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        if timeout is None or timeout < 0:
            raise ValueError(f"default timeout must be >= 0, got {timeout!r}")
        self.serializer = serializer if serializer is not None else PickleSerializer()
        self.framing = framing if framing is not None else Base64Framing()
        self.timeout = timeout
        self._last_msg: Any = UNSET
        reader, writer = socket.socketpair()
        self.reader = FramedSocket(reader, self.framing)
        self.writer = FramedSocket(writer, self.framing)
        log.debug("opened %r", self)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Channel":
        if settings is None:
            settings = load_settings()
        return cls(
            serializer=get_serializer(settings.serializer),
            framing=get_framing(settings.framing, settings.separator_bytes),
            timeout=settings.timeout,
        )

    # -- lifecycle --

    @property
    def closed(self) -> bool:
        return self.reader.closed and self.writer.closed

    def close(self) -> bool:
        if self.closed:
            raise ClosedChannelError()
        self.reader.close()
        self.writer.close()
        log.debug("closed channel")
        return True

    def __enter__(self) -> "Channel":
        return self

    def __exit__(self, *exc) -> None:
        if not self.closed:
            self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<Channel {state} framing={self.framing!r} serializer={self.serializer!r}>"

    # -- send --

    def send(self, value: Any) -> None:
        """Blocking write: waits for the writer to become writable with no deadline."""
        self._send(value, None)

    def send_timeout(self, value: Any, timeout: Any = _DEFAULT) -> None:
        """
        Write with a deadline of `timeout` seconds. Omitted: the channel default;
        None: wait forever; 0: poll once.

        Raises ClosedChannelError if the writer is closed and ChannelTimeout if it
        doesn't become writable in time, in which case nothing was written.
        """
        self._send(value, self.timeout if timeout is _DEFAULT else timeout)

    write = send
    write_timeout = send_timeout

    def _send(self, value: Any, timeout: Optional[float]) -> None:
        if self.writer.closed:
            raise ClosedChannelError()
        if not self.writer.wait_writable(timeout):
            log.debug("write timed out after %s seconds", timeout)
            raise ChannelTimeout(f"write timed out after waiting {timeout} seconds", timeout)
        try:
            payload = self.serializer.dump(value)
        except Exception as e:
            raise SerializationError(f"cannot serialize {type(value).__name__}: {e}") from e
        self.writer.send_frame(payload)

    # -- receive --

    def recv(self) -> Any:
        """Blocking read: waits for a message with no deadline."""
        return self._recv(None)

    def recv_timeout(self, timeout: Any = _DEFAULT) -> Any:
        """
        Read with a deadline of `timeout` seconds. Omitted: the channel default;
        None: wait forever; 0: poll once.

        The deadline only covers waiting for the first readable bytes. Once data is
        available the rest of the frame is read without a deadline.
        """
        return self._recv(self.timeout if timeout is _DEFAULT else timeout)

    read = recv
    read_timeout = recv_timeout

    def _recv(self, timeout: Optional[float]) -> Any:
        if self.reader.closed:
            raise ClosedChannelError()
        if not self.reader.wait_readable(timeout):
            log.debug("read timed out after %s seconds", timeout)
            raise ChannelTimeout(f"read timed out after waiting {timeout} seconds", timeout)
        try:
            payload = self.reader.recv_frame()
        except ValueError as e:
            raise SerializationError(str(e)) from e
        try:
            value = self.serializer.load(payload)
        except Exception as e:
            raise SerializationError(f"cannot deserialize message: {e}") from e
        self._last_msg = value
        return value

    # -- drain --

    def readable(self) -> bool:
        """True when a message is waiting. Never blocks."""
        if self.closed or self.reader.closed:
            return False
        return self.reader.wait_readable(0)

    def last_message(self) -> Any:
        """
        Read until no messages are left and return the newest one.
        Older queued messages are discarded. Returns UNSET if nothing was ever received.
        """
        while self.readable():
            self._last_msg = self.recv()
        return self._last_msg
