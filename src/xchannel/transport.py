"""
xchannel.transport
Delimiter-framed send/receive over one socket endpoint, plus the selectors-based readiness gate.
"""
from __future__ import annotations

import logging
import selectors
import socket
from typing import Optional

from .errors import ConnectionClosed, TransportError
from .protocol import Framing

log = logging.getLogger(__name__)

RECV_SIZE = 4096


def wait_ready(sock: socket.socket, writable: bool = False, timeout: Optional[float] = None) -> bool:
    """
    Wait until `sock` is readable (or writable). timeout=None waits forever,
    timeout=0 is a single non-blocking poll. Returns False if the deadline passed.
    """
    if timeout is not None and timeout < 0:
        raise ValueError(f"timeout must be >= 0 or None, got {timeout!r}")
    event = selectors.EVENT_WRITE if writable else selectors.EVENT_READ
    with selectors.DefaultSelector() as selector:
        selector.register(sock, event)
        ready = selector.select(timeout)
    return any(e & event for _, e in ready)


class FramedSocket:
    def __init__(self, sock: socket.socket, framing: Framing):
        self.sock = sock
        self.framing = framing
        self.buf = b""

    @property
    def closed(self) -> bool:
        return self.sock.fileno() == -1

    def close(self) -> None:
        self.sock.close()
        self.buf = b""

    def wait_readable(self, timeout: Optional[float] = None) -> bool:
        # A complete frame already buffered counts as readable.
        if self.framing.has_frame(self.buf):
            return True
        return wait_ready(self.sock, writable=False, timeout=timeout)

    def wait_writable(self, timeout: Optional[float] = None) -> bool:
        return wait_ready(self.sock, writable=True, timeout=timeout)

    def send_frame(self, payload: bytes) -> None:
        data = self.framing.frame(payload)
        try:
            n = self.sock.send(data)
        except OSError as e:
            raise TransportError(f"write failed: {e}") from e
        if n != len(data):
            raise TransportError(f"short write: {n} of {len(data)} bytes")
        log.debug("wrote frame of %d bytes", n)

    def recv_frame(self) -> bytes:
        """
        Block until the next delimiter arrives, consume it, and return the decoded body.
        There is no deadline here: once bytes are readable the rest of the frame is
        expected to follow, and a peer that stalls mid-frame stalls this call too.
        """
        while True:
            body, rest = self.framing.deframe(self.buf)
            if body is not None:
                self.buf = rest
                log.debug("read frame of %d bytes", len(body) + len(self.framing.delimiter))
                return self.framing.decode(body)
            try:
                chunk = self.sock.recv(RECV_SIZE)
            except OSError as e:
                raise TransportError(f"read failed: {e}") from e
            if not chunk:
                raise ConnectionClosed("connection closed")
            self.buf += chunk
