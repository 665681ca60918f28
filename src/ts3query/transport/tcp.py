"""TCP socket transport.

Wire format: UTF-8 text, one line per command or reply row. Outgoing lines
are LF-terminated. Incoming lines are split on LF; surrounding whitespace is
stripped because servers terminate lines with LF CR.

In blocking mode the socket timeout bounds every read. In non-blocking mode
each read_line() call polls for at most `poll_interval` seconds and returns
None if no complete line arrived.
"""

from __future__ import annotations

import logging
import select
import socket

from ..errors import TransportError
from ..protocol.wire import SEPARATOR_LINE
from .base import Transport, TransportConfig, TransportState

logger = logging.getLogger(__name__)

NEWLINE = SEPARATOR_LINE.encode("ascii")
RECV_SIZE = 4096


class TCPTransport(Transport):
    """Line transport over a TCP socket."""

    def __init__(self, config: TransportConfig | None = None) -> None:
        super().__init__(config)
        self._sock: socket.socket | None = None
        self._buffer = b""

    @property
    def address(self) -> str:
        return f"{self.config.host}:{self.config.port}"

    def _do_connect(self) -> None:
        try:
            self._sock = socket.create_connection(
                (self.config.host, self.config.port),
                timeout=self.config.timeout,
            )
        except OSError as e:
            raise TransportError(f"failed to connect to {self.address}: {e}") from e

        self._buffer = b""
        logger.info(f"Connected to {self.address}")

    def _do_disconnect(self) -> None:
        sock, self._sock = self._sock, None
        self._buffer = b""
        if sock is not None:
            sock.close()
            logger.info(f"Disconnected from {self.address}")

    def _require_socket(self) -> socket.socket:
        if self._sock is None or not self.is_connected:
            raise TransportError(f"not connected to {self.address}")
        return self._sock

    def _lost(self, reason: str) -> TransportError:
        """Mark the connection closed and build the error to raise."""
        self._state = TransportState.CLOSED
        if self._sock is not None:
            self._sock.close()
            self._sock = None
        return TransportError(f"connection to {self.address} lost: {reason}")

    def send_line(self, line: str) -> None:
        sock = self._require_socket()
        logger.debug(f"-> {line}")
        try:
            sock.sendall(line.encode(self.config.encoding) + NEWLINE)
        except OSError as e:
            raise self._lost(str(e)) from e

    def read_line(self) -> str | None:
        sock = self._require_socket()

        while NEWLINE not in self._buffer:
            if not self.config.blocking:
                ready, _, _ = select.select([sock], [], [], self.config.poll_interval)
                if not ready:
                    return None

            try:
                chunk = sock.recv(RECV_SIZE)
            except TimeoutError as e:
                raise TransportError(
                    f"timed out after {self.config.timeout}s waiting for {self.address}"
                ) from e
            except OSError as e:
                raise self._lost(str(e)) from e

            if not chunk:
                raise self._lost("closed by peer")

            self._buffer += chunk

        raw, _, self._buffer = self._buffer.partition(NEWLINE)
        line = raw.decode(self.config.encoding, errors="replace").strip()
        logger.debug(f"<- {line}")
        return line
