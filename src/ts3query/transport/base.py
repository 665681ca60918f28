"""Transport abstraction for the ServerQuery adapter.

The adapter only needs line-level I/O. Transports handle:
- Connection management (connect/disconnect)
- Framing (LF-terminated lines) and text encoding
- Blocking vs. non-blocking reads

A blocking transport's read_line() waits until a full line is available. A
non-blocking transport's read_line() may return None, meaning "nothing yet".
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..adapter import ServerQueryAdapter


class TransportState(str, Enum):
    """Connection state machine."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    CLOSED = "closed"


@dataclass
class TransportConfig:
    """Transport configuration."""

    host: str = "127.0.0.1"
    port: int = 10011
    timeout: float = 10.0

    # Non-blocking reads poll the socket for at most poll_interval seconds
    blocking: bool = True
    poll_interval: float = 1.0

    encoding: str = "utf-8"

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by name."""
        return asdict(self).get(key, default)


class Transport(ABC):
    """Abstract line transport."""

    def __init__(self, config: TransportConfig | None = None) -> None:
        self.config = config or TransportConfig()
        self._state = TransportState.DISCONNECTED
        self._adapter: ServerQueryAdapter | None = None

    @property
    def state(self) -> TransportState:
        """Current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state == TransportState.CONNECTED

    @property
    def adapter(self) -> ServerQueryAdapter | None:
        """The adapter this transport is bound to, if any."""
        return self._adapter

    def set_adapter(self, adapter: ServerQueryAdapter) -> None:
        """Bind the owning adapter."""
        self._adapter = adapter

    def get_config(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def connect(self) -> None:
        """Establish the connection. No-op if already connected.

        Raises:
            TransportError: If the connection cannot be established
        """
        if self.is_connected:
            return
        self._do_connect()
        self._state = TransportState.CONNECTED

    def disconnect(self) -> None:
        """Close the connection. No-op if not connected."""
        if not self.is_connected:
            return
        try:
            self._do_disconnect()
        finally:
            self._state = TransportState.CLOSED

    @abstractmethod
    def send_line(self, line: str) -> None:
        """Send one line; the transport appends the line terminator.

        Raises:
            TransportError: If not connected or the write fails
        """

    @abstractmethod
    def read_line(self) -> str | None:
        """Read one line without its terminator.

        Returns:
            The line, or None if a non-blocking transport has nothing yet

        Raises:
            TransportError: If not connected, timed out or connection lost
        """

    @abstractmethod
    def _do_connect(self) -> None:
        """Transport-specific connection logic."""

    @abstractmethod
    def _do_disconnect(self) -> None:
        """Transport-specific disconnection logic."""

    def __enter__(self) -> Transport:
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.disconnect()
