"""In-memory transport for testing.

Allows injecting server lines and recording sent commands. No actual I/O.

Usage:
    transport = MockTransport(["TS3"])
    transport.set_response("version", ["version=3.13.7 build=1655727713 platform=Linux",
                                       STATUS_OK])

    adapter = ServerQueryAdapter(transport=transport)
    adapter.connect()
    adapter.request("version")

    assert transport.sent_lines == ["version"]
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from ..errors import TransportError
from ..protocol.wire import first_field
from .base import Transport, TransportConfig

# Status line of a successful reply, for canned responses
STATUS_OK = "error id=0 msg=ok"


class MockTransport(Transport):
    """Transport that replays canned lines."""

    def __init__(
        self,
        lines: Iterable[str] | None = None,
        config: TransportConfig | None = None,
        blocking: bool = True,
    ) -> None:
        super().__init__(config or TransportConfig(blocking=blocking))
        self._incoming: deque[str | None] = deque(lines or [])
        self._sent: list[str] = []
        self._responses: dict[str, list[str]] = {}
        self.read_count = 0
        self.send_error: Exception | None = None

    @property
    def sent_lines(self) -> list[str]:
        """All lines sent through this transport."""
        return self._sent.copy()

    @property
    def pending(self) -> int:
        """Number of queued lines not read yet."""
        return len(self._incoming)

    def feed(self, *lines: str | None) -> None:
        """Queue lines for read_line(). None simulates an empty non-blocking poll."""
        self._incoming.extend(lines)

    def set_response(self, verb: str, lines: list[str]) -> None:
        """Queue `lines` every time a command with this verb is sent."""
        self._responses[verb] = lines

    def clear(self) -> None:
        """Clear recorded lines, queued lines and canned responses."""
        self._sent.clear()
        self._incoming.clear()
        self._responses.clear()
        self.read_count = 0

    def _do_connect(self) -> None:
        """No-op for mock."""

    def _do_disconnect(self) -> None:
        """No-op for mock."""

    def send_line(self, line: str) -> None:
        if not self.is_connected:
            raise TransportError("not connected")
        if self.send_error is not None:
            raise self.send_error

        self._sent.append(line)
        self._incoming.extend(self._responses.get(first_field(line), []))

    def read_line(self) -> str | None:
        if not self.is_connected:
            raise TransportError("not connected")

        self.read_count += 1
        if self._incoming:
            return self._incoming.popleft()
        if not self.config.blocking:
            return None
        raise TransportError("timed out waiting for data (mock transport exhausted)")
