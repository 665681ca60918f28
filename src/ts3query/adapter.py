"""ServerQuery adapter - low-level request/reply over a line transport.

The protocol is strictly half-duplex: one command is sent, then lines are read
until the `error id=... msg=...` status line arrives. A connection must be
used by one caller at a time.

Usage:
    with ServerQueryAdapter(QueryConfig.from_uri(uri)) as adapter:
        reply = adapter.execute("login", {"client_login_name": "admin",
                                          "client_login_password": "secret"})
        servers = adapter.request("serverlist").to_list()

Notifications (non-blocking transports only):
    adapter.execute("servernotifyregister", {"event": "textprivate"})
    event = adapter.wait()
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Mapping
from typing import Any

from .config import QueryConfig
from .errors import (
    BlockedCommandError,
    HandshakeError,
    IllegalCommandError,
    TransportError,
    TransportModeError,
)
from .node.host import Host
from .profiler import Profiler
from .protocol.commands import CommandType, prepare
from .protocol.events import Event
from .protocol.reply import Reply
from .protocol.wire import ERROR, EVENT, first_field
from .signals import Signal, SignalBus
from .transport.base import Transport
from .transport.tcp import TCPTransport

logger = logging.getLogger(__name__)


class ServerQueryAdapter:
    """Sends commands to a query server and collects replies and events.

    Collaborators are injected:
    - transport: line I/O (defaults to TCPTransport built from config)
    - signals: observability hooks (defaults to a private SignalBus)
    - profiler: runtime accounting (defaults to a private Profiler)
    """

    def __init__(
        self,
        config: QueryConfig | None = None,
        transport: Transport | None = None,
        signals: SignalBus | None = None,
        profiler: Profiler | None = None,
    ) -> None:
        self.config = config or QueryConfig()
        self._transport = transport or TCPTransport(self.config.transport)
        self._signals = signals or SignalBus()
        self._profiler = profiler or Profiler()
        self._key = f"sq_{uuid.uuid4().hex[:12]}"
        self._blocked = frozenset(self.config.blocked_commands)

        self._host: Host | None = None
        self._timer: float | None = None
        self._count = 0

    def __repr__(self) -> str:
        return f"ServerQueryAdapter(key={self._key!r}, state={self._transport.state.value!r})"

    # =========================================================================
    # Collaborators
    # =========================================================================

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def signals(self) -> SignalBus:
        return self._signals

    @property
    def profiler(self) -> Profiler:
        return self._profiler

    @property
    def profiler_key(self) -> str:
        """Scope key of this adapter in the profiler."""
        return self._key

    @property
    def host(self) -> Host:
        """The Host node of this connection, created on first access."""
        if self._host is None:
            self._host = Host(self)
        return self._host

    # =========================================================================
    # Connection lifecycle
    # =========================================================================

    def connect(self) -> None:
        """Connect the transport and validate the server greeting.

        Raises:
            HandshakeError: If the transport cannot connect, no greeting arrives
                within the timeout, or the greeting does not start with a known
                protocol identifier. The transport is disconnected first.
        """
        try:
            self._transport.connect()
        except TransportError as e:
            raise HandshakeError(f"failed to establish connection: {e}") from e

        self._transport.set_adapter(self)
        self._profiler.init(self._key)

        try:
            greeting = self._read_greeting()
        except TransportError as e:
            self._transport.disconnect()
            raise HandshakeError(f"no greeting from the server: {e}") from e

        if not greeting.startswith(self.config.proto_idents):
            self._transport.disconnect()
            raise HandshakeError(f"invalid reply from the server ({greeting})")

        logger.info(f"ServerQuery connection established ({greeting})")
        self._signals.emit(Signal.CONNECTED, self)

    def _read_greeting(self) -> str:
        """Read the first line, polling a non-blocking transport until timeout."""
        timeout = self._transport.get_config("timeout")
        deadline = time.monotonic() + timeout if timeout else None

        greeting = self._transport.read_line()
        while greeting is None:
            if self._transport.get_config("blocking", True):
                raise TransportError("connection closed before greeting")
            if deadline is not None and time.monotonic() > deadline:
                raise TransportError(f"timed out after {timeout}s awaiting greeting")
            greeting = self._transport.read_line()
        return greeting

    def close(self) -> None:
        """Send quit and disconnect. Never raises; safe to call repeatedly."""
        if not self._transport.is_connected:
            return

        try:
            self.request(CommandType.QUIT.value)
        except Exception as e:
            logger.debug(f"Ignoring error while sending quit: {e}")

        try:
            self._transport.disconnect()
        except Exception as e:
            logger.debug(f"Ignoring error while disconnecting: {e}")

        logger.info(f"ServerQuery connection closed after {self._count} queries")
        self._signals.emit(Signal.DISCONNECTED, self)

    def __enter__(self) -> ServerQueryAdapter:
        if not self._transport.is_connected:
            self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    # =========================================================================
    # Commands
    # =========================================================================

    def prepare(self, verb: str, params: Mapping[Any, Any] | None = None) -> str:
        """Build a command line from a verb and parameters."""
        return prepare(verb, params)

    def execute(
        self,
        verb: str,
        params: Mapping[Any, Any] | None = None,
        raise_on_error: bool = True,
    ) -> Reply:
        """Serialize and send a command."""
        return self.request(prepare(verb, params), raise_on_error)

    def request(self, command: str, raise_on_error: bool = True) -> Reply:
        """Send a prepared command line and return the server's reply.

        Args:
            command: Command line without terminator
            raise_on_error: Raise ServerQueryError for a non-success status

        Raises:
            IllegalCommandError: Command contains CR or LF (no I/O performed)
            BlockedCommandError: Verb is blocked (no I/O performed)
            TransportError: The transport failed
            ServerQueryError: The server reported failure and raise_on_error
        """
        verb = first_field(command)

        if "\r" in command or "\n" in command:
            raise IllegalCommandError(f"illegal characters in command '{verb}'")
        if verb in self._blocked:
            raise BlockedCommandError(verb)

        self._signals.emit(Signal.COMMAND_STARTED, command)

        self._profiler.start(self._key)
        try:
            self._transport.send_line(command)
            self._timer = time.time()
            self._count += 1

            lines = self._read_reply(verb)
        finally:
            self._profiler.stop(self._key)

        self._dispatch_notifications(lines)

        reply = Reply.from_lines(lines, command, self.host, raise_on_error)

        self._signals.emit(Signal.COMMAND_FINISHED, command, reply)

        return reply

    def _read_reply(self, verb: str) -> list[str]:
        """Read lines up to and including the status line."""
        lines: list[str] = []
        timeout = self._transport.get_config("timeout")
        deadline = time.monotonic() + timeout if timeout else None

        while True:
            line = self._transport.read_line()

            if line is None:
                # Non-blocking transport polled without data
                if self._transport.get_config("blocking", True):
                    raise TransportError(f"connection closed while awaiting reply to '{verb}'")
                if deadline is not None and time.monotonic() > deadline:
                    raise TransportError(f"timed out awaiting reply to '{verb}'")
                continue

            lines.append(line)
            if deadline is not None:
                deadline = time.monotonic() + timeout

            if first_field(line) == ERROR:
                return lines

    def _dispatch_notifications(self, lines: list[str]) -> None:
        """Emit notification lines that arrived while a reply was in flight."""
        for line in lines:
            if first_field(line).startswith(EVENT):
                self._signals.emit(Signal.NOTIFY_EVENT, Event.from_line(line, self.host))

    # =========================================================================
    # Notifications
    # =========================================================================

    def wait(self) -> Event:
        """Block until the server pushes a notification and return it.

        Lines that are not notifications are discarded.

        Raises:
            TransportModeError: The transport is in blocking mode (no read performed)
            TransportError: The transport failed
        """
        if self._transport.get_config("blocking"):
            raise TransportModeError("only available in non-blocking mode")

        while True:
            line = self._transport.read_line()
            if line is None:
                continue
            if first_field(line).startswith(EVENT):
                break
            logger.debug(f"Discarding line while waiting for notification: {line}")

        event = Event.from_line(line, self.host)
        self._signals.emit(Signal.NOTIFY_EVENT, event)
        return event

    # =========================================================================
    # Instrumentation
    # =========================================================================

    @property
    def query_last_timestamp(self) -> float | None:
        """Epoch seconds of the last command sent, or None."""
        return self._timer

    @property
    def query_count(self) -> int:
        """Number of commands sent on this connection."""
        return self._count

    @property
    def query_runtime(self) -> float:
        """Total seconds spent sending commands and reading replies."""
        return self._profiler.get_runtime(self._key)
