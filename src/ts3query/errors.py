"""Exception hierarchy for the ServerQuery client.

Pre-flight errors (illegal characters, blocked commands, wrong transport mode)
are raised before any transport I/O. Transport errors are raised by the
transport implementations and propagate through the adapter unchanged.
"""

from __future__ import annotations


class TS3QueryError(Exception):
    """Base class for all errors raised by this package."""


class AdapterError(TS3QueryError):
    """The adapter refused or failed an operation."""


class HandshakeError(AdapterError):
    """The server greeting did not match a known protocol identifier."""


class IllegalCommandError(AdapterError):
    """A command line contained carriage-return or line-feed characters."""


class TransportModeError(AdapterError):
    """An operation was attempted in the wrong transport blocking mode."""


class TransportError(TS3QueryError):
    """Socket-level failure: connect, send, receive, timeout or lost connection."""


class ServerQueryError(TS3QueryError):
    """The server replied with a non-success status line.

    Attributes:
        code: Numeric status id reported by the server
        failed_permid: Permission id that caused the failure, if any
        extra_msg: Additional detail text sent by the server, if any
    """

    def __init__(
        self,
        message: str,
        code: int = 0,
        failed_permid: int | None = None,
        extra_msg: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.failed_permid = failed_permid
        self.extra_msg = extra_msg

    def __str__(self) -> str:
        text = f"error {self.code:#06x}: {self.message}"
        if self.extra_msg:
            text += f" ({self.extra_msg})"
        return text


class BlockedCommandError(ServerQueryError):
    """The command verb is on the adapter's blocklist."""

    CODE = 0x100

    def __init__(self, verb: str) -> None:
        super().__init__("command not found", code=self.CODE)
        self.verb = verb
