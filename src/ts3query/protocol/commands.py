"""Command definitions and parameter serialization.

Commands are single text lines: a verb followed by parameter cells.

    login client_login_name=serveradmin client_login_password=secret
    clientkick clid=5 reasonid=5|clid=7 reasonid=5

Parameter values are coerced by a fixed set of rules:
- None: the parameter is omitted
- bool: encoded as 1 or 0
- Identifiable: replaced by its id
- list: expanded into parallel cells, one per list index
- anything else: str(), then escaped
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from .wire import SEPARATOR_CELL, SEPARATOR_LIST, SEPARATOR_PAIR, escape


@runtime_checkable
class Identifiable(Protocol):
    """Anything that can stand in for its id in a command parameter."""

    def get_id(self) -> int | str: ...


class CommandType(str, Enum):
    """Commonly used ServerQuery verbs."""

    # Session
    LOGIN = "login"
    LOGOUT = "logout"
    QUIT = "quit"
    USE = "use"
    WHOAMI = "whoami"

    # Server
    VERSION = "version"
    SERVER_LIST = "serverlist"
    SERVER_INFO = "serverinfo"

    # Entities
    CHANNEL_LIST = "channellist"
    CLIENT_LIST = "clientlist"
    CLIENT_UPDATE = "clientupdate"

    # Notifications
    SERVER_NOTIFY_REGISTER = "servernotifyregister"
    SERVER_NOTIFY_UNREGISTER = "servernotifyunregister"

    # Introspection
    HELP = "help"


def _coerce(value: Any) -> Any:
    """Map bool and Identifiable values to their wire representation."""
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, Identifiable):
        return value.get_id()
    return value


# Decimal numbers with optional sign, fraction and exponent, e.g. "1", "-1", "1.5", "1e3"
_NUMERIC_RE = re.compile(r"\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*", re.ASCII)


def _is_positional(key: Any) -> bool:
    """Numeric keys carry no `key=` prefix."""
    if isinstance(key, bool):
        return False
    if isinstance(key, (int, float)):
        return True
    return isinstance(key, str) and _NUMERIC_RE.fullmatch(key) is not None


def prepare(verb: str, params: Mapping[Any, Any] | None = None) -> str:
    """Build a command line from a verb and ordered parameters.

    Args:
        verb: Command name
        params: Parameters in wire order. Integer (or digit-string) keys are
            positional and emit no `key=` prefix.

    Returns:
        The command line, without line terminator
    """
    args: list[str] = []
    cells: dict[int, list[str]] = {}

    for key, value in (params or {}).items():
        ident = "" if _is_positional(key) else str(key).lower() + SEPARATOR_PAIR

        if isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                if item is None:
                    continue
                cells.setdefault(index, []).append(ident + escape(str(_coerce(item))))
        else:
            if value is None:
                continue
            args.append(ident + escape(str(_coerce(value))))

    line = verb
    if args:
        line += " " + SEPARATOR_CELL.join(args)
    if cells:
        line += " " + SEPARATOR_LIST.join(SEPARATOR_CELL.join(group) for group in cells.values())

    return line.strip()


class Command(BaseModel):
    """A ServerQuery command before serialization.

    Example:
        Command.login("serveradmin", "secret").line
        # 'login client_login_name=serveradmin client_login_password=secret'
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    verb: str
    params: dict[Any, Any] = Field(default_factory=dict)

    @property
    def line(self) -> str:
        """The serialized command line."""
        return prepare(self.verb, self.params)

    def __str__(self) -> str:
        return self.line

    @classmethod
    def create(
        cls,
        verb: str | CommandType,
        params: Mapping[Any, Any] | None = None,
    ) -> Command:
        """Factory method for creating commands."""
        return cls(
            verb=verb.value if isinstance(verb, CommandType) else verb,
            params=dict(params or {}),
        )

    # Convenience factories for common commands
    @classmethod
    def login(cls, username: str, password: str) -> Command:
        """Create a login command."""
        return cls.create(
            CommandType.LOGIN,
            {"client_login_name": username, "client_login_password": password},
        )

    @classmethod
    def use(
        cls,
        sid: int | Identifiable | None = None,
        port: int | None = None,
        virtual: bool = False,
    ) -> Command:
        """Create a use command selecting a virtual server by id or port."""
        params: dict[Any, Any] = {"sid": sid, "port": port}
        if virtual:
            params[0] = "-virtual"
        return cls.create(CommandType.USE, params)

    @classmethod
    def notify_register(cls, event: str, target: int | Identifiable | None = None) -> Command:
        """Create a servernotifyregister command."""
        return cls.create(CommandType.SERVER_NOTIFY_REGISTER, {"event": event, "id": target})

    @classmethod
    def quit(cls) -> Command:
        """Create a quit command."""
        return cls.create(CommandType.QUIT)
