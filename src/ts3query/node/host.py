"""Host node - the root of a query connection's domain model.

Every adapter owns exactly one Host, created on first access of
`adapter.host`. Replies and events carry a reference to it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..protocol.commands import Command, CommandType, Identifiable
from .base import Node
from .server import Server

if TYPE_CHECKING:
    from ..adapter import ServerQueryAdapter

logger = logging.getLogger(__name__)


class Host(Node):
    """Server instance level operations: login, server selection, notifications."""

    def __init__(self, adapter: ServerQueryAdapter) -> None:
        super().__init__(adapter)
        self._login_name: str | None = None
        self._selected_id: int | None = None

    def __repr__(self) -> str:
        return f"Host(login={self._login_name!r}, selected={self._selected_id!r})"

    @property
    def login_name(self) -> str | None:
        """Name used for the current login, or None."""
        return self._login_name

    @property
    def selected_server_id(self) -> int | None:
        return self._selected_id

    def version(self) -> dict[str, str]:
        """Server version, build and platform."""
        return self.request(CommandType.VERSION.value).to_info()

    def whoami(self) -> dict[str, str]:
        """Information about the current query client."""
        return self.request(CommandType.WHOAMI.value).to_info()

    def login(self, username: str, password: str) -> None:
        """Authenticate the query client."""
        self.request(Command.login(username, password).line)
        self._login_name = username
        logger.info(f"Logged in as {username}")

    def logout(self) -> None:
        """Drop authentication and server selection."""
        self.request(CommandType.LOGOUT.value)
        self._login_name = None
        self._selected_id = None

    def server_list(self) -> list[Server]:
        """All virtual servers on this instance."""
        reply = self.request(CommandType.SERVER_LIST.value)
        return [Server(self, record) for record in reply.to_list()]

    def server_select(self, server: int | Identifiable, virtual: bool = False) -> None:
        """Select a virtual server by id or Server node."""
        self.request(Command.use(sid=server, virtual=virtual).line)
        self._selected_id = int(server.get_id() if isinstance(server, Identifiable) else server)
        logger.debug(f"Selected virtual server {self._selected_id}")

    def server_select_by_port(self, port: int, virtual: bool = False) -> None:
        """Select a virtual server by its voice port."""
        self.request(Command.use(port=port, virtual=virtual).line)
        self._selected_id = int(self.whoami().get("virtualserver_id") or 0) or None
        logger.debug(f"Selected virtual server {self._selected_id} on port {port}")

    def server_selected(self) -> Server | None:
        """The currently selected virtual server, with fresh info."""
        if self._selected_id is None:
            return None
        info = self.request(CommandType.SERVER_INFO.value).to_info()
        info.setdefault("virtualserver_id", str(self._selected_id))
        return Server(self, info)

    def set_nickname(self, nickname: str) -> None:
        """Change the query client's nickname on the selected server."""
        self.execute(CommandType.CLIENT_UPDATE.value, {"client_nickname": nickname})

    def notify_register(self, event: str, target: int | Identifiable | None = None) -> None:
        """Subscribe to server notifications (server, channel, textserver, ...)."""
        self.request(Command.notify_register(event, target).line)

    def notify_unregister(self) -> None:
        """Drop all notification subscriptions."""
        self.request(CommandType.SERVER_NOTIFY_UNREGISTER.value)
