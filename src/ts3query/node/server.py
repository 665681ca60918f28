"""Virtual server node."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..protocol.commands import CommandType
from .base import Node

if TYPE_CHECKING:
    from .host import Host


class Server(Node):
    """A virtual server as reported by `serverlist` or `serverinfo`.

    Can be passed as a command parameter; it serializes to its id.
    """

    def __init__(self, host: Host, info: dict[str, str]) -> None:
        super().__init__(host.adapter, info)
        self._host = host

    def __repr__(self) -> str:
        return f"Server(id={self.get('virtualserver_id')!r}, name={self.name!r})"

    @property
    def host(self) -> Host:
        return self._host

    @property
    def name(self) -> str | None:
        return self.get("virtualserver_name")

    @property
    def port(self) -> int | None:
        port = self.get("virtualserver_port")
        return int(port) if port else None

    def get_id(self) -> int:
        return int(self["virtualserver_id"])

    def select(self) -> None:
        self._host.server_select(self)

    def client_list(self) -> list[dict[str, str]]:
        """Clients connected to this server. Selects the server if needed."""
        if self._host.selected_server_id != self.get_id():
            self.select()
        return self.request(CommandType.CLIENT_LIST.value).to_list()

    def channel_list(self) -> list[dict[str, str]]:
        """Channels of this server. Selects the server if needed."""
        if self._host.selected_server_id != self.get_id():
            self.select()
        return self.request(CommandType.CHANNEL_LIST.value).to_list()
