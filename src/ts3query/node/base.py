"""Base class for objects of the server's domain model."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..adapter import ServerQueryAdapter
    from ..protocol.reply import Reply


class Node:
    """A domain object bound to one adapter, holding the fields the server reported."""

    def __init__(self, adapter: ServerQueryAdapter, info: Mapping[str, str] | None = None) -> None:
        self._adapter = adapter
        self._info: dict[str, str] = dict(info or {})

    @property
    def adapter(self) -> ServerQueryAdapter:
        return self._adapter

    def request(self, command: str, raise_on_error: bool = True) -> Reply:
        return self._adapter.request(command, raise_on_error)

    def execute(
        self,
        verb: str,
        params: Mapping[Any, Any] | None = None,
        raise_on_error: bool = True,
    ) -> Reply:
        return self._adapter.execute(verb, params, raise_on_error)

    def get_info(self) -> dict[str, str]:
        return dict(self._info)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._info.get(key, default)

    def __getitem__(self, key: str) -> str:
        return self._info[key]

    def __contains__(self, key: str) -> bool:
        return key in self._info
