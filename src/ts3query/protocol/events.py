"""Notification event value object.

Servers push notification lines for every event type the query client has
registered for (see `servernotifyregister`). Each line starts with the
`notify` prefix followed by the event type:

    notifytextmessage targetmode=3 msg=hello invokerid=5 invokername=Alice
    notifycliententerview cfid=0 ctid=1 reasonid=0 clid=7 client_nickname=Bob
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..errors import AdapterError
from .wire import EVENT, SEPARATOR_CELL, first_field, parse_records


class Event(BaseModel):
    """A notification pushed by the server.

    `type` is the first field without the `notify` prefix, e.g. `textmessage`.
    `data` holds the first record; `records` holds all of them for
    notifications that carry `|`-separated lists.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    line: str
    type: str
    records: tuple[dict[str, str], ...] = ()
    host: Any = Field(default=None, exclude=True, repr=False)

    @classmethod
    def from_line(cls, line: str, host: Any = None) -> Event:
        """Parse a raw notification line. Raises AdapterError for any other line."""
        head = first_field(line)
        if not head.startswith(EVENT):
            raise AdapterError(f"invalid notification event format ({line})")

        _, _, rest = line.partition(SEPARATOR_CELL)
        return cls(
            line=line,
            type=head[len(EVENT) :],
            records=tuple(parse_records(rest)),
            host=host,
        )

    @property
    def data(self) -> dict[str, str]:
        return self.records[0] if self.records else {}

    def get(self, key: str, default: str | None = None) -> str | None:
        """Get a field of the first record with optional default."""
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> str:
        return self.data[key]
