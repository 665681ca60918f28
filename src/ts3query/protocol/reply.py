"""Reply value object.

A reply is every line the server sent in response to one command, ending with
the status line:

    virtualserver_id=1 virtualserver_port=9987|virtualserver_id=2 ...
    error id=0 msg=ok

Notification lines the server pushed while the reply was in flight are kept
in `lines` but excluded from the data helpers and exposed via `notifications`.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..errors import AdapterError, ServerQueryError
from .wire import (
    ERROR,
    EVENT,
    MOTD_PREFIX,
    SEPARATOR_CELL,
    first_field,
    parse_cells,
    parse_records,
)


class ReplyStatus(BaseModel):
    """Parsed `error id=... msg=...` status line."""

    model_config = ConfigDict(frozen=True)

    id: int = 0
    msg: str = "ok"
    failed_permid: int | None = None
    extra_msg: str | None = None

    @classmethod
    def parse(cls, line: str) -> ReplyStatus:
        """Parse a status line. Raises AdapterError if it is not one."""
        if first_field(line) != ERROR:
            raise AdapterError(f"invalid status line from the server ({line})")
        _, _, rest = line.partition(SEPARATOR_CELL)
        data = parse_cells(rest)
        return cls(
            id=int(data.get("id") or 0),
            msg=data.get("msg", ""),
            failed_permid=int(data["failed_permid"]) if data.get("failed_permid") else None,
            extra_msg=data.get("extra_msg") or None,
        )

    @property
    def is_success(self) -> bool:
        return self.id == 0


class Reply(BaseModel):
    """The server's answer to a single command."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    lines: tuple[str, ...]
    command: str
    status: ReplyStatus
    host: Any = Field(default=None, exclude=True, repr=False)

    @classmethod
    def from_lines(
        cls,
        lines: Sequence[str],
        command: str,
        host: Any = None,
        raise_on_error: bool = True,
    ) -> Reply:
        """Build a reply from raw lines, the last of which is the status line.

        Raises:
            AdapterError: If the last line is not a status line
            ServerQueryError: If raise_on_error and the status is not success
        """
        if not lines:
            raise AdapterError(f"empty reply from the server to '{command}'")

        reply = cls(
            lines=tuple(lines),
            command=command,
            status=ReplyStatus.parse(lines[-1]),
            host=host,
        )

        if raise_on_error and not reply.is_success:
            raise reply.to_error()

        return reply

    @property
    def is_success(self) -> bool:
        return self.status.is_success

    @property
    def body(self) -> list[str]:
        """Non-empty data lines, without status, notification and banner lines."""
        return [
            line
            for line in self.lines[:-1]
            if line.strip()
            and not first_field(line).startswith(EVENT)
            and not line.startswith(MOTD_PREFIX)
        ]

    @property
    def notifications(self) -> list[str]:
        """Notification lines received between the command and its status."""
        return [line for line in self.lines[:-1] if first_field(line).startswith(EVENT)]

    def to_error(self) -> ServerQueryError:
        """Build the exception describing this reply's status."""
        return ServerQueryError(
            self.status.msg,
            code=self.status.id,
            failed_permid=self.status.failed_permid,
            extra_msg=self.status.extra_msg,
        )

    def to_lines(self) -> list[str]:
        return self.body

    def to_text(self) -> str:
        return "\n".join(self.body)

    def to_list(self) -> list[dict[str, str]]:
        """All records of the reply as dicts with unescaped values."""
        records: list[dict[str, str]] = []
        for line in self.body:
            records.extend(parse_records(line))
        return records

    def to_info(self) -> dict[str, str]:
        """The first record, or an empty dict for data-less replies."""
        records = self.to_list()
        return records[0] if records else {}

    def to_dict(self, ident: str) -> dict[str, dict[str, str]]:
        """Records keyed by the value of `ident`. Records without it are skipped."""
        return {record[ident]: record for record in self.to_list() if ident in record}
