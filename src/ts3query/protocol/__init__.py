"""ServerQuery text protocol layer.

Key concepts:
- Commands: one line per request, `verb key=value ...`
- Replies: data lines terminated by an `error id=... msg=...` status line
- Events: `notify...` lines pushed by the server after registration

Everything here is pure string handling; I/O lives in the transport and
adapter modules.
"""

from .commands import Command, CommandType, Identifiable, prepare
from .events import Event
from .reply import Reply, ReplyStatus
from .wire import escape, unescape

__all__ = [
    "Command",
    "CommandType",
    "Identifiable",
    "prepare",
    "Event",
    "Reply",
    "ReplyStatus",
    "escape",
    "unescape",
]
