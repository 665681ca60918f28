"""ServerQuery wire grammar.

Lines are LF-terminated UTF-8 text. A line is split into records by the list
separator, records into cells by the cell separator, and cells into key/value
pairs by the pair separator. Values escape every character that would
otherwise collide with the grammar.

Example reply:
    virtualserver_id=1 virtualserver_name=My\\sServer|virtualserver_id=2 ...
    error id=0 msg=ok
"""

from __future__ import annotations

import re

SEPARATOR_LINE = "\n"
SEPARATOR_LIST = "|"
SEPARATOR_CELL = " "
SEPARATOR_PAIR = "="

# First field of the line that terminates every reply
ERROR = "error"

# Prefix of the first field of every server notification
EVENT = "notify"

# Greeting prefixes sent by compatible servers
TS3_PROTO_IDENT = "TS3"
TEA_PROTO_IDENT = "TeaSpeak"
PROTO_IDENTS: tuple[str, ...] = (TS3_PROTO_IDENT, TEA_PROTO_IDENT)

# Welcome banner the server sends after the greeting; it ends up in the first reply
MOTD_PREFIX = "Welcome"

# Order matters: the backslash must be escaped first
ESCAPE_PATTERNS: dict[str, str] = {
    "\\": "\\\\",
    "/": "\\/",
    " ": "\\s",
    "|": "\\p",
    ";": "\\;",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}

_UNESCAPE_PATTERNS = {escaped[1]: raw for raw, escaped in ESCAPE_PATTERNS.items()}
_UNESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


def escape(value: str) -> str:
    """Escape a value for use inside a command or reply cell."""
    for raw, escaped in ESCAPE_PATTERNS.items():
        value = value.replace(raw, escaped)
    return value


def unescape(value: str) -> str:
    """Reverse escape(). Unknown escape sequences keep the escaped character."""
    return _UNESCAPE_RE.sub(lambda m: _UNESCAPE_PATTERNS.get(m.group(1), m.group(1)), value)


def first_field(line: str) -> str:
    """Return the part of a line before the first cell separator."""
    return line.split(SEPARATOR_CELL, 1)[0]


def parse_cells(text: str) -> dict[str, str]:
    """Parse `key=value key2=value2` into a dict with unescaped values.

    Cells without a pair separator map to an empty string.
    """
    data: dict[str, str] = {}
    for cell in text.split(SEPARATOR_CELL):
        if not cell:
            continue
        key, _, value = cell.partition(SEPARATOR_PAIR)
        data[key] = unescape(value)
    return data


def parse_records(text: str) -> list[dict[str, str]]:
    """Parse a `|`-separated list of records into dicts."""
    return [parse_cells(record) for record in text.split(SEPARATOR_LIST) if record.strip()]
