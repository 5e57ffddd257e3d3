"""Parse one logical strace line into a TraceEvent.

Grammar (strace ``-f -ttt``)::

    [ "[pid " N "] " | N " " ] SECONDS "." MICROS " " NAME "(" ARGS ")" " = " RETVAL [ " " ERRNO ... ]

Anything after the error token (the ``(Operation now in progress)`` text,
``-T`` durations) is ignored.
"""

from __future__ import annotations

import re

from sockdump.trace.models import TraceEvent

_LINE_RE = re.compile(
    r"^(?:\[?(?:pid)?\s*(?P<pid>\d+)\]?\s+)?"
    r"(?P<seconds>\d+)\.(?P<micros>\d+)\s+"
    r"(?P<name>[a-z0-9_]+)\((?P<args>.*)\)\s+=\s+(?P<retval>-?\d+)"
    r"(?:\s+(?P<errno>E[A-Z0-9]+))?"
)


class TraceParseError(ValueError):
    """The line does not follow the trace grammar."""

    def __init__(self, line: str) -> None:
        super().__init__(f"unparsable line: {line}")
        self.line = line


def parse_line(line: str) -> TraceEvent:
    """Parse ``line`` or raise TraceParseError."""
    line = line.rstrip("\r\n")
    m = _LINE_RE.match(line)
    if m is None:
        raise TraceParseError(line)

    pid = m.group("pid")
    return TraceEvent(
        pid=int(pid) if pid else 0,
        seconds=int(m.group("seconds")),
        microseconds=int(m.group("micros")),
        name=m.group("name"),
        args=m.group("args"),
        retval=int(m.group("retval")),
        errno=m.group("errno"),
        line=line,
    )
