"""Stitch ``<unfinished ...>`` / ``<... resumed>`` line pairs back together.

strace logs a blocking call as two lines when another thread's activity
lands in between::

    [pid  12] 1700000000.000100 read(5,  <unfinished ...>
    [pid  13] 1700000000.000150 write(6, "\\x41", 1) = 1
    [pid  12] 1700000000.000200 <... read resumed> "\\x42\\x43", 4096) = 2

The resumed line's prefix (pid, timestamp) is kept and the call text from
the unfinished line is spliced in front of the tail.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

_UNFINISHED_RE = re.compile(r"(([a-z0-9_]+)\(.*?) ?<unfinished \.\.\.>")
_RESUMED_RE = re.compile(r"^(.*?) ?<\.\.\. ([a-z0-9_]+) resumed> ?(.*)$")


class UnresolvedResumeError(ValueError):
    """A resumed line arrived with no pending unfinished call of that name."""

    def __init__(self, syscall: str, line: str) -> None:
        super().__init__(f"no matching 'unfinished' for {syscall}: {line}")
        self.syscall = syscall
        self.line = line


class LineReassembler:
    """Pairs unfinished and resumed lines by syscall name.

    Only one pending call per name is kept; a second unfinished call of the
    same name replaces the first. Pending calls are not keyed by pid, so
    concurrent same-name calls from different threads can be mis-paired.
    """

    def __init__(self) -> None:
        self._pending: dict[str, str] = {}

    @property
    def pending(self) -> dict[str, str]:
        return dict(self._pending)

    def feed(self, line: str) -> str | None:
        """Return the logical line for ``line``, or None if it is held back.

        Raises UnresolvedResumeError for a resumed line with nothing pending.
        """
        line = line.rstrip("\r\n")
        if "<" not in line:
            return line

        m = _UNFINISHED_RE.search(line)
        if m:
            name = m.group(2)
            if name in self._pending:
                logger.debug("Replacing pending unfinished %s call", name)
            self._pending[name] = m.group(1)
            return None

        m = _RESUMED_RE.match(line)
        if m:
            prefix, name, tail = m.groups()
            head = self._pending.pop(name, None)
            if head is None:
                raise UnresolvedResumeError(name, line)
            return f"{prefix} {head}{tail}" if prefix else f"{head}{tail}"

        return line
