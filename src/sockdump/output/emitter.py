"""Packet filter and the two output layouts.

Debug layout (one record, echo line plus blank separator)::

    # 1700000000.000200 write(3, "\\x48\\x65...", 13) = 13
        1     2      0    200    13         127.0.0.1:3             127.0.0.1:3       1 1         H e l l o ...

Machine layout (one line, integers only, payload truncated)::

    1 2 0 200 13 2130706433 3 2130706433 3 1 1 4 8 6 5 ...
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass

from sockdump.trace.models import PacketRecord, PayloadToken


class DropReason(enum.Enum):
    """Why a candidate packet was not emitted."""

    TOO_SMALL = "too_small"
    FLOW_LIMIT = "flow_limit"


@dataclass(frozen=True)
class PacketFilter:
    """Keeps packets of at least ``min_size`` bytes, and TCP packets no
    further than ``max_tcp_seq`` into their flow."""

    min_size: int = 12
    max_tcp_seq: int = 5

    def check(self, record: PacketRecord) -> DropReason | None:
        """Return why ``record`` is dropped, or None if it passes."""
        if record.size < self.min_size:
            return DropReason.TOO_SMALL
        if record.is_tcp and record.tcp_seq > self.max_tcp_seq:
            return DropReason.FLOW_LIMIT
        return None

    def accepts(self, record: PacketRecord) -> bool:
        return self.check(record) is None


def _join(tokens: Sequence[PayloadToken]) -> str:
    return " ".join(str(t) for t in tokens)


def format_debug(record: PacketRecord) -> str:
    """Human-readable layout, preceded by the trace line it came from."""
    body = "%5d %5d %6d %6d %5d   %15s:%-5d %15s:%-5d   %d %d         %s" % (
        record.id,
        record.line_no,
        record.rel_seconds,
        record.microseconds,
        record.size,
        record.src.dotted,
        record.src.port,
        record.dst.dotted,
        record.dst.port,
        int(record.is_tcp),
        record.tcp_seq,
        _join(record.payload),
    )
    return f"# {record.line}\n{body}\n"


def format_machine(record: PacketRecord, payload_limit: int) -> str:
    """Space-separated integer layout with the payload cut to ``payload_limit`` tokens."""
    fields = (
        record.id,
        record.line_no,
        record.rel_seconds,
        record.microseconds,
        record.size,
        record.src.ip,
        record.src.port,
        record.dst.ip,
        record.dst.port,
        int(record.is_tcp),
        record.tcp_seq,
    )
    head = " ".join(str(f) for f in fields)
    payload = _join(record.payload[:payload_limit])
    return f"{head} {payload}"


class PacketEmitter:
    """Renders surviving records in the layout selected by ``debug``."""

    def __init__(self, debug: bool = False, payload_limit: int = 24) -> None:
        self._debug = debug
        self._payload_limit = payload_limit

    @property
    def debug(self) -> bool:
        return self._debug

    def render(self, record: PacketRecord) -> str:
        if self._debug:
            return format_debug(record)
        return format_machine(record, self._payload_limit)
