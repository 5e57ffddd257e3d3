"""Reconstruction engine — drives one trace session line by line."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from sockdump.config import SockdumpConfig
from sockdump.engine.dispatch import SyscallDispatcher
from sockdump.engine.state import SocketStateStore
from sockdump.output.emitter import DropReason, PacketFilter
from sockdump.trace.models import PacketRecord
from sockdump.trace.parser import TraceParseError, parse_line
from sockdump.trace.reassembler import LineReassembler, UnresolvedResumeError

logger = logging.getLogger(__name__)


@dataclass
class SessionStats:
    """Running counters for one session."""

    lines: int = 0
    events: int = 0
    unparsable: int = 0
    unresolved: int = 0
    ignored: int = 0
    candidates: int = 0
    emitted: int = 0
    dropped_small: int = 0
    dropped_flow: int = 0

    @property
    def dropped(self) -> int:
        return self.dropped_small + self.dropped_flow


class Reconstructor:
    """Owns all state of one session: pending lines, sockets, counters.

    Independent instances share nothing, so several sessions can run side
    by side.
    """

    def __init__(
        self,
        config: SockdumpConfig | None = None,
        on_diagnostic: Callable[[str], None] | None = None,
    ) -> None:
        self._config = config or SockdumpConfig()
        self._on_diagnostic = on_diagnostic
        self._reassembler = LineReassembler()
        self._store = SocketStateStore()
        self._dispatcher = SyscallDispatcher(self._store, debug=self._config.debug)
        self._filter = PacketFilter(
            min_size=self._config.min_size,
            max_tcp_seq=self._config.max_tcp_seq,
        )
        self._stats = SessionStats()
        self._time_base: int | None = None
        self._next_id = 0

    @property
    def config(self) -> SockdumpConfig:
        return self._config

    @property
    def stats(self) -> SessionStats:
        return self._stats

    @property
    def store(self) -> SocketStateStore:
        return self._store

    def feed(self, raw_line: str) -> PacketRecord | None:
        """Process one raw input line; return the emitted record, if any."""
        self._stats.lines += 1
        line_no = self._stats.lines

        try:
            line = self._reassembler.feed(raw_line)
        except UnresolvedResumeError as exc:
            self._stats.unresolved += 1
            self._diagnose(str(exc))
            return None
        if line is None or not line.strip():
            return None

        try:
            event = parse_line(line)
        except TraceParseError:
            self._stats.unparsable += 1
            self._diagnose(line)
            return None

        self._stats.events += 1
        if self._time_base is None:
            self._time_base = event.seconds

        if not self._dispatcher.is_supported(event.name):
            self._stats.ignored += 1
            return None

        candidate = self._dispatcher.dispatch(event)
        if candidate is None:
            return None
        self._stats.candidates += 1

        reason = self._filter.check(candidate)
        if reason is DropReason.TOO_SMALL:
            self._stats.dropped_small += 1
            logger.debug("line %d: %d bytes below minimum", line_no, candidate.size)
            return None
        if reason is DropReason.FLOW_LIMIT:
            self._stats.dropped_flow += 1
            logger.debug(
                "line %d: fd %d past TCP flow limit (seq %d)",
                line_no,
                candidate.fd,
                candidate.tcp_seq,
            )
            return None

        self._next_id += 1
        self._stats.emitted += 1
        return dataclasses.replace(
            candidate,
            id=self._next_id,
            line_no=line_no,
            rel_seconds=event.seconds - self._time_base,
            microseconds=event.microseconds,
            line=line,
        )

    def run(self, lines: Iterable[str]) -> Iterator[PacketRecord]:
        """Yield emitted records until ``lines`` is exhausted."""
        for raw_line in lines:
            record = self.feed(raw_line)
            if record is not None:
                yield record

    def _diagnose(self, message: str) -> None:
        logger.debug("diagnostic: %s", message)
        if self._on_diagnostic:
            self._on_diagnostic(message)
