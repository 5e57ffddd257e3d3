"""Per-session socket table keyed by file descriptor."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sockdump.trace.models import UNKNOWN_ADDRESS, AddressPair, Direction, Protocol

logger = logging.getLogger(__name__)


@dataclass
class SocketEntry:
    """What is known about one descriptor."""

    protocol: Protocol = Protocol.UNSET
    cached_src: AddressPair = UNKNOWN_ADDRESS
    cached_dst: AddressPair = UNKNOWN_ADDRESS
    seq_in: int = 0
    seq_out: int = 0

    @property
    def is_inet(self) -> bool:
        """Whether later handlers track this descriptor."""
        return self.protocol in (Protocol.TCP, Protocol.UDP)

    @property
    def is_tcp(self) -> bool:
        return self.protocol is Protocol.TCP

    def next_seq(self, direction: Direction) -> int:
        """Advance and return the flow sequence for ``direction`` (TCP only)."""
        if not self.is_tcp:
            return 0
        if direction is Direction.IN:
            self.seq_in += 1
            return self.seq_in
        self.seq_out += 1
        return self.seq_out


@dataclass
class SocketStateStore:
    """Descriptor table for one trace session. Never persisted."""

    _entries: dict[int, SocketEntry] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, fd: object) -> bool:
        return fd in self._entries

    def create(self, fd: int, protocol: Protocol) -> SocketEntry:
        """Register a freshly created socket, replacing any previous entry."""
        if fd in self._entries:
            logger.debug("fd %d reused, resetting socket state", fd)
        entry = SocketEntry(protocol=protocol)
        self._entries[fd] = entry
        return entry

    def get(self, fd: int) -> SocketEntry | None:
        return self._entries.get(fd)

    def lookup_inet(self, fd: int | None) -> SocketEntry | None:
        """Return the entry only if ``fd`` is a tracked TCP/UDP socket."""
        if fd is None:
            return None
        entry = self._entries.get(fd)
        if entry is None or not entry.is_inet:
            return None
        return entry

    def set_source(self, fd: int, addr: AddressPair) -> bool:
        entry = self.lookup_inet(fd)
        if entry is None or not addr.is_known:
            return False
        entry.cached_src = addr
        return True

    def set_destination(self, fd: int, addr: AddressPair) -> bool:
        entry = self.lookup_inet(fd)
        if entry is None or not addr.is_known:
            return False
        entry.cached_dst = addr
        return True
