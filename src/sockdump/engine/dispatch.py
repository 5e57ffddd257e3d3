"""Syscall dispatch table — maps traced syscalls to state handlers."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable

from sockdump.engine.assembler import assemble_packet
from sockdump.engine.state import SocketStateStore
from sockdump.trace.decode import classify_socket, parse_address, parse_fd
from sockdump.trace.models import Direction, PacketRecord, TraceEvent

logger = logging.getLogger(__name__)

# Failure tolerated by bind/connect/accept on non-blocking sockets
_IN_PROGRESS = "EINPROGRESS"


class SyscallFamily(enum.Enum):
    """Handler groups; aliases within a family share one handler."""

    SOCKET = "socket"
    BIND = "bind"
    CONNECT = "connect"
    READ = "read"
    WRITE = "write"


class Syscall(enum.Enum):
    """Syscalls that carry socket or payload information."""

    SOCKET = "socket"
    BIND = "bind"
    CONNECT = "connect"
    ACCEPT = "accept"
    READ = "read"
    RECV = "recv"
    RECVMSG = "recvmsg"
    RECVFROM = "recvfrom"
    WRITE = "write"
    SEND = "send"
    SENDMSG = "sendmsg"
    SENDTO = "sendto"

    @property
    def family(self) -> SyscallFamily:
        return _FAMILIES[self]

    @classmethod
    def lookup(cls, name: str) -> Syscall | None:
        try:
            return cls(name)
        except ValueError:
            return None


_FAMILIES: dict[Syscall, SyscallFamily] = {
    Syscall.SOCKET: SyscallFamily.SOCKET,
    Syscall.BIND: SyscallFamily.BIND,
    Syscall.CONNECT: SyscallFamily.CONNECT,
    Syscall.ACCEPT: SyscallFamily.CONNECT,
    Syscall.READ: SyscallFamily.READ,
    Syscall.RECV: SyscallFamily.READ,
    Syscall.RECVMSG: SyscallFamily.READ,
    Syscall.RECVFROM: SyscallFamily.READ,
    Syscall.WRITE: SyscallFamily.WRITE,
    Syscall.SEND: SyscallFamily.WRITE,
    Syscall.SENDMSG: SyscallFamily.WRITE,
    Syscall.SENDTO: SyscallFamily.WRITE,
}

Handler = Callable[[TraceEvent], PacketRecord | None]


class SyscallDispatcher:
    """Routes TraceEvents to handlers that mutate a SocketStateStore.

    Only the read and write families return packet candidates. Unknown
    syscalls, failed calls and untracked descriptors are no-ops.
    """

    def __init__(self, store: SocketStateStore, debug: bool = False) -> None:
        self._store = store
        self._debug = debug
        self._handlers: dict[SyscallFamily, Handler] = {
            SyscallFamily.SOCKET: self._on_socket,
            SyscallFamily.BIND: self._on_bind,
            SyscallFamily.CONNECT: self._on_connect,
            SyscallFamily.READ: self._on_read,
            SyscallFamily.WRITE: self._on_write,
        }

    @property
    def store(self) -> SocketStateStore:
        return self._store

    def is_supported(self, name: str) -> bool:
        return Syscall.lookup(name) is not None

    def dispatch(self, event: TraceEvent) -> PacketRecord | None:
        syscall = Syscall.lookup(event.name)
        if syscall is None:
            return None
        return self._handlers[syscall.family](event)

    def _on_socket(self, event: TraceEvent) -> None:
        if event.failed:
            return None
        protocol = classify_socket(event.args)
        self._store.create(event.retval, protocol)
        logger.debug("fd %d classified as %s", event.retval, protocol.value)
        return None

    def _on_bind(self, event: TraceEvent) -> None:
        if event.failed and event.errno != _IN_PROGRESS:
            return None
        fd = parse_fd(event.args)
        if fd is not None:
            self._store.set_source(fd, parse_address(event.args))
        return None

    def _on_connect(self, event: TraceEvent) -> None:
        if event.failed and event.errno != _IN_PROGRESS:
            return None
        fd = parse_fd(event.args)
        if fd is not None:
            self._store.set_destination(fd, parse_address(event.args))
        return None

    def _on_read(self, event: TraceEvent) -> PacketRecord | None:
        if event.failed:
            return None
        fd = parse_fd(event.args)
        entry = self._store.lookup_inet(fd)
        if fd is None or entry is None:
            return None
        if "MSG_PEEK" in event.args:
            return None
        return assemble_packet(
            Direction.IN, fd, entry, event.args, event.retval, debug=self._debug
        )

    def _on_write(self, event: TraceEvent) -> PacketRecord | None:
        if event.failed:
            return None
        fd = parse_fd(event.args)
        entry = self._store.lookup_inet(fd)
        if fd is None or entry is None:
            return None
        return assemble_packet(
            Direction.OUT, fd, entry, event.args, event.retval, debug=self._debug
        )
