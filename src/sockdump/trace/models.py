"""Trace data models — events, addresses and reconstructed packets."""

from __future__ import annotations

import enum
import ipaddress
from dataclasses import dataclass, field


class Protocol(enum.Enum):
    """Socket classification fixed at creation time."""

    UNSET = "unset"
    TCP = "tcp"
    UDP = "udp"
    OTHER = "other"


class Direction(enum.Enum):
    """Data direction relative to the traced process."""

    IN = "in"
    OUT = "out"


@dataclass(frozen=True)
class AddressPair:
    """An IPv4 endpoint. Port 0 means the address is unknown."""

    ip: int = 0
    port: int = 0

    @property
    def is_known(self) -> bool:
        return self.port != 0

    @property
    def dotted(self) -> str:
        return str(ipaddress.IPv4Address(self.ip))

    def __str__(self) -> str:
        return f"{self.dotted}:{self.port}"

    @classmethod
    def from_dotted(cls, ip: str, port: int) -> AddressPair:
        return cls(ip=int(ipaddress.IPv4Address(ip)), port=port)


UNKNOWN_ADDRESS = AddressPair()

LOOPBACK_IP = int(ipaddress.IPv4Address("127.0.0.1"))


def loopback_for(fd: int) -> AddressPair:
    """Placeholder endpoint for a descriptor with no observed address."""
    return AddressPair(ip=LOOPBACK_IP, port=fd)


@dataclass(frozen=True)
class TraceEvent:
    """One logical syscall line, parsed."""

    pid: int
    seconds: int
    microseconds: int
    name: str
    args: str
    retval: int
    errno: str | None = None
    line: str = ""

    @property
    def failed(self) -> bool:
        return self.retval < 0


PayloadToken = int | str


@dataclass(frozen=True)
class PacketRecord:
    """A reconstructed read/write event.

    ``id``, ``line_no`` and the relative timestamp are filled in by the
    reconstructor once the record survives filtering.
    """

    fd: int
    direction: Direction
    size: int
    src: AddressPair
    dst: AddressPair
    is_tcp: bool = False
    tcp_seq: int = 0
    payload: tuple[PayloadToken, ...] = field(default_factory=tuple)
    id: int = 0
    line_no: int = 0
    rel_seconds: int = 0
    microseconds: int = 0
    line: str = ""
