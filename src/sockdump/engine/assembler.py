"""Build a PacketRecord from a read/write event and the socket state."""

from __future__ import annotations

from sockdump.engine.state import SocketEntry
from sockdump.trace.decode import decode_payload, parse_address
from sockdump.trace.models import AddressPair, Direction, PacketRecord, loopback_for


def _first_known(fd: int, *candidates: AddressPair) -> AddressPair:
    for addr in candidates:
        if addr.is_known:
            return addr
    return loopback_for(fd)


def assemble_packet(
    direction: Direction,
    fd: int,
    entry: SocketEntry,
    args: str,
    size: int,
    debug: bool = False,
) -> PacketRecord:
    """Assemble an unfiltered packet record.

    Address resolution, first known wins:

    * out: dst = call argument, cached dst, loopback; src = cached src, loopback
    * in:  src = call argument, cached dst, loopback; dst = cached src, loopback
    """
    explicit = parse_address(args)
    if direction is Direction.OUT:
        dst = _first_known(fd, explicit, entry.cached_dst)
        src = _first_known(fd, entry.cached_src)
    else:
        src = _first_known(fd, explicit, entry.cached_dst)
        dst = _first_known(fd, entry.cached_src)

    return PacketRecord(
        fd=fd,
        direction=direction,
        size=size,
        src=src,
        dst=dst,
        is_tcp=entry.is_tcp,
        tcp_seq=entry.next_seq(direction),
        payload=decode_payload(args, debug=debug),
    )
