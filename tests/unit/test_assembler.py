"""Tests for packet assembly and the address fallback chain."""

from __future__ import annotations

from sockdump.engine.assembler import assemble_packet
from sockdump.engine.state import SocketEntry
from sockdump.trace.models import AddressPair, Direction, Protocol, loopback_for

LOCAL = AddressPair.from_dotted("192.168.1.10", 40000)
PEER = AddressPair.from_dotted("93.184.216.34", 80)
DNS = AddressPair.from_dotted("8.8.8.8", 53)

SENDTO_ARGS = (
    '4, "\\x00\\x01", 2, 0, {sa_family=AF_INET, sin_port=htons(53), '
    'sin_addr=inet_addr("8.8.8.8")}, 16'
)


def test_out_falls_back_to_loopback():
    entry = SocketEntry(protocol=Protocol.TCP)
    pkt = assemble_packet(Direction.OUT, 3, entry, '3, "\\x41", 1', 1)
    assert pkt.src == loopback_for(3)
    assert pkt.dst == loopback_for(3)
    assert str(pkt.src) == "127.0.0.1:3"


def test_out_uses_cached_addresses():
    entry = SocketEntry(protocol=Protocol.TCP, cached_src=LOCAL, cached_dst=PEER)
    pkt = assemble_packet(Direction.OUT, 3, entry, '3, "\\x41", 1', 1)
    assert pkt.src == LOCAL
    assert pkt.dst == PEER


def test_out_prefers_explicit_destination():
    entry = SocketEntry(protocol=Protocol.UDP, cached_dst=PEER)
    pkt = assemble_packet(Direction.OUT, 4, entry, SENDTO_ARGS, 2)
    assert pkt.dst == DNS
    assert pkt.src == loopback_for(4)


def test_in_uses_cached_addresses_swapped():
    entry = SocketEntry(protocol=Protocol.TCP, cached_src=LOCAL, cached_dst=PEER)
    pkt = assemble_packet(Direction.IN, 3, entry, '3, "\\x41", 4096', 1)
    assert pkt.src == PEER
    assert pkt.dst == LOCAL


def test_in_prefers_explicit_source():
    args = (
        '4, "\\x00\\x01", 512, 0, {sa_family=AF_INET, sin_port=htons(53), '
        'sin_addr=inet_addr("8.8.8.8")}, [16]'
    )
    entry = SocketEntry(protocol=Protocol.UDP, cached_dst=PEER)
    pkt = assemble_packet(Direction.IN, 4, entry, args, 2)
    assert pkt.src == DNS
    assert pkt.dst == loopback_for(4)


def test_tcp_sequence_advances_per_direction():
    entry = SocketEntry(protocol=Protocol.TCP)
    outs = [assemble_packet(Direction.OUT, 3, entry, "3", 0).tcp_seq for _ in range(3)]
    ins = [assemble_packet(Direction.IN, 3, entry, "3", 0).tcp_seq for _ in range(2)]
    assert outs == [1, 2, 3]
    assert ins == [1, 2]


def test_udp_packet_has_no_sequence():
    entry = SocketEntry(protocol=Protocol.UDP)
    pkt = assemble_packet(Direction.OUT, 4, entry, SENDTO_ARGS, 2)
    assert not pkt.is_tcp
    assert pkt.tcp_seq == 0


def test_payload_and_size():
    entry = SocketEntry(protocol=Protocol.TCP)
    pkt = assemble_packet(Direction.OUT, 3, entry, '3, "\\x48\\x69"..., 300', 300)
    assert pkt.size == 300
    assert pkt.payload == (4, 8, 6, 9)
    debug_pkt = assemble_packet(Direction.OUT, 3, entry, '3, "\\x48\\x69", 2', 2, debug=True)
    assert debug_pkt.payload == ("H", "i")
