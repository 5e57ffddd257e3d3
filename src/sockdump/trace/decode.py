"""Pure decoders for syscall argument text."""

from __future__ import annotations

import ipaddress
import re

from sockdump.trace.models import UNKNOWN_ADDRESS, AddressPair, PayloadToken, Protocol

# sin_port=htons(80), sin_addr=inet_addr("10.0.0.1")
_ADDR_RE = re.compile(r'htons\((\d+)\).*?addr\("([0-9.]+)"\)')
_FD_RE = re.compile(r"^\s*(\d+)")
_QUOTED_RE = re.compile(r'"([^"]*)"')
_ESCAPE_RE = re.compile(r"\\x([0-9a-fA-F]{2})")
_HEX_RE = re.compile(r"^(?:[0-9a-fA-F]{2})+$")

_TCP_RE = re.compile(r"\b[AP]F_INET6?\b.*\bSOCK_STREAM\b.*\bIPPROTO_(?:IP|TCP)\b")
_UDP_RE = re.compile(r"\b[AP]F_INET6?\b.*\bSOCK_DGRAM\b.*\bIPPROTO_(?:IP|UDP)\b")

_PRINTABLE = range(0x20, 0x7F)


def parse_address(args: str) -> AddressPair:
    """Extract the (ip, port) of a sockaddr literal, or UNKNOWN_ADDRESS."""
    m = _ADDR_RE.search(args)
    if m is None:
        return UNKNOWN_ADDRESS
    port = int(m.group(1))
    try:
        ip = int(ipaddress.IPv4Address(m.group(2)))
    except ipaddress.AddressValueError:
        return UNKNOWN_ADDRESS
    if port > 0xFFFF:
        return UNKNOWN_ADDRESS
    return AddressPair(ip=ip, port=port)


def parse_fd(args: str) -> int | None:
    """Return the leading descriptor argument, if any."""
    m = _FD_RE.match(args)
    return int(m.group(1)) if m else None


def classify_socket(args: str) -> Protocol:
    """Classify a ``socket()`` call from its argument text."""
    if _TCP_RE.search(args):
        return Protocol.TCP
    if _UDP_RE.search(args):
        return Protocol.UDP
    return Protocol.OTHER


def payload_bytes(args: str) -> bytes:
    """Bytes of the first quoted string literal in ``args``.

    Accepts ``\\xNN`` escapes (``strace -xx``) or a bare run of hex pairs.
    """
    m = _QUOTED_RE.search(args)
    if m is None:
        return b""
    text = m.group(1)
    escapes = _ESCAPE_RE.findall(text)
    if escapes:
        return bytes(int(h, 16) for h in escapes)
    if _HEX_RE.match(text):
        return bytes.fromhex(text)
    return b""


def decode_payload(args: str, debug: bool = False) -> tuple[PayloadToken, ...]:
    """Decode the payload into nibbles, or printable characters in debug mode."""
    tokens: list[PayloadToken] = []
    for byte in payload_bytes(args):
        if debug and byte in _PRINTABLE:
            tokens.append(chr(byte))
        else:
            tokens.append(byte >> 4)
            tokens.append(byte & 0x0F)
    return tuple(tokens)
