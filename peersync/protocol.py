"""Message types, synchronisation state and wire encodings."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable

UNSYNCHRONIZED = 255
"""Synchronisation level of a node that is not synchronised."""

_COUNT = struct.Struct(">H")
_PORT = struct.Struct(">H")
_TIMESTAMP = struct.Struct(">BQ")
_IPV4_LENGTH = 4


class MessageType(IntEnum):
    """First byte of every datagram."""

    HELLO = 1
    HELLO_REPLY = 2
    CONNECT = 3
    ACK_CONNECT = 4
    SYNC_START = 11
    DELAY_REQUEST = 12
    DELAY_RESPONSE = 13
    LEADER = 21
    GET_TIME = 31
    TIME = 32


class SyncState(Enum):
    """Step reached in a synchronisation exchange."""

    NONE = 0
    WAITING_FOR_REQUEST = 1
    WAITING_FOR_RESPONSE = 2


@dataclass
class SyncContext:
    """State of the synchronisation in progress."""

    sync_partner_id: int = 0
    partner_sync_level: int = 0
    t1: int = 0
    t2: int = 0
    t3: int = 0
    t4: int = 0
    state: SyncState = SyncState.NONE
    last_sync_time: int = 0


def encode_peers(peers: Iterable[tuple[str, int]]) -> bytes:
    """Encode a node count followed by (address length, IPv4, port) records."""
    peers = list(peers)
    try:
        parts = [_COUNT.pack(len(peers))]
        for host, port in peers:
            address = ipaddress.IPv4Address(host).packed
            parts.append(bytes([len(address)]) + address + _PORT.pack(port))
    except struct.error as exc:
        raise ValueError(f"value out of range: {exc}") from exc
    return b"".join(parts)


def decode_peers(data: bytes) -> list[tuple[str, int]]:
    """Decode the payload written by :func:`encode_peers`."""
    data = bytes(data)
    if len(data) < _COUNT.size:
        raise ValueError("missing node count")
    (count,) = _COUNT.unpack_from(data)
    position = _COUNT.size
    peers = []
    for _ in range(count):
        if position >= len(data):
            raise ValueError("truncated node record")
        length = data[position]
        position += 1
        if length != _IPV4_LENGTH:
            raise ValueError(f"unsupported address length {length}")
        end = position + length + _PORT.size
        if end > len(data):
            raise ValueError("truncated node record")
        host = str(ipaddress.IPv4Address(data[position:position + length]))
        (port,) = _PORT.unpack_from(data, position + length)
        peers.append((host, port))
        position = end
    return peers


def encode_timestamp(level: int, timestamp: int) -> bytes:
    """Encode a synchronisation level byte and a 64-bit big-endian timestamp."""
    try:
        return _TIMESTAMP.pack(level, timestamp)
    except struct.error as exc:
        raise ValueError(f"value out of range: {exc}") from exc


def decode_timestamp(data: bytes) -> tuple[int, int]:
    """Decode a (level, timestamp) pair written by :func:`encode_timestamp`."""
    if len(data) < _TIMESTAMP.size:
        raise ValueError("truncated timestamp")
    level, timestamp = _TIMESTAMP.unpack_from(bytes(data))
    return level, timestamp