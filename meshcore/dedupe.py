"""Recently seen packet tracking, so duplicates are processed only once.

Regular packets are identified by an 8-byte SHA-256 hash of their payload type
and payload; ACK packets by their 4-byte checksum, in a table of their own.
Both tables are fixed-size rings that overwrite their oldest entries.
"""

from __future__ import annotations

import hashlib
import struct

from meshcore.codec.packet import Packet, PayloadType

DEFAULT_MAX_PACKET_HASHES = 128
DEFAULT_MAX_ACK_HASHES = 64
PACKET_HASH_SIZE = 8


def calculate_packet_hash(packet: Packet) -> bytes:
    """SHA-256 of payload type, path length (TRACE only) and payload, cut to 8 bytes."""
    h = hashlib.sha256()
    t = packet.payload_type()
    h.update(bytes([t]))
    if t == PayloadType.TRACE:
        h.update(bytes([packet.path_len & 0xFF]))
    h.update(packet.payload)
    return h.digest()[:PACKET_HASH_SIZE]


class PacketDeduplicator:
    """Remembers the most recent packet hashes and ACK checksums."""

    def __init__(
        self,
        max_hashes: int = DEFAULT_MAX_PACKET_HASHES,
        max_acks: int = DEFAULT_MAX_ACK_HASHES,
    ) -> None:
        if max_hashes <= 0 or max_acks <= 0:
            raise ValueError("capacities must be positive")
        self._max_hashes = max_hashes
        self._max_acks = max_acks
        self.clear()

    def has_seen(self, packet: Packet) -> bool:
        """True if the packet was seen before; otherwise record it and return False."""
        if packet.payload_type() == PayloadType.ACK and len(packet.payload) >= 4:
            (ack,) = struct.unpack_from("<I", packet.payload, 0)
            if ack in self._acks:
                return True
            self._acks[self._next_ack] = ack
            self._next_ack = (self._next_ack + 1) % self._max_acks
            return False

        digest = calculate_packet_hash(packet)
        if digest in self._hashes:
            return True
        self._hashes[self._next_hash] = digest
        self._next_hash = (self._next_hash + 1) % self._max_hashes
        return False

    def clear(self) -> None:
        """Forget every packet seen so far."""
        self._hashes = [bytes(PACKET_HASH_SIZE)] * self._max_hashes
        self._acks = [0] * self._max_acks
        self._next_hash = 0
        self._next_ack = 0