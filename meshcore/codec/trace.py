"""TRACE payload: tag, auth code, flags and the relay hashes of the route."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from meshcore.codec.payload import PayloadError

TRACE_HEADER_SIZE = 9
TRACE_FLAG_HASH_SIZE_MASK = 0x03


@dataclass
class TracePayload:
    """A parsed TRACE payload; ``hash_size`` is 1 << (flags & 0x03)."""

    tag: int
    auth_code: int
    flags: int
    hash_size: int
    path_hashes: bytes = b""

    def hop_count(self) -> int:
        if self.hash_size == 0 or not self.path_hashes:
            return 0
        return len(self.path_hashes) // self.hash_size

    def hash_at(self, index: int) -> bytes | None:
        """Hash bytes for hop ``index``, or None when out of range."""
        offset = index * self.hash_size
        if index < 0 or offset + self.hash_size > len(self.path_hashes):
            return None
        return self.path_hashes[offset : offset + self.hash_size]


def parse_trace_payload(data: bytes) -> TracePayload:
    data = bytes(data)
    if len(data) < TRACE_HEADER_SIZE:
        raise PayloadError(
            "trace payload too short: expected at least "
            f"{TRACE_HEADER_SIZE} bytes, got {len(data)}"
        )
    tag, auth_code, flags = struct.unpack_from("<IIB", data, 0)
    return TracePayload(
        tag=tag,
        auth_code=auth_code,
        flags=flags,
        hash_size=1 << (flags & TRACE_FLAG_HASH_SIZE_MASK),
        path_hashes=data[TRACE_HEADER_SIZE:],
    )


def build_trace_payload(tag: int, auth_code: int, flags: int, path_hashes: bytes | None) -> bytes:
    return struct.pack("<IIB", tag, auth_code, flags) + bytes(path_hashes or b"")