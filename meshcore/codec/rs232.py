"""Framing used on the serial bridge: magic, length, payload, Fletcher-16."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from meshcore.codec.fletcher16 import fletcher16

BRIDGE_PACKET_MAGIC = 0xC03E
MAX_TRANS_UNIT = 256
FRAME_HEADER_SIZE = 4
FRAME_CHECKSUM_SIZE = 2
MIN_FRAME_SIZE = FRAME_HEADER_SIZE + FRAME_CHECKSUM_SIZE


class FrameError(ValueError):
    """A serial frame could not be encoded or decoded."""


class FrameTooShortError(FrameError):
    pass


class InvalidMagicError(FrameError):
    pass


class PayloadTooLargeError(FrameError):
    pass


class ChecksumMismatchError(FrameError):
    pass


class IncompleteFrameError(FrameError):
    pass


@dataclass(frozen=True)
class RS232Frame:
    payload: bytes


def decode_rs232_frame(data: bytes) -> tuple[RS232Frame, bytes]:
    """Decode one frame from the start of ``data``; return it and the bytes after it."""
    data = bytes(data)
    if len(data) < MIN_FRAME_SIZE:
        raise FrameTooShortError("frame too short")

    magic, length = struct.unpack_from(">HH", data, 0)
    if magic != BRIDGE_PACKET_MAGIC:
        raise InvalidMagicError("invalid frame magic")
    if length > MAX_TRANS_UNIT:
        raise PayloadTooLargeError("payload exceeds maximum size")

    total = FRAME_HEADER_SIZE + length + FRAME_CHECKSUM_SIZE
    if len(data) < total:
        raise IncompleteFrameError("incomplete frame")

    payload = data[FRAME_HEADER_SIZE : FRAME_HEADER_SIZE + length]
    (received,) = struct.unpack_from(">H", data, FRAME_HEADER_SIZE + length)
    expected = fletcher16(payload)
    if expected != received:
        raise ChecksumMismatchError(
            f"checksum mismatch: expected {expected:04x}, got {received:04x}"
        )
    return RS232Frame(payload), data[total:]


def encode_rs232_frame(payload: bytes) -> bytes:
    """Wrap ``payload`` in a frame."""
    payload = bytes(payload)
    if len(payload) > MAX_TRANS_UNIT:
        raise PayloadTooLargeError("payload exceeds maximum size")
    header = struct.pack(">HH", BRIDGE_PACKET_MAGIC, len(payload))
    return header + payload + struct.pack(">H", fletcher16(payload))