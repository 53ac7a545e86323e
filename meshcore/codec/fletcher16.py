"""Fletcher-16 checksum as used by the serial bridge."""

from __future__ import annotations


def fletcher16(data: bytes) -> int:
    """Fletcher-16 checksum of ``data`` (second sum in the high byte)."""
    sum1 = 0
    sum2 = 0
    for byte in data:
        sum1 = (sum1 + byte) % 255
        sum2 = (sum2 + sum1) % 255
    return (sum2 << 8) | sum1


def validate_checksum(data: bytes, received: int) -> bool:
    """True if the checksum of ``data`` equals ``received``."""
    return fletcher16(data) == received