"""ACK hash of a message."""

from __future__ import annotations

import hashlib


def compute_ack_hash(content_data: bytes, pub_key: bytes) -> int:
    """First four bytes (little endian) of SHA-256 over the content and a public key.

    Plain messages hash with the sender's key; signed ones with the receiver's.
    """
    digest = hashlib.sha256(bytes(content_data) + bytes(pub_key)).digest()
    return int.from_bytes(digest[:4], "little")