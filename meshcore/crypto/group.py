"""Group channel messages encrypted with a pre-shared key."""

from __future__ import annotations

import hashlib
import struct

from meshcore.codec.payload import PayloadError
from meshcore.crypto.cipher import InvalidKeySizeError, encrypt_then_mac, mac_then_decrypt

# Pre-shared key of the built-in "Public" channel.
DEFAULT_CHANNEL_KEY = bytes.fromhex("8b3387e9c5cdea6ac9e5edbaa115cd72")


def _check_key(shared_key: bytes) -> bytes:
    shared_key = bytes(shared_key)
    if len(shared_key) not in (16, 32):
        raise InvalidKeySizeError("invalid key size: must be 16 or 32 bytes")
    return shared_key


def compute_channel_hash(shared_key: bytes) -> int:
    """First byte of SHA-256 of the channel key."""
    return hashlib.sha256(bytes(shared_key)).digest()[0]


def encrypt_group_message(plaintext: bytes, shared_key: bytes) -> bytes:
    """Encrypt for a channel; returns MAC(2) followed by the ciphertext."""
    return encrypt_then_mac(_check_key(shared_key), plaintext)


def decrypt_group_message(data: bytes, shared_key: bytes) -> bytes:
    """Decrypt MAC(2)+ciphertext from a channel; zero padding is left in place."""
    return mac_then_decrypt(_check_key(shared_key), data)


def build_grp_txt_plaintext(timestamp: int, message: str) -> bytes:
    """Plain GRP_TXT content: timestamp, type/attempt byte of zero, then the text."""
    return struct.pack("<IB", timestamp & 0xFFFFFFFF, 0) + message.encode("utf-8")


def parse_grp_txt_plaintext(plaintext: bytes) -> tuple[int, int, str]:
    """Return (timestamp, text type, message) from decrypted GRP_TXT content."""
    plaintext = bytes(plaintext)
    if len(plaintext) < 5:
        raise PayloadError("plaintext too short")
    timestamp, type_attempt = struct.unpack_from("<IB", plaintext, 0)
    text = plaintext[5:]
    end = text.find(0)
    if end >= 0:
        text = text[:end]
    return timestamp, type_attempt >> 2, text.decode("utf-8", errors="replace")