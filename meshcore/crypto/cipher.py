"""AES-128 ECB encryption with a truncated HMAC-SHA256 tag in front."""

from __future__ import annotations

import hashlib
import hmac

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

CIPHER_KEY_SIZE = 16
CIPHER_BLOCK_SIZE = 16
CIPHER_MAC_SIZE = 2
SECRET_SIZE = 32


class CipherError(ValueError):
    """Encryption or decryption failed."""


class InvalidKeySizeError(CipherError):
    pass


class InvalidMACSizeError(CipherError):
    pass


class MACMismatchError(CipherError):
    pass


def _aes(secret: bytes) -> Cipher:
    if len(secret) < CIPHER_KEY_SIZE:
        raise InvalidKeySizeError("invalid key size: must be 16 or 32 bytes")
    return Cipher(algorithms.AES(secret[:CIPHER_KEY_SIZE]), modes.ECB())


def _mac(secret: bytes, ciphertext: bytes) -> bytes:
    key = secret[:SECRET_SIZE].ljust(SECRET_SIZE, b"\x00")
    return hmac.new(key, ciphertext, hashlib.sha256).digest()[:CIPHER_MAC_SIZE]


def encrypt_then_mac(secret: bytes, plaintext: bytes) -> bytes:
    """Zero-pad and encrypt ``plaintext``; return MAC(2) followed by the ciphertext.

    The first 16 bytes of ``secret`` are the AES key; the secret zero-padded
    to 32 bytes is the HMAC key.
    """
    secret = bytes(secret)
    plaintext = bytes(plaintext)
    padded_len = -(-len(plaintext) // CIPHER_BLOCK_SIZE) * CIPHER_BLOCK_SIZE
    padded = plaintext.ljust(padded_len, b"\x00")
    encryptor = _aes(secret).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return _mac(secret, ciphertext) + ciphertext


def mac_then_decrypt(secret: bytes, data: bytes) -> bytes:
    """Check the MAC of MAC(2)+ciphertext and decrypt; padding is left in place."""
    secret = bytes(secret)
    data = bytes(data)
    if len(data) <= CIPHER_MAC_SIZE:
        raise InvalidMACSizeError("ciphertext too short for MAC")
    received, ciphertext = data[:CIPHER_MAC_SIZE], data[CIPHER_MAC_SIZE:]
    if not hmac.compare_digest(received, _mac(secret, ciphertext)):
        raise MACMismatchError("MAC verification failed")
    if len(ciphertext) % CIPHER_BLOCK_SIZE:
        raise CipherError("ciphertext length is not a multiple of the block size")
    decryptor = _aes(secret).decryptor()
    return decryptor.update(ciphertext) + decryptor.finalize()