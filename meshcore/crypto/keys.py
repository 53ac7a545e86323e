"""Ed25519 node identities and X25519 shared secrets derived from them."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey

PUBLIC_KEY_SIZE = 32
PRIVATE_KEY_SIZE = 64

# Curve25519 field prime and the Edwards curve constant d = -121665/121666.
_P = 2**255 - 19
_D = (-121665 * pow(121666, _P - 2, _P)) % _P


class InvalidKeyError(ValueError):
    """A key is malformed or unusable."""


class InvalidPubKeySizeError(InvalidKeyError):
    pass


class InvalidPrivKeySizeError(InvalidKeyError):
    pass


@dataclass(frozen=True)
class KeyPair:
    """An Ed25519 identity: 32-byte public key and 64-byte seed||public private key."""

    public_key: bytes
    private_key: bytes

    def hash(self) -> int:
        """First byte of the public key, used for routing."""
        return self.public_key[0]


def generate_key_pair() -> KeyPair:
    key = Ed25519PrivateKey.generate()
    seed = key.private_bytes(
        serialization.Encoding.Raw,
        serialization.PrivateFormat.Raw,
        serialization.NoEncryption(),
    )
    public = key.public_key().public_bytes(
        serialization.Encoding.Raw, serialization.PublicFormat.Raw
    )
    return KeyPair(public_key=public, private_key=seed + public)


def key_pair_from_private_key(private_key: bytes) -> KeyPair:
    """Rebuild a KeyPair from a 64-byte private key; the public key is its last 32 bytes."""
    private_key = bytes(private_key)
    if len(private_key) != PRIVATE_KEY_SIZE:
        raise InvalidPrivKeySizeError("invalid private key size: expected 64 bytes")
    return KeyPair(public_key=private_key[PUBLIC_KEY_SIZE:], private_key=private_key)


def ed25519_pub_key_to_x25519(ed_pub_key: bytes) -> bytes:
    """Montgomery u-coordinate of an Ed25519 public key, for X25519."""
    ed_pub_key = bytes(ed_pub_key)
    if len(ed_pub_key) != PUBLIC_KEY_SIZE:
        raise InvalidPubKeySizeError("invalid public key size: expected 32 bytes")
    y = (int.from_bytes(ed_pub_key, "little") & ((1 << 255) - 1)) % _P
    y2 = y * y % _P
    x2 = (y2 - 1) * pow((_D * y2 + 1) % _P, _P - 2, _P) % _P
    if x2 and pow(x2, (_P - 1) // 2, _P) != 1:
        raise InvalidKeyError("invalid Ed25519 public key: not a point on the curve")
    u = (1 + y) * pow((1 - y) % _P, _P - 2, _P) % _P
    return u.to_bytes(32, "little")


def ed25519_priv_key_to_x25519(ed_priv_key: bytes) -> bytes:
    """X25519 scalar of an Ed25519 private key: SHA-512 of the seed, clamped."""
    ed_priv_key = bytes(ed_priv_key)
    if len(ed_priv_key) != PRIVATE_KEY_SIZE:
        raise InvalidPrivKeySizeError("invalid private key size: expected 64 bytes")
    h = bytearray(hashlib.sha512(ed_priv_key[:32]).digest()[:32])
    h[0] &= 248
    h[31] &= 127
    h[31] |= 64
    return bytes(h)


def compute_shared_secret(local_priv_key: bytes, remote_pub_key: bytes) -> bytes:
    """32-byte X25519 shared secret between a local Ed25519 key and a remote one."""
    remote_pub_key = bytes(remote_pub_key)
    if len(remote_pub_key) != PUBLIC_KEY_SIZE:
        raise InvalidPubKeySizeError("invalid public key size: expected 32 bytes")
    scalar = ed25519_priv_key_to_x25519(local_priv_key)
    u = ed25519_pub_key_to_x25519(remote_pub_key)
    try:
        private = X25519PrivateKey.from_private_bytes(scalar)
        return private.exchange(X25519PublicKey.from_public_bytes(u))
    except ValueError as exc:
        raise InvalidKeyError(f"ECDH failed: {exc}") from exc