"""Signing and verification of ADVERT payloads."""

from __future__ import annotations

import struct

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from meshcore.codec.builder import build_advert_app_data
from meshcore.codec.payload import AdvertPayload
from meshcore.crypto.keys import (
    PRIVATE_KEY_SIZE,
    PUBLIC_KEY_SIZE,
    InvalidPrivKeySizeError,
    InvalidPubKeySizeError,
)


def build_advert_signed_message(
    pub_key: bytes, timestamp: int, app_data_bytes: bytes | None
) -> bytes:
    """The bytes an ADVERT signature covers: public key, timestamp (LE), app data."""
    pub_key = bytes(pub_key)
    if len(pub_key) != PUBLIC_KEY_SIZE:
        raise InvalidPubKeySizeError("invalid public key size: expected 32 bytes")
    return pub_key + struct.pack("<I", timestamp & 0xFFFFFFFF) + bytes(app_data_bytes or b"")


def sign_advert(
    private_key: bytes, pub_key: bytes, timestamp: int, app_data_bytes: bytes | None
) -> bytes:
    """Ed25519 signature (64 bytes) over an advert with the given wire-form app data."""
    private_key = bytes(private_key)
    if len(private_key) != PRIVATE_KEY_SIZE:
        raise InvalidPrivKeySizeError("invalid private key size: expected 64 bytes")
    message = build_advert_signed_message(pub_key, timestamp, app_data_bytes)
    signer = Ed25519PrivateKey.from_private_bytes(private_key[:32])
    signature = signer.sign(message)
    if len(signature) != 64:
        raise ValueError(f"unexpected signature length: {len(signature)}")
    return signature


def verify_advert(advert: AdvertPayload) -> bool:
    """True if the advert's signature is valid for its key, timestamp and app data."""
    message = build_advert_signed_message(
        advert.pub_key, advert.timestamp, build_advert_app_data(advert.app_data)
    )
    try:
        Ed25519PublicKey.from_public_bytes(bytes(advert.pub_key)).verify(
            bytes(advert.signature), message
        )
    except (InvalidSignature, ValueError):
        return False
    return True