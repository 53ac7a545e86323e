"""Peer-to-peer and anonymous encryption keyed by an X25519 shared secret."""

from __future__ import annotations

from meshcore.crypto.cipher import encrypt_then_mac, mac_then_decrypt
from meshcore.crypto.keys import compute_shared_secret, generate_key_pair


def encrypt_addressed(plaintext: bytes, local_priv_key: bytes, remote_pub_key: bytes) -> bytes:
    """Encrypt for a peer; returns MAC(2) followed by the ciphertext."""
    secret = compute_shared_secret(local_priv_key, remote_pub_key)
    return encrypt_then_mac(secret, plaintext)


def decrypt_addressed(data: bytes, local_priv_key: bytes, remote_pub_key: bytes) -> bytes:
    """Decrypt MAC(2)+ciphertext from a peer; zero padding is left in place."""
    secret = compute_shared_secret(local_priv_key, remote_pub_key)
    return mac_then_decrypt(secret, data)


def encrypt_addressed_with_secret(plaintext: bytes, shared_secret: bytes) -> bytes:
    """Encrypt with a shared secret computed beforehand."""
    return encrypt_then_mac(shared_secret, plaintext)


def decrypt_addressed_with_secret(data: bytes, shared_secret: bytes) -> bytes:
    """Decrypt with a shared secret computed beforehand."""
    return mac_then_decrypt(shared_secret, data)


def encrypt_anonymous(plaintext: bytes, recipient_pub_key: bytes) -> tuple[bytes, bytes]:
    """Encrypt with a fresh ephemeral key pair.

    Returns the ephemeral public key (for the ANON_REQ payload) and MAC(2)+ciphertext.
    """
    ephemeral = generate_key_pair()
    secret = compute_shared_secret(ephemeral.private_key, recipient_pub_key)
    return ephemeral.public_key, encrypt_then_mac(secret, plaintext)


def decrypt_anonymous(data: bytes, local_priv_key: bytes, ephemeral_pub_key: bytes) -> bytes:
    """Decrypt an anonymous request using the sender's ephemeral public key."""
    secret = compute_shared_secret(local_priv_key, ephemeral_pub_key)
    return mac_then_decrypt(secret, data)