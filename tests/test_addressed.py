import pytest

from meshcore.crypto.addressed import (
    decrypt_addressed,
    decrypt_addressed_with_secret,
    decrypt_anonymous,
    encrypt_addressed,
    encrypt_addressed_with_secret,
    encrypt_anonymous,
)
from meshcore.crypto.cipher import MACMismatchError
from meshcore.crypto.keys import InvalidPubKeySizeError, compute_shared_secret, generate_key_pair


def test_encrypt_decrypt_addressed():
    sender = generate_key_pair()
    recipient = generate_key_pair()
    plaintext = b"Hello, peer-to-peer!"
    encrypted = encrypt_addressed(plaintext, sender.private_key, recipient.public_key)
    decrypted = decrypt_addressed(encrypted, recipient.private_key, sender.public_key)
    assert decrypted.startswith(plaintext)
    assert len(decrypted) % 16 == 0


def test_encrypt_decrypt_addressed_with_secret():
    a = generate_key_pair()
    b = generate_key_pair()
    secret = compute_shared_secret(a.private_key, b.public_key)
    plaintext = b"Using pre-computed secret"
    encrypted = encrypt_addressed_with_secret(plaintext, secret)
    assert decrypt_addressed_with_secret(encrypted, secret).startswith(plaintext)


def test_encrypt_decrypt_addressed_cross_compatible():
    a = generate_key_pair()
    b = generate_key_pair()
    secret = compute_shared_secret(a.private_key, b.public_key)
    plaintext = b"Cross-compatible test"
    encrypted = encrypt_addressed(plaintext, a.private_key, b.public_key)
    assert decrypt_addressed_with_secret(encrypted, secret).startswith(plaintext)


def test_encrypt_decrypt_addressed_wrong_key():
    sender = generate_key_pair()
    recipient = generate_key_pair()
    wrong = generate_key_pair()
    encrypted = encrypt_addressed(b"Secret message", sender.private_key, recipient.public_key)
    with pytest.raises(MACMismatchError):
        decrypt_addressed(encrypted, wrong.private_key, sender.public_key)


def test_encrypt_decrypt_anonymous():
    recipient = generate_key_pair()
    plaintext = b"Anonymous request data"
    eph_pub, encrypted = encrypt_anonymous(plaintext, recipient.public_key)
    assert len(eph_pub) == 32
    assert decrypt_anonymous(encrypted, recipient.private_key, eph_pub).startswith(plaintext)


def test_encrypt_anonymous_unique_keys():
    recipient = generate_key_pair()
    eph1, _ = encrypt_anonymous(b"test", recipient.public_key)
    eph2, _ = encrypt_anonymous(b"test", recipient.public_key)
    assert eph1 != eph2


def test_decrypt_anonymous_wrong_key():
    recipient = generate_key_pair()
    wrong = generate_key_pair()
    eph_pub, encrypted = encrypt_anonymous(b"test", recipient.public_key)
    with pytest.raises(MACMismatchError):
        decrypt_anonymous(encrypted, wrong.private_key, eph_pub)


def test_encrypt_addressed_bad_public_key_size():
    sender = generate_key_pair()
    with pytest.raises(InvalidPubKeySizeError):
        encrypt_addressed(b"x", sender.private_key, bytes(16))