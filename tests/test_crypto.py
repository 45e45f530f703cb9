"""Unit tests for field encryption."""

import pytest

from peer360.security.crypto import (
    DecryptionError,
    EncryptionError,
    decrypt,
    encrypt,
    evaluation_key,
    generate_key,
    member_key,
)


def test_generate_key_is_sha256_of_material():
    key = generate_key("token")
    assert len(key) == 32
    assert key == generate_key("token")
    assert key != generate_key("other")


def test_round_trip():
    key = generate_key("k1")
    for text in ["Ana", "ana@example.com", "Ótimo colega 👍", "x" * 2000]:
        assert decrypt(encrypt(text, key), key) == text


def test_encrypt_is_randomized():
    """Fresh nonce per call - equal plaintexts do not produce equal tokens."""
    key = generate_key("k1")
    assert encrypt("same", key) != encrypt("same", key)


def test_wrong_key_fails():
    token = encrypt("secret", generate_key("k1"))
    with pytest.raises(DecryptionError) as exc:
        decrypt(token, generate_key("k2"))
    assert str(exc.value) == "decryption failed"


def test_corrupt_data_fails_with_same_error():
    key = generate_key("k1")
    token = encrypt("secret", key)
    tampered = token[:-4] + ("AAAA" if not token.endswith("AAAA") else "BBBB")
    for bad in [tampered, "not base64 !!", "AAAA", ""]:
        with pytest.raises(DecryptionError) as exc:
            decrypt(bad, key)
        assert str(exc.value) == "decryption failed"


def test_empty_plaintext_rejected():
    with pytest.raises(EncryptionError):
        encrypt("", generate_key("k1"))


def test_evaluation_and_member_keys_differ_per_evaluation():
    assert evaluation_key("tok") == generate_key("tok")
    assert member_key("ev-1", "s" * 32) != member_key("ev-2", "s" * 32)
    assert member_key("ev-1", "s" * 32) != member_key("ev-1", "t" * 32)
