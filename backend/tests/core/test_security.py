"""Tests for core.security: redaction, credential encryption, and tokens."""

from datetime import timedelta

import bcrypt
import pytest

from src.core.security import (
    create_access_token,
    decode_token,
    decrypt_secret,
    encrypt_secret,
    hash_password,
    preview_secret,
)


@pytest.mark.parametrize("value", [None, ""])
def test_preview_of_missing_value_is_none(value):
    assert preview_secret(value) is None


def test_preview_never_contains_the_middle():
    secret = "HEAD012345" + "x" * 40 + "TAIL987654"

    preview = preview_secret(secret)

    assert preview == "HEAD012345...TAIL987654"
    assert "x" not in preview


def test_encrypted_secret_is_not_plaintext():
    token = encrypt_secret("ringba-key-value")

    assert b"ringba-key-value" not in token
    assert decrypt_secret(token) == "ringba-key-value"


def test_decrypt_rejects_tampered_data():
    with pytest.raises(ValueError):
        decrypt_secret(b"definitely-not-fernet")


def test_empty_secret_round_trips_to_empty():
    assert encrypt_secret("") == b""
    assert decrypt_secret(b"") == ""


def test_access_token_carries_subject_and_type():
    payload = decode_token(create_access_token({"sub": "user-1"}))

    assert payload["sub"] == "user-1"
    assert payload["type"] == "access"


def test_expired_token_does_not_decode():
    token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-5))

    assert decode_token(token) is None


def test_password_hash_is_salted_bcrypt():
    hashed = hash_password("correct horse")

    assert hashed != hash_password("correct horse")
    assert bcrypt.checkpw(b"correct horse", hashed.encode("utf-8"))
    assert not bcrypt.checkpw(b"wrong horse", hashed.encode("utf-8"))
