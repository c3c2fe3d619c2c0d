"""Unit tests for password hashing, tokens and share keys."""

from datetime import timedelta

from billbook.core.security import (
    create_access_token,
    decode_token,
    generate_share_key,
    get_password_hash,
    verify_password,
)


def test_password_hash_roundtrip():
    hashed = get_password_hash("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong-pass", hashed)


def test_long_passwords_are_truncated_consistently():
    base = "é" * 40
    hashed = get_password_hash(base + "tail")
    # only the first 72 bytes count
    assert verify_password(base + "other tail", hashed)


def test_access_token_carries_subject_and_type():
    token = create_access_token({"sub": "abc", "email": "an@example.com"})
    payload = decode_token(token)
    assert payload["sub"] == "abc"
    assert payload["type"] == "access"


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "abc"}, expires_delta=timedelta(seconds=-5))
    assert decode_token(token) is None


def test_garbage_token_is_rejected():
    assert decode_token("not-a-jwt") is None


def test_share_keys_are_url_safe_and_distinct():
    keys = {generate_share_key() for _ in range(20)}
    assert len(keys) == 20
    for key in keys:
        assert len(key) >= 16
        assert all(c.isalnum() or c in "-_" for c in key)
    assert len(generate_share_key(8)) < len(generate_share_key(32))
