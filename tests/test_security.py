from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from soloquest.core.config import parse_expiry
from soloquest.core.security import (
    decode_token,
    hash_password,
    issue_token,
    needs_rehash,
    verify_password,
)

SECRET = "unit-test-secret-with-enough-bytes-123"


def test_hash_and_verify_password():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert hashed.startswith("$argon2")
    assert verify_password("correct horse", hashed) is True
    assert verify_password("wrong", hashed) is False
    assert needs_rehash(hashed) is False


def test_verify_password_handles_missing_or_garbage_hash():
    assert verify_password("x", None) is False
    assert verify_password("x", "") is False
    assert verify_password("x", "not-a-hash") is False
    assert needs_rehash("not-a-hash") is True


def test_token_round_trip_carries_claims():
    token = issue_token(user_id="u1", email="a@example.com", role="admin", secret=SECRET, ttl_seconds=3600)
    header, payload, signature = token.split(".")
    assert header and payload and signature
    claims = decode_token(token, secret=SECRET)
    assert claims.user_id == "u1"
    assert claims.email == "a@example.com"
    assert claims.role == "admin"
    assert claims.expires_at - claims.issued_at == timedelta(hours=1)


def test_token_with_wrong_secret_or_tampering_is_rejected():
    token = issue_token(user_id="u1", email="a@example.com", role="user", secret=SECRET, ttl_seconds=60)
    assert decode_token(token, secret="another-secret-that-is-long-enough-too") is None
    forged = jwt.encode({"userId": "u1", "email": "a@example.com", "role": "admin"}, SECRET, algorithm="HS256")
    assert decode_token(forged, secret=SECRET) is None  # no exp/iat
    assert decode_token("a.b.c", secret=SECRET) is None
    assert decode_token(None, secret=SECRET) is None


def test_expired_token_is_rejected():
    past = datetime.now(timezone.utc) - timedelta(days=2)
    token = issue_token(user_id="u1", email="a@example.com", role="user", secret=SECRET, ttl_seconds=60, now=past)
    assert decode_token(token, secret=SECRET) is None


def test_parse_expiry():
    assert parse_expiry("7d") == 7 * 86400
    assert parse_expiry("12h") == 12 * 3600
    assert parse_expiry("30m") == 1800
    assert parse_expiry("45s") == 45
    assert parse_expiry("3600") == 3600
    assert parse_expiry("soon") == 7 * 86400
    assert parse_expiry(None) == 7 * 86400
