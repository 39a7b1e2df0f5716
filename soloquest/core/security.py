"""Security helpers (password hashing and session tokens)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
TOKEN_ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return _ph.hash(password)


def verify_password(password: str, stored_hash: str | None) -> bool:
    if not stored_hash:
        return False
    try:
        return _ph.verify(stored_hash, password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def needs_rehash(stored_hash: str) -> bool:
    """True when the stored hash was produced with outdated argon2 parameters."""
    try:
        return _ph.check_needs_rehash(stored_hash)
    except argon_exc.InvalidHashError:
        return True


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime


def issue_token(
    *,
    user_id: str,
    email: str,
    role: str,
    secret: str,
    ttl_seconds: int,
    now: datetime | None = None,
) -> str:
    """Sign a session token carrying the user identity, issue time and expiry."""
    issued = (now or datetime.now(timezone.utc)).replace(microsecond=0)
    payload = {
        "userId": user_id,
        "email": email,
        "role": role,
        "iat": issued,
        "exp": issued + timedelta(seconds=ttl_seconds),
    }
    return jwt.encode(payload, secret, algorithm=TOKEN_ALGORITHM)


def decode_token(token: str | None, *, secret: str) -> TokenClaims | None:
    """Verify signature and expiry. Invalid or expired tokens yield None."""
    if not token:
        return None
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[TOKEN_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.PyJWTError:
        return None
    try:
        return TokenClaims(
            user_id=str(payload["userId"]),
            email=str(payload["email"]),
            role=str(payload["role"]),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError):
        return None
