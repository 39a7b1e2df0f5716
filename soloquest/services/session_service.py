"""Session helpers (issue tokens, read bearer headers, validation)."""
from __future__ import annotations

from fastapi import Request

from soloquest.core.config import Settings
from soloquest.core.security import TokenClaims, decode_token, issue_token
from soloquest.domain.entities import User

BEARER_PREFIX = "bearer "


def issue_session(user: User, settings: Settings) -> str:
    """Sign a token for ``user`` valid for the configured TTL."""
    return issue_token(
        user_id=user.id,
        email=user.email,
        role=user.role.value,
        secret=settings.jwt_secret,
        ttl_seconds=max(60, settings.jwt_ttl_seconds),
    )


def read_session(token: str | None, settings: Settings) -> TokenClaims | None:
    return decode_token(token, secret=settings.jwt_secret)


def bearer_token(request: Request) -> str | None:
    """Return the token from an ``Authorization: Bearer ...`` header, if any."""
    header = request.headers.get("authorization") or ""
    if not header.lower().startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):].strip()
    return token or None
