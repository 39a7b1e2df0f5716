"""Shared dependencies for the API routers."""
from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from soloquest.core.security import TokenClaims
from soloquest.services.database_client import DatabaseClient
from soloquest.services.session_service import bearer_token


def get_db(request: Request) -> DatabaseClient:
    db = getattr(getattr(request.app, "state", None), "db", None)
    if db is None:
        raise RuntimeError("DatabaseClient not configured")
    return db


def current_claims(request: Request, db: DatabaseClient = Depends(get_db)) -> TokenClaims:
    claims = db.verify_token(bearer_token(request))
    if not claims:
        raise HTTPException(401, "Not authenticated")
    return claims


def parse_payload(cls, payload: dict):
    """Build a draft/patch from a JSON body, mapping bad input to 422."""
    try:
        return cls.from_dict(payload or {})
    except ValueError as exc:
        raise HTTPException(422, str(exc))
