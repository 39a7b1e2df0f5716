from __future__ import annotations

from fastapi import APIRouter, Body, Depends, HTTPException

from soloquest.core.security import TokenClaims
from soloquest.routers.deps import current_claims, get_db
from soloquest.services.database_client import DatabaseClient

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
def login(payload: dict = Body(...), db: DatabaseClient = Depends(get_db)):
    email = str(payload.get("email") or "").strip()
    password = str(payload.get("password") or "")
    if not email or not password:
        raise HTTPException(401, "Invalid credentials")
    result = db.login(email, password)
    if not result:
        raise HTTPException(401, "Invalid credentials")
    return result.to_dict()


@router.get("/me")
def me(claims: TokenClaims = Depends(current_claims), db: DatabaseClient = Depends(get_db)):
    user = db.get_user_by_id(claims.user_id)
    if not user:
        raise HTTPException(401, "Not authenticated")
    return {"user": user.to_dict(), "expiresAt": claims.expires_at.isoformat()}
