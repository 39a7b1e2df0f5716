from __future__ import annotations

from fastapi import APIRouter, Body, Depends, HTTPException

from soloquest.domain.entities import UserDraft, UserPatch
from soloquest.repositories.base import DuplicateEmailError
from soloquest.routers.deps import get_db, parse_payload
from soloquest.services.database_client import DatabaseClient

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("")
def list_users(db: DatabaseClient = Depends(get_db)):
    return [user.to_dict() for user in db.get_users()]


@router.get("/by-email")
def user_by_email(email: str = "", db: DatabaseClient = Depends(get_db)):
    user = db.get_user_by_email(email)
    if not user:
        raise HTTPException(404, "User not found")
    return user.to_dict()


@router.post("", status_code=201)
def create_user(payload: dict = Body(...), db: DatabaseClient = Depends(get_db)):
    draft = parse_payload(UserDraft, payload)
    try:
        user = db.create_user(draft)
    except DuplicateEmailError as exc:
        raise HTTPException(409, str(exc))
    return user.to_dict()


@router.get("/{user_id}")
def get_user(user_id: str, db: DatabaseClient = Depends(get_db)):
    user = db.get_user_by_id(user_id)
    if not user:
        raise HTTPException(404, "User not found")
    return user.to_dict()


@router.patch("/{user_id}")
def update_user(user_id: str, payload: dict = Body(...), db: DatabaseClient = Depends(get_db)):
    patch = parse_payload(UserPatch, payload)
    try:
        user = db.update_user(user_id, patch)
    except DuplicateEmailError as exc:
        raise HTTPException(409, str(exc))
    if not user:
        raise HTTPException(404, "User not found")
    return user.to_dict()


@router.delete("/{user_id}")
def delete_user(user_id: str, db: DatabaseClient = Depends(get_db)):
    if not db.delete_user(user_id):
        raise HTTPException(404, "User not found")
    return {"ok": True}
