from __future__ import annotations

from fastapi import APIRouter, Depends

from soloquest.routers.deps import get_db
from soloquest.services.database_client import DatabaseClient

router = APIRouter(prefix="/api", tags=["settings"])


@router.get("/settings/database")
def database_settings(db: DatabaseClient = Depends(get_db)):
    if not db.is_connected:
        db.connect()
    return db.describe()


@router.get("/settings/export")
def export_data(db: DatabaseClient = Depends(get_db)):
    return db.export_snapshot()


@router.get("/notices")
def notices(db: DatabaseClient = Depends(get_db)):
    return [notice.to_dict() for notice in db.drain_notices()]
