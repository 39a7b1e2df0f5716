from __future__ import annotations

from fastapi import APIRouter, Depends

from soloquest.routers.deps import get_db
from soloquest.services.database_client import DatabaseClient
from soloquest.services.stats_service import dashboard_summary, project_stats, recent_activity

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/dashboard")
def dashboard(db: DatabaseClient = Depends(get_db)):
    projects = db.get_projects()
    return {"summary": dashboard_summary(projects), **recent_activity(projects)}


@router.get("")
def stats(db: DatabaseClient = Depends(get_db)):
    return project_stats(db.get_projects())
