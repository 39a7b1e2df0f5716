from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from soloquest.domain.entities import ProjectDraft, ProjectPatch, TaskDraft, TaskPatch
from soloquest.routers.deps import get_db, parse_payload
from soloquest.services.database_client import DatabaseClient
from soloquest.services.stats_service import filter_projects, project_progress

router = APIRouter(prefix="/api/projects", tags=["projects"])


def _project_view(project) -> dict:
    data = project.to_dict()
    data["progress"] = project_progress(project)
    return data


@router.get("")
def list_projects(status: Optional[str] = None, q: Optional[str] = None, db: DatabaseClient = Depends(get_db)):
    try:
        projects = filter_projects(db.get_projects(), status=status, query=q)
    except ValueError:
        raise HTTPException(422, "Unknown project status")
    return [_project_view(p) for p in projects]


@router.post("", status_code=201)
def create_project(payload: dict = Body(...), db: DatabaseClient = Depends(get_db)):
    draft = parse_payload(ProjectDraft, payload)
    return _project_view(db.create_project(draft))


@router.get("/{project_id}")
def get_project(project_id: str, db: DatabaseClient = Depends(get_db)):
    project = db.get_project(project_id)
    if not project:
        raise HTTPException(404, "Project not found")
    return _project_view(project)


@router.patch("/{project_id}")
def update_project(project_id: str, payload: dict = Body(...), db: DatabaseClient = Depends(get_db)):
    patch = parse_payload(ProjectPatch, payload)
    project = db.update_project(project_id, patch)
    if not project:
        raise HTTPException(404, "Project not found")
    return _project_view(project)


@router.delete("/{project_id}")
def delete_project(project_id: str, db: DatabaseClient = Depends(get_db)):
    if not db.delete_project(project_id):
        raise HTTPException(404, "Project not found")
    return {"ok": True}


# -------------------------- tasks --------------------------
@router.post("/{project_id}/tasks", status_code=201)
def create_task(project_id: str, payload: dict = Body(...), db: DatabaseClient = Depends(get_db)):
    draft = parse_payload(TaskDraft, payload)
    task = db.create_task(project_id, draft)
    if not task:
        raise HTTPException(404, "Project not found")
    return task.to_dict()


@router.patch("/{project_id}/tasks/{task_id}")
def update_task(project_id: str, task_id: str, payload: dict = Body(...), db: DatabaseClient = Depends(get_db)):
    patch = parse_payload(TaskPatch, payload)
    task = db.update_task(project_id, task_id, patch)
    if not task:
        raise HTTPException(404, "Task not found")
    return task.to_dict()


@router.delete("/{project_id}/tasks/{task_id}")
def delete_task(project_id: str, task_id: str, db: DatabaseClient = Depends(get_db)):
    if not db.delete_task(project_id, task_id):
        raise HTTPException(404, "Task not found")
    return {"ok": True}
