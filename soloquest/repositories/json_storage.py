"""
JSON snapshot files.

Exports written by the settings page end up here; the seeding script can read
them back to load projects into a real store.
"""

from __future__ import annotations

from pathlib import Path
import json

from soloquest.domain.entities import (
    Priority,
    Project,
    ProjectStatus,
    Task,
    TaskStatus,
    parse_datetime,
    utcnow,
)


def dump(snapshot: dict, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(snapshot, ensure_ascii=False, indent=2), encoding="utf-8")


def load(path: Path) -> dict:
    path = Path(path)
    if not path.exists():
        return {"projects": [], "users": []}
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    data.setdefault("projects", [])
    data.setdefault("users", [])
    return data


def project_from_dict(data: dict) -> Project:
    """Rebuild a Project (and its tasks) from its exported camelCase shape."""
    project_id = str(data["id"])
    created = parse_datetime(data.get("createdAt")) or utcnow()
    updated = parse_datetime(data.get("updatedAt")) or created
    tasks = []
    for item in data.get("tasks") or []:
        task_created = parse_datetime(item.get("createdAt")) or created
        tasks.append(
            Task(
                id=str(item["id"]),
                title=item.get("title") or "",
                description=item.get("description"),
                status=TaskStatus(item.get("status") or TaskStatus.TODO),
                priority=Priority(item.get("priority") or Priority.MEDIUM),
                due_date=parse_datetime(item.get("dueDate")),
                project_id=project_id,
                created_at=task_created,
                updated_at=parse_datetime(item.get("updatedAt")) or task_created,
            )
        )
    return Project(
        id=project_id,
        name=data.get("name") or "",
        description=data.get("description") or "",
        status=ProjectStatus(data.get("status") or ProjectStatus.PLANNING),
        priority=Priority(data.get("priority") or Priority.MEDIUM),
        created_at=created,
        updated_at=updated,
        tasks=tasks,
    )
