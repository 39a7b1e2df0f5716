"""
Aggregations behind the dashboard, project list and statistics pages.

All helpers are pure functions over already-loaded projects.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional

from soloquest.domain.entities import Project, ProjectStatus, Task, TaskStatus

TOP_PROJECTS_LIMIT = 5


def _all_tasks(projects: Iterable[Project]) -> list[Task]:
    return [task for project in projects for task in project.tasks]


def _count(items, status) -> int:
    return sum(1 for item in items if item.status == status)


def _completion_rate(completed: int, total: int) -> int:
    if not total:
        return 0
    # Math.round semantics (half up) rather than banker's rounding.
    return int(completed * 100 / total + 0.5)


def dashboard_summary(projects: list[Project]) -> dict:
    tasks = _all_tasks(projects)
    completed = _count(tasks, TaskStatus.COMPLETED)
    return {
        "totalProjects": len(projects),
        "activeProjects": _count(projects, ProjectStatus.ACTIVE),
        "completedProjects": _count(projects, ProjectStatus.COMPLETED),
        "totalTasks": len(tasks),
        "todoTasks": _count(tasks, TaskStatus.TODO),
        "inProgressTasks": _count(tasks, TaskStatus.IN_PROGRESS),
        "completedTasks": completed,
        "completionRate": _completion_rate(completed, len(tasks)),
    }


def recent_activity(projects: list[Project], project_limit: int = 3, task_limit: int = 5) -> dict:
    """Most recently updated projects and tasks; tasks carry their project's name."""
    recent_projects = sorted(projects, key=lambda p: p.updated_at, reverse=True)[:project_limit]
    tasks = [(task, project.name) for project in projects for task in project.tasks]
    tasks.sort(key=lambda pair: pair[0].updated_at, reverse=True)
    return {
        "recentProjects": [p.to_dict() for p in recent_projects],
        "recentTasks": [{**task.to_dict(), "projectName": name} for task, name in tasks[:task_limit]],
    }


def project_progress(project: Project) -> dict:
    total = len(project.tasks)
    completed = _count(project.tasks, TaskStatus.COMPLETED)
    return {
        "total": total,
        "todo": _count(project.tasks, TaskStatus.TODO),
        "inProgress": _count(project.tasks, TaskStatus.IN_PROGRESS),
        "completed": completed,
        "percent": _completion_rate(completed, total),
    }


def _start_of_week(day: date) -> date:
    # Weeks start on Sunday.
    return day - timedelta(days=(day.weekday() + 1) % 7)


def weekly_activity(tasks: list[Task], today: date) -> list[dict]:
    """Tasks touched on each day of ``today``'s week, and how many of those are completed."""
    start = _start_of_week(today)
    out = []
    for offset in range(7):
        day = start + timedelta(days=offset)
        touched = [t for t in tasks if t.updated_at.astimezone(timezone.utc).date() == day]
        out.append(
            {
                "name": day.strftime("%a"),
                "date": f"{day.strftime('%b')} {day.day}",
                "completed": _count(touched, TaskStatus.COMPLETED),
                "created": len(touched),
            }
        )
    return out


def project_stats(projects: list[Project], today: Optional[date] = None) -> dict:
    today = today or datetime.now(timezone.utc).date()
    tasks = _all_tasks(projects)
    summary = dashboard_summary(projects)
    summary["planningProjects"] = _count(projects, ProjectStatus.PLANNING)

    project_status = [
        {"name": "Planning", "value": summary["planningProjects"]},
        {"name": "Active", "value": summary["activeProjects"]},
        {"name": "Completed", "value": summary["completedProjects"]},
    ]
    task_status = [
        {"name": "To Do", "value": summary["todoTasks"]},
        {"name": "In Progress", "value": summary["inProgressTasks"]},
        {"name": "Completed", "value": summary["completedTasks"]},
    ]
    per_project = [{"name": p.name, **project_progress(p)} for p in projects]
    per_project.sort(key=lambda item: item["total"], reverse=True)
    for item in per_project:
        item.pop("percent")

    return {
        "summary": summary,
        "projectStatus": [item for item in project_status if item["value"] > 0],
        "taskStatus": [item for item in task_status if item["value"] > 0],
        "topProjects": per_project[:TOP_PROJECTS_LIMIT],
        "weeklyActivity": weekly_activity(tasks, today),
    }


def filter_projects(
    projects: list[Project],
    status: Optional[str] = None,
    query: Optional[str] = None,
) -> list[Project]:
    """Status filter ("all" or empty means any) followed by a name/description search."""
    result = list(projects)
    if status and status != "all":
        wanted = ProjectStatus(status)
        result = [p for p in result if p.status == wanted]
    needle = (query or "").strip().lower()
    if needle:
        result = [
            p for p in result if needle in p.name.lower() or needle in (p.description or "").lower()
        ]
    return result
