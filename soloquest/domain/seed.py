"""Built-in demo data served when the relational store is unavailable."""

from __future__ import annotations

from datetime import datetime, timezone

from .entities import Priority, Project, ProjectStatus, Task, TaskStatus


def _d(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


# task tuples: (id, title, status, priority, created, updated)
_DEMO = [
    {
        "id": "1",
        "name": "Personal Website",
        "description": "Redesign of my personal portfolio website with a blog section",
        "status": ProjectStatus.ACTIVE,
        "priority": Priority.MEDIUM,
        "created_at": _d(2023, 11, 10),
        "updated_at": _d(2024, 3, 15),
        "tasks": [
            ("101", "Design homepage wireframe", TaskStatus.COMPLETED, Priority.MEDIUM, _d(2023, 11, 10), _d(2023, 11, 12)),
            ("102", "Implement responsive layout", TaskStatus.IN_PROGRESS, Priority.HIGH, _d(2023, 11, 15), _d(2023, 11, 15)),
            ("103", "Add blog functionality", TaskStatus.TODO, Priority.MEDIUM, _d(2023, 11, 20), _d(2023, 11, 20)),
        ],
    },
    {
        "id": "2",
        "name": "Weather App",
        "description": "Mobile weather application with real-time updates and location services",
        "status": ProjectStatus.PLANNING,
        "priority": Priority.LOW,
        "created_at": _d(2024, 1, 5),
        "updated_at": _d(2024, 1, 5),
        "tasks": [
            ("201", "Research weather APIs", TaskStatus.COMPLETED, Priority.HIGH, _d(2024, 1, 5), _d(2024, 1, 7)),
            ("202", "Create app design mockups", TaskStatus.TODO, Priority.MEDIUM, _d(2024, 1, 10), _d(2024, 1, 10)),
        ],
    },
    {
        "id": "3",
        "name": "Budget Tracker",
        "description": "Personal finance application to track expenses and savings",
        "status": ProjectStatus.COMPLETED,
        "priority": Priority.MEDIUM,
        "created_at": _d(2023, 9, 1),
        "updated_at": _d(2023, 12, 15),
        "tasks": [
            ("301", "Design database schema", TaskStatus.COMPLETED, Priority.HIGH, _d(2023, 9, 1), _d(2023, 9, 5)),
            ("302", "Implement user authentication", TaskStatus.COMPLETED, Priority.HIGH, _d(2023, 9, 10), _d(2023, 9, 20)),
            ("303", "Add expense tracking feature", TaskStatus.COMPLETED, Priority.MEDIUM, _d(2023, 9, 25), _d(2023, 10, 10)),
            ("304", "Create reporting dashboard", TaskStatus.COMPLETED, Priority.MEDIUM, _d(2023, 10, 15), _d(2023, 11, 1)),
        ],
    },
]


def demo_projects() -> list[Project]:
    """Fresh copies of the demo projects; callers may mutate them freely."""
    projects = []
    for meta in _DEMO:
        tasks = [
            Task(
                id=task_id,
                title=title,
                status=status,
                priority=priority,
                project_id=meta["id"],
                created_at=created,
                updated_at=updated,
            )
            for task_id, title, status, priority, created, updated in meta["tasks"]
        ]
        projects.append(
            Project(
                id=meta["id"],
                name=meta["name"],
                description=meta["description"],
                status=meta["status"],
                priority=meta["priority"],
                created_at=meta["created_at"],
                updated_at=meta["updated_at"],
                tasks=tasks,
            )
        )
    return projects
