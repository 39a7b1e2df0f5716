"""Domain records and seed data for SoloQuest."""

from .entities import (
    Priority,
    Project,
    ProjectDraft,
    ProjectPatch,
    ProjectStatus,
    Task,
    TaskDraft,
    TaskPatch,
    TaskStatus,
    User,
    UserDraft,
    UserPatch,
    UserRole,
)

__all__ = [
    "Priority",
    "Project",
    "ProjectDraft",
    "ProjectPatch",
    "ProjectStatus",
    "Task",
    "TaskDraft",
    "TaskPatch",
    "TaskStatus",
    "User",
    "UserDraft",
    "UserPatch",
    "UserRole",
]
