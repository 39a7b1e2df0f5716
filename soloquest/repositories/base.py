"""Backend interface shared by the SQL and in-memory repositories."""

from __future__ import annotations

from typing import Optional, Protocol

from soloquest.domain.entities import (
    PRIORITY_RANK,
    Project,
    ProjectDraft,
    ProjectPatch,
    Task,
    TaskDraft,
    TaskPatch,
    User,
    UserDraft,
    UserPatch,
)


class PersistenceError(Exception):
    """Base class for domain-level persistence errors (not store outages)."""


class DuplicateEmailError(PersistenceError):
    def __init__(self, email: str):
        super().__init__(f"Email already registered: {email}")
        self.email = email


class Backend(Protocol):
    """
    Operations the facade delegates to.

    Not-found is reported as ``None`` / ``False``. Passwords arrive already
    hashed; reads never expose the hash except through ``get_credentials``.
    """

    def count_users(self) -> int: ...

    def get_projects(self) -> list[Project]: ...
    def get_project(self, project_id: str) -> Optional[Project]: ...
    def create_project(self, draft: ProjectDraft) -> Project: ...
    def update_project(self, project_id: str, patch: ProjectPatch) -> Optional[Project]: ...
    def delete_project(self, project_id: str) -> bool: ...

    def create_task(self, project_id: str, draft: TaskDraft) -> Optional[Task]: ...
    def update_task(self, project_id: str, task_id: str, patch: TaskPatch) -> Optional[Task]: ...
    def delete_task(self, project_id: str, task_id: str) -> bool: ...

    def get_users(self) -> list[User]: ...
    def get_user_by_id(self, user_id: str) -> Optional[User]: ...
    def get_user_by_email(self, email: str) -> Optional[User]: ...
    def get_credentials(self, email: str) -> Optional[tuple[User, str]]: ...
    def create_user(self, draft: UserDraft, password_hash: str) -> User: ...
    def update_user(self, user_id: str, patch: UserPatch, password_hash: Optional[str] = None) -> Optional[User]: ...
    def set_password_hash(self, user_id: str, password_hash: str) -> None: ...
    def delete_user(self, user_id: str) -> bool: ...


# Ordering rules. The SQL backend expresses the same keys in ORDER BY.
def sort_projects(projects: list[Project]) -> list[Project]:
    """Most recently updated first, then newest created, then id."""
    ordered = sorted(projects, key=lambda p: p.id)
    return sorted(ordered, key=lambda p: (p.updated_at, p.created_at), reverse=True)


def sort_tasks(tasks: list[Task]) -> list[Task]:
    """Priority high to low, then most recently updated, then id."""
    ordered = sorted(tasks, key=lambda t: t.id)
    ordered = sorted(ordered, key=lambda t: t.updated_at, reverse=True)
    return sorted(ordered, key=lambda t: PRIORITY_RANK.get(t.priority, len(PRIORITY_RANK)))


def sort_users(users: list[User]) -> list[User]:
    return sorted(users, key=lambda u: (u.created_at, u.id))


def normalize_email(email: str | None) -> str:
    return (email or "").strip()
