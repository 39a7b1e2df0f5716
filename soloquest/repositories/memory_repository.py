"""In-memory mirror used when the relational store cannot be reached."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Iterable, Optional

from soloquest.domain.entities import (
    Project,
    ProjectDraft,
    ProjectPatch,
    Task,
    TaskDraft,
    TaskPatch,
    User,
    UserDraft,
    UserPatch,
    new_id,
    next_stamp,
    utcnow,
)
from soloquest.repositories.base import (
    DuplicateEmailError,
    normalize_email,
    sort_projects,
    sort_tasks,
    sort_users,
)


@dataclass
class _Account:
    user: User
    password_hash: str


class MemoryRepository:
    """Backend keeping projects (with nested tasks) and accounts in lists.

    Every returned record is a deep copy so callers never hold references into
    the mirror.
    """

    def __init__(self, projects: Iterable[Project] = ()) -> None:
        self._projects: list[Project] = [copy.deepcopy(p) for p in projects]
        self._accounts: list[_Account] = []

    # -------------------------- helpers --------------------------
    def _find_project(self, project_id: str) -> Optional[Project]:
        for project in self._projects:
            if project.id == project_id:
                return project
        return None

    def _find_account(self, user_id: str) -> Optional[_Account]:
        for account in self._accounts:
            if account.user.id == user_id:
                return account
        return None

    def _find_account_by_email(self, email: str) -> Optional[_Account]:
        email = normalize_email(email)
        for account in self._accounts:
            if account.user.email == email:
                return account
        return None

    @staticmethod
    def _view(project: Project) -> Project:
        out = copy.deepcopy(project)
        out.tasks = sort_tasks(out.tasks)
        return out

    # -------------------------- projects --------------------------
    def get_projects(self) -> list[Project]:
        return [self._view(p) for p in sort_projects(self._projects)]

    def get_project(self, project_id: str) -> Optional[Project]:
        project = self._find_project(project_id)
        return self._view(project) if project else None

    def create_project(self, draft: ProjectDraft) -> Project:
        now = utcnow()
        project = Project(
            id=new_id(),
            name=draft.name,
            description=draft.description or "",
            status=draft.status,
            priority=draft.priority,
            created_at=now,
            updated_at=now,
            tasks=[],
        )
        self._projects.append(project)
        return self._view(project)

    def update_project(self, project_id: str, patch: ProjectPatch) -> Optional[Project]:
        project = self._find_project(project_id)
        if not project:
            return None
        patch.apply(project)
        project.updated_at = next_stamp(project.updated_at)
        return self._view(project)

    def delete_project(self, project_id: str) -> bool:
        before = len(self._projects)
        # Tasks live inside the project, so they go with it.
        self._projects = [p for p in self._projects if p.id != project_id]
        return len(self._projects) < before

    # -------------------------- tasks --------------------------
    def create_task(self, project_id: str, draft: TaskDraft) -> Optional[Task]:
        project = self._find_project(project_id)
        if not project:
            return None
        now = utcnow()
        task = Task(
            id=new_id(),
            title=draft.title,
            description=draft.description,
            status=draft.status,
            priority=draft.priority,
            due_date=draft.due_date,
            project_id=project.id,
            created_at=now,
            updated_at=now,
        )
        project.tasks.append(task)
        return copy.deepcopy(task)

    def update_task(self, project_id: str, task_id: str, patch: TaskPatch) -> Optional[Task]:
        project = self._find_project(project_id)
        if not project:
            return None
        for task in project.tasks:
            if task.id == task_id:
                patch.apply(task)
                task.updated_at = next_stamp(task.updated_at)
                return copy.deepcopy(task)
        return None

    def delete_task(self, project_id: str, task_id: str) -> bool:
        project = self._find_project(project_id)
        if not project:
            return False
        before = len(project.tasks)
        project.tasks = [t for t in project.tasks if t.id != task_id]
        return len(project.tasks) < before

    # -------------------------- users --------------------------
    def count_users(self) -> int:
        return len(self._accounts)

    def get_users(self) -> list[User]:
        return [copy.deepcopy(u) for u in sort_users([a.user for a in self._accounts])]

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        account = self._find_account(user_id)
        return copy.deepcopy(account.user) if account else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        account = self._find_account_by_email(email)
        return copy.deepcopy(account.user) if account else None

    def get_credentials(self, email: str) -> Optional[tuple[User, str]]:
        account = self._find_account_by_email(email)
        if not account:
            return None
        return copy.deepcopy(account.user), account.password_hash

    def create_user(self, draft: UserDraft, password_hash: str) -> User:
        email = normalize_email(draft.email)
        if self._find_account_by_email(email):
            raise DuplicateEmailError(email)
        now = utcnow()
        user = User(
            id=new_id(),
            email=email,
            name=draft.name,
            role=draft.role,
            created_at=now,
            updated_at=now,
        )
        self._accounts.append(_Account(user=user, password_hash=password_hash))
        return copy.deepcopy(user)

    def update_user(self, user_id: str, patch: UserPatch, password_hash: Optional[str] = None) -> Optional[User]:
        account = self._find_account(user_id)
        if not account:
            return None
        changes = patch.changes()
        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
            other = self._find_account_by_email(changes["email"])
            if other and other is not account:
                raise DuplicateEmailError(changes["email"])
        for name, value in changes.items():
            setattr(account.user, name, value)
        if password_hash:
            account.password_hash = password_hash
        account.user.updated_at = next_stamp(account.user.updated_at)
        return copy.deepcopy(account.user)

    def set_password_hash(self, user_id: str, password_hash: str) -> None:
        account = self._find_account(user_id)
        if account:
            account.password_hash = password_hash

    def delete_user(self, user_id: str) -> bool:
        before = len(self._accounts)
        self._accounts = [a for a in self._accounts if a.user.id != user_id]
        return len(self._accounts) < before
