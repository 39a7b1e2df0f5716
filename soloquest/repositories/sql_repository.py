"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import case, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from soloquest.db.models import ProjectRow, TaskRow, UserRow
from soloquest.db.session import session_scope
from soloquest.domain.entities import (
    PRIORITY_RANK,
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
    as_utc,
    new_id,
    next_stamp,
    utcnow,
)
from soloquest.repositories.base import DuplicateEmailError, normalize_email

_PRIORITY_RANK_SQL = case(
    {priority.value: rank for priority, rank in PRIORITY_RANK.items()},
    value=TaskRow.priority,
    else_=len(PRIORITY_RANK),
)
PROJECT_ORDER = (ProjectRow.updated_at.desc(), ProjectRow.created_at.desc(), ProjectRow.id.asc())
TASK_ORDER = (_PRIORITY_RANK_SQL, TaskRow.updated_at.desc(), TaskRow.id.asc())
USER_ORDER = (UserRow.created_at.asc(), UserRow.id.asc())


# -------------------------- row mapping --------------------------
def _task(row: TaskRow) -> Task:
    return Task(
        id=row.id,
        title=row.title,
        description=row.description,
        status=TaskStatus(row.status),
        priority=Priority(row.priority),
        due_date=as_utc(row.due_date),
        project_id=row.project_id,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def _project(row: ProjectRow, tasks: list[Task]) -> Project:
    return Project(
        id=row.id,
        name=row.name,
        description=row.description or "",
        status=ProjectStatus(row.status),
        priority=Priority(row.priority),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        tasks=tasks,
    )


def _user(row: UserRow) -> User:
    return User(
        id=row.id,
        email=row.email,
        name=row.name,
        role=UserRole(row.role),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def _column_value(value):
    return value.value if hasattr(value, "value") else value


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._factory = session_factory

    def _tasks_for(self, session, project_id: str) -> list[Task]:
        stmt = select(TaskRow).where(TaskRow.project_id == project_id).order_by(*TASK_ORDER)
        return [_task(row) for row in session.execute(stmt).scalars().all()]

    # -------------------------- projects --------------------------
    def get_projects(self) -> list[Project]:
        with session_scope(self._factory) as session:
            rows = session.execute(select(ProjectRow).order_by(*PROJECT_ORDER)).scalars().all()
            grouped: dict[str, list[Task]] = {row.id: [] for row in rows}
            for task_row in session.execute(select(TaskRow).order_by(*TASK_ORDER)).scalars().all():
                if task_row.project_id in grouped:
                    grouped[task_row.project_id].append(_task(task_row))
            return [_project(row, grouped[row.id]) for row in rows]

    def get_project(self, project_id: str) -> Optional[Project]:
        with session_scope(self._factory) as session:
            row = session.get(ProjectRow, project_id)
            if not row:
                return None
            return _project(row, self._tasks_for(session, row.id))

    def create_project(self, draft: ProjectDraft) -> Project:
        now = utcnow()
        row = ProjectRow(
            id=new_id(),
            name=draft.name,
            description=draft.description or "",
            status=draft.status.value,
            priority=draft.priority.value,
            created_at=now,
            updated_at=now,
        )
        with session_scope(self._factory) as session:
            session.add(row)
            session.commit()
            return _project(row, [])

    def update_project(self, project_id: str, patch: ProjectPatch) -> Optional[Project]:
        with session_scope(self._factory) as session:
            row = session.get(ProjectRow, project_id)
            if not row:
                return None
            for name, value in patch.changes().items():
                setattr(row, name, _column_value(value))
            row.updated_at = next_stamp(row.updated_at)
            session.commit()
            return _project(row, self._tasks_for(session, row.id))

    def delete_project(self, project_id: str) -> bool:
        with session_scope(self._factory) as session:
            # SQLite does not enforce the FK cascade unless asked to; delete tasks explicitly.
            session.execute(delete(TaskRow).where(TaskRow.project_id == project_id))
            result = session.execute(delete(ProjectRow).where(ProjectRow.id == project_id))
            session.commit()
            return (result.rowcount or 0) > 0

    def upsert_project(self, project: Project) -> None:
        """Write a full project (ids and timestamps kept) with its tasks."""
        with session_scope(self._factory) as session:
            row = session.get(ProjectRow, project.id)
            if not row:
                row = ProjectRow(id=project.id)
                session.add(row)
            row.name = project.name
            row.description = project.description or ""
            row.status = project.status.value
            row.priority = project.priority.value
            row.created_at = project.created_at
            row.updated_at = project.updated_at
            for task in project.tasks:
                task_row = session.get(TaskRow, task.id)
                if not task_row:
                    task_row = TaskRow(id=task.id)
                    session.add(task_row)
                task_row.project_id = project.id
                task_row.title = task.title
                task_row.description = task.description
                task_row.status = task.status.value
                task_row.priority = task.priority.value
                task_row.due_date = task.due_date
                task_row.created_at = task.created_at
                task_row.updated_at = task.updated_at
            session.commit()

    # -------------------------- tasks --------------------------
    def create_task(self, project_id: str, draft: TaskDraft) -> Optional[Task]:
        now = utcnow()
        with session_scope(self._factory) as session:
            if not session.get(ProjectRow, project_id):
                return None
            row = TaskRow(
                id=new_id(),
                project_id=project_id,
                title=draft.title,
                description=draft.description,
                status=draft.status.value,
                priority=draft.priority.value,
                due_date=draft.due_date,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.commit()
            return _task(row)

    def update_task(self, project_id: str, task_id: str, patch: TaskPatch) -> Optional[Task]:
        with session_scope(self._factory) as session:
            row = session.get(TaskRow, task_id)
            if not row or row.project_id != project_id:
                return None
            for name, value in patch.changes().items():
                setattr(row, name, _column_value(value))
            row.updated_at = next_stamp(row.updated_at)
            session.commit()
            return _task(row)

    def delete_task(self, project_id: str, task_id: str) -> bool:
        with session_scope(self._factory) as session:
            stmt = delete(TaskRow).where(TaskRow.id == task_id, TaskRow.project_id == project_id)
            result = session.execute(stmt)
            session.commit()
            return (result.rowcount or 0) > 0

    # -------------------------- users --------------------------
    def count_users(self) -> int:
        with session_scope(self._factory) as session:
            return int(session.execute(select(func.count()).select_from(UserRow)).scalar_one())

    def get_users(self) -> list[User]:
        with session_scope(self._factory) as session:
            rows = session.execute(select(UserRow).order_by(*USER_ORDER)).scalars().all()
            return [_user(row) for row in rows]

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        with session_scope(self._factory) as session:
            row = session.get(UserRow, user_id)
            return _user(row) if row else None

    def _row_by_email(self, session, email: str) -> Optional[UserRow]:
        stmt = select(UserRow).where(UserRow.email == normalize_email(email))
        return session.execute(stmt).scalar_one_or_none()

    def get_user_by_email(self, email: str) -> Optional[User]:
        with session_scope(self._factory) as session:
            row = self._row_by_email(session, email)
            return _user(row) if row else None

    def get_credentials(self, email: str) -> Optional[tuple[User, str]]:
        with session_scope(self._factory) as session:
            row = self._row_by_email(session, email)
            if not row:
                return None
            return _user(row), row.password_hash

    def create_user(self, draft: UserDraft, password_hash: str) -> User:
        email = normalize_email(draft.email)
        now = utcnow()
        with session_scope(self._factory) as session:
            if self._row_by_email(session, email):
                raise DuplicateEmailError(email)
            row = UserRow(
                id=new_id(),
                email=email,
                password_hash=password_hash,
                name=draft.name,
                role=draft.role.value,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                raise DuplicateEmailError(email) from exc
            return _user(row)

    def update_user(self, user_id: str, patch: UserPatch, password_hash: Optional[str] = None) -> Optional[User]:
        with session_scope(self._factory) as session:
            row = session.get(UserRow, user_id)
            if not row:
                return None
            changes = patch.changes()
            if "email" in changes:
                changes["email"] = normalize_email(changes["email"])
                other = self._row_by_email(session, changes["email"])
                if other and other.id != row.id:
                    raise DuplicateEmailError(changes["email"])
            for name, value in changes.items():
                setattr(row, name, _column_value(value))
            if password_hash:
                row.password_hash = password_hash
            row.updated_at = next_stamp(row.updated_at)
            try:
                session.commit()
            except IntegrityError as exc:
                raise DuplicateEmailError(row.email) from exc
            return _user(row)

    def set_password_hash(self, user_id: str, password_hash: str) -> None:
        with session_scope(self._factory) as session:
            row = session.get(UserRow, user_id)
            if row:
                row.password_hash = password_hash
                session.commit()

    def delete_user(self, user_id: str) -> bool:
        with session_scope(self._factory) as session:
            result = session.execute(delete(UserRow).where(UserRow.id == user_id))
            session.commit()
            return (result.rowcount or 0) > 0
