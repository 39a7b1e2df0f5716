"""
Plain records exchanged between the persistence layer and its callers.

Attributes are snake_case; ``to_dict`` renders the camelCase shape consumed by
the UI. Drafts carry creation input, patches carry partial updates where an
absent field keeps the current value.
"""
from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field, fields
from datetime import date, datetime, timedelta, timezone
from typing import Any, Mapping, Optional


class ProjectStatus(str, enum.Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class TaskStatus(str, enum.Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Priority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"


PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Naive datetimes (SQLite) are UTC; aware ones are normalized to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def next_stamp(previous: datetime | None) -> datetime:
    """Current time, nudged forward so it is strictly after ``previous``."""
    now = utcnow()
    prev = as_utc(previous)
    if prev is not None and now <= prev:
        return prev + timedelta(microseconds=1)
    return now


def new_id() -> str:
    return uuid.uuid4().hex


def parse_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


# --------------------------------- records ---------------------------------
@dataclass
class Task:
    id: str
    title: str
    status: TaskStatus
    priority: Priority
    project_id: str
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None
    due_date: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "dueDate": _iso(self.due_date),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
            "projectId": self.project_id,
        }


@dataclass
class Project:
    id: str
    name: str
    description: str
    status: ProjectStatus
    priority: Priority
    created_at: datetime
    updated_at: datetime
    tasks: list[Task] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
            "tasks": [task.to_dict() for task in self.tasks],
        }


@dataclass
class User:
    """Public view of an account. The password hash never leaves the backends."""

    id: str
    email: str
    name: str
    role: UserRole
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


# ------------------------------ drafts/patches ------------------------------
_CONVERTERS = {
    "priority": Priority,
    "role": UserRole,
    "due_date": parse_datetime,
}


def _snake(key: str) -> str:
    return "".join("_" + ch.lower() if ch.isupper() else ch for ch in key)


class _FromDict:
    """Mixin building drafts/patches from camelCase or snake_case mappings."""

    _status_enum: Any = None
    _keep_none = False

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value is UNSET or value is None:
                continue
            setattr(self, f.name, self._coerce(f.name, value))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        allowed = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, raw in (data or {}).items():
            name = _snake(str(key))
            if name not in allowed:
                continue
            if raw is None and not cls._keep_none:
                continue
            values[name] = raw
        try:
            return cls(**values)
        except TypeError as exc:
            raise ValueError(f"invalid {cls.__name__}: {exc}") from exc

    @classmethod
    def _coerce(cls, name: str, raw: Any) -> Any:
        if name == "status" and cls._status_enum is not None:
            return cls._status_enum(raw)
        converter = _CONVERTERS.get(name)
        if converter is None:
            return raw
        return converter(raw)


@dataclass
class ProjectDraft(_FromDict):
    name: str
    description: str = ""
    status: ProjectStatus = ProjectStatus.PLANNING
    priority: Priority = Priority.MEDIUM

    _status_enum = ProjectStatus


@dataclass
class TaskDraft(_FromDict):
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: Priority = Priority.MEDIUM
    due_date: Optional[datetime] = None

    _status_enum = TaskStatus


@dataclass
class UserDraft(_FromDict):
    email: str
    password: str
    name: str
    role: UserRole = UserRole.USER


class _Patch(_FromDict):
    # Fields that may be cleared by an explicit None.
    _nullable: frozenset = frozenset()
    _keep_none = True

    def changes(self) -> dict[str, Any]:
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is UNSET:
                continue
            if value is None and f.name not in self._nullable:
                continue
            out[f.name] = value
        return out

    def apply(self, target: Any) -> Any:
        """Copy the supplied fields onto ``target``; absent ones keep their value."""
        for name, value in self.changes().items():
            setattr(target, name, value)
        return target


@dataclass
class ProjectPatch(_Patch):
    name: Any = UNSET
    description: Any = UNSET
    status: Any = UNSET
    priority: Any = UNSET

    _status_enum = ProjectStatus


@dataclass
class TaskPatch(_Patch):
    title: Any = UNSET
    description: Any = UNSET
    status: Any = UNSET
    priority: Any = UNSET
    due_date: Any = UNSET

    _status_enum = TaskStatus
    _nullable = frozenset({"description", "due_date"})


@dataclass
class UserPatch(_Patch):
    email: Any = UNSET
    name: Any = UNSET
    role: Any = UNSET
    password: Any = UNSET

    def changes(self) -> dict[str, Any]:
        out = super().changes()
        out.pop("password", None)
        return out

    @property
    def new_password(self) -> Optional[str]:
        if self.password is UNSET or not self.password:
            return None
        return self.password
