"""
The data-access facade used by every caller that needs durable state.

``DatabaseClient`` connects lazily. When the relational store answers, calls
go to ``SQLRepository``; when it does not, the client switches for good to the
``MemoryRepository`` mirror seeded with demo data. While store-backed, a
failing query is served from the mirror for that call only.
"""

from __future__ import annotations

import enum
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, TypeVar, Union

from sqlalchemy import text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from soloquest.core.config import Settings, get_settings
from soloquest.core.logging import get_logger
from soloquest.core.security import TokenClaims, hash_password, needs_rehash, verify_password
from soloquest.db.session import Base, build_engine, build_sessionmaker
from soloquest.db import models  # noqa: F401  # ensure models are imported for metadata
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
    UserRole,
    utcnow,
)
from soloquest.domain.seed import demo_projects
from soloquest.repositories.base import Backend
from soloquest.repositories.memory_repository import MemoryRepository
from soloquest.repositories.sql_repository import SQLRepository
from soloquest.services.session_service import issue_session, read_session

logger = get_logger(__name__)

T = TypeVar("T")
MAX_NOTICES = 50
FALLBACK_NOTICE = "Could not connect to the database, using fallback data."


class ConnectionMode(str, enum.Enum):
    DISCONNECTED = "disconnected"
    STORE = "store"
    MEMORY = "memory"


@dataclass(frozen=True)
class Notice:
    """Non-fatal message meant to be surfaced to the user (toast)."""

    level: str
    message: str
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {"level": self.level, "message": self.message, "createdAt": self.created_at.isoformat()}


@dataclass
class LoginResult:
    user: User
    token: str

    def to_dict(self) -> dict:
        return {"user": self.user.to_dict(), "token": self.token}


def _coerce(cls, data):
    if isinstance(data, cls):
        return data
    return cls.from_dict(data or {})


class DatabaseClient:
    """Facade over the store-backed and memory-backed repositories.

    Construct one per application and hand it to whatever needs persistence.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        on_notice: Optional[Callable[[Notice], None]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._on_notice = on_notice
        self._lock = threading.RLock()
        self._mode = ConnectionMode.DISCONNECTED
        self._engine: Optional[Engine] = None
        self._store: Optional[SQLRepository] = None
        self._memory = MemoryRepository()
        self._notices: deque[Notice] = deque(maxlen=MAX_NOTICES)
        target = self._target()
        logger.info(
            "[db] client initialized host=%s port=%s database=%s user=%s",
            target["host"],
            target["port"],
            target["database"],
            target["user"],
        )

    # -------------------------------------- state --------------------------------------
    @property
    def mode(self) -> ConnectionMode:
        return self._mode

    @property
    def is_connected(self) -> bool:
        return self._mode is not ConnectionMode.DISCONNECTED

    def _target(self) -> dict:
        """Host, port, database and user of the URL the engine is built from."""
        try:
            url = make_url(self.settings.database_url)
        except ArgumentError:
            return {
                "host": self.settings.db_host,
                "port": self.settings.db_port,
                "database": self.settings.db_name,
                "user": self.settings.db_user,
            }
        return {"host": url.host, "port": url.port, "database": url.database, "user": url.username}

    def describe(self) -> dict:
        """Connection info for the settings page. The password is never included."""
        return {"mode": self._mode.value, **self._target()}

    def _notify(self, level: str, message: str) -> None:
        notice = Notice(level=level, message=message)
        self._notices.append(notice)
        if self._on_notice:
            self._on_notice(notice)

    def drain_notices(self) -> list[Notice]:
        with self._lock:
            pending = list(self._notices)
            self._notices.clear()
            return pending

    # -------------------------------------- connection --------------------------------------
    def _bootstrap_admin(self) -> UserDraft:
        return UserDraft(
            email=self.settings.admin_email,
            password=self.settings.admin_password,
            name=self.settings.admin_name,
            role=UserRole.ADMIN,
        )

    def _seed_mirror(self) -> None:
        mirror = MemoryRepository(demo_projects())
        admin = self._bootstrap_admin()
        mirror.create_user(admin, hash_password(admin.password))
        self._memory = mirror

    def _open_store(self) -> SQLRepository:
        engine = build_engine(self.settings.database_url)
        self._engine = engine
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        if self.settings.db_create_schema:
            Base.metadata.create_all(bind=engine)
        store = SQLRepository(build_sessionmaker(engine))
        if store.count_users() == 0:
            admin = self._bootstrap_admin()
            store.create_user(admin, hash_password(admin.password))
            logger.info("[db] bootstrap admin created email=%s", admin.email)
        return store

    def _dispose_engine(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None

    def connect(self) -> bool:
        """Connect once. Returns True when store-backed, False when using the mirror."""
        with self._lock:
            if self._mode is not ConnectionMode.DISCONNECTED:
                return self._mode is ConnectionMode.STORE
            target = self._target()
            logger.info("[db] connecting to %s:%s/%s", target["host"], target["port"], target["database"])
            self._seed_mirror()
            try:
                self._store = self._open_store()
            except (SQLAlchemyError, ImportError, RuntimeError) as exc:
                logger.warning("[db] connection failed, switching to in-memory data: %s", exc)
                self._dispose_engine()
                self._store = None
                self._mode = ConnectionMode.MEMORY
                self._notify("warning", FALLBACK_NOTICE)
                return False
            self._mode = ConnectionMode.STORE
            logger.info("[db] connected (store-backed)")
            return True

    def disconnect(self) -> None:
        with self._lock:
            logger.info("[db] disconnecting")
            self._dispose_engine()
            self._store = None
            self._mode = ConnectionMode.DISCONNECTED

    def _call(self, operation: str, fn: Callable[[Backend], T]) -> T:
        """Run ``fn`` against the current backend, falling back to the mirror for this call."""
        with self._lock:
            if self._mode is ConnectionMode.DISCONNECTED:
                self.connect()
            if self._mode is ConnectionMode.STORE and self._store is not None:
                try:
                    return fn(self._store)
                except SQLAlchemyError as exc:
                    logger.warning("[db] %s failed, serving from fallback data: %s", operation, exc)
                    self._notify("warning", f"Database error during {operation}, using fallback data.")
            return fn(self._memory)

    # -------------------------------------- projects --------------------------------------
    def get_projects(self) -> list[Project]:
        return self._call("get_projects", lambda b: b.get_projects())

    def get_project(self, project_id: str) -> Optional[Project]:
        return self._call("get_project", lambda b: b.get_project(project_id))

    def create_project(self, data: Union[ProjectDraft, Mapping[str, Any]]) -> Project:
        draft = _coerce(ProjectDraft, data)
        return self._call("create_project", lambda b: b.create_project(draft))

    def update_project(self, project_id: str, data: Union[ProjectPatch, Mapping[str, Any]]) -> Optional[Project]:
        patch = _coerce(ProjectPatch, data)
        return self._call("update_project", lambda b: b.update_project(project_id, patch))

    def delete_project(self, project_id: str) -> bool:
        return self._call("delete_project", lambda b: b.delete_project(project_id))

    # -------------------------------------- tasks --------------------------------------
    def create_task(self, project_id: str, data: Union[TaskDraft, Mapping[str, Any]]) -> Optional[Task]:
        draft = _coerce(TaskDraft, data)
        return self._call("create_task", lambda b: b.create_task(project_id, draft))

    def update_task(
        self, project_id: str, task_id: str, data: Union[TaskPatch, Mapping[str, Any]]
    ) -> Optional[Task]:
        patch = _coerce(TaskPatch, data)
        return self._call("update_task", lambda b: b.update_task(project_id, task_id, patch))

    def delete_task(self, project_id: str, task_id: str) -> bool:
        return self._call("delete_task", lambda b: b.delete_task(project_id, task_id))

    # -------------------------------------- users --------------------------------------
    def get_users(self) -> list[User]:
        return self._call("get_users", lambda b: b.get_users())

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self._call("get_user_by_id", lambda b: b.get_user_by_id(user_id))

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._call("get_user_by_email", lambda b: b.get_user_by_email(email))

    def create_user(self, data: Union[UserDraft, Mapping[str, Any]]) -> User:
        draft = _coerce(UserDraft, data)
        password_hash = hash_password(draft.password)
        return self._call("create_user", lambda b: b.create_user(draft, password_hash))

    def update_user(self, user_id: str, data: Union[UserPatch, Mapping[str, Any]]) -> Optional[User]:
        patch = _coerce(UserPatch, data)
        password_hash = hash_password(patch.new_password) if patch.new_password else None
        return self._call("update_user", lambda b: b.update_user(user_id, patch, password_hash))

    def delete_user(self, user_id: str) -> bool:
        return self._call("delete_user", lambda b: b.delete_user(user_id))

    # -------------------------------------- auth --------------------------------------
    def login(self, email: str, password: str) -> Optional[LoginResult]:
        """Check credentials and issue a session token. Wrong email or password yields None."""
        credentials = self._call("login", lambda b: b.get_credentials(email))
        if not credentials:
            return None
        user, stored_hash = credentials
        if not verify_password(password, stored_hash):
            return None
        if needs_rehash(stored_hash):
            new_hash = hash_password(password)
            self._call("login", lambda b: b.set_password_hash(user.id, new_hash))
        return LoginResult(user=user, token=issue_session(user, self.settings))

    def verify_token(self, token: Optional[str]) -> Optional[TokenClaims]:
        return read_session(token, self.settings)

    # -------------------------------------- export --------------------------------------
    def export_snapshot(self) -> dict:
        """Plain JSON data of every project and user (passwords omitted)."""
        with self._lock:
            return {
                "exportedAt": utcnow().isoformat(),
                "projects": [p.to_dict() for p in self.get_projects()],
                "users": [u.to_dict() for u in self.get_users()],
            }
