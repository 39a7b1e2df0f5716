"""
Smoke tests for the SQLRepository against a temporary SQLite database.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import inspect

from soloquest.db.models import ProjectRow, TaskRow
from soloquest.domain.entities import (
    Priority,
    ProjectDraft,
    ProjectPatch,
    TaskDraft,
    TaskPatch,
    UserDraft,
    UserPatch,
    UserRole,
)
from soloquest.domain.seed import demo_projects
from soloquest.repositories.base import DuplicateEmailError, sort_projects, sort_tasks
from soloquest.repositories.memory_repository import MemoryRepository


def test_project_and_task_flow(sql_repo):
    project = sql_repo.create_project(ProjectDraft(name="Site", description="Portfolio"))
    task = sql_repo.create_task(project.id, TaskDraft(title="Wireframe", priority=Priority.HIGH))
    assert task is not None

    loaded = sql_repo.get_project(project.id)
    assert loaded.name == "Site"
    assert [t.id for t in loaded.tasks] == [task.id]
    assert loaded.created_at.tzinfo is not None

    updated = sql_repo.update_task(project.id, task.id, TaskPatch(title="Wireframe v2"))
    assert updated.title == "Wireframe v2"
    assert updated.priority is Priority.HIGH


def test_delete_project_removes_tasks_rows(sql_repo):
    project = sql_repo.create_project(ProjectDraft(name="Gone"))
    sql_repo.create_task(project.id, TaskDraft(title="a"))
    sql_repo.create_task(project.id, TaskDraft(title="b"))
    assert sql_repo.delete_project(project.id) is True
    assert sql_repo.delete_project(project.id) is False
    assert sql_repo.get_projects() == []


def test_update_project_applies_only_supplied_fields(sql_repo):
    project = sql_repo.create_project(ProjectDraft(name="Keep", description="same", priority=Priority.HIGH))
    updated = sql_repo.update_project(project.id, ProjectPatch(status="active"))
    assert updated.name == "Keep"
    assert updated.description == "same"
    assert updated.priority is Priority.HIGH
    assert updated.status.value == "active"


def test_user_crud_and_credentials(sql_repo):
    user = sql_repo.create_user(UserDraft(email=" eve@example.com ", password="x", name="Eve"), "hash-1")
    assert user.email == "eve@example.com"
    assert sql_repo.count_users() == 1

    fetched, stored_hash = sql_repo.get_credentials("eve@example.com")
    assert fetched == user
    assert stored_hash == "hash-1"

    sql_repo.update_user(user.id, UserPatch(role=UserRole.ADMIN), password_hash="hash-2")
    assert sql_repo.get_credentials("eve@example.com")[1] == "hash-2"
    sql_repo.set_password_hash(user.id, "hash-3")
    assert sql_repo.get_credentials("eve@example.com")[1] == "hash-3"
    assert sql_repo.get_user_by_id(user.id).role is UserRole.ADMIN


def test_email_uniqueness(sql_repo):
    first = sql_repo.create_user(UserDraft(email="a@example.com", password="x", name="A"), "h")
    sql_repo.create_user(UserDraft(email="b@example.com", password="x", name="B"), "h")
    with pytest.raises(DuplicateEmailError):
        sql_repo.create_user(UserDraft(email="a@example.com", password="x", name="A2"), "h")
    with pytest.raises(DuplicateEmailError):
        sql_repo.update_user(first.id, UserPatch(email="b@example.com"))
    assert sql_repo.get_user_by_id(first.id).email == "a@example.com"


def test_upsert_project_keeps_ids_and_timestamps(sql_repo):
    for project in demo_projects():
        sql_repo.upsert_project(project)
    # idempotent
    for project in demo_projects():
        sql_repo.upsert_project(project)
    loaded = sql_repo.get_projects()
    assert [p.id for p in loaded] == ["1", "2", "3"]
    assert loaded[0].updated_at == datetime(2024, 3, 15, tzinfo=timezone.utc)
    assert sum(len(p.tasks) for p in loaded) == 9


def test_sql_and_memory_ordering_match(sql_repo):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    projects = demo_projects()
    # Force ties so the id tie-break decides.
    for project in projects:
        project.updated_at = base
        project.created_at = base
        for task in project.tasks:
            task.updated_at = base + timedelta(days=1)
    for project in projects:
        sql_repo.upsert_project(project)
    memory = MemoryRepository(projects)

    sql_view = [(p.id, [t.id for t in p.tasks]) for p in sql_repo.get_projects()]
    memory_view = [(p.id, [t.id for t in p.tasks]) for p in memory.get_projects()]
    assert sql_view == memory_view
    assert [p.id for p in sort_projects(projects)] == [pid for pid, _ in sql_view]
    assert [t.id for t in sort_tasks(projects[0].tasks)] == ["102", "101", "103"]


def test_task_cascade_lives_in_the_foreign_key():
    assert not inspect(ProjectRow).relationships
    assert not inspect(TaskRow).relationships
    (fk,) = TaskRow.__table__.c.project_id.foreign_keys
    assert fk.ondelete == "CASCADE"
