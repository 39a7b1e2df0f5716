"""
End-to-end checks of the JSON API with FastAPI's TestClient.
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD
from soloquest.app import create_app
from soloquest.services.database_client import DatabaseClient


@pytest.fixture()
def api(store_settings):
    app = create_app(store_settings, db=DatabaseClient(store_settings))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def fallback_api(unreachable_settings):
    app = create_app(unreachable_settings)
    with TestClient(app) as test_client:
        yield test_client


def test_project_and_task_endpoints(api):
    resp = api.post("/api/projects", json={"name": "API project", "priority": "high"})
    assert resp.status_code == 201
    project = resp.json()
    assert project["status"] == "planning"
    assert project["createdAt"] == project["updatedAt"]
    assert project["progress"]["total"] == 0

    resp = api.post(f"/api/projects/{project['id']}/tasks", json={"title": "First", "priority": "low"})
    assert resp.status_code == 201
    task = resp.json()
    assert task["projectId"] == project["id"]

    resp = api.patch(f"/api/projects/{project['id']}/tasks/{task['id']}", json={"status": "completed"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "completed"

    detail = api.get(f"/api/projects/{project['id']}").json()
    assert detail["progress"] == {"total": 1, "todo": 0, "inProgress": 0, "completed": 1, "percent": 100}

    listed = api.get("/api/projects", params={"q": "api"}).json()
    assert [p["id"] for p in listed] == [project["id"]]

    assert api.delete(f"/api/projects/{project['id']}/tasks/{task['id']}").status_code == 200
    assert api.delete(f"/api/projects/{project['id']}").status_code == 200
    assert api.get(f"/api/projects/{project['id']}").status_code == 404


def test_not_found_and_validation_errors(api):
    assert api.get("/api/projects/missing").status_code == 404
    assert api.patch("/api/projects/missing", json={"name": "x"}).status_code == 404
    assert api.post("/api/projects/missing/tasks", json={"title": "orphan"}).status_code == 404
    assert api.post("/api/projects", json={"name": "x", "status": "paused"}).status_code == 422
    assert api.post("/api/projects", json={"description": "no name"}).status_code == 422
    assert api.get("/api/projects", params={"status": "paused"}).status_code == 422


def test_user_endpoints_never_return_passwords(api):
    resp = api.post("/api/users", json={"email": "ann@example.com", "password": "pw123456", "name": "Ann"})
    assert resp.status_code == 201
    user = resp.json()
    assert "password" not in user
    assert api.post("/api/users", json={"email": "ann@example.com", "password": "x", "name": "Ann"}).status_code == 409

    by_email = api.get("/api/users/by-email", params={"email": "ann@example.com"}).json()
    assert by_email == user
    assert all("password" not in u for u in api.get("/api/users").json())

    patched = api.patch(f"/api/users/{user['id']}", json={"name": "Anne"}).json()
    assert patched["name"] == "Anne"
    assert api.delete(f"/api/users/{user['id']}").status_code == 200
    assert api.get(f"/api/users/{user['id']}").status_code == 404


def test_login_and_me(api):
    assert api.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "bad"}).status_code == 401
    resp = api.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    token = resp.json()["token"]
    assert resp.json()["user"]["email"] == ADMIN_EMAIL

    me = api.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["user"]["role"] == "admin"
    assert api.get("/api/auth/me").status_code == 401
    assert api.get("/api/auth/me", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_fallback_mode_serves_demo_data_and_notices(fallback_api):
    projects = fallback_api.get("/api/projects").json()
    assert [p["name"] for p in projects] == ["Personal Website", "Weather App", "Budget Tracker"]
    assert fallback_api.get("/api/health").json()["mode"] == "memory"
    notices = fallback_api.get("/api/notices").json()
    assert notices and notices[0]["level"] == "warning"
    assert fallback_api.get("/api/notices").json() == []

    dashboard = fallback_api.get("/api/stats/dashboard").json()
    assert dashboard["summary"]["totalProjects"] == 3
    assert len(dashboard["recentTasks"]) == 5
    stats = fallback_api.get("/api/stats").json()
    assert len(stats["weeklyActivity"]) == 7


def test_settings_endpoints(api):
    info = api.get("/api/settings/database").json()
    assert info["mode"] == "store"
    assert "password" not in info
    snapshot = api.get("/api/settings/export").json()
    assert {u["email"] for u in snapshot["users"]} == {ADMIN_EMAIL}
    assert snapshot["projects"] == []
