from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the soloquest package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from soloquest.core import config as core_config  # noqa: E402
from soloquest.db import models  # noqa: E402
from soloquest.db.session import build_engine, build_sessionmaker  # noqa: E402
from soloquest.repositories.sql_repository import SQLRepository  # noqa: E402
from soloquest.services.database_client import DatabaseClient  # noqa: E402

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-secret"
JWT_SECRET = "test-secret-with-at-least-thirty-two-bytes"


def _configure(monkeypatch, database_url: str):
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setenv("JWT_SECRET", JWT_SECRET)
    monkeypatch.setenv("JWT_EXPIRY", "7d")
    core_config.get_settings.cache_clear()
    return core_config.get_settings()


@pytest.fixture()
def store_settings(tmp_path, monkeypatch):
    """Settings pointing at a temporary SQLite file."""
    settings = _configure(monkeypatch, f"sqlite:///{tmp_path / 'test.db'}")
    yield settings
    core_config.get_settings.cache_clear()


@pytest.fixture()
def unreachable_settings(tmp_path, monkeypatch):
    """Settings pointing at a SQLite file that cannot be opened (store outage)."""
    settings = _configure(monkeypatch, f"sqlite:///{tmp_path / 'missing' / 'nowhere.db'}")
    yield settings
    core_config.get_settings.cache_clear()


@pytest.fixture()
def sql_repo(store_settings):
    engine = build_engine(store_settings.database_url)
    models.Base.metadata.create_all(bind=engine)
    yield SQLRepository(build_sessionmaker(engine))
    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def store_client(store_settings):
    client = DatabaseClient(store_settings)
    assert client.connect() is True
    yield client
    client.disconnect()


@pytest.fixture()
def memory_client(unreachable_settings):
    client = DatabaseClient(unreachable_settings)
    assert client.connect() is False
    yield client
    client.disconnect()


@pytest.fixture(params=["store", "memory"])
def client(request):
    """The facade in both operating modes."""
    return request.getfixturevalue(f"{request.param}_client")
