"""Utility script to create the initial database schema."""
from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from soloquest.core.config import get_settings

from .session import Base, build_engine
from . import models  # noqa: F401  # ensure models are imported for metadata


def create_all(engine: Engine | None = None) -> None:
    engine = engine or build_engine(get_settings().database_url)
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    try:
        create_all()
        print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
