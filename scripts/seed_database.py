"""Load projects into the relational store: the demo set, or a JSON export."""
from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Make the soloquest package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from soloquest.core.config import get_settings
from soloquest.db.create_tables import create_all
from soloquest.db.session import build_engine, build_sessionmaker
from soloquest.domain.seed import demo_projects
from soloquest.repositories import json_storage
from soloquest.repositories.sql_repository import SQLRepository


def seed(snapshot: Path | None = None) -> int:
    engine = build_engine(get_settings().database_url)
    create_all(engine)
    repo = SQLRepository(build_sessionmaker(engine))
    if snapshot:
        data = json_storage.load(snapshot)
        projects = [json_storage.project_from_dict(item) for item in data["projects"]]
    else:
        projects = demo_projects()
    for project in projects:
        repo.upsert_project(project)
    engine.dispose()
    return len(projects)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("snapshot", nargs="?", type=Path, help="JSON export to load instead of the demo data")
    args = parser.parse_args()
    count = seed(args.snapshot)
    print(f"{count} project(s) written.")
