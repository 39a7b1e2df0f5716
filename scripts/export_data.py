"""Write a JSON snapshot of every project and user (no passwords)."""
from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Make the soloquest package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from soloquest.repositories import json_storage
from soloquest.services.database_client import DatabaseClient


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("output", type=Path, help="destination file")
    args = parser.parse_args()
    client = DatabaseClient()
    try:
        snapshot = client.export_snapshot()
        print(f"Mode: {client.mode.value}")
    finally:
        client.disconnect()
    json_storage.dump(snapshot, args.output)
    print(f"Exported {len(snapshot['projects'])} project(s) and {len(snapshot['users'])} user(s) to {args.output}")


if __name__ == "__main__":
    main()
