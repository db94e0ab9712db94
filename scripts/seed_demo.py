"""Seed demo data for the record browser."""
from __future__ import annotations

import json
from pathlib import Path

from table_engine.config import ensure_config
from table_engine.data import Database
from table_engine.data.demo import demo_audit_logs, seed_audit_logs


def _write_json(path: Path, count: int) -> None:
    rows = [{"id": index + 1, **row} for index, row in enumerate(demo_audit_logs(count))]
    path.write_text(json.dumps(rows, indent=2, default=str), encoding="utf-8")


def main() -> None:
    config_path = ensure_config()
    data_dir = Path("data")
    data_dir.mkdir(exist_ok=True)

    db_path = data_dir / "demo.sqlite"
    json_path = data_dir / "demo.json"
    written = 0
    if not db_path.exists():
        written = seed_audit_logs(Database.from_path(db_path), 37)
    _write_json(json_path, 37)

    print(f"Config ensured at {config_path}")
    print(f"Seeded {written} audit logs into {db_path}")
    print(f"Wrote demo JSON records to {json_path}")


if __name__ == "__main__":
    main()
