#!/usr/bin/env python3
"""
Check whether the users, attendance and tasks tables exist.
Uses the same DATABASE_URL as the app (.env / environment).
Run from project root: python scripts/check_tables.py
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import inspect

from app.core.config import load_settings
from app.db.session import build_engine

REQUIRED_TABLES = ("users", "attendance", "tasks")


def main() -> int:
    settings = load_settings()
    url = settings.DATABASE_URL
    print(f"DATABASE_URL: {url if url.startswith('sqlite') else url.split('@')[-1]}")

    existing = set(inspect(build_engine(settings)).get_table_names())
    missing = [name for name in REQUIRED_TABLES if name not in existing]
    for name in REQUIRED_TABLES:
        print(f"{name:<12} {'exists' if name in existing else 'MISSING'}")

    if missing:
        print("Run: alembic upgrade head", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
