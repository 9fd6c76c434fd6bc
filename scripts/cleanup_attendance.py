#!/usr/bin/env python3
"""
Delete every attendance record owned by one user (admin/test utility).
Uses the same settings as the app (.env / environment).

Usage:
  python scripts/cleanup_attendance.py --email someone@example.com
  python scripts/cleanup_attendance.py --email someone@example.com --yes
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.core.config import load_settings
from app.db.session import build_engine, build_session_factory
from app.services import attendance_service
from app.services.auth_service import get_user_by_email


def main() -> int:
    parser = argparse.ArgumentParser(description="Delete all attendance records of a user")
    parser.add_argument("--email", required=True, help="Email of the user whose records are deleted")
    parser.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    args = parser.parse_args()

    settings = load_settings()
    session_factory = build_session_factory(build_engine(settings))

    db = session_factory()
    try:
        user = get_user_by_email(db, args.email)
        if user is None:
            print(f"No user with email {args.email}", file=sys.stderr)
            return 1

        if not args.yes:
            answer = input(f"Delete ALL attendance records of {user.email} (id={user.id})? [y/N] ")
            if answer.strip().lower() != "y":
                print("Aborted")
                return 1

        deleted = attendance_service.cleanup(db, user.id)
        print(f"Deleted {deleted} attendance records for {user.email}")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
