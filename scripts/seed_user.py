#!/usr/bin/env python3
"""Create a user and print a bearer token for it.

Users are registered by another service; this script stands in for it in
local development so the bearer-protected routes can be exercised.

Usage:
    python scripts/seed_user.py alice alice@example.com
    python scripts/seed_user.py alice alice@example.com --password-hash '$2b$...'

Exit codes:
    0: User created (or already present) and token printed
    1: Missing secret or conflicting user
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from sqlalchemy.exc import IntegrityError  # noqa: E402

from videoshelf.auth.tokens import issue_token  # noqa: E402
from videoshelf.config import get_settings  # noqa: E402
from videoshelf.db import repo  # noqa: E402
from videoshelf.db.schema import User  # noqa: E402
from videoshelf.db.session import get_db_session, init_db  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("username")
    parser.add_argument("email")
    parser.add_argument(
        "--password-hash",
        default="!unusable",
        help="Pre-hashed password to store (never verified by videoshelf)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    settings = get_settings()

    if not settings.jwt_secret_key:
        print("FAIL: set VIDEOSHELF_JWT_SECRET_KEY (or JWT_SECRET_KEY) first")
        return 1

    init_db(settings.database_url)

    try:
        with get_db_session(settings.database_url) as session:
            existing = session.query(User).filter(User.username == args.username).first()
            if existing is not None:
                user_id = existing.id
                print(f"User exists: {args.username} ({user_id})")
            else:
                user_id = repo.create_user(
                    session, args.username, args.email, args.password_hash
                ).id
                print(f"Created user: {args.username} ({user_id})")
    except IntegrityError:
        print(f"FAIL: email already registered: {args.email}")
        return 1

    print(f"Token: {issue_token(user_id, settings)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
