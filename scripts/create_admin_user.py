from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from auth import ADMIN_ROLES, create_admin_user
from db import db_session, init_schema

logger = logging.getLogger("create_admin_user")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create an admin or editor account.")
    parser.add_argument("email")
    parser.add_argument("--role", choices=sorted(ADMIN_ROLES), default="admin")
    parser.add_argument("--name", help="Display name")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Confirm password: "):
        logger.error("Passwords do not match")
        return 2

    init_schema()
    try:
        with db_session() as db:
            user, created = create_admin_user(db, args.email, password, role=args.role, display_name=args.name)
            email, role = user.email, user.role
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    if created:
        print(f"Created {role} account for {email}")
    else:
        print(f"{email} already exists ({role}); nothing changed")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    sys.exit(main())
