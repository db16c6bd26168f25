from __future__ import annotations

import argparse
import logging
import sys
import uuid
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from catalog import fetch_careers
from db import db_session
from models import AuditLog
from validation import normalize_career_record

logger = logging.getLogger("fix_subject_names")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rewrite display-name subject keys in career requirements to standard codes.")
    parser.add_argument("--apply", action="store_true", help="Write the changes (default is a dry run)")
    parser.add_argument("--actor", help="Admin user id recorded in the audit log")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    changed: list[str] = []

    with db_session() as db:
        for career in fetch_careers(db, include_inactive=True):
            updates, touched = normalize_career_record(career)
            if not touched:
                continue
            changed.append(career.name)
            print(f"- {career.name}")
            print(f"    min_grades: {career.min_grades_json} -> {updates['min_grades_json']}")
            if args.apply:
                for key, value in updates.items():
                    setattr(career, key, value)

        if args.apply and changed:
            db.add(
                AuditLog(
                    user_id=uuid.UUID(args.actor) if args.actor else None,
                    action="subject_names_normalized",
                    details_json={"careers": changed},
                )
            )

    if not changed:
        print("All career requirements already use standard subject codes.")
    elif args.apply:
        logger.info("Normalized subject names for %d careers", len(changed))
    else:
        print(f"\n{len(changed)} careers would change. Re-run with --apply to write them.")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    sys.exit(main())
