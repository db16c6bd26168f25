from __future__ import annotations

import argparse
import logging
import sys
from collections import defaultdict
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from catalog import fetch_active_countries, fetch_careers, load_subjects
from db import db_session
from validation import SEVERITY_ERROR, ValidationIssue, validate_career_requirements

logger = logging.getLogger("validate_careers")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check stored career requirements against each country's curriculum.")
    parser.add_argument("--country", action="append", help="Country code to check (repeatable, default: all active)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    found: list[ValidationIssue] = []

    with db_session() as db:
        codes = [code.upper() for code in args.country] if args.country else [c["code"] for c in fetch_active_countries(db)]
        careers = fetch_careers(db, include_inactive=True)
        for code in codes:
            valid = {item["standard_name"] for item in load_subjects(db, code)}
            print(f"{code}: {len(valid)} subjects in curriculum")
            for career in careers:
                found.extend(validate_career_requirements(career, code, valid_codes=valid))

    print(f"\nChecked {len(careers)} careers across {len(codes)} countries")

    by_career: dict[str, list[ValidationIssue]] = defaultdict(list)
    for issue in found:
        by_career[issue.career].append(issue)

    for name, items in sorted(by_career.items()):
        print(f"\n{name}")
        for issue in items:
            marker = "ERROR" if issue.severity == SEVERITY_ERROR else "warn "
            print(f"  [{marker}] {issue.country}: {issue.message}")

    errors = sum(1 for issue in found if issue.severity == SEVERITY_ERROR)
    print(f"\n{errors} error(s), {len(found) - errors} warning(s)")
    if errors:
        logger.error("Career requirements reference subjects outside the curriculum")
    return 1 if errors else 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    sys.exit(main())
