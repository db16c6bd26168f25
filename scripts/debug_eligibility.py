from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from catalog import evaluate_catalog, load_either_or_groups
from db import db_session
from logic import group_by_status

logger = logging.getLogger("debug_eligibility")

SAMPLE_GRADES = {
    "Math": 75,
    "English": 70,
    "Physics": 65,
    "Chemistry": 68,
    "Biology": 72,
    "LifeOrientation": 80,
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate sample grades against every stored career.")
    parser.add_argument("--country", default="ZA", help="Country code (default: ZA)")
    parser.add_argument("--grades", help='JSON object of grades, e.g. \'{"Math": 80, "English": 65}\'')
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    country_code = args.country.upper()
    try:
        grades = json.loads(args.grades) if args.grades else dict(SAMPLE_GRADES)
    except json.JSONDecodeError as exc:
        logger.error("Invalid --grades JSON: %s", exc)
        return 2

    with db_session() as db:
        groups = load_either_or_groups(db, country_code)
        results = evaluate_catalog(db, grades, country_code)

    print(f"Country: {country_code}")
    print(f"Grades: {grades}")
    print(f"Either-or groups: {', '.join(group.label for group in groups) or '-'}")

    for status, items in group_by_status(results).items():
        print(f"\n=== {status} ({len(items)}) ===")
        for item in items:
            verdict = item["verdict"]
            print(f"- {item['career_name']}: score={verdict.match_score} ({verdict.met_requirements}/{verdict.total_requirements})")
            print(f"    requirements: {item['requirements']}")
            if verdict.close_subjects:
                print(f"    close: {', '.join(verdict.close_subjects)}")
            if verdict.missing_subjects:
                print(f"    missing: {', '.join(verdict.missing_subjects)}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    sys.exit(main())
