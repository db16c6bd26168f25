from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from catalog import fetch_careers
from db import db_session
from validation import VERIFICATION_THRESHOLD_DAYS, check_verification

logger = logging.getLogger("check_stale_verification")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List careers whose requirement data needs re-verification.")
    parser.add_argument("--days", type=int, default=VERIFICATION_THRESHOLD_DAYS, help="Age threshold in days (default: 365)")
    parser.add_argument("--country", default="ZA", help="Country whose qualification levels are checked (default: ZA)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    country_code = args.country.upper()
    print(f"Threshold: {args.days} days")
    print(f"Country: {country_code}")

    with db_session() as db:
        careers = fetch_careers(db, include_inactive=True)
    print(f"Found {len(careers)} careers\n")

    buckets: dict[str, list[tuple[str, object]]] = {"critical": [], "warning": [], "healthy": []}
    for career in careers:
        report = check_verification(career, threshold_days=args.days, country_code=country_code)
        buckets[report.health].append((f"{career.name} ({career.category or 'No category'})", report))

    for label, heading in (("critical", "CRITICAL - needs immediate attention"), ("warning", "WARNING - should be addressed")):
        if not buckets[label]:
            continue
        print(f"{heading}:")
        for name, report in buckets[label]:
            print(f"  {name}")
            for issue in report.issues:
                print(f"    x {issue}")
            for warning in report.warnings:
                print(f"    ! {warning}")
        print()

    print(
        f"Summary: {len(buckets['critical'])} critical, {len(buckets['warning'])} warning, "
        f"{len(buckets['healthy'])} healthy"
    )
    if buckets["critical"]:
        logger.warning("%d careers need re-verification", len(buckets["critical"]))
        return 1
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    sys.exit(main())
