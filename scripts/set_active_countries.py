from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from db import db_session
from seed import seed_countries, set_active_countries

logger = logging.getLogger("set_active_countries")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Choose which countries learners can select.")
    parser.add_argument("codes", nargs="+", help="Country codes to activate, e.g. ZA KE")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    with db_session() as db:
        seed_countries(db)
        db.flush()
        result = set_active_countries(db, args.codes)

    print(f"Activated: {', '.join(result['activated']) or '-'}")
    print(f"Deactivated: {', '.join(result['deactivated']) or '-'}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    sys.exit(main())
