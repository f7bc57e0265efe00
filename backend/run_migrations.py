from __future__ import annotations

import argparse
import logging
import sys

from bootstrap import DEFAULT_EVENT_ID, run_bootstrap_migrations

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the database schema and seed the default event.")
    parser.add_argument(
        "--no-seed",
        action="store_true",
        help=f"Create tables only; do not insert default event {DEFAULT_EVENT_ID}.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    logger.info("Starting migration...")
    try:
        run_bootstrap_migrations(seed=not args.no_seed)
    except Exception:
        logger.exception("Migration failed!")
        return 1
    logger.info("Database schema updated%s.", "" if args.no_seed else " and seed data inserted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
