"""Create (or recreate) all tables directly from the ORM metadata.

Intended for local development and demos; deployments use ``migrate``.
"""
from __future__ import annotations

import argparse
import logging

from gyansetu.db.session import create_tables, drop_tables

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create the GyanSetu database tables.")
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    args = parser.parse_args(argv)

    if args.drop:
        drop_tables()
        logger.info("Dropped all tables")
    create_tables()
    logger.info("Database initialized")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
