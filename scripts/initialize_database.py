"""Utility script to create the notification tables in the database."""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from activity_notification.infrastructure.database import (
    build_engine,
    engine,
    initialize_database,
)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for database initialization."""

    parser = argparse.ArgumentParser(
        description="Create the tables used by the activity notification package.",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy URL to initialize (defaults to DATABASE_URL from the settings)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log the statements emitted while creating the tables.",
    )
    return parser.parse_args()


def main() -> None:
    """Create every table registered on the declarative base."""

    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    bind = build_engine(args.database_url) if args.database_url else engine
    try:
        initialize_database(bind)
    except SQLAlchemyError as exc:
        raise SystemExit(f"Could not initialize the database: {exc}") from exc
    finally:
        bind.dispose()
    print(f"Tables ready on {bind.url.render_as_string(hide_password=True)}")


if __name__ == "__main__":
    main()
