"""
Manual database connectivity check.

Runs a trivial query, then lists the tables in the `public` schema.
Exit status: 0 on success, 1 on configuration or database failure.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from core import config
from core.db import Database

logger = logging.getLogger(__name__)

CURRENT_TIME_SQL = text("SELECT now() AS current_time")
PUBLIC_TABLES_SQL = text(
    """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_schema = 'public'
    ORDER BY table_name
    """
)


async def check_connection(db: Database) -> tuple[object, list[str]]:
    current_time = await db.fetch_one(CURRENT_TIME_SQL)
    tables = await db.fetch_all(PUBLIC_TABLES_SQL)
    return current_time, [str(name) for name in tables]


async def run(db: Database) -> int:
    print("Testing database connection...")
    try:
        current_time, tables = await check_connection(db)
    except (SQLAlchemyError, OSError) as exc:
        logger.error("database_check_failed error=%s", exc)
        return 1
    finally:
        await db.dispose()

    print("Database connection successful.")
    print(f"Current time from database: {current_time}")
    print("Available tables:")
    for name in tables:
        print(f"  - {name}")
    return 0


def main() -> None:
    config.configure_logging()
    try:
        db = Database.from_settings(config.Settings.from_env())
    except config.ConfigurationError as exc:
        logger.error("database_check_failed error=%s", exc)
        sys.exit(1)
    sys.exit(asyncio.run(run(db)))


if __name__ == "__main__":
    main()
