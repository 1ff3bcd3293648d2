"""
Create missing tables over the direct (non-pooled) connection.

Only creates; it never alters or drops existing tables.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from core import config
from core.db import Base, Database

# Registers the post table on Base.metadata.
from posts import models  # noqa: F401

logger = logging.getLogger(__name__)


async def push(db: Database) -> list[str]:
    try:
        await db.create_all()
    finally:
        await db.dispose()
    return sorted(Base.metadata.tables)


def main() -> None:
    config.configure_logging()
    try:
        settings = config.Settings.from_env()
        url = config.non_pooled_url(settings.database_url)
        config.log_resolved_url("admin", url, debug=settings.db_debug)
        db = Database.from_url(url, debug=settings.db_debug)
    except config.ConfigurationError as exc:
        logger.error("schema_push_failed error=%s", exc)
        sys.exit(1)

    try:
        tables = asyncio.run(push(db))
    except (SQLAlchemyError, OSError) as exc:
        logger.error("schema_push_failed error=%s", exc)
        sys.exit(1)
    logger.info("schema_push_complete tables=%s", ",".join(tables))


if __name__ == "__main__":
    main()
