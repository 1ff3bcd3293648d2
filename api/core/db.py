"""
Async database access through SQLAlchemy (asyncpg driver).

A `Database` owns one engine and its session factory. The FastAPI lifespan
builds it once per process and stores it on `app.state.db` (see
`api/main.py`); handlers receive it through the `get_db` dependency.

Each helper runs a single statement in its own session. Write helpers commit
before returning.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql import Executable

from . import config

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class Database:
    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._sessions = async_sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, url: str, *, debug: bool = False) -> Database:
        options = config.engine_options(url)
        engine = create_async_engine(
            options["url"],
            connect_args=options["connect_args"],
            pool_pre_ping=True,
            echo=debug,
        )
        return cls(engine)

    @classmethod
    def from_settings(cls, settings: config.Settings) -> Database:
        config.log_resolved_url("runtime", settings.database_url, debug=settings.db_debug)
        return cls.from_url(settings.database_url, debug=settings.db_debug)

    async def fetch_one(self, statement: Executable) -> Any | None:
        """
        Run a query and return the first scalar (entity or column value), or None.
        """
        async with self._sessions() as session:
            result = await session.execute(statement)
            return result.scalars().first()

    async def fetch_all(self, statement: Executable) -> list[Any]:
        """
        Run a query and return every first-column scalar.
        """
        async with self._sessions() as session:
            result = await session.execute(statement)
            return list(result.scalars().all())

    async def execute(self, statement: Executable) -> int:
        """
        Run a statement (INSERT/UPDATE/DELETE). Returns affected rowcount.
        """
        async with self._sessions.begin() as session:
            result = await session.execute(statement)
            return result.rowcount

    async def execute_returning_one(self, statement: Executable) -> Any:
        """
        Run a statement with RETURNING and return the first returned scalar.
        """
        async with self._sessions.begin() as session:
            result = await session.execute(statement)
            row = result.scalars().first()
            if row is None:
                raise RuntimeError("Expected one row returned, got none.")
            return row

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_db(request: Request) -> Database:
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("Database is not initialized. It is created in the app lifespan.")
    return db
