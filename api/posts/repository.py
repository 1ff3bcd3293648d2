"""
Post persistence helpers.
"""

from __future__ import annotations

from sqlalchemy import delete as sql_delete
from sqlalchemy import insert as sql_insert
from sqlalchemy import select

from core.db import Database

from . import schemas
from .models import Post

PAGE_SIZE = 10


async def find_many(db: Database, *, limit: int = PAGE_SIZE) -> list[Post]:
    return await db.fetch_all(
        select(Post).order_by(Post.id.desc()).limit(limit)
    )


async def find_first(db: Database, post_id: int) -> Post | None:
    return await db.fetch_one(
        select(Post).where(Post.id == post_id).limit(1)
    )


async def insert(db: Database, payload: schemas.CreatePostSchema) -> Post:
    return await db.execute_returning_one(
        sql_insert(Post).values(**payload.model_dump()).returning(Post)
    )


async def delete(db: Database, post_id: int) -> int:
    return await db.execute(
        sql_delete(Post)
        .where(Post.id == post_id)
        .execution_options(synchronize_session=False)
    )
