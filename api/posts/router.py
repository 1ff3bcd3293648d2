"""
Post RPC procedures.

Queries are GET, mutations are POST; each path is the procedure name.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from auth import dependencies as auth_dependencies
from auth.security import AuthContext
from core.db import Database, get_db

from . import repository, schemas
from .models import Post

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("/post.all", response_model=list[schemas.PostResponse])
async def all_posts(db: Database = Depends(get_db)) -> list[Post]:
    return await repository.find_many(db)


@router.get("/post.byId", response_model=schemas.PostResponse | None)
async def post_by_id(
    payload: Annotated[schemas.PostIdInput, Query()],
    db: Database = Depends(get_db),
) -> Post | None:
    return await repository.find_first(db, payload.post_id)


@router.post("/post.create", response_model=schemas.PostResponse)
async def create_post(
    payload: schemas.CreatePostSchema,
    session: AuthContext = Depends(auth_dependencies.require_session),
    db: Database = Depends(get_db),
) -> Post:
    post = await repository.insert(db, payload)
    logger.info("post_created id=%s user_id=%s", post.id, session.user_id)
    return post


@router.post("/post.delete", response_model=schemas.DeleteResult)
async def delete_post(
    payload: schemas.PostIdInput,
    session: AuthContext = Depends(auth_dependencies.require_session),
    db: Database = Depends(get_db),
) -> schemas.DeleteResult:
    deleted = await repository.delete(db, payload.post_id)
    logger.info("post_deleted id=%s deleted=%s user_id=%s", payload.id, deleted, session.user_id)
    return schemas.DeleteResult(deleted=deleted)
