from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from core import config
from core.db import Database
from posts import router as posts_router

logger = logging.getLogger(__name__)


def create_app(
    *,
    settings: config.Settings | None = None,
    database: Database | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Settings are resolved here so a missing POSTGRES_URL aborts startup.
        if getattr(app.state, "db", None) is not None:
            yield
            return

        resolved = settings or config.Settings.from_env()
        app.state.db = Database.from_settings(resolved)
        try:
            yield
        finally:
            await app.state.db.dispose()
            app.state.db = None

    app = FastAPI(title="Post API", lifespan=lifespan)
    if database is not None:
        app.state.db = database

    origins = settings.cors_origins if settings is not None else config.cors_origins()
    # Allow local frontend dev server to call this API from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("database_error path=%s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_SERVER_ERROR",
                    "message": type(exc).__name__,
                }
            },
        )

    app.include_router(posts_router.router, prefix="/rpc", tags=["post"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


config.configure_logging()
app = create_app()
