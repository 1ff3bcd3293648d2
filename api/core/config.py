"""
Environment configuration and database URL resolution.

One required variable, `POSTGRES_URL`, holds the pooled connection URL
(transaction-mode pooler on port 6543). Administrative commands derive the
direct endpoint (port 5432) from it with `non_pooled_url()`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

POOLED_PORT = 6543
DIRECT_PORT = 5432
ASYNC_DRIVER = "postgresql+asyncpg"

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

_POSTGRES_SCHEMES = {"postgres", "postgresql", "postgresql+asyncpg", "postgresql+psycopg2"}
_SSL_MODES = {"disable", "allow", "prefer", "require", "verify-ca", "verify-full"}

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    pass


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def database_url() -> str:
    url = os.environ.get("POSTGRES_URL", "").strip()
    if not url:
        raise ConfigurationError("POSTGRES_URL is not set.")
    return url


def db_debug() -> bool:
    return _env_bool("DB_DEBUG", False)


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _parse(url: str) -> URL:
    try:
        parsed = make_url(url)
    except ArgumentError as exc:
        raise ConfigurationError("Database URL could not be parsed.") from exc
    if parsed.drivername not in _POSTGRES_SCHEMES:
        raise ConfigurationError(f"Unsupported database scheme: {parsed.drivername}")
    return parsed


def non_pooled_url(url: str) -> str:
    """
    Rewrite the pooled endpoint (port 6543) to the direct endpoint (5432).

    Fails loudly instead of silently reusing the pooled URL.
    """
    parsed = _parse(url)
    if parsed.port != POOLED_PORT:
        raise ConfigurationError(
            f"Expected pooled port {POOLED_PORT} in database URL, got {parsed.port}."
        )
    return parsed.set(port=DIRECT_PORT).render_as_string(hide_password=False)


def is_pooled(url: str) -> bool:
    return _parse(url).port == POOLED_PORT


def driver_url(url: str) -> tuple[str, dict[str, Any]]:
    """
    Return the SQLAlchemy async URL and asyncpg connect args for `url`.

    `sslmode` is a libpq query parameter that the SQLAlchemy URL cannot carry
    to asyncpg, so it is moved into the `ssl` connect argument unchanged.
    """
    parsed = _parse(url)
    connect_args: dict[str, Any] = {}
    sslmode = parsed.query.get("sslmode")
    if isinstance(sslmode, tuple):
        sslmode = sslmode[-1]
    if sslmode is not None:
        if sslmode not in _SSL_MODES:
            raise ConfigurationError(f"Unsupported sslmode: {sslmode}")
        connect_args["ssl"] = sslmode

    parsed = parsed.difference_update_query(["sslmode"]).set(drivername=ASYNC_DRIVER)
    return parsed.render_as_string(hide_password=False), connect_args


def engine_options(url: str) -> dict[str, Any]:
    url_string, connect_args = driver_url(url)
    if is_pooled(url):
        # Transaction-mode poolers cannot keep per-connection prepared statements.
        connect_args["statement_cache_size"] = 0
        url_string = (
            make_url(url_string)
            .update_query_dict({"prepared_statement_cache_size": "0"})
            .render_as_string(hide_password=False)
        )
    return {"url": url_string, "connect_args": connect_args}


def redact_url(url: str) -> str:
    try:
        return make_url(url).render_as_string(hide_password=True)
    except ArgumentError:
        return "<unparseable database url>"


def log_resolved_url(label: str, url: str, *, debug: bool) -> None:
    if not debug:
        return None
    logger.info("database_url_resolved label=%s url=%s", label, redact_url(url))


@dataclass(frozen=True)
class Settings:
    database_url: str
    db_debug: bool = False
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            database_url=database_url(),
            db_debug=db_debug(),
            cors_origins=cors_origins(),
            log_level=log_level(),
        )


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=level or log_level(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
