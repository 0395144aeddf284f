"""SQLAlchemy engine and connection lifecycle.

The service runs against PostgreSQL or SQLite. No ORM mapping is used;
repositories issue `text()` statements on connections from one shared
engine.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

from formservice.config import DEFAULT_DSN

logger = logging.getLogger(__name__)

_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None


def _env_url() -> str:
    return os.getenv("TEST_DATABASE_URL") or os.getenv("DATABASE_URL") or DEFAULT_DSN


def _engine_options(url: str) -> Dict[str, Any]:
    options: Dict[str, Any] = {"future": True, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        # Handlers run in FastAPI's threadpool.
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            options["poolclass"] = StaticPool
    return options


def get_engine(url: str | None = None) -> Engine:
    """Return the shared Engine, rebuilding it when a different URL is asked for.

    Without `url` the engine bound last is reused; before any binding the URL
    comes from TEST_DATABASE_URL, DATABASE_URL or the development default.
    """
    global _ENGINE, _ENGINE_URL
    target = url or _ENGINE_URL or _env_url()
    if _ENGINE is not None and _ENGINE_URL == target:
        return _ENGINE

    if _ENGINE is not None:
        _ENGINE.dispose()
    _ENGINE = create_engine(target, **_engine_options(target))
    _ENGINE_URL = target
    logger.info("db_engine_created dialect=%s", _ENGINE.dialect.name)
    return _ENGINE


@contextmanager
def transaction() -> Iterator[Connection]:
    """Yield a connection in a transaction that commits on success.

    Any exception rolls back, is logged, and propagates.
    """
    with get_engine().connect() as conn:
        trans = conn.begin()
        try:
            yield conn
        except Exception:
            trans.rollback()
            logger.error("db_transaction_rolled_back", exc_info=True)
            raise
        trans.commit()


__all__ = ["get_engine", "transaction"]
