from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError

from formservice.config import AppConfig, load_config
from formservice.db.base import get_engine
from formservice.db.migrations_runner import apply_migrations
from formservice.http.problem import (
    handle_http_exception,
    handle_request_validation_error,
    handle_storage_error,
    handle_unexpected_error,
    handle_validation_error,
)
from formservice.http.request_id import RequestIdMiddleware
from formservice.logging_setup import configure_logging
from formservice.logic.validation import ValidationError
from formservice.middleware.cors import apply_cors
from formservice.models.response_types import HealthStatus
from formservice.routes import api_router

logger = logging.getLogger(__name__)


def _health_check() -> HealthStatus:
    try:
        with get_engine().connect() as conn:
            conn.execute(sql_text("SELECT 1"))
        return HealthStatus(status="ok", db=True)
    except SQLAlchemyError:
        logger.error("Health DB check failed", exc_info=True)
        return HealthStatus(status="degraded", db=False)


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the FastAPI application.

    Configures logging, binds the engine to the configured DSN, applies
    pending migrations when enabled, and mounts the API under the configured
    prefix.
    """
    configure_logging()
    cfg = config or load_config()

    engine = get_engine(cfg.database.dsn)
    if cfg.migrations.auto_apply:
        applied = apply_migrations(engine, cfg.migrations.directory)
        if applied:
            logger.info("startup_migrations_applied files=%s", applied)

    app = FastAPI(title="Form Service")
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(SQLAlchemyError, handle_storage_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    apply_cors(app, origins=cfg.http.cors_origins)
    app.add_middleware(RequestIdMiddleware)

    app.add_api_route("/health", _health_check, methods=["GET"], response_model=HealthStatus, tags=["Health"])
    app.include_router(api_router, prefix=cfg.http.api_prefix)
    logger.info("app_created prefix=%s dialect=%s", cfg.http.api_prefix, engine.dialect.name)
    return app


__all__ = ["create_app"]
