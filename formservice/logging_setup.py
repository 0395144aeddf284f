"""Logging bootstrap for the form service.

One stdout handler on the root logger; uvicorn's loggers write through the
same handler instead of their own. SQLAlchemy engine chatter is held at
WARNING unless LOG_LEVEL asks for DEBUG.
"""
from __future__ import annotations
import logging
import os
from logging.config import dictConfig

LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"
_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _build_config(level: str) -> dict:
    shared = {"level": level, "handlers": ["stdout"], "propagate": False}
    loggers = {name: dict(shared) for name in _UVICORN_LOGGERS}
    loggers["sqlalchemy.engine"] = {"level": "DEBUG" if level == "DEBUG" else "WARNING"}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"plain": {"format": LOG_FORMAT}},
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "plain",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["stdout"]},
        "loggers": loggers,
    }


def configure_logging(level: str | None = None) -> None:
    """Install the service's logging configuration.

    No-op when the root logger already has handlers, e.g. under a reloader or
    when pytest's log capture is active.
    """
    if logging.getLogger().handlers:
        return
    resolved = (level or os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    dictConfig(_build_config(resolved))
