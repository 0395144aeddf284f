"""Configuration loading for the form service.

Each setting is looked up in order, first hit wins:

1) environment variable (e.g. ``DATABASE_URL``)
2) single-value text file under ``config/`` (e.g. ``config/database.url``)
3) dotted key in ``formservice_config.json`` at the project root
4) development default

The resolved strings are then validated through pydantic models.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("formservice_config.json")
DEFAULT_DSN = "sqlite+pysqlite:///./formservice.db"
logger = logging.getLogger(__name__)

# setting name -> (env var, override file, json key, default)
_SOURCES: Dict[str, tuple] = {
    "dsn": ("DATABASE_URL", "database.url", "database.dsn", DEFAULT_DSN),
    "api_prefix": ("API_PREFIX", "http.api_prefix", "http.api_prefix", "/api"),
    "cors_origins": ("CORS_ORIGINS", "http.cors_origins", "http.cors_origins", "*"),
    "auto_apply": ("AUTO_APPLY_MIGRATIONS", "migrations.auto_apply", "migrations.auto_apply", "true"),
    "migrations_dir": ("MIGRATIONS_DIR", "migrations.directory", "migrations.directory", "migrations"),
}


class DatabaseConfig(BaseModel):
    dsn: str

    @field_validator("dsn")
    @classmethod
    def dsn_present(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("database.dsn must not be blank")
        return v.strip()


class HttpConfig(BaseModel):
    api_prefix: str = Field(default="/api")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator("api_prefix")
    @classmethod
    def prefix_must_be_absolute(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("http.api_prefix must start with '/'")
        return v.rstrip("/")


class MigrationsConfig(BaseModel):
    auto_apply: bool = Field(default=True)
    directory: str = Field(default="migrations")


class AppConfig(BaseModel):
    database: DatabaseConfig
    http: HttpConfig
    migrations: MigrationsConfig


def _override_file(name: str) -> Optional[str]:
    path = CONFIG_DIR / name
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8").strip() or None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("config_override_unreadable path=%s error=%s", path, e)
        return None


def _json_document() -> Dict[str, Any]:
    if not ROOT_CONFIG.is_file():
        return {}
    try:
        doc = json.loads(ROOT_CONFIG.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("config_json_unreadable path=%s error=%s", ROOT_CONFIG, e)
        return {}
    return doc if isinstance(doc, dict) else {}


def _json_value(doc: Dict[str, Any], dotted: str) -> Optional[str]:
    node: Any = doc
    for part in dotted.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    if node is None:
        return None
    if isinstance(node, list):
        return ",".join(str(item) for item in node)
    if isinstance(node, bool):
        return "true" if node else "false"
    return str(node)


def _resolve(name: str, doc: Dict[str, Any]) -> str:
    env_key, file_name, json_key, default = _SOURCES[name]
    return os.environ.get(env_key) or _override_file(file_name) or _json_value(doc, json_key) or default


def _as_bool(text: str) -> bool:
    return text.strip().lower() in {"1", "true", "yes", "on"}


def load_config() -> AppConfig:
    """Resolve every setting and return a validated AppConfig.

    Raises pydantic's ValidationError (after logging it) for invalid values.
    """
    doc = _json_document()
    raw = {name: _resolve(name, doc) for name in _SOURCES}
    try:
        return AppConfig(
            database=DatabaseConfig(dsn=raw["dsn"]),
            http=HttpConfig(
                api_prefix=raw["api_prefix"].strip(),
                cors_origins=[o.strip() for o in raw["cors_origins"].split(",") if o.strip()],
            ),
            migrations=MigrationsConfig(auto_apply=_as_bool(raw["auto_apply"]), directory=raw["migrations_dir"]),
        )
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DEFAULT_DSN",
    "DatabaseConfig",
    "HttpConfig",
    "MigrationsConfig",
    "load_config",
]
