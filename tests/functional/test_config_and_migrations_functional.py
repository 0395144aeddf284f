"""Functional tests for configuration precedence and the migrations runner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import create_engine, text as sql_text
from sqlalchemy.exc import IntegrityError

from formservice import config as config_module
from formservice.config import DEFAULT_DSN, load_config
from formservice.db.migrations_runner import _split_statements, apply_migrations

_MIGRATIONS = Path(__file__).resolve().parents[2] / "migrations"
_SHIPPED = ["001_forms.sql", "002_form_responses_seq_unique.sql"]


@pytest.fixture()
def isolated_config(tmp_path, monkeypatch) -> Path:
    """Point config discovery at an empty tmp dir and clear related env vars."""
    monkeypatch.setattr(config_module, "CONFIG_DIR", tmp_path / "config")
    monkeypatch.setattr(config_module, "ROOT_CONFIG", tmp_path / "formservice_config.json")
    for key in ("DATABASE_URL", "API_PREFIX", "CORS_ORIGINS", "AUTO_APPLY_MIGRATIONS", "MIGRATIONS_DIR"):
        monkeypatch.delenv(key, raising=False)
    return tmp_path


def test_defaults_apply_without_any_source(isolated_config) -> None:
    cfg = load_config()
    assert cfg.database.dsn == DEFAULT_DSN
    assert cfg.http.api_prefix == "/api"
    assert cfg.http.cors_origins == ["*"]
    assert cfg.migrations.auto_apply is True
    assert cfg.migrations.directory == "migrations"


def test_precedence_env_over_files_over_json(isolated_config, monkeypatch) -> None:
    (isolated_config / "formservice_config.json").write_text(
        json.dumps(
            {
                "database": {"dsn": "sqlite:///from-json.db"},
                "http": {"api_prefix": "/json", "cors_origins": ["https://a.example", "https://b.example"]},
                "migrations": {"auto_apply": False},
            }
        ),
        encoding="utf-8",
    )
    overrides = isolated_config / "config"
    overrides.mkdir()
    (overrides / "http.api_prefix").write_text("/file/\n", encoding="utf-8")

    cfg = load_config()
    assert cfg.database.dsn == "sqlite:///from-json.db"
    assert cfg.http.api_prefix == "/file"
    assert cfg.http.cors_origins == ["https://a.example", "https://b.example"]
    assert cfg.migrations.auto_apply is False

    monkeypatch.setenv("API_PREFIX", "/env")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///from-env.db")
    cfg = load_config()
    assert cfg.http.api_prefix == "/env"
    assert cfg.database.dsn == "sqlite:///from-env.db"


def test_invalid_prefix_is_rejected(isolated_config, monkeypatch) -> None:
    monkeypatch.setenv("API_PREFIX", "api")
    with pytest.raises(PydanticValidationError):
        load_config()


def test_migrations_apply_once(tmp_path) -> None:
    engine = create_engine(f"sqlite:///{tmp_path / 'migrate.db'}", future=True)
    try:
        assert apply_migrations(engine, _MIGRATIONS) == _SHIPPED
        assert apply_migrations(engine, _MIGRATIONS) == []
        with engine.connect() as conn:
            journal = conn.execute(sql_text("SELECT filename FROM migration_journal")).scalars().all()
            conn.execute(sql_text("SELECT form_id, data FROM forms"))
            conn.execute(sql_text("SELECT response_id, seq FROM form_responses"))
        assert sorted(journal) == _SHIPPED
    finally:
        engine.dispose()


def test_migrations_skip_rollback_files_and_missing_dir(tmp_path) -> None:
    (tmp_path / "001_a.sql").write_text("-- create\nCREATE TABLE a (id INTEGER);\n", encoding="utf-8")
    (tmp_path / "001_a_rollback.sql").write_text("DROP TABLE a;", encoding="utf-8")
    engine = create_engine(f"sqlite:///{tmp_path / 'm.db'}", future=True)
    try:
        assert apply_migrations(engine, tmp_path) == ["001_a.sql"]
        assert apply_migrations(engine, tmp_path / "absent") == []
    finally:
        engine.dispose()


def test_split_statements_ignores_semicolons_in_comment_lines() -> None:
    script = (
        "-- Portable between engines; data stored as TEXT.\n"
        "BEGIN;\n"
        "CREATE TABLE a (id INTEGER);\n"
        "  -- trailing note; still a comment\n"
        "CREATE INDEX IF NOT EXISTS ix_a ON a (id);\n"
        "COMMIT;\n"
    )
    assert list(_split_statements(script)) == [
        "CREATE TABLE a (id INTEGER)",
        "CREATE INDEX IF NOT EXISTS ix_a ON a (id)",
    ]


def test_migration_with_semicolon_in_header_comment_applies(tmp_path) -> None:
    (tmp_path / "001_a.sql").write_text(
        "-- First table; second line of the note.\nCREATE TABLE a (id INTEGER);\n", encoding="utf-8"
    )
    engine = create_engine(f"sqlite:///{tmp_path / 'c.db'}", future=True)
    try:
        assert apply_migrations(engine, tmp_path) == ["001_a.sql"]
        with engine.connect() as conn:
            conn.execute(sql_text("SELECT id FROM a"))
    finally:
        engine.dispose()


def test_response_seq_is_unique_per_form(tmp_path) -> None:
    engine = create_engine(f"sqlite:///{tmp_path / 'seq.db'}", future=True)
    row = "INSERT INTO form_responses (response_id, form_id, seq, submitted_at, data) VALUES (:r, 'f', 1, 'now', '{}')"
    try:
        apply_migrations(engine, _MIGRATIONS)
        with engine.begin() as conn:
            conn.execute(sql_text(row), {"r": "r1"})
        with pytest.raises(IntegrityError):
            with engine.begin() as conn:
                conn.execute(sql_text(row), {"r": "r2"})
    finally:
        engine.dispose()
