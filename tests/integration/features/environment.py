"""Behave environment hooks for form service integration tests.

Runs the application in-process through FastAPI's TestClient against a
throwaway SQLite database. `tests/integration/.env.test` (optional) may set
TEST_DATABASE_URL or TEST_API_PREFIX; values already in the environment win.
"""

import os
import tempfile
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from fastapi.testclient import TestClient
from sqlalchemy import text

_ROOT = Path(__file__).resolve().parents[3]


def before_all(context: Any) -> None:
    load_dotenv(dotenv_path=_ROOT / "tests" / "integration" / ".env.test", override=False)

    context._tmpdir = tempfile.TemporaryDirectory(prefix="formservice-it-")
    default_dsn = f"sqlite:///{Path(context._tmpdir.name) / 'integration.db'}"
    context.test_database_url = os.getenv("TEST_DATABASE_URL") or default_dsn
    context.api_prefix = os.getenv("TEST_API_PREFIX", "/api").rstrip("/")

    os.environ["DATABASE_URL"] = context.test_database_url
    os.environ["API_PREFIX"] = context.api_prefix
    os.environ["MIGRATIONS_DIR"] = str(_ROOT / "migrations")
    os.environ["AUTO_APPLY_MIGRATIONS"] = "true"

    from formservice.main import create_app

    context.client = TestClient(create_app())
    context.client.__enter__()


def before_scenario(context: Any, scenario: Any) -> None:
    from formservice.db.base import get_engine

    with get_engine().begin() as conn:
        conn.execute(text("DELETE FROM form_responses"))
        conn.execute(text("DELETE FROM forms"))
    context.vars = {}
    context.response = None


def after_all(context: Any) -> None:
    client = getattr(context, "client", None)
    if client is not None:
        client.__exit__(None, None, None)
    from formservice.db.base import get_engine

    get_engine().dispose()
    tmpdir = getattr(context, "_tmpdir", None)
    if tmpdir is not None:
        tmpdir.cleanup()
