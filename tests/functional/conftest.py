from __future__ import annotations

"""Functional test bootstrap.

Points the service at a file-backed SQLite database under tmp/ before any
application import, applies migrations once per session and empties the
tables before every test.
"""

import os
import pathlib
from typing import Any, Dict

import pytest

_ROOT = pathlib.Path(__file__).resolve().parents[2]
_DB_FILE = _ROOT / "tmp" / "functional_tests.db"
_DB_FILE.parent.mkdir(parents=True, exist_ok=True)
if _DB_FILE.exists():
    _DB_FILE.unlink()

os.environ["DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["MIGRATIONS_DIR"] = str(_ROOT / "migrations")
os.environ["API_PREFIX"] = "/api"
os.environ.pop("TEST_DATABASE_URL", None)


@pytest.fixture(scope="session", autouse=True)
def functional_sqlite_bootstrap() -> None:
    """Session-level bootstrap: apply migrations once for the shared DB."""
    from formservice.db.base import get_engine
    from formservice.db.migrations_runner import apply_migrations

    apply_migrations(get_engine(os.environ["DATABASE_URL"]), os.environ["MIGRATIONS_DIR"])
    yield


@pytest.fixture(autouse=True)
def clean_state() -> None:
    from sqlalchemy import text as sql_text

    from formservice.db.base import get_engine
    from formservice.logic.events import get_buffered_events

    with get_engine(os.environ["DATABASE_URL"]).begin() as conn:
        conn.execute(sql_text("DELETE FROM form_responses"))
        conn.execute(sql_text("DELETE FROM forms"))
    get_buffered_events(clear=True)
    yield


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient

    from formservice.main import create_app

    with TestClient(create_app()) as c:
        yield c


def branching_form_payload() -> Dict[str, Any]:
    """Dropdown D routes 'Yes' to Q2; Q1 and Q2 are both required text fields."""
    return {
        "title": "Branching",
        "fields": [
            {
                "id": "D",
                "type": "dropdown",
                "label": "D",
                "options": ["Yes", "No"],
                "condition": {"Yes": "Q2"},
            },
            {"id": "Q1", "type": "text", "label": "Q1", "validation": {"required": True}},
            {"id": "Q2", "type": "text", "label": "Q2", "validation": {"required": True}},
        ],
    }


@pytest.fixture()
def branching_payload() -> Dict[str, Any]:
    return branching_form_payload()
