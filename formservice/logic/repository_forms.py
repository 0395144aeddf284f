"""Form definition data access helpers.

Forms are stored as JSON documents keyed by form_id. Deleting a form removes
its responses in the same transaction.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import List, Optional

from sqlalchemy import text as sql_text

from formservice.db.base import get_engine, transaction
from formservice.models.form import FormSchema

logger = logging.getLogger(__name__)


def _load(data: str | dict) -> FormSchema:
    doc = json.loads(data) if isinstance(data, str) else data
    return FormSchema.model_validate(doc)


def _dump(schema: FormSchema) -> str:
    return json.dumps(schema.to_document(), ensure_ascii=False)


def list_forms() -> List[FormSchema]:
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(sql_text("SELECT data FROM forms ORDER BY form_id ASC")).fetchall()
    return [_load(r[0]) for r in rows]


def get_form(form_id: str) -> Optional[FormSchema]:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text("SELECT data FROM forms WHERE form_id = :id"),
            {"id": form_id},
        ).fetchone()
    return _load(row[0]) if row else None


def form_exists(form_id: str) -> bool:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(sql_text("SELECT 1 FROM forms WHERE form_id = :id"), {"id": form_id}).fetchone()
    return row is not None


def create_form(schema: FormSchema) -> FormSchema:
    """Store a new form under a generated uuid4 id and return it."""
    stored = schema.model_copy(update={"id": str(uuid.uuid4())})
    with transaction() as conn:
        conn.execute(
            sql_text("INSERT INTO forms (form_id, data) VALUES (:id, :data)"),
            {"id": stored.id, "data": _dump(stored)},
        )
    logger.info("form_created form_id=%s fields=%d", stored.id, len(stored.fields))
    return stored


def replace_form(form_id: str, schema: FormSchema) -> Optional[FormSchema]:
    """Replace the stored definition; returns None when the form is unknown."""
    stored = schema.model_copy(update={"id": form_id})
    with transaction() as conn:
        result = conn.execute(
            sql_text("UPDATE forms SET data = :data WHERE form_id = :id"),
            {"id": form_id, "data": _dump(stored)},
        )
        if result.rowcount == 0:
            return None
    logger.info("form_replaced form_id=%s fields=%d", form_id, len(stored.fields))
    return stored


def delete_form(form_id: str) -> bool:
    """Delete a form and its responses; returns False when nothing was deleted."""
    with transaction() as conn:
        removed = conn.execute(
            sql_text("DELETE FROM form_responses WHERE form_id = :id"),
            {"id": form_id},
        ).rowcount
        deleted = conn.execute(sql_text("DELETE FROM forms WHERE form_id = :id"), {"id": form_id}).rowcount
    if deleted:
        logger.info("form_deleted form_id=%s responses_removed=%s", form_id, removed)
    return bool(deleted)


__all__ = [
    "list_forms",
    "get_form",
    "form_exists",
    "create_form",
    "replace_form",
    "delete_form",
]
