"""Response data access helpers.

Encapsulates response persistence to keep route handlers free of inline SQL.
Responses are listed in submission order via a per-form sequence number.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from formservice.db.base import get_engine, transaction
from formservice.models.response_types import ResponseRecord

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


SEQ_CONFLICT_RETRIES = 3


def _next_seq(conn: Connection, form_id: str) -> int:
    return int(
        conn.execute(
            sql_text("SELECT COALESCE(MAX(seq), 0) + 1 FROM form_responses WHERE form_id = :fid"),
            {"fid": form_id},
        ).scalar_one()
    )


def insert_response(form_id: str, values: Dict[str, Any]) -> ResponseRecord:
    """Store a response under the next per-form sequence number.

    A concurrent insert that claimed the same number trips the unique
    (form_id, seq) index; the insert is then retried with a fresh number.
    """
    record = ResponseRecord(
        response_id=str(uuid.uuid4()),
        form_id=form_id,
        submitted_at=_now(),
        values=values,
    )
    attempt = 1
    while True:
        try:
            with transaction() as conn:
                seq = _next_seq(conn, form_id)
                conn.execute(
                    sql_text(
                        """
                        INSERT INTO form_responses (response_id, form_id, seq, submitted_at, data)
                        VALUES (:rid, :fid, :seq, :at, :data)
                        """
                    ),
                    {
                        "rid": record.response_id,
                        "fid": form_id,
                        "seq": seq,
                        "at": record.submitted_at,
                        "data": json.dumps(values, ensure_ascii=False),
                    },
                )
        except IntegrityError:
            if attempt >= SEQ_CONFLICT_RETRIES:
                raise
            logger.warning("response_seq_conflict form_id=%s seq=%s attempt=%d", form_id, seq, attempt)
            attempt += 1
            continue
        break
    logger.info("response_inserted form_id=%s response_id=%s seq=%s", form_id, record.response_id, seq)
    return record


def list_responses(form_id: str) -> List[ResponseRecord]:
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                """
                SELECT response_id, form_id, submitted_at, data
                FROM form_responses
                WHERE form_id = :fid
                ORDER BY seq ASC
                """
            ),
            {"fid": form_id},
        ).mappings().all()
    return [
        ResponseRecord(
            response_id=r["response_id"],
            form_id=r["form_id"],
            submitted_at=r["submitted_at"],
            values=json.loads(r["data"]),
        )
        for r in rows
    ]


def clear_responses(form_id: str) -> int:
    """Delete every response for a form and return how many were removed."""
    with transaction() as conn:
        removed = conn.execute(
            sql_text("DELETE FROM form_responses WHERE form_id = :fid"),
            {"fid": form_id},
        ).rowcount
    logger.info("responses_cleared form_id=%s removed=%s", form_id, removed)
    return int(removed or 0)


__all__ = ["insert_response", "list_responses", "clear_responses"]
