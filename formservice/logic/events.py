"""Domain events raised by form and response writes.

Events are logged and kept in a process-local buffer that tests (and any
in-process observer) can drain with `get_buffered_events`.
"""

from __future__ import annotations

from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)

FORM_CREATED = "form.created"
FORM_UPDATED = "form.updated"
FORM_DELETED = "form.deleted"
RESPONSE_SUBMITTED = "response.submitted"
RESPONSES_CLEARED = "responses.cleared"

EVENT_BUFFER: List[Dict[str, Any]] = []


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append({"type": event_type, "payload": dict(payload)})


def get_buffered_events(clear: bool = True) -> List[Dict[str, Any]]:
    """Return published events oldest first, draining the buffer unless `clear` is False."""
    drained = EVENT_BUFFER[:]
    if clear:
        del EVENT_BUFFER[:]
    return drained


__all__ = [
    "EVENT_BUFFER",
    "FORM_CREATED",
    "FORM_DELETED",
    "FORM_UPDATED",
    "RESPONSES_CLEARED",
    "RESPONSE_SUBMITTED",
    "get_buffered_events",
    "publish",
]
