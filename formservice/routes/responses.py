"""Response submission, listing and clearing endpoints."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Response

from formservice.http.problem import not_found
from formservice.logic.events import RESPONSE_SUBMITTED, RESPONSES_CLEARED, publish
from formservice.logic.repository_forms import form_exists, get_form
from formservice.logic.repository_responses import clear_responses, insert_response, list_responses
from formservice.logic.validation import ensure_valid_response
from formservice.models.response_types import ResponseRecord

router = APIRouter()


@router.post(
    "/forms/{form_id}/responses",
    status_code=201,
    summary="Submit a response",
    operation_id="submitResponse",
    tags=["Responses"],
    response_model=ResponseRecord,
)
def submit_response_route(form_id: str, values: Dict[str, Any] = Body(...)) -> ResponseRecord:
    """Validate and store a response.

    Validation here sees no respondent-side visibility: every field is
    checked and `required` is never relaxed.
    """
    schema = get_form(form_id)
    if schema is None:
        raise not_found()
    ensure_valid_response(schema.fields, values)
    record = insert_response(form_id, values)
    publish(RESPONSE_SUBMITTED, {"form_id": form_id, "response_id": record.response_id})
    return record


@router.get(
    "/forms/{form_id}/responses",
    summary="List responses",
    operation_id="listResponses",
    tags=["Responses"],
    response_model=List[ResponseRecord],
)
def list_responses_route(form_id: str) -> List[ResponseRecord]:
    if not form_exists(form_id):
        raise not_found()
    return list_responses(form_id)


@router.delete("/forms/{form_id}/responses", status_code=204, summary="Clear responses", tags=["Responses"])
def clear_responses_route(form_id: str) -> Response:
    if not form_exists(form_id):
        raise not_found()
    removed = clear_responses(form_id)
    publish(RESPONSES_CLEARED, {"form_id": form_id, "removed": removed})
    return Response(status_code=204)


__all__ = ["router"]
