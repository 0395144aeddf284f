"""Form definition endpoints and the preview evaluation endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Response

from formservice.http.problem import not_found
from formservice.logic.events import FORM_CREATED, FORM_DELETED, FORM_UPDATED, publish
from formservice.logic.form_definition import ensure_valid_form
from formservice.logic.repository_forms import (
    create_form,
    delete_form,
    get_form,
    list_forms,
    replace_form,
)
from formservice.logic.validation import validate_response
from formservice.logic.visibility_rules import resolve_visible_field_ids
from formservice.models.form import FormSchema
from formservice.models.response_types import PreviewResult

router = APIRouter()
logger = logging.getLogger(__name__)


def _document(schema: FormSchema) -> Dict[str, Any]:
    return schema.to_document()


@router.get("/forms", summary="List forms", operation_id="listForms", tags=["Forms"])
def list_forms_route() -> List[Dict[str, Any]]:
    return [_document(f) for f in list_forms()]


@router.post("/forms", status_code=201, summary="Create a form", operation_id="createForm", tags=["Forms"])
def create_form_route(schema: FormSchema) -> Dict[str, Any]:
    ensure_valid_form(schema)
    stored = create_form(schema)
    publish(FORM_CREATED, {"form_id": stored.id})
    return _document(stored)


@router.get("/forms/{form_id}", summary="Get a form", operation_id="getForm", tags=["Forms"])
def get_form_route(form_id: str) -> Dict[str, Any]:
    schema = get_form(form_id)
    if schema is None:
        raise not_found()
    return _document(schema)


@router.put("/forms/{form_id}", summary="Replace a form", operation_id="replaceForm", tags=["Forms"])
def replace_form_route(form_id: str, schema: FormSchema) -> Dict[str, Any]:
    ensure_valid_form(schema)
    stored = replace_form(form_id, schema)
    if stored is None:
        raise not_found()
    publish(FORM_UPDATED, {"form_id": form_id})
    return _document(stored)


@router.delete("/forms/{form_id}", status_code=204, summary="Delete a form and its responses", tags=["Forms"])
def delete_form_route(form_id: str) -> Response:
    if not delete_form(form_id):
        raise not_found()
    publish(FORM_DELETED, {"form_id": form_id})
    return Response(status_code=204)


@router.post(
    "/forms/{form_id}/preview",
    summary="Evaluate visibility and validation for a value snapshot",
    operation_id="previewForm",
    tags=["Preview"],
    response_model=PreviewResult,
)
def preview_form_route(form_id: str, values: Optional[Dict[str, Any]] = Body(None)) -> PreviewResult:
    """Return what the respondent would see and what would block submission.

    Uses respondent-side semantics: hidden fields are not validated and
    `required` is relaxed on everything except the selected jump target.
    """
    schema = get_form(form_id)
    if schema is None:
        raise not_found()
    values = values or {}
    visible = resolve_visible_field_ids(schema.fields, values)
    errors = validate_response(schema.fields, values, visible)
    logger.debug("form_preview form_id=%s visible=%d errors=%d", form_id, len(visible), len(errors))
    return PreviewResult(visible_field_ids=visible, errors=errors)


__all__ = ["router"]
