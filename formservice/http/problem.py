"""Problem+JSON utilities and global exception handlers.

Defines the RFC7807 media type and handler callables registered by
`create_app`. Handlers map domain validation failures, request shape errors,
storage failures and anything unexpected onto application/problem+json.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
import logging
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from formservice.logic.form_definition import FormDefinitionError
from formservice.logic.validation import ValidationError

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def problem_response(
    title: str,
    status: int,
    detail: Optional[str] = None,
    errors: Optional[List[Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body: Dict[str, Any] = {"title": title, "status": status}
    if detail:
        body["detail"] = detail
    if errors is not None:
        body["errors"] = errors
    return JSONResponse(body, status_code=status, media_type=PROBLEM_MEDIA_TYPE, headers=headers)


def not_found(title: str = "Form not found") -> HTTPException:
    return HTTPException(status_code=404, detail={"title": title, "status": 404})


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status = int(exc.status_code or 500)
    headers = {str(k): str(v) for k, v in (exc.headers or {}).items()} or None
    if isinstance(exc.detail, dict):
        return JSONResponse(exc.detail, status_code=status, media_type=PROBLEM_MEDIA_TYPE, headers=headers)
    return problem_response("Error", status, detail=str(exc.detail or ""), headers=headers)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    logger.info("request_validation_failed path=%s errors=%d", request.url.path, len(exc.errors()))
    return problem_response(
        "Invalid Request",
        422,
        detail="Request validation failed",
        errors=[{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in exc.errors()],
    )


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:  # noqa: D401
    status = 422 if isinstance(exc, FormDefinitionError) else 400
    logger.info("validation_failed path=%s title=%s count=%d", request.url.path, exc.title, len(exc.errors))
    return problem_response(exc.title, status, errors=exc.errors)


async def handle_storage_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:  # noqa: D401
    logger.error("storage_error path=%s", request.url.path, exc_info=exc)
    return problem_response("Operation failed", 500)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return problem_response("Internal Server Error", 500)


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem_response",
    "not_found",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_validation_error",
    "handle_storage_error",
    "handle_unexpected_error",
]
