"""Pydantic models for response bodies."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel


class PreviewResult(BaseModel):
    visible_field_ids: List[str]
    errors: List[str]


class ResponseRecord(BaseModel):
    response_id: str
    form_id: str
    submitted_at: str
    values: Dict[str, Any]


class HealthStatus(BaseModel):
    status: str
    db: bool


__all__ = ["PreviewResult", "ResponseRecord", "HealthStatus"]
