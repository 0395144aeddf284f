"""Type-aware validation of response values against a form definition.

One validator serves both call sites:

- preview (client semantics): pass the resolver's visible ids; invisible
  fields are skipped and `required` is relaxed on every visible field other
  than the selected jump target;
- submission (server semantics): pass `visible_ids=None`; every field is
  checked and nothing is relaxed.

The validator never raises for malformed values; it returns messages.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence

from formservice.logic.visibility_rules import selected_jump_target
from formservice.models.field_kind import FieldKind
from formservice.models.form import (
    DropdownField,
    FormField,
    TableColumn,
    TableField,
    TextField,
    TextValidation,
)


class ValidationError(ValueError):
    """Raised when a payload fails validation; carries every message."""

    def __init__(self, errors: List[str], title: str = "Validation failed") -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)
        self.title = title


def _text_errors(subject: str, value: Any, rules: TextValidation, required: bool) -> List[str]:
    # Non-string values count as not set.
    text = value if isinstance(value, str) else None
    errors: List[str] = []
    if required and not (text or "").strip():
        errors.append(f"{subject} is required.")
    if rules.min_length and text is not None and len(text) < rules.min_length:
        errors.append(f"{subject} must be at least {rules.min_length} characters.")
    if rules.max_length and text is not None and len(text) > rules.max_length:
        errors.append(f"{subject} must be at most {rules.max_length} characters.")
    return errors


def _choice_errors(subject: str, value: Any, options: Optional[Sequence[str]], required: bool) -> List[str]:
    errors: List[str] = []
    if required and not value:
        errors.append(f"{subject} is required.")
    if value and options is not None and value not in options:
        errors.append(f"{subject} value is not valid.")
    return errors


def _cell_errors(subject: str, column: TableColumn, cell: Any, required: bool) -> List[str]:
    if column.type == FieldKind.DROPDOWN:
        return _choice_errors(subject, cell, column.options, required)
    return _text_errors(subject, cell, column.validation, required)


def _table_errors(field: TableField, value: Any, relax_required: bool) -> List[str]:
    if not isinstance(value, list):
        return []
    errors: List[str] = []
    for row_no, row in enumerate(value, start=1):
        cells = row if isinstance(row, Mapping) else {}
        for column in field.columns:
            required = bool(column.validation.required) and not relax_required
            subject = f"{column.label} in {field.label} row {row_no}"
            errors.extend(_cell_errors(subject, column, cells.get(column.id), required))
    return errors


def validate_response(
    fields: Sequence[FormField],
    values: Mapping[str, Any],
    visible_ids: Optional[Iterable[str]] = None,
) -> List[str]:
    """Return validation messages for `values` in field, row, column order.

    `visible_ids=None` selects server semantics (all fields visible, no
    relaxation of `required`).
    """
    if visible_ids is None:
        visible = {field.id for field in fields}
        jump_target_id = None
    else:
        visible = set(visible_ids)
        jump_target_id = selected_jump_target(fields, values)

    errors: List[str] = []
    for field in fields:
        if field.id not in visible:
            continue
        # The branching dropdown itself is relaxed too; only the target stays required.
        relax_required = bool(jump_target_id) and jump_target_id in visible and field.id != jump_target_id
        value = values.get(field.id)
        if isinstance(field, TextField):
            required = bool(field.validation.required) and not relax_required
            errors.extend(_text_errors(field.label, value, field.validation, required))
        elif isinstance(field, DropdownField):
            required = bool(field.validation.required) and not relax_required
            errors.extend(_choice_errors(field.label, value, field.options, required))
        elif isinstance(field, TableField):
            errors.extend(_table_errors(field, value, relax_required))
    return errors


def ensure_valid_response(
    fields: Sequence[FormField],
    values: Mapping[str, Any],
    visible_ids: Optional[Iterable[str]] = None,
) -> None:
    """Raise ValidationError when `validate_response` reports anything."""
    errors = validate_response(fields, values, visible_ids)
    if errors:
        raise ValidationError(errors, title="Response validation failed")


__all__ = ["ValidationError", "validate_response", "ensure_valid_response"]
