"""Structural checks for form definitions before they are stored."""

from __future__ import annotations

from collections import Counter
from typing import List, Sequence

from formservice.logic.validation import ValidationError
from formservice.models.field_kind import FieldKind, TableMode
from formservice.models.form import DropdownField, FormField, FormSchema, TableField


def _blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


def _option_errors(options: Sequence[str] | None, owner: str) -> List[str]:
    if not options:
        return [f"{owner} must have at least one option."]
    return [f"{owner} option {i} cannot be empty." for i, opt in enumerate(options, start=1) if _blank(opt)]


def _table_errors(table: TableField) -> List[str]:
    errors: List[str] = []
    if not table.columns:
        errors.append(f"Table '{table.label}' must have at least one column.")
    for i, col in enumerate(table.columns, start=1):
        if _blank(col.label):
            errors.append(f"Table '{table.label}' column {i} label cannot be empty.")
        if col.type == FieldKind.DROPDOWN:
            errors.extend(_option_errors(col.options, f"Table '{table.label}' column '{col.label}'"))
    if table.mode == TableMode.STATIC:
        if not table.row_labels:
            errors.append(f"Table '{table.label}' must have at least one row label.")
        for i, row_label in enumerate(table.row_labels or [], start=1):
            if _blank(row_label):
                errors.append(f"Table '{table.label}' row {i} label cannot be empty.")
    return errors


def validate_form_definition(title: str, fields: Sequence[FormField]) -> List[str]:
    """Return messages describing why the definition cannot be saved."""
    errors: List[str] = []
    if _blank(title):
        errors.append("Form title cannot be empty.")

    counts = Counter(field.id for field in fields)
    for field_id, count in counts.items():
        if count > 1:
            errors.append(f"Field id '{field_id}' is used by more than one field.")

    for idx, field in enumerate(fields, start=1):
        if _blank(field.label):
            errors.append(f"Field {idx} label cannot be empty.")
        if isinstance(field, DropdownField):
            errors.extend(_option_errors(field.options, f"Dropdown '{field.label}'"))
        elif isinstance(field, TableField):
            errors.extend(_table_errors(field))
    return errors


class FormDefinitionError(ValidationError):
    """Raised when a form definition cannot be stored."""

    def __init__(self, errors: List[str]) -> None:
        super().__init__(errors, title="Invalid form definition")


def ensure_valid_form(schema: FormSchema) -> None:
    errors = validate_form_definition(schema.title, schema.fields)
    if errors:
        raise FormDefinitionError(errors)


__all__ = ["FormDefinitionError", "validate_form_definition", "ensure_valid_form"]
