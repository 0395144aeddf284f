"""Immutable table values for client callers.

Helpers for code that builds table answers cell by cell (a form renderer or
an API client) before posting them; the HTTP routes never call them, since
they receive finished values. Each row is a read-only mapping and every edit
returns a new tuple of rows, so a rendered table value never aliases the
stored one. `to_value` yields the list-of-dicts shape the validator expects.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from formservice.models.field_kind import TableMode
from formservice.models.form import TableField

Row = Mapping[str, Any]
Rows = Tuple[Row, ...]

_EMPTY_ROW: Row = MappingProxyType({})


def initial_rows(field: TableField) -> Rows:
    """Static tables start with one empty row per row label; dynamic ones start empty."""
    if field.mode == TableMode.STATIC:
        return tuple(_EMPTY_ROW for _ in field.row_labels or [])
    return ()


def set_cell(rows: Rows, row_index: int, column_id: str, value: Any) -> Rows:
    """Return new rows with a single cell replaced.

    Rows missing up to `row_index` are filled with empty rows.
    """
    if row_index < 0:
        raise IndexError(f"row_index must be >= 0, got {row_index}")
    padded = list(rows) + [_EMPTY_ROW] * max(0, row_index + 1 - len(rows))
    updated = dict(padded[row_index])
    updated[column_id] = value
    padded[row_index] = MappingProxyType(updated)
    return tuple(padded)


def append_row(rows: Rows) -> Rows:
    return tuple(rows) + (_EMPTY_ROW,)


def to_value(rows: Rows) -> List[Dict[str, Any]]:
    """Convert rows to the plain list-of-dicts stored in response values."""
    return [dict(row) for row in rows]


__all__ = ["Row", "Rows", "initial_rows", "set_cell", "append_row", "to_value"]
