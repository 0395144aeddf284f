"""Functional tests for immutable table value editing."""

from __future__ import annotations

import pytest

from formservice.logic.table_values import append_row, initial_rows, set_cell, to_value
from formservice.logic.validation import validate_response
from formservice.models.form import TableField


def _table(mode: str, row_labels=None) -> TableField:
    return TableField.model_validate(
        {
            "id": "t",
            "label": "Grid",
            "mode": mode,
            "rowLabels": row_labels,
            "columns": [{"id": "c", "type": "text", "label": "C", "validation": {"required": True}}],
        }
    )


def test_static_table_starts_with_one_row_per_label() -> None:
    rows = initial_rows(_table("static", ["a", "b", "c"]))
    assert to_value(rows) == [{}, {}, {}]


def test_dynamic_table_starts_empty() -> None:
    assert initial_rows(_table("dynamic", ["ignored"])) == ()


def test_set_cell_returns_new_rows_and_leaves_original_untouched() -> None:
    original = initial_rows(_table("static", ["a", "b"]))
    edited = set_cell(original, 1, "c", "hello")
    assert to_value(original) == [{}, {}]
    assert to_value(edited) == [{}, {"c": "hello"}]
    again = set_cell(edited, 1, "c", "bye")
    assert to_value(edited) == [{}, {"c": "hello"}]
    assert to_value(again) == [{}, {"c": "bye"}]


def test_rows_are_read_only() -> None:
    rows = set_cell((), 0, "c", "x")
    with pytest.raises(TypeError):
        rows[0]["c"] = "y"  # type: ignore[index]


def test_set_cell_pads_missing_rows() -> None:
    assert to_value(set_cell((), 2, "c", "x")) == [{}, {}, {"c": "x"}]


def test_set_cell_rejects_negative_index() -> None:
    with pytest.raises(IndexError):
        set_cell((), -1, "c", "x")


def test_append_row_and_validate_built_value() -> None:
    table = _table("dynamic")
    rows = append_row(append_row(initial_rows(table)))
    rows = set_cell(rows, 0, "c", "filled")
    assert validate_response([table], {"t": to_value(rows)}) == ["C in Grid row 2 is required."]
