"""FieldKind enumeration for the supported form field types.

Provides a simple constants container instead of an Enum so the wire tokens
can be compared directly against stored JSON.
"""

from __future__ import annotations


class FieldKind:
    TEXT = "text"
    DROPDOWN = "dropdown"
    TABLE = "table"


class TableMode:
    STATIC = "static"
    DYNAMIC = "dynamic"


__all__ = ["FieldKind", "TableMode"]
