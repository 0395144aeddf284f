"""Visibility rule evaluation for conditional branching.

Centralizes the single-jump branching rule so the preview endpoint, the
response validator and any other caller derive the visible field set from one
place. Only the first dropdown carrying a non-empty condition map branches;
conditions on later dropdowns still mark their targets as jump targets.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from formservice.models.form import DropdownField, FormField

logger = logging.getLogger(__name__)


def possible_jump_targets(fields: Sequence[FormField]) -> set[str]:
    """Return every field id named as a target by any dropdown condition."""
    targets: set[str] = set()
    for field in fields:
        if isinstance(field, DropdownField) and field.condition:
            targets.update(tid for tid in field.condition.values() if tid)
    return targets


def find_branching_index(fields: Sequence[FormField]) -> Optional[int]:
    """Return the index of the active branching dropdown, or None.

    The active branching field is the first dropdown, in field order, whose
    condition map is non-empty.
    """
    return next(
        (idx for idx, field in enumerate(fields) if isinstance(field, DropdownField) and field.condition),
        None,
    )


def _index_of(fields: Sequence[FormField], field_id: str) -> int:
    for idx, field in enumerate(fields):
        if field.id == field_id:
            return idx
    return -1


def selected_jump_target(
    fields: Sequence[FormField],
    values: Mapping[str, Any],
    branch_idx: Optional[int] = None,
) -> Optional[str]:
    """Return the field id selected by the branching dropdown's current answer.

    Returns None when there is no branching field, no answer, or the answer
    maps to an empty target or to an id that names no field of the schema.
    """
    if branch_idx is None:
        branch_idx = find_branching_index(fields)
    if branch_idx is None:
        return None
    branch = fields[branch_idx]
    selected = values.get(branch.id)
    if not selected or not isinstance(selected, str):
        return None
    target_id = (branch.condition or {}).get(selected)
    if not target_id or _index_of(fields, target_id) == -1:
        return None
    return target_id


def resolve_visible_field_ids(fields: Sequence[FormField], values: Mapping[str, Any]) -> list[str]:
    """Compute the ordered list of field ids to present to the respondent.

    - Without a branching dropdown every field is visible in schema order.
    - With no usable answer on the branching dropdown only that dropdown is
      visible.
    - Otherwise the branching field comes first, then the selected jump
      target, then every field after the target except other jump targets.

    A jump target placed before the branching field is scanned from its own
    index, so fields between the two (the branching field included) are
    listed again.
    """
    branch_idx = find_branching_index(fields)
    if branch_idx is None:
        return [field.id for field in fields]

    targets = possible_jump_targets(fields)
    jump_target = selected_jump_target(fields, values, branch_idx)

    visible = [fields[branch_idx].id]
    if jump_target is None:
        return visible

    visible.append(jump_target)
    after_idx = _index_of(fields, jump_target) + 1
    for field in fields[after_idx:]:
        if field.id not in targets or field.id == jump_target:
            visible.append(field.id)
    logger.debug("visibility_resolved branch=%s target=%s visible=%s", fields[branch_idx].id, jump_target, visible)
    return visible


__all__ = [
    "possible_jump_targets",
    "find_branching_index",
    "selected_jump_target",
    "resolve_visible_field_ids",
]
