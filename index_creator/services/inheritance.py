from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from itertools import accumulate

from ..models.row_data import FIELDS, RawRow
from ..parsing.markers import INHERIT_MARKER

"""Field inheritance resolver.

A cell holding ``^^`` copies the same field from the previous data row; a
blank ``term`` does the same implicitly. "Previous" is the last non-comment
row after its own inheritance was resolved. Comment rows pass through
untouched and never become the previous row.

Implemented as a fold over an immutable accumulator so the walk carries no
hidden state between calls. Each step state also holds the row it emitted;
``accumulate`` yields every step, so collecting the rows stays linear.
"""

__all__ = [
    "InheritanceState",
    "apply_field_inheritance",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InheritanceState:
    previous: Mapping[str, str] = field(default_factory=dict)  # Resolved values of the last data row
    row: RawRow | None = None  # Row emitted by this step


def _inherits(name: str, value: str) -> bool:
    return value == INHERIT_MARKER or (name == "term" and value == "")


def _inherit_step(state: InheritanceState, row: RawRow) -> InheritanceState:
    if row.ignored:
        return InheritanceState(previous=state.previous, row=row)

    changes: dict[str, str] = {}
    for name in FIELDS:
        if _inherits(name, row.get(name).strip()):
            changes[name] = state.previous.get(name, "")
            logger.debug(
                f'Row {row.line_number}: copying "{name}" from previous row -> "{changes[name]}"'
            )
    resolved = row.with_values(**changes) if changes else row
    return InheritanceState(previous=resolved.as_dict(), row=resolved)


def apply_field_inheritance(rows: Iterable[RawRow]) -> tuple[RawRow, ...]:
    steps = accumulate(rows, _inherit_step, initial=InheritanceState())
    next(steps)  # seed state
    return tuple(step.row for step in steps)
