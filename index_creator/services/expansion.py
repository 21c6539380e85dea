from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from itertools import product

from ..models.row_data import FIELDS, ExpandedRow, RawRow
from ..parsing.markers import FLIP_MARKER, SPLIT_MARKER

"""Row expander: flip (``<>``) and split (``&&``) markers.

Flip turns one row into the row itself plus a copy with term and sub-term
swapped. Split treats ``&&`` as an alternatives delimiter in any field and
emits the cartesian product of all fields' alternatives. Flip runs first, so
both flipped rows are split independently.
"""

__all__ = [
    "expand_flipped_rows",
    "expand_split_rows",
    "expand_rows",
]

logger = logging.getLogger(__name__)


def _iter_flipped(rows: Iterable[RawRow]) -> Iterator[ExpandedRow]:
    for row in rows:
        term = row.term.strip()
        sub_term = row.sub_term.strip()
        if FLIP_MARKER not in term and FLIP_MARKER not in sub_term:
            yield row
            continue
        clean_term = term.replace(FLIP_MARKER, "").strip()
        clean_sub_term = sub_term.replace(FLIP_MARKER, "").strip()
        logger.debug(f'Row {row.line_number}: flipping "{clean_term}" <> "{clean_sub_term}"')
        yield row.with_values(term=clean_term, sub_term=clean_sub_term)
        yield row.with_values(term=clean_sub_term, sub_term=clean_term)


def expand_flipped_rows(rows: Iterable[RawRow]) -> tuple[ExpandedRow, ...]:
    return tuple(_iter_flipped(rows))


def _candidates(value: str) -> list[str]:
    if SPLIT_MARKER in value:
        return [part.strip() for part in value.split(SPLIT_MARKER)]
    return [value.strip()]


def _iter_split(rows: Iterable[RawRow]) -> Iterator[ExpandedRow]:
    for row in rows:
        candidates = [_candidates(row.get(name)) for name in FIELDS]
        for combination in product(*candidates):
            yield ExpandedRow(
                values=dict(zip(FIELDS, combination)),
                ignored=row.ignored,
                line_number=row.line_number,
            )


def expand_split_rows(rows: Iterable[RawRow]) -> tuple[ExpandedRow, ...]:
    return tuple(_iter_split(rows))


def expand_rows(rows: Iterable[RawRow]) -> tuple[ExpandedRow, ...]:
    """Flip, then split."""
    return expand_split_rows(_iter_flipped(rows))
