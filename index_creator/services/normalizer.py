from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from itertools import accumulate

from ..models.entry import EMPTY_ENTRY, Entry
from ..models.row_data import FIELDS, RawRow
from ..parsing.markdown import extract_page_start

"""Rule normalizer: expanded rows -> Entry records.

Rules, first match wins, evaluated against the previous Entry (``last``):

1. only ``term`` given      -> term; book and page copied from ``last``
2. only ``sub-term`` given  -> sub-term; term, book and page copied from ``last``
3. anything else            -> term / sub-term / notes as written; book and page
                               from the row when present, else from ``last``

Comment rows are skipped and never become ``last``.
"""

__all__ = [
    "NormalizerState",
    "parse_book",
    "normalise_page_order",
    "build_entry",
    "normalize_rows",
]

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class NormalizerState:
    last: Entry = EMPTY_ENTRY
    emitted: Entry | None = None  # Entry built by this step, None for comment rows


def parse_book(raw: str, fallback: int) -> int:
    """Leading base-10 integer of ``raw`` (``"2b"`` -> 2), else ``fallback``."""
    match = _LEADING_INT.match(raw)
    if match is None:
        if raw.strip():
            logger.debug(f'non-numeric book "{raw}" -> keeping {fallback}')
        return fallback
    return int(match.group(1))


def normalise_page_order(page: str) -> str:
    """Reorder comma separated page segments by their lowest page number.

    ``"**30**, 4-6, 12"`` -> ``"4-6, 12, **30**"``. Markup is preserved and
    segments without digits go last; the sort is stable.
    """
    if not page:
        return ""
    segments = [segment.strip() for segment in page.split(",")]
    return ", ".join(sorted(segments, key=extract_page_start))


def build_entry(row: RawRow, last: Entry) -> Entry:
    raw = {name: row.get(name).strip() for name in FIELDS}
    given = {name for name, value in raw.items() if value}

    if given == {"term"}:
        return Entry(term=raw["term"], subTerm="", notes="", book=last.book, page=last.page)
    if given == {"sub-term"}:
        return Entry(term=last.term, subTerm=raw["sub-term"], notes="", book=last.book, page=last.page)

    book = parse_book(raw["book"], last.book) if raw["book"] else last.book
    page = normalise_page_order(raw["page"]) if raw["page"] else last.page
    return Entry(
        term=raw["term"],
        subTerm=raw["sub-term"],
        notes=raw["notes"],
        book=book,
        page=page,
    )


def _normalize_step(state: NormalizerState, row: RawRow) -> NormalizerState:
    if row.ignored:
        return NormalizerState(last=state.last)
    entry = build_entry(row, state.last)
    return NormalizerState(last=entry, emitted=entry)


def normalize_rows(rows: Iterable[RawRow]) -> tuple[Entry, ...]:
    """Fold rows into entries in input order (sorting is a separate stage)."""
    steps = accumulate(rows, _normalize_step, initial=NormalizerState())
    return tuple(step.emitted for step in steps if step.emitted is not None)
