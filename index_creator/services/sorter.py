from __future__ import annotations

import unicodedata
from collections.abc import Iterable

from ..models.entry import Entry
from ..parsing.markdown import clean_strip_markdown, extract_page_start

"""Final ordering of entries: term, sub-term, then first page number.

Text comparison ignores inline markdown and compares like a locale collation
at its default strength: accents and case are ignored first, then accents
break ties, then case (lowercase before uppercase). Each field is compared
fully, case tie-break included, before the next one, so ``apple/z`` sorts
ahead of ``Apple/a``; this is how a default ``localeCompare`` on the term
behaves. Python's sort is stable, so fully equal keys keep their input order.
"""

__all__ = [
    "collation_key",
    "entry_sort_key",
    "sort_entries",
]


def collation_key(text: str) -> tuple[str, str, str]:
    stripped = clean_strip_markdown(text)
    decomposed = unicodedata.normalize("NFKD", stripped)
    base = "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()
    return (base, stripped.casefold(), stripped.swapcase())


def entry_sort_key(entry: Entry) -> tuple[tuple[str, str, str], tuple[str, str, str], int]:
    return (
        collation_key(entry.term),
        collation_key(entry.subTerm),
        extract_page_start(entry.page),
    )


def sort_entries(entries: Iterable[Entry]) -> tuple[Entry, ...]:
    return tuple(sorted(entries, key=entry_sort_key))
