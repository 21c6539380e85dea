from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Union

"""Entry and DividerMarker output records.

Entry is the finalized, normalized index record produced by the rule
normalizer. DividerMarker is a grouping decoration inserted by export
adapters; it shares the output sequence type with Entry.
"""

__all__ = [
    "Entry",
    "DividerMarker",
    "IndexItem",
    "EMPTY_ENTRY",
]


@dataclass(frozen=True)
class Entry:
    """Final index record.

    ``page`` is display-ready: comma separated, already ordered by the lowest
    page number of each segment. Consumers must not re-sort it.
    """
    term: str
    subTerm: str  # noqa: N815 - matches the exported record key
    notes: str
    book: int
    page: str

    def to_record(self) -> dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class DividerMarker:
    """Group separator keyed by the leading character of the following terms."""
    divider: str

    def to_record(self) -> dict[str, object]:
        return {"divider": self.divider}


IndexItem = Union[Entry, DividerMarker]

# Running "last" entry before any row has been normalized
EMPTY_ENTRY = Entry(term="", subTerm="", notes="", book=0, page="")
