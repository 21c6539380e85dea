from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace

"""RawRow model for the index pipeline.

RawRow represents a single data line of the authored table after parsing.
Rows are immutable: resolver stages return new rows via ``with_values`` so the
rows captured straight after parsing stay available for round-trip export.
"""

__all__ = [
    "FIELDS",
    "TEXT_FIELDS",
    "RawRow",
    "ExpandedRow",
]

# Default column order for header-less input
FIELDS: tuple[str, ...] = ("term", "sub-term", "notes", "book", "page")

# Fields that may carry shorthand definitions / substitutions
TEXT_FIELDS: tuple[str, ...] = ("term", "sub-term", "notes")


@dataclass(frozen=True)
class RawRow:
    """One authored row: field name -> string, plus the comment flag.

    ``line_number`` is the 1-based line in the source text. Rows derived by
    expansion keep the line number of the row they came from.
    """
    values: Mapping[str, str]  # Header name -> cell text
    ignored: bool = False  # Comment row (term starts with '?')
    line_number: int = 0

    def get(self, name: str) -> str:
        return self.values.get(name, "") or ""

    @property
    def term(self) -> str:
        return self.get("term")

    @property
    def sub_term(self) -> str:
        return self.get("sub-term")

    def with_values(self, **changes: str) -> RawRow:
        """Return a copy with the given fields replaced.

        Keyword names use underscores for hyphens (``sub_term`` -> ``sub-term``).
        """
        merged = dict(self.values)
        for key, value in changes.items():
            merged[key.replace("_", "-")] = value
        return replace(self, values=merged)

    def as_dict(self) -> dict[str, str]:
        return {name: self.get(name) for name in FIELDS}


# Same shape; produced 1:N by the row expander
ExpandedRow = RawRow
