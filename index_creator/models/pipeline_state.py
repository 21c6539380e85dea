from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .anomaly_record import AnomalyRecord
from .entry import Entry
from .row_data import RawRow

"""Caller-owned state threaded through the pipeline stages.

Every stage takes a PipelineState and returns a new one; nothing is kept in
module globals, so independent runs never share state.
"""

__all__ = [
    "ParseResult",
    "PipelineState",
]


@dataclass(frozen=True)
class ParseResult:
    """Output of the table parser."""
    rows: tuple[RawRow, ...]
    metadata: dict[str, Any] | None = None
    format: str = "markdown"  # Format actually used ("markdown" | "csv")
    has_header: bool = True
    anomalies: tuple[AnomalyRecord, ...] = ()


@dataclass(frozen=True)
class PipelineState:
    source: str = "<input>"  # File name used in anomaly records and log lines
    source_rows: tuple[RawRow, ...] = ()  # Rows exactly as parsed (round-trip export)
    metadata: dict[str, Any] | None = None
    replacements: dict[str, str] = field(default_factory=dict)
    rows: tuple[RawRow, ...] = ()
    entries: tuple[Entry, ...] = ()
    anomalies: tuple[AnomalyRecord, ...] = ()
    collapsed: bool = True
    has_dividers: bool = False

    @property
    def ignored_rows(self) -> int:
        return sum(1 for r in self.source_rows if r.ignored)
