from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result models for batch build / check runs.

ProcessingResult aggregates the per-file outcome of one run and carries the
numbers rendered on the SUMMARY line.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics (internal helper for ProcessingResult)."""
    file_name: str
    status: str  # success/failed/skipped
    entries: int
    elapsed_seconds: float
    outputs: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of a run."""
    success_files: int
    failed_files: int
    total_entries: int
    ignored_rows: int  # Comment rows across all files
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_entries_per_sec: float
    skipped_files: int = 0  # Check mode: no expected output to compare against
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files + self.skipped_files
