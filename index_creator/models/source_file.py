from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

"""SourceFile domain model and FileStatus enum.

SourceFile is the processing context for one authored index file during a
batch build or check run, tracking its status from pending to success/failed.
"""


class FileStatus(Enum):
    """Status enum for SourceFile processing lifecycle.

    State transitions: pending → processing → (success | failed | skipped)

    - PENDING: File discovered but not yet processed
    - PROCESSING: File is currently being processed
    - SUCCESS: Pipeline ran and all exports were written (or the check passed)
    - FAILED: Read/write failure, or expected output mismatch in check mode
    - SKIPPED: Check mode only, no ``<name>.expected.json`` beside the file
    """
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class SourceFile:
    """Processing context for a single index source file."""
    path: Path                          # Full path to the source file
    name: str                           # File name
    start_time: datetime | None = None  # Processing start (UTC)
    end_time: datetime | None = None    # Processing end (UTC)
    status: FileStatus = FileStatus.PENDING
    entries: int = 0                    # Entries produced by the pipeline
    ignored_rows: int = 0               # Comment rows seen while parsing
    outputs: tuple[Path, ...] = ()      # Export files written
    error: str | None = None            # Failure reason summary

    @property
    def base_name(self) -> str:
        return self.path.stem
