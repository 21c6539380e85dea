from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..models.anomaly_record import AnomalyRecord

"""Anomaly log buffering.

- JSON Lines with a fixed schema (no extra keys)
- One ``anomalies-YYYYMMDD-HHMMSS.log`` (UTC) per run, created on first flush
- Records are buffered and written once at the end of a run
"""

__all__ = [
    "AnomalyRecord",
    "AnomalyLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class AnomalyLogBuffer:
    """In-memory buffer for anomaly records. Flush appends JSON Lines.

    The file path is fixed on first access; runs are serial so no locking.
    """

    def __init__(self, directory: Path | None = None) -> None:
        self._directory = directory if directory is not None else LOGS_DIR
        self._records: list[AnomalyRecord] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._directory.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._directory / f"anomalies-{stamp}.log"
        return self._file_path

    def append(self, record: AnomalyRecord) -> None:
        self._records.append(record)

    def extend(self, records: Iterable[AnomalyRecord]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the log path, or None when nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
