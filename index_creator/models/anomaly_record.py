from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""AnomalyRecord model for the anomaly log.

The pipeline never rejects input: short rows, malformed metadata lines and
file-level read/write failures are absorbed and reported as AnomalyRecord
entries instead. Records serialize to a fixed JSON Lines schema.

row=-1 is the sentinel for file-level anomalies where no source line applies.
"""

__all__ = [
    "AnomalyRecord",
]


@dataclass(frozen=True)
class AnomalyRecord:
    """Structured anomaly record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Source file name (or "<input>" for pasted text)
        row: 1-based source line number, -1 when unknown / file-level
        anomaly_type: Classification in UPPER_SNAKE_CASE format
        message: Human readable description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int
    anomaly_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, row: int, anomaly_type: str, message: str) -> AnomalyRecord:
        """Create a new AnomalyRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return AnomalyRecord(
            timestamp=ts,
            file=file,
            row=row,
            anomaly_type=anomaly_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON line (no keys beyond the dataclass fields)."""
        return json.dumps(asdict(self), ensure_ascii=False)
