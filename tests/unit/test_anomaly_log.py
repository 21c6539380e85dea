from __future__ import annotations
import json
from pathlib import Path
from index_creator.logging.anomaly_log import AnomalyLogBuffer, AnomalyRecord

SCHEMA_KEYS = {"timestamp", "file", "row", "anomaly_type", "message"}


def test_anomaly_record_creation_and_json_line():
    rec = AnomalyRecord.create(
        file="tools.md",
        row=10,
        anomaly_type="SHORT_ROW",
        message="expected 5 cells, got 2",
    )
    data = json.loads(rec.to_json_line())
    assert data["file"] == "tools.md"
    assert data["row"] == 10
    assert data["anomaly_type"] == "SHORT_ROW"
    assert data["message"] == "expected 5 cells, got 2"
    assert "timestamp" in data and data["timestamp"].endswith("Z")
    assert set(data.keys()) == SCHEMA_KEYS


def test_json_line_keeps_non_ascii():
    rec = AnomalyRecord.create("résumé.md", -1, "READ_ERROR", "bad")
    assert "résumé.md" in rec.to_json_line()


def test_anomaly_log_buffer_flush(temp_workdir: Path):
    buf = AnomalyLogBuffer(temp_workdir / "logs")
    buf.append(AnomalyRecord.create("a.csv", 2, "INVALID_METADATA", "bad json"))
    buf.extend([AnomalyRecord.create("a.csv", 4, "SHORT_ROW", "expected 5 cells, got 1")])
    path = buf.flush()

    assert path is not None and path.exists()
    assert path.parent == temp_workdir / "logs"
    assert path.name.startswith("anomalies-") and path.suffix == ".log"
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        assert set(json.loads(raw).keys()) == SCHEMA_KEYS
    # buffer is cleared after flush
    assert len(buf) == 0


def test_empty_buffer_writes_nothing(temp_workdir: Path):
    buf = AnomalyLogBuffer(temp_workdir / "fresh")
    assert buf.flush() is None
    assert not (temp_workdir / "fresh").exists()


def test_anomaly_log_buffer_multiple_flushes(temp_workdir: Path):
    buf = AnomalyLogBuffer(temp_workdir / "logs")
    buf.append(AnomalyRecord.create("a.md", 1, "SHORT_ROW", "x"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(AnomalyRecord.create("a.md", 2, "SHORT_ROW", "y"))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1
