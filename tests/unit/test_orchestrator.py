from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from index_creator.config.loader import load_config
from index_creator.export.writer import ExportError
from index_creator.export.writer import write_exports as real_write_exports
from index_creator.models.processing_result import ProcessingResult
from index_creator.services.pipeline import run_pipeline as real_run_pipeline
from index_creator.services.orchestrator import (
    ProcessingError,
    build_all,
    check_all,
    scan_source_files,
)


def test_scan_source_files(temp_workdir: Path) -> None:
    data_dir = temp_workdir / "data"
    for name in ["b.md", "a.csv", "notes.txt", "a.source.csv", "a.expected.json", "img.png"]:
        (data_dir / name).write_text("x", encoding="utf-8")
    (data_dir / "sub").mkdir()
    (data_dir / "sub" / "nested.md").write_text("x", encoding="utf-8")

    files = scan_source_files(data_dir)

    assert [f.name for f in files] == ["a.csv", "b.md", "notes.txt"]


def test_scan_source_files_directory_not_found() -> None:
    with pytest.raises(ProcessingError, match="Directory not found"):
        scan_source_files(Path("/non/existent/path"))


def test_scan_source_files_not_a_directory(temp_workdir: Path) -> None:
    f = temp_workdir / "data" / "file.md"
    f.write_text("x", encoding="utf-8")
    with pytest.raises(ProcessingError, match="not a directory"):
        scan_source_files(f)


def test_build_all_empty_directory(temp_workdir: Path, write_config: Path) -> None:
    config = load_config(write_config)

    result = build_all(config)

    assert isinstance(result, ProcessingResult)
    assert result.success_files == 0
    assert result.failed_files == 0
    assert result.total_entries == 0
    assert result.throughput_entries_per_sec == 0.0
    assert result.file_stats == []
    # No anomalies -> no log file
    assert list((temp_workdir / "logs").iterdir()) == []


def test_build_all_writes_exports(temp_workdir: Path, write_config: Path, sample_index_files) -> None:
    config = load_config(write_config)

    result = build_all(config)

    assert result.success_files == 2
    assert result.failed_files == 0
    assert result.total_entries == 8
    assert result.ignored_rows == 2
    out = temp_workdir / "output"
    assert sorted(p.name for p in out.iterdir()) == [
        "red-team.csv",
        "red-team.json",
        "tools.csv",
        "tools.json",
    ]
    stats = {s.file_name: s for s in result.file_stats}
    assert stats["tools.md"].entries == 6
    assert stats["tools.md"].status == "success"
    assert stats["red-team.csv"].outputs == ("red-team.json", "red-team.csv")


def test_build_all_read_error_continues(temp_workdir: Path, write_config: Path, sample_index_files) -> None:
    config = load_config(write_config)
    (temp_workdir / "data" / "broken.md").write_bytes(b"\xff\xfe\xfa not utf-8")

    result = build_all(config)

    assert result.success_files == 2
    assert result.failed_files == 1
    logs = list((temp_workdir / "logs").glob("anomalies-*.log"))
    assert len(logs) == 1
    records = [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]
    assert [(r["file"], r["row"], r["anomaly_type"]) for r in records] == [("broken.md", -1, "READ_ERROR")]


def test_build_all_export_error_marks_file_failed(temp_workdir: Path, write_config: Path, sample_index_files) -> None:
    config = load_config(write_config)

    def fail_for_tools(state, output_dir, base_name, formats):
        if base_name == "tools":
            raise ExportError("disk full")
        return real_write_exports(state, output_dir, base_name, formats)

    with patch("index_creator.services.orchestrator.write_exports", side_effect=fail_for_tools):
        result = build_all(config)

    assert result.success_files == 1
    assert result.failed_files == 1
    failed = [s for s in result.file_stats if s.status == "failed"]
    assert [s.file_name for s in failed] == ["tools.md"]


def test_build_all_unexpected_pipeline_error_continues(
    temp_workdir: Path, write_config: Path, sample_index_files
) -> None:
    config = load_config(write_config)

    def fail_for_tools(text, source="<input>", **kwargs):
        if source == "tools.md":
            raise ValueError("boom")
        return real_run_pipeline(text, source=source, **kwargs)

    with patch("index_creator.services.orchestrator.run_pipeline", side_effect=fail_for_tools):
        result = build_all(config)

    assert result.success_files == 1
    assert result.failed_files == 1
    (log,) = (temp_workdir / "logs").glob("anomalies-*.log")
    records = [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]
    assert [(r["file"], r["row"], r["anomaly_type"]) for r in records] == [("tools.md", -1, "UNEXPECTED_ERROR")]
    assert "boom" in records[0]["message"]


def test_build_all_unexpected_export_error_marks_file_failed(
    temp_workdir: Path, write_config: Path, sample_index_files
) -> None:
    config = load_config(write_config)

    with patch("index_creator.services.orchestrator.write_exports", side_effect=KeyError("page")):
        result = build_all(config)

    assert result.success_files == 0
    assert result.failed_files == 2
    (log,) = (temp_workdir / "logs").glob("anomalies-*.log")
    types = {json.loads(line)["anomaly_type"] for line in log.read_text(encoding="utf-8").splitlines()}
    assert "UNEXPECTED_ERROR" in types


def test_build_all_logs_parse_anomalies(temp_workdir: Path, write_config: Path) -> None:
    config = load_config(write_config)
    (temp_workdir / "data" / "short.md").write_text(
        "| term | sub-term | notes | book | page |\n|---|---|---|---|---|\n| nmap | flags |\n",
        encoding="utf-8",
    )

    result = build_all(config)

    assert result.success_files == 1
    (log,) = (temp_workdir / "logs").glob("anomalies-*.log")
    record = json.loads(log.read_text(encoding="utf-8").splitlines()[0])
    assert record["anomaly_type"] == "SHORT_ROW"
    assert record["row"] == 3


def test_build_all_missing_directory(temp_workdir: Path, write_config: Path) -> None:
    write_config.write_text("source_directory: ./nope\n", encoding="utf-8")
    config = load_config(write_config)
    with pytest.raises(ProcessingError):
        build_all(config)


def test_check_all_skips_files_without_expected(temp_workdir: Path, write_config: Path, sample_index_files) -> None:
    config = load_config(write_config)

    result = check_all(config)

    assert result.skipped_files == 2
    assert result.success_files == 0
    assert result.failed_files == 0


def test_check_all_update_then_pass(temp_workdir: Path, write_config: Path, sample_index_files) -> None:
    config = load_config(write_config)

    updated = check_all(config, update="tools")
    expected_path = temp_workdir / "data" / "tools.expected.json"
    assert expected_path.exists()
    assert updated.success_files == 1
    assert updated.skipped_files == 1

    records = json.loads(expected_path.read_text(encoding="utf-8"))
    assert records[0] == {"term": "nmap", "subTerm": "flags", "notes": "", "book": 2, "page": "41"}

    result = check_all(config)
    assert result.success_files == 1
    assert result.failed_files == 0


def test_check_all_mismatch_fails(temp_workdir: Path, write_config: Path, sample_index_files) -> None:
    config = load_config(write_config)
    (temp_workdir / "data" / "tools.expected.json").write_text("[]\n", encoding="utf-8")

    result = check_all(config)

    assert result.failed_files == 1
    (log,) = (temp_workdir / "logs").glob("anomalies-*.log")
    record = json.loads(log.read_text(encoding="utf-8").splitlines()[0])
    assert record["anomaly_type"] == "CHECK_MISMATCH"
    assert record["file"] == "tools.md"


def test_check_all_unreadable_expected(temp_workdir: Path, write_config: Path, sample_index_files) -> None:
    config = load_config(write_config)
    (temp_workdir / "data" / "tools.expected.json").write_text("{not json", encoding="utf-8")

    result = check_all(config)

    assert result.failed_files == 1
