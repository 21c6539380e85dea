from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path

from ..export.writer import ExportError, entries_to_records, write_exports
from ..logging.anomaly_log import AnomalyLogBuffer, AnomalyRecord
from ..models.config_models import IndexerConfig
from ..models.pipeline_state import PipelineState
from ..models.processing_result import FileStat, ProcessingResult
from ..models.source_file import FileStatus, SourceFile
from .pipeline import run_pipeline
from .progress import ProgressTracker

"""Batch orchestration over a directory of index sources.

- ``build_all``: run the pipeline for every source file and write the
  configured exports. A file that cannot be read or written, or that hits an
  unexpected error, is marked failed and the run continues with the next one.
- ``check_all``: regression mode. Each source with a sibling
  ``<name>.expected.json`` is run and its entries compared with that file;
  ``update=<name>`` rewrites the expected output instead of comparing.

Both return a ProcessingResult and flush the anomaly log once at the end.
"""

__all__ = [
    "ProcessingError",
    "SOURCE_SUFFIXES",
    "scan_source_files",
    "read_source",
    "run_source_file",
    "build_all",
    "check_all",
]

logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".md", ".txt", ".csv")
_EXPORT_SUFFIX = ".source.csv"
EXPECTED_SUFFIX = ".expected.json"


class ProcessingError(Exception):
    """Fatal error that prevents a run from starting."""


def scan_source_files(directory: Path) -> list[Path]:
    """Source files in ``directory`` (non-recursive), sorted by name.

    Raises:
        ProcessingError: If the directory is missing or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            p
            for p in directory.iterdir()
            if p.is_file() and p.suffix in SOURCE_SUFFIXES and not p.name.endswith(_EXPORT_SUFFIX)
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def read_source(path: Path) -> str:
    return path.read_text(encoding="utf-8-sig")


def run_source_file(path: Path, config: IndexerConfig, text: str | None = None) -> PipelineState:
    if text is None:
        text = read_source(path)
    return run_pipeline(
        text,
        fmt=config.input_format,
        has_header=config.has_header,
        source=path.name,
        collapsed=config.collapsed,
        dividers=config.dividers,
    )


def _failed(source: SourceFile, anomaly_log: AnomalyLogBuffer, anomaly_type: str, message: str) -> SourceFile:
    anomaly_log.append(AnomalyRecord.create(source.name, -1, anomaly_type, message))
    logger.error(f"{source.name}: {message}")
    return replace(source, status=FileStatus.FAILED, end_time=datetime.now(UTC), error=message)


def _load(source: SourceFile, config: IndexerConfig, anomaly_log: AnomalyLogBuffer) -> PipelineState | SourceFile:
    try:
        text = read_source(source.path)
    except (OSError, UnicodeDecodeError) as e:
        return _failed(source, anomaly_log, "READ_ERROR", f"cannot read source: {e}")
    try:
        state = run_source_file(source.path, config, text)
    except Exception as e:
        # Unexpected errors
        return _failed(source, anomaly_log, "UNEXPECTED_ERROR", f"pipeline failed: {e}")
    anomaly_log.extend(state.anomalies)
    return state


def _build_single_file(path: Path, config: IndexerConfig, anomaly_log: AnomalyLogBuffer) -> SourceFile:
    source = SourceFile(path=path, name=path.name, start_time=datetime.now(UTC), status=FileStatus.PROCESSING)
    loaded = _load(source, config, anomaly_log)
    if isinstance(loaded, SourceFile):
        return loaded
    state = loaded

    try:
        exported = write_exports(state, Path(config.output_directory), source.base_name, config.exports)
    except ExportError as e:
        return _failed(source, anomaly_log, "EXPORT_ERROR", str(e))
    except Exception as e:
        return _failed(source, anomaly_log, "UNEXPECTED_ERROR", f"export failed: {e}")

    logger.info(f"{source.name}: {len(state.entries)} entries -> {', '.join(p.name for p in exported.outputs)}")
    return replace(
        source,
        status=FileStatus.SUCCESS,
        end_time=datetime.now(UTC),
        entries=len(state.entries),
        ignored_rows=state.ignored_rows,
        outputs=exported.outputs,
    )


def _first_difference(actual: list[dict[str, object]], expected: object) -> str:
    if not isinstance(expected, list):
        return "expected output is not a JSON list"
    for i, (a, e) in enumerate(zip(actual, expected)):
        if a != e:
            return f"entry {i}: expected {e} received {a}"
    return f"expected {len(expected)} entries, received {len(actual)}"


def _check_single_file(
    path: Path, config: IndexerConfig, anomaly_log: AnomalyLogBuffer, update: str | None
) -> SourceFile:
    source = SourceFile(path=path, name=path.name, start_time=datetime.now(UTC), status=FileStatus.PROCESSING)
    expected_path = path.with_name(f"{source.base_name}{EXPECTED_SUFFIX}")
    updating = update == source.base_name

    if not expected_path.exists() and not updating:
        logger.warning(f'Skipping "{source.name}": no matching expected output')
        return replace(source, status=FileStatus.SKIPPED, end_time=datetime.now(UTC))

    loaded = _load(source, config, anomaly_log)
    if isinstance(loaded, SourceFile):
        return loaded
    state = loaded
    actual = entries_to_records(state.entries)
    done = replace(source, entries=len(state.entries), ignored_rows=state.ignored_rows)

    if updating:
        try:
            expected_path.write_text(json.dumps(actual, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        except OSError as e:
            return _failed(done, anomaly_log, "EXPORT_ERROR", f"cannot write {expected_path.name}: {e}")
        logger.info(f'Updated expected output for "{source.base_name}"')
        return replace(done, status=FileStatus.SUCCESS, end_time=datetime.now(UTC), outputs=(expected_path,))

    try:
        expected = json.loads(expected_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        return _failed(done, anomaly_log, "READ_ERROR", f"cannot read {expected_path.name}: {e}")

    if actual != expected:
        return _failed(done, anomaly_log, "CHECK_MISMATCH", _first_difference(actual, expected))
    logger.info(f"{source.base_name} passed")
    return replace(done, status=FileStatus.SUCCESS, end_time=datetime.now(UTC))


def _run(
    config: IndexerConfig,
    per_file: Callable[[Path, IndexerConfig, AnomalyLogBuffer], SourceFile],
    description: str,
) -> ProcessingResult:
    start_time = datetime.now(UTC)
    anomaly_log = AnomalyLogBuffer(Path(config.log_directory))

    file_paths = scan_source_files(Path(config.source_directory))

    results: list[SourceFile] = []
    with ProgressTracker(len(file_paths), description=description) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            result = per_file(file_path, config, anomaly_log)
            results.append(result)
            progress.set_postfix(
                success=sum(r.status == FileStatus.SUCCESS for r in results),
                failed=sum(r.status == FileStatus.FAILED for r in results),
            )
            progress.finish_file(success=result.status == FileStatus.SUCCESS)

    try:
        log_path = anomaly_log.flush()
    except OSError as e:
        # The run result stands even if the anomaly log cannot be written
        logger.warning(f"cannot write anomaly log: {e}")
    else:
        if log_path is not None:
            logger.info(f"anomalies written to {log_path}")

    return _aggregate(results, start_time)


def _aggregate(results: list[SourceFile], start_time: datetime) -> ProcessingResult:
    end_time = datetime.now(UTC)
    elapsed = (end_time - start_time).total_seconds()
    succeeded = [r for r in results if r.status == FileStatus.SUCCESS]
    total_entries = sum(r.entries for r in succeeded)

    file_stats = [
        FileStat(
            file_name=r.name,
            status=r.status.value,
            entries=r.entries,
            elapsed_seconds=((r.end_time or end_time) - (r.start_time or start_time)).total_seconds(),
            outputs=tuple(p.name for p in r.outputs),
        )
        for r in results
    ]
    return ProcessingResult(
        success_files=len(succeeded),
        failed_files=sum(r.status == FileStatus.FAILED for r in results),
        skipped_files=sum(r.status == FileStatus.SKIPPED for r in results),
        total_entries=total_entries,
        ignored_rows=sum(r.ignored_rows for r in results),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed,
        throughput_entries_per_sec=total_entries / elapsed if elapsed > 0 else 0.0,
        file_stats=file_stats,
    )


def build_all(config: IndexerConfig) -> ProcessingResult:
    """Build every source file in ``config.source_directory``.

    Raises:
        ProcessingError: If the source directory is missing or unreadable
    """
    return _run(config, _build_single_file, "Indexing files")


def check_all(config: IndexerConfig, update: str | None = None) -> ProcessingResult:
    """Compare every source file against its ``.expected.json``.

    Raises:
        ProcessingError: If the source directory is missing or unreadable
    """

    def _check(path: Path, cfg: IndexerConfig, anomaly_log: AnomalyLogBuffer) -> SourceFile:
        return _check_single_file(path, cfg, anomaly_log, update)

    return _run(config, _check, "Checking files")
