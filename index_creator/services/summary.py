from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering for build / check runs."""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Avoid scientific notation for very small values
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for a run.

    Format::

        SUMMARY files={total}/{total} success={success} failed={failed} skipped={skipped}
        entries={entries} ignored_rows={ignored} elapsed_sec={elapsed} throughput_eps={throughput}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2025, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2025, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=0, total_entries=40,
        ...     ignored_rows=2, start_time=start, end_time=end,
        ...     elapsed_seconds=2.0, throughput_entries_per_sec=20.0
        ... )
        >>> render_summary_line(result)
        'SUMMARY files=1/1 success=1 failed=0 skipped=0 entries=40 ignored_rows=2 elapsed_sec=2 throughput_eps=20'
    """
    total = result.total_files
    return (
        f"SUMMARY files={total}/{total} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"skipped={result.skipped_files} "
        f"entries={result.total_entries} "
        f"ignored_rows={result.ignored_rows} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"throughput_eps={_format_number(result.throughput_entries_per_sec)}"
    )
