from __future__ import annotations

import re
from datetime import datetime, timezone

import pytest

from index_creator.models.processing_result import ProcessingResult
from index_creator.services.summary import _format_number, render_summary_line

"""Unit tests for the SUMMARY line renderer."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+files=([0-9]+)/(\1)\s+success=([0-9]+)\s+failed=([0-9]+)\s+"
    r"skipped=([0-9]+)\s+entries=([0-9]+)\s+ignored_rows=([0-9]+)\s+"
    r"elapsed_sec=([0-9]+\.?[0-9]*)\s+throughput_eps=([0-9]+\.?[0-9]*)$"
)

START = datetime(2025, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
END = datetime(2025, 1, 1, 10, 0, 2, tzinfo=timezone.utc)


def _result(**overrides) -> ProcessingResult:
    values = dict(
        success_files=2,
        failed_files=0,
        total_entries=1000,
        ignored_rows=3,
        start_time=START,
        end_time=END,
        elapsed_seconds=2.0,
        throughput_entries_per_sec=500.0,
    )
    values.update(overrides)
    return ProcessingResult(**values)


def test_render_summary_line_all_success():
    line = render_summary_line(_result())
    match = SUMMARY_PATTERN.match(line)
    assert match, f"SUMMARY line should match regex: {line}"
    assert line == (
        "SUMMARY files=2/2 success=2 failed=0 skipped=0 entries=1000 ignored_rows=3 "
        "elapsed_sec=2 throughput_eps=500"
    )


def test_render_summary_line_counts_failed_and_skipped_in_total():
    line = render_summary_line(_result(success_files=1, failed_files=1, skipped_files=2))
    match = SUMMARY_PATTERN.match(line)
    assert match
    assert match.group(1) == "4"
    assert match.group(4) == "1"
    assert match.group(5) == "2"


def test_render_summary_line_no_files():
    line = render_summary_line(
        _result(success_files=0, total_entries=0, ignored_rows=0, elapsed_seconds=0.0, throughput_entries_per_sec=0.0)
    )
    assert line.startswith("SUMMARY files=0/0 success=0 failed=0 skipped=0 entries=0")
    assert SUMMARY_PATTERN.match(line)


@pytest.mark.parametrize(
    "value,expected",
    [(0, "0"), (2.0, "2"), (0.84, "0.84"), (1234.56789, "1234.568"), (0.0001234, "0.000123")],
)
def test_format_number(value: float, expected: str):
    assert _format_number(value) == expected
