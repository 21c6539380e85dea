from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone
from pathlib import Path

import pytest

from index_creator.models import (
    EMPTY_ENTRY,
    FIELDS,
    DividerMarker,
    Entry,
    FileStatus,
    IndexerConfig,
    PipelineState,
    ProcessingResult,
    RawRow,
    SourceFile,
)


def test_raw_row_get_defaults_to_empty_string():
    row = RawRow(values={"term": "nmap", "page": None})
    assert row.term == "nmap"
    assert row.sub_term == ""
    assert row.get("page") == ""
    assert row.get("unknown") == ""


def test_raw_row_with_values_maps_underscores():
    row = RawRow(values={"term": "a", "sub-term": "b"}, ignored=True, line_number=4)
    changed = row.with_values(sub_term="c", page="5")
    assert changed.sub_term == "c"
    assert changed.get("page") == "5"
    assert changed.ignored is True
    assert changed.line_number == 4
    # original untouched
    assert row.sub_term == "b"


def test_raw_row_as_dict_uses_fixed_field_order():
    row = RawRow(values={"page": "1", "term": "a", "extra": "x"})
    assert tuple(row.as_dict()) == FIELDS
    assert row.as_dict()["term"] == "a"


def test_models_are_frozen():
    with pytest.raises(FrozenInstanceError):
        EMPTY_ENTRY.term = "x"  # type: ignore[misc]
    with pytest.raises(FrozenInstanceError):
        PipelineState().collapsed = False  # type: ignore[misc]


def test_entry_and_divider_records():
    entry = Entry(term="a", subTerm="b", notes="c", book=1, page="2")
    assert entry.to_record() == {"term": "a", "subTerm": "b", "notes": "c", "book": 1, "page": "2"}
    assert DividerMarker(divider="A").to_record() == {"divider": "A"}


def test_pipeline_state_counts_ignored_source_rows():
    state = PipelineState(
        source_rows=(RawRow(values={"term": "?x"}, ignored=True), RawRow(values={"term": "y"}))
    )
    assert state.ignored_rows == 1
    assert state.collapsed is True
    assert state.has_dividers is False


def test_source_file_defaults():
    sf = SourceFile(path=Path("data/tools.md"), name="tools.md")
    assert sf.status == FileStatus.PENDING
    assert sf.base_name == "tools"
    assert sf.outputs == ()


def test_processing_result_total_files():
    now = datetime.now(timezone.utc)
    result = ProcessingResult(
        success_files=2,
        failed_files=1,
        total_entries=5,
        ignored_rows=0,
        start_time=now,
        end_time=now,
        elapsed_seconds=0.0,
        throughput_entries_per_sec=0.0,
        skipped_files=3,
    )
    assert result.total_files == 6
    assert result.file_stats is None


def test_indexer_config_defaults():
    cfg = IndexerConfig(source_directory="./data")
    assert cfg.exports == ("json", "csv")
    assert cfg.output_directory == "./output"
    assert cfg.log_directory == "./logs"
