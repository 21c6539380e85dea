from __future__ import annotations

import csv
import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.config_models import EXPORT_FORMATS
from ..models.entry import DividerMarker, Entry, IndexItem
from ..models.pipeline_state import PipelineState
from ..models.row_data import FIELDS, RawRow
from ..parsing.markdown import clean_strip_markdown, strip_markdown
from ..parsing.markers import META_MARKER

"""Export adapters for pipeline output.

- JSON: the sorted entries as records (``term, subTerm, notes, book, page``),
  optionally with ``{"divider": c}`` records between letter groups.
- Display CSV / XLSX: what the rendered table shows, with headers
  ``Term, Sub-term, Notes, Book, Page``, markdown stripped from text columns
  and repeated term / sub-term cells blanked in collapsed view.
- Source CSV: the rows exactly as parsed (before any marker was resolved)
  plus the ``?meta:`` line, so re-importing reproduces the same input.
"""

__all__ = [
    "ExportError",
    "ExportResult",
    "DISPLAY_COLUMNS",
    "collapse_entries",
    "insert_dividers",
    "view_items",
    "entries_to_records",
    "entries_to_frame",
    "source_rows_to_frame",
    "render_source_csv",
    "write_json",
    "write_display_csv",
    "write_xlsx",
    "write_source_csv",
    "write_exports",
]

DISPLAY_COLUMNS: tuple[str, ...] = ("Term", "Sub-term", "Notes", "Book", "Page")


class ExportError(Exception):
    pass


@dataclass(frozen=True)
class ExportResult:
    outputs: tuple[Path, ...]


def insert_dividers(entries: Iterable[Entry]) -> list[IndexItem]:
    """Insert a DividerMarker before each run of terms with a new leading character."""
    items: list[IndexItem] = []
    current: str | None = None
    for entry in entries:
        term = clean_strip_markdown(entry.term).strip()
        leading = term[:1].upper()
        if leading and leading != current:
            items.append(DividerMarker(divider=leading))
            current = leading
        items.append(entry)
    return items


def collapse_entries(items: Iterable[IndexItem]) -> list[IndexItem]:
    """Blank a term equal to the previous entry's, and a sub-term when both repeat."""
    collapsed: list[IndexItem] = []
    last_term: str | None = None
    last_sub_term: str | None = None
    for item in items:
        if isinstance(item, DividerMarker):
            collapsed.append(item)
            continue
        same_term = item.term == last_term
        collapsed.append(
            Entry(
                term="" if same_term else item.term,
                subTerm="" if same_term and item.subTerm == last_sub_term else item.subTerm,
                notes=item.notes,
                book=item.book,
                page=item.page,
            )
        )
        last_term = item.term
        last_sub_term = item.subTerm
    return collapsed


def view_items(entries: Sequence[Entry], collapsed: bool, dividers: bool) -> list[IndexItem]:
    items: list[IndexItem] = insert_dividers(entries) if dividers else list(entries)
    return collapse_entries(items) if collapsed else items


def entries_to_records(items: Iterable[IndexItem]) -> list[dict[str, Any]]:
    return [item.to_record() for item in items]


def entries_to_frame(entries: Sequence[Entry], collapsed: bool = False, dividers: bool = False) -> pd.DataFrame:
    """Display table as a DataFrame (markdown stripped from the text columns)."""
    records: list[list[Any]] = []
    for item in view_items(entries, collapsed, dividers):
        if isinstance(item, DividerMarker):
            records.append([item.divider, "", "", "", ""])
            continue
        records.append(
            [
                strip_markdown(item.term),
                strip_markdown(item.subTerm),
                strip_markdown(item.notes),
                item.book,
                item.page,
            ]
        )
    return pd.DataFrame(records, columns=list(DISPLAY_COLUMNS))


def source_rows_to_frame(rows: Iterable[RawRow]) -> pd.DataFrame:
    return pd.DataFrame([[row.get(name) for name in FIELDS] for row in rows], columns=list(FIELDS))


def render_source_csv(rows: Iterable[RawRow], metadata: dict[str, Any] | None = None) -> str:
    """Round-trip CSV text: header, optional ``?meta:`` line, original rows."""
    df = source_rows_to_frame(rows)
    header = df.iloc[:0].to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    body = df.to_csv(index=False, header=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    meta = f"{META_MARKER} {json.dumps(metadata, ensure_ascii=False)}\n" if metadata else ""
    return header + meta + body


def _write_text(path: Path, text: str) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise ExportError(f"failed writing {path}: {e}") from e
    return path


def write_json(path: Path, entries: Sequence[Entry], dividers: bool = False) -> Path:
    items = insert_dividers(entries) if dividers else list(entries)
    return _write_text(path, json.dumps(entries_to_records(items), indent=2, ensure_ascii=False) + "\n")


def write_display_csv(path: Path, entries: Sequence[Entry], collapsed: bool = True, dividers: bool = False) -> Path:
    df = entries_to_frame(entries, collapsed=collapsed, dividers=dividers)
    return _write_text(path, df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n"))


def write_xlsx(path: Path, entries: Sequence[Entry], collapsed: bool = True, dividers: bool = False) -> Path:
    df = entries_to_frame(entries, collapsed=collapsed, dividers=dividers)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Index", index=False)
    except OSError as e:
        raise ExportError(f"failed writing {path}: {e}") from e
    return path


def write_source_csv(path: Path, rows: Iterable[RawRow], metadata: dict[str, Any] | None = None) -> Path:
    return _write_text(path, render_source_csv(rows, metadata))


def write_exports(state: PipelineState, output_dir: Path, base_name: str, formats: Iterable[str]) -> ExportResult:
    """Write every requested format for one pipeline run.

    Output names: ``<base>.json``, ``<base>.csv``, ``<base>.xlsx`` and
    ``<base>.source.csv``.
    """
    formats = tuple(formats)
    unknown = [fmt for fmt in formats if fmt not in EXPORT_FORMATS]
    if unknown:
        raise ExportError(f"unknown export format: {', '.join(unknown)}")

    outputs: list[Path] = []
    for fmt in formats:
        if fmt == "json":
            outputs.append(write_json(output_dir / f"{base_name}.json", state.entries, state.has_dividers))
        elif fmt == "csv":
            outputs.append(
                write_display_csv(output_dir / f"{base_name}.csv", state.entries, state.collapsed, state.has_dividers)
            )
        elif fmt == "xlsx":
            outputs.append(
                write_xlsx(output_dir / f"{base_name}.xlsx", state.entries, state.collapsed, state.has_dividers)
            )
        elif fmt == "source":
            outputs.append(write_source_csv(output_dir / f"{base_name}.source.csv", state.source_rows, state.metadata))
    return ExportResult(outputs=tuple(outputs))
