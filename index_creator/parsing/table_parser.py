from __future__ import annotations

import csv
import json
import logging
import re
from typing import Any

from ..models.anomaly_record import AnomalyRecord
from ..models.pipeline_state import ParseResult
from ..models.row_data import FIELDS, RawRow
from .markers import COMMENT_MARKER, META_MARKER

"""Table parser: pasted Markdown / CSV text -> RawRow sequence.

Markdown: first non-blank line is the header (outer pipes stripped, cells
trimmed), the second line is the divider and is always skipped, the rest are
data. Without a header the fixed column order ``FIELDS`` is assumed.

CSV: RFC4180-style quoting per line, optional header row, optional
``?meta: {...}`` line as the first data line which is consumed into the
metadata side-channel.

Parsing is permissive. Short rows are padded with empty strings and a bad
metadata payload is logged and dropped; nothing here raises on bad input.
"""

__all__ = [
    "MARKDOWN",
    "CSV",
    "detect_format",
    "detect_header",
    "tokenize_csv_line",
    "parse_table",
]

logger = logging.getLogger(__name__)

MARKDOWN = "markdown"
CSV = "csv"

_OUTER_PIPES = re.compile(r"^\||\|$")
_DIVIDER_LINE = re.compile(r"^[\s|:]*-[-\s|:]*$")


def detect_format(text: str) -> str:
    """CSV when the text has a comma and no pipe, Markdown otherwise."""
    trimmed = text.strip()
    if "," in trimmed and "|" not in trimmed:
        return CSV
    return MARKDOWN


def _split_markdown_cells(line: str) -> list[str]:
    return [c.strip() for c in _OUTER_PIPES.sub("", line).split("|")]


def tokenize_csv_line(line: str) -> list[str]:
    """Split one CSV line into trimmed cells.

    Double-quoted cells may contain commas and ``""`` escaped quotes, and may
    follow a space after the comma. An unterminated quote simply runs to the
    end of the line.
    """
    try:
        cells = next(csv.reader([line], skipinitialspace=True), [])
    except csv.Error as e:
        logger.debug(f"csv tokenizer fallback for line {line!r}: {e}")
        cells = line.split(",")
    return [c.strip() for c in cells]


def detect_header(lines: list[str], fmt: str) -> bool:
    """Guess header presence from the first (two) non-blank lines."""
    if not lines:
        return False
    if fmt == CSV:
        first = {c.lower() for c in tokenize_csv_line(lines[0])}
        return all(name in first for name in FIELDS)
    if len(lines) < 2:
        return False
    return "|" in lines[0] and bool(_DIVIDER_LINE.match(lines[1]))


def _build_row(
    header: list[str],
    cells: list[str],
    line_number: int,
    source: str,
    anomalies: list[AnomalyRecord],
) -> RawRow:
    if len(cells) < len(header):
        logger.debug(f"{source}:{line_number} short row ({len(cells)}/{len(header)} cells)")
        anomalies.append(
            AnomalyRecord.create(
                source,
                line_number,
                "SHORT_ROW",
                f"expected {len(header)} cells, got {len(cells)}",
            )
        )
    values = {name: (cells[i] if i < len(cells) else "") for i, name in enumerate(header)}
    term = values.get("term", "").strip()
    ignored = term.startswith(COMMENT_MARKER)
    if ignored:
        logger.debug(f"Ignoring row: {term}")
    return RawRow(values=values, ignored=ignored, line_number=line_number)


def _parse_metadata(
    payload: str, line_number: int, source: str, anomalies: list[AnomalyRecord]
) -> dict[str, Any] | None:
    try:
        meta = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.warning(f"{source}: ignoring malformed metadata line {line_number}: {e}")
        anomalies.append(AnomalyRecord.create(source, line_number, "INVALID_METADATA", str(e)))
        return None
    if not isinstance(meta, dict):
        logger.warning(f"{source}: ignoring metadata line {line_number}: not a JSON object")
        anomalies.append(
            AnomalyRecord.create(source, line_number, "INVALID_METADATA", "metadata is not a JSON object")
        )
        return None
    return meta


def parse_table(
    text: str,
    fmt: str | None = None,
    has_header: bool | None = None,
    source: str = "<input>",
) -> ParseResult:
    """Parse raw table text into rows plus optional metadata.

    Parameters
    ----------
    text: pasted Markdown table or CSV content
    fmt: "markdown" / "csv", or None to auto-detect
    has_header: header presence, or None to auto-detect
    source: name used for log lines and anomaly records
    """
    fmt = fmt or detect_format(text)
    numbered = [
        (n, line.strip()) for n, line in enumerate(text.splitlines(), start=1) if line.strip()
    ]
    lines = [line for _, line in numbered]
    if has_header is None:
        has_header = detect_header(lines, fmt)

    anomalies: list[AnomalyRecord] = []
    metadata: dict[str, Any] | None = None
    rows: list[RawRow] = []

    if fmt == CSV:
        header = list(FIELDS)
        data = numbered
        if has_header and data:
            header = [c.lower() for c in tokenize_csv_line(data[0][1])]
            data = data[1:]
        if data and data[0][1].startswith(META_MARKER):
            line_number, line = data[0]
            metadata = _parse_metadata(line[len(META_MARKER):], line_number, source, anomalies)
            data = data[1:]
        for line_number, line in data:
            rows.append(_build_row(header, tokenize_csv_line(line), line_number, source, anomalies))
    else:
        if has_header:
            if len(numbered) < 2:
                return ParseResult(rows=(), format=fmt, has_header=True)
            header = _split_markdown_cells(numbered[0][1])
            data = numbered[2:]
        else:
            header = list(FIELDS)
            data = numbered
        for line_number, line in data:
            rows.append(_build_row(header, _split_markdown_cells(line), line_number, source, anomalies))

    logger.debug(f"{source}: parsed {len(rows)} rows as {fmt} (header={has_header})")
    return ParseResult(
        rows=tuple(rows),
        metadata=metadata,
        format=fmt,
        has_header=has_header,
        anomalies=tuple(anomalies),
    )
