"""Parsing of authored index tables and the cell marker mini-language."""

from .table_parser import CSV, MARKDOWN, detect_format, detect_header, parse_table, tokenize_csv_line

__all__ = [
    "CSV",
    "MARKDOWN",
    "detect_format",
    "detect_header",
    "parse_table",
    "tokenize_csv_line",
]
