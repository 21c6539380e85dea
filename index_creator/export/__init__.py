"""Export adapters (JSON, display CSV / XLSX, round-trip source CSV)."""

from .writer import ExportError, ExportResult, write_exports

__all__ = [
    "ExportError",
    "ExportResult",
    "write_exports",
]
