from __future__ import annotations

from dataclasses import dataclass

"""Config dataclasses for index-creator.

Loaded and validated by ``index_creator.config.loader``; these are the typed
domain view of ``config/indexer.yml``.
"""

EXPORT_FORMATS: tuple[str, ...] = ("json", "csv", "xlsx", "source")


@dataclass(frozen=True)
class IndexerConfig:
    """Root configuration object for a build / check run."""
    source_directory: str  # Directory scanned for .md/.txt/.csv sources
    output_directory: str = "./output"
    input_format: str | None = None  # "markdown" | "csv" | None (auto)
    has_header: bool | None = None  # None = auto-detect
    exports: tuple[str, ...] = ("json", "csv")
    collapsed: bool | None = None  # None = metadata value, else default (True)
    dividers: bool | None = None  # None = metadata value, else default (False)
    log_directory: str = "./logs"
