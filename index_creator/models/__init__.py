"""Domain models for index-creator.

This package contains the domain model classes shared by the parser, the
pipeline stages, the export adapters and the batch orchestrator.
"""

from .anomaly_record import AnomalyRecord
from .config_models import EXPORT_FORMATS, IndexerConfig
from .entry import EMPTY_ENTRY, DividerMarker, Entry, IndexItem
from .pipeline_state import ParseResult, PipelineState
from .processing_result import FileStat, ProcessingResult
from .row_data import FIELDS, TEXT_FIELDS, ExpandedRow, RawRow
from .source_file import FileStatus, SourceFile

__all__ = [
    # Configuration models
    "EXPORT_FORMATS",
    "IndexerConfig",
    # Pipeline models
    "FIELDS",
    "TEXT_FIELDS",
    "RawRow",
    "ExpandedRow",
    "Entry",
    "DividerMarker",
    "IndexItem",
    "EMPTY_ENTRY",
    "ParseResult",
    "PipelineState",
    # Run models
    "AnomalyRecord",
    "FileStat",
    "FileStatus",
    "ProcessingResult",
    "SourceFile",
]
