"""Pipeline stages and run orchestration."""

from .pipeline import PIPELINE_STAGES, run_pipeline

__all__ = [
    "PIPELINE_STAGES",
    "run_pipeline",
]
