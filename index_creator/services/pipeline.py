from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from ..models.pipeline_state import PipelineState
from ..parsing.table_parser import parse_table
from .expansion import expand_flipped_rows, expand_split_rows
from .inheritance import apply_field_inheritance
from .normalizer import normalize_rows
from .replacements import apply_replacements, extract_replacements, strip_definitions
from .sorter import sort_entries

"""Pipeline composition: raw table text -> sorted Entry sequence.

Each stage is a pure ``PipelineState -> PipelineState`` function. The order is
fixed (see ``parsing.markers.STAGE_ORDER``) because inheritance, expansion and
normalization all depend on row position.
"""

__all__ = [
    "Stage",
    "PIPELINE_STAGES",
    "initial_state",
    "run_stages",
    "run_pipeline",
]

logger = logging.getLogger(__name__)

Stage = Callable[[PipelineState], PipelineState]


def _define(state: PipelineState) -> PipelineState:
    return replace(state, replacements=extract_replacements(state.rows))


def _strip(state: PipelineState) -> PipelineState:
    return replace(state, rows=strip_definitions(state.rows))


def _substitute(state: PipelineState) -> PipelineState:
    return replace(state, rows=apply_replacements(state.rows, state.replacements))


def _inherit(state: PipelineState) -> PipelineState:
    return replace(state, rows=apply_field_inheritance(state.rows))


def _flip(state: PipelineState) -> PipelineState:
    return replace(state, rows=expand_flipped_rows(state.rows))


def _split(state: PipelineState) -> PipelineState:
    return replace(state, rows=expand_split_rows(state.rows))


def _normalize(state: PipelineState) -> PipelineState:
    return replace(state, entries=normalize_rows(state.rows))


def _sort(state: PipelineState) -> PipelineState:
    return replace(state, entries=sort_entries(state.entries))


PIPELINE_STAGES: tuple[tuple[str, Stage], ...] = (
    ("define", _define),
    ("strip", _strip),
    ("substitute", _substitute),
    ("inherit", _inherit),
    ("flip", _flip),
    ("split", _split),
    ("normalize", _normalize),
    ("sort", _sort),
)


def _flag(metadata: dict[str, Any] | None, key: str, override: bool | None, default: bool) -> bool:
    if override is not None:
        return override
    if metadata and isinstance(metadata.get(key), bool):
        return metadata[key]
    return default


def initial_state(
    text: str,
    fmt: str | None = None,
    has_header: bool | None = None,
    source: str = "<input>",
    collapsed: bool | None = None,
    dividers: bool | None = None,
) -> PipelineState:
    """Parse ``text`` and seed a state; view flags fall back to the metadata line."""
    parsed = parse_table(text, fmt=fmt, has_header=has_header, source=source)
    return PipelineState(
        source=source,
        source_rows=parsed.rows,
        metadata=parsed.metadata,
        rows=parsed.rows,
        anomalies=parsed.anomalies,
        collapsed=_flag(parsed.metadata, "collapsed", collapsed, True),
        has_dividers=_flag(parsed.metadata, "hasDividers", dividers, False),
    )


def run_stages(state: PipelineState, stages: tuple[tuple[str, Stage], ...] = PIPELINE_STAGES) -> PipelineState:
    for name, stage in stages:
        state = stage(state)
        logger.debug(f"{state.source}: stage {name} -> rows={len(state.rows)} entries={len(state.entries)}")
    return state


def run_pipeline(
    text: str,
    fmt: str | None = None,
    has_header: bool | None = None,
    source: str = "<input>",
    collapsed: bool | None = None,
    dividers: bool | None = None,
) -> PipelineState:
    """Run the whole pipeline over ``text`` and return the final state."""
    state = initial_state(
        text, fmt=fmt, has_header=has_header, source=source, collapsed=collapsed, dividers=dividers
    )
    return run_stages(state)
