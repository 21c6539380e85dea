from __future__ import annotations

import re

"""Marker mini-language used inside index table cells.

Markers and where they are recognised::

    ?            comment row     leading char of ``term``; row is parsed but never output
    ?meta:       metadata line   first CSV data line, followed by a JSON object
    a^b          definition      term / sub-term / notes; ``a`` is replaced by ``b`` everywhere
    !a           escape          suppresses substitution of one shorthand occurrence
    ^^           inherit         any field; copy the value from the previous data row
    <>           flip            term / sub-term; emit the row again with both swapped
    &&           split           any field; one output row per alternative (cartesian)

Either side of a definition is a bare ``[\\w-]+`` token or a single/double
quoted phrase: ``vuln^vulnerability``, ``"red team"^'adversary emulation'``.

Application order is fixed and mirrored by ``services.pipeline.PIPELINE_STAGES``.
"""

__all__ = [
    "COMMENT_MARKER",
    "META_MARKER",
    "DEFINE_MARKER",
    "INHERIT_MARKER",
    "FLIP_MARKER",
    "SPLIT_MARKER",
    "ESCAPE_MARKER",
    "DEFINITION_PATTERN",
    "STAGE_ORDER",
    "definition_parts",
]

COMMENT_MARKER = "?"
META_MARKER = "?meta:"
DEFINE_MARKER = "^"
INHERIT_MARKER = "^^"
FLIP_MARKER = "<>"
SPLIT_MARKER = "&&"
ESCAPE_MARKER = "!"

DEFINITION_PATTERN = re.compile(
    r"""(?:"([^"]+)"|'([^']+)'|([\w-]+))"""  # shorthand: "phrase" | 'phrase' | token
    r"\^"
    r"""(?:"([^"]+)"|'([^']+)'|([\w-]+))"""  # replacement
)

STAGE_ORDER: tuple[str, ...] = (
    "define",
    "strip",
    "substitute",
    "inherit",
    "flip",
    "split",
    "normalize",
    "sort",
)


def definition_parts(match: re.Match[str]) -> tuple[str, str]:
    """Return (shorthand, replacement) as authored, quotes removed and trimmed."""
    shorthand = match.group(1) or match.group(2) or match.group(3) or ""
    replacement = match.group(4) or match.group(5) or match.group(6) or ""
    return shorthand.strip(), replacement.strip()
