from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping

from ..models.row_data import TEXT_FIELDS, RawRow
from ..parsing.markers import DEFINITION_PATTERN, ESCAPE_MARKER, definition_parts

"""Shorthand replacement resolver.

Authors define shorthand inline (``vuln^vulnerability``) in the term,
sub-term or notes cell of any row, comment rows included. Resolution runs in
three steps:

1. ``extract_replacements``: collect shorthand -> replacement (last write wins,
   shorthand keys lower-cased, replacement case kept as a template).
2. ``strip_definitions``: replace each definition with its bare shorthand.
3. ``apply_replacements``: substitute every word-bounded shorthand occurrence,
   case matched to the occurrence, except where prefixed with ``!``.

Substitution is a single regex pass over all shorthands, so replacement
output is never scanned again for further shorthand.
"""

__all__ = [
    "extract_replacements",
    "strip_definitions",
    "apply_replacements",
    "substitute_text",
    "match_capitalisation",
]

logger = logging.getLogger(__name__)

_WORD_BOUNDARY = re.compile(r"\b")
_ACRONYM = re.compile(r"[A-Z]{2,}")
_ALPHA = re.compile(r"[^\W\d_]")


def extract_replacements(rows: Iterable[RawRow]) -> dict[str, str]:
    """Build the shorthand map from every row (ignored rows included)."""
    replacements: dict[str, str] = {}
    for row in rows:
        for field in TEXT_FIELDS:
            for match in DEFINITION_PATTERN.finditer(row.get(field)):
                shorthand, replacement = definition_parts(match)
                shorthand = shorthand.lower()
                if shorthand and replacement:
                    logger.debug(f'Defining: "{shorthand}" -> "{replacement}"')
                    replacements[shorthand] = replacement
    return replacements


def _bare_shorthand(match: re.Match[str]) -> str:
    return match.group(1) or match.group(2) or match.group(3) or ""


def strip_definitions(rows: Iterable[RawRow]) -> tuple[RawRow, ...]:
    """Drop the ``^replacement`` half of each definition, keeping the shorthand."""
    stripped: list[RawRow] = []
    for row in rows:
        changes = {}
        for field in TEXT_FIELDS:
            value = row.get(field)
            if value:
                new_value = DEFINITION_PATTERN.sub(_bare_shorthand, value)
                if new_value != value:
                    changes[field] = new_value
        stripped.append(row.with_values(**changes) if changes else row)
    return tuple(stripped)


def _title(token: str) -> str:
    return token[:1].upper() + token[1:].lower()


def match_capitalisation(source: str, replacement: str) -> str:
    """Reshape ``replacement`` to follow the case of the matched ``source``.

    Tokens holding an acronym (2+ consecutive capitals) are kept verbatim.
    Otherwise an all-caps source Title-cases every token, a capitalised source
    Title-cases the first alphabetic token only, anything else is lower-cased.

    >>> match_capitalisation("Vuln", "vulnerability scan")
    'Vulnerability scan'
    >>> match_capitalisation("VULN", "vulnerability scan")
    'Vulnerability Scan'
    >>> match_capitalisation("ad", "Active Directory (AD)")
    'active directory (AD)'
    """
    all_caps = source == source.upper()
    capitalised = bool(source) and source[0] == source[0].upper()

    shaped: list[str] = []
    capitalised_first = False
    for token in _WORD_BOUNDARY.split(replacement):
        if _ACRONYM.search(token):
            shaped.append(token)
        elif all_caps:
            shaped.append(_title(token))
        elif capitalised and not capitalised_first and _ALPHA.search(token):
            capitalised_first = True
            shaped.append(_title(token))
        else:
            shaped.append(token.lower())
    return "".join(shaped)


def _substitution_pattern(shorthands: Iterable[str]) -> re.Pattern[str]:
    # Alternatives keep map insertion order; the optional group captures the escape marker
    alternation = "|".join(re.escape(s) for s in shorthands)
    return re.compile(rf"({re.escape(ESCAPE_MARKER)})?\b(?:{alternation})\b", re.IGNORECASE)


def substitute_text(
    text: str, replacements: Mapping[str, str], pattern: re.Pattern[str] | None = None
) -> str:
    """Substitute shorthand occurrences in one string."""
    if not text or not replacements:
        return text
    pattern = pattern or _substitution_pattern(replacements)
    lookup = {k.casefold(): v for k, v in replacements.items()}

    def _replace(match: re.Match[str]) -> str:
        escaped = match.group(1) is not None
        occurrence = match.group(0)[1:] if escaped else match.group(0)
        if escaped:
            return occurrence
        replacement = lookup.get(occurrence.casefold())
        if replacement is None:
            return occurrence
        return match_capitalisation(occurrence, replacement)

    return pattern.sub(_replace, text)


def apply_replacements(rows: Iterable[RawRow], replacements: Mapping[str, str]) -> tuple[RawRow, ...]:
    """Apply the shorthand map to term / sub-term / notes of every row."""
    rows = tuple(rows)
    if not replacements:
        return rows
    pattern = _substitution_pattern(replacements)
    resolved: list[RawRow] = []
    for row in rows:
        changes = {}
        for field in TEXT_FIELDS:
            value = row.get(field)
            new_value = substitute_text(value, replacements, pattern)
            if new_value != value:
                changes[field] = new_value
        resolved.append(row.with_values(**changes) if changes else row)
    return tuple(resolved)
