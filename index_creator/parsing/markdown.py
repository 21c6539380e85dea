from __future__ import annotations

import re
import sys

"""Inline markdown helpers used for ordering.

Cells may carry inline emphasis or code (``**12**``, ```nmap```); ordering
must ignore that markup. Two flavours exist:

- ``strip_markdown`` keeps escaped ``\\*`` / ``\\``` as literal characters.
- ``clean_strip_markdown`` drops escaped formatting characters entirely and is
  what the term / sub-term comparison uses.
"""

__all__ = [
    "NO_PAGE_KEY",
    "strip_markdown",
    "clean_strip_markdown",
    "extract_page_start",
]

# Sort key for a page segment without any digits (pushed last)
NO_PAGE_KEY = sys.maxsize

_ESC_BACKTICK = "\x00ESC_BACKTICK\x00"
_ESC_STAR = "\x00ESC_STAR\x00"

_CODE = re.compile(r"`([^`]+?)`")
_BOLD_ITALIC = re.compile(r"\*\*\*([^*]+?)\*\*\*")
_BOLD = re.compile(r"\*\*([^*]+?)\*\*")
_ITALIC = re.compile(r"\*([^*]+?)\*")
_ESCAPED_FORMAT = re.compile(r"\\[`*]")
_DIGITS = re.compile(r"\d+")


def _unwrap(text: str) -> str:
    text = _CODE.sub(r"\1", text)
    text = _BOLD_ITALIC.sub(r"\1", text)
    text = _BOLD.sub(r"\1", text)
    return _ITALIC.sub(r"\1", text)


def strip_markdown(text: str | None) -> str:
    if not text:
        return ""
    text = text.replace("\\`", _ESC_BACKTICK).replace("\\*", _ESC_STAR)
    text = _unwrap(text)
    return text.replace(_ESC_BACKTICK, "`").replace(_ESC_STAR, "*")


def clean_strip_markdown(text: str | None) -> str:
    if not text:
        return ""
    return _unwrap(_ESCAPED_FORMAT.sub("", text))


def extract_page_start(page: object) -> int:
    """Smallest integer embedded in ``page`` after markdown stripping.

    ``"**12**-15"`` -> 12, ``"100-9"`` -> 9 (the minimum, not the first number),
    ``"passim"`` -> NO_PAGE_KEY.
    """
    raw = strip_markdown(str(page or ""))
    numbers = [int(n) for n in _DIGITS.findall(raw)]
    if not numbers:
        return NO_PAGE_KEY
    return min(numbers)
