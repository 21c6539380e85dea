#!/usr/bin/env python3
"""Synthetic index generator for performance testing.

Writes a Markdown index table with a header and divider line followed by
``--rows`` data rows. The rows exercise every marker the pipeline handles:
a few shorthand definitions up front, then a mix of plain rows, ``^^``
inheritance, blank terms, ``<>`` flips, ``&&`` splits and ``?`` comment rows.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np

HEADER = "| term | sub-term | notes | book | page |"
DIVIDER = "| --- | --- | --- | --- | --- |"

SHORTHANDS = {
    "vuln": "vulnerability",
    "xss": "cross-site scripting",
    "sqli": "SQL injection",
    "priv": "privilege escalation",
}

WORDS = [
    "access", "audit", "buffer", "cache", "cipher", "cookie", "domain", "exploit",
    "firewall", "hash", "header", "kernel", "malware", "nonce", "payload", "proxy",
    "session", "socket", "token", "vector",
]


def generate_index_rows(rows: int, seed: int = 42) -> list[list[str]]:
    """Generate ``rows`` table rows as cell lists in header order.

    Args:
        rows: Number of data rows (definition rows count towards it)
        seed: Random seed for reproducible data

    Returns:
        List of [term, sub-term, notes, book, page] rows
    """
    rng = np.random.default_rng(seed)
    out: list[list[str]] = []

    for short, long in list(SHORTHANDS.items())[: max(0, rows)]:
        out.append([f'?{short}^"{long}"', "", "", "", ""])

    shorthand_keys = list(SHORTHANDS)
    while len(out) < rows:
        kind = rng.integers(0, 10)
        word = WORDS[rng.integers(0, len(WORDS))]
        sub = WORDS[rng.integers(0, len(WORDS))]
        book = str(rng.integers(1, 6))
        pages = ", ".join(str(p) for p in rng.integers(1, 400, size=rng.integers(1, 4)))
        if kind == 0:
            out.append([f"?note about {word}", "", "", "", ""])
        elif kind == 1:
            out.append(["^^", sub, "", "^^", pages])
        elif kind == 2:
            out.append(["", sub, f"see {word}", book, pages])
        elif kind == 3:
            out.append([f"{word}<>", sub, "", book, pages])
        elif kind == 4:
            out.append([f"{word} && {sub}", "", "", book, pages])
        elif kind == 5:
            short = shorthand_keys[rng.integers(0, len(shorthand_keys))]
            out.append([short.capitalize(), word, f"notes on {short}", book, pages])
        else:
            out.append([f"*{word}*", sub, "", book, pages])
    return out


def render_markdown(rows: list[list[str]]) -> str:
    lines = [HEADER, DIVIDER]
    lines.extend("| " + " | ".join(cells) + " |" for cells in rows)
    return "\n".join(lines) + "\n"


def write_sample_index(output_path: Path, rows: int, seed: int = 42) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_markdown(generate_index_rows(rows, seed)), encoding="utf-8")
    return output_path


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic Markdown index table for performance testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate the default 500 rows
  %(prog)s data/sample.md

  # Larger index with a fixed seed
  %(prog)s data/large.md --rows 20000 --seed 123
        """,
    )
    parser.add_argument("output", type=Path, help="Output Markdown file path")
    parser.add_argument("--rows", type=int, default=500, help="Number of data rows (default: 500)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1

    try:
        path = write_sample_index(args.output, args.rows, args.seed)
    except OSError as e:
        print(f"Error writing index: {e}", file=sys.stderr)
        return 1
    print(f"Created index: {path} ({args.rows:,} rows)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
