"""Command line interface (``index-creator``)."""

from .__main__ import main

__all__ = ["main"]
