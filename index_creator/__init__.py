"""index-creator: turn a hand-authored index table into sorted index entries."""

__version__ = "0.3.0"
