"""
Single-line terminal progress: the line is rewritten in place with a carriage
return and only terminated once the last file is reached.
"""
from __future__ import annotations

import sys
from typing import TextIO


def progress_percent(current: int, total: int) -> int:
    """floor(current / total * 100); an empty batch counts as complete."""
    if total <= 0:
        return 100
    return (current * 100) // total


def format_progress(current: int, total: int, label: str) -> str:
    return f"Processing {label} [{progress_percent(current, total)}%]"


def print_progress(current: int, total: int, label: str, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    stream.write("\r" + format_progress(current, total, label))
    if current == total:
        stream.write("\n")
    stream.flush()
