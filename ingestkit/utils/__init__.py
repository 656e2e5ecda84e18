"""Utility helpers."""

from .helpers import (
    chunks,
    format_duration,
    measure_time,
    read_json,
    write_json,
)

__all__ = [
    "chunks",
    "format_duration",
    "measure_time",
    "read_json",
    "write_json",
]
