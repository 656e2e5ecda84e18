"""
================================================================================
HELPERS - Common Utility Functions
================================================================================

FUNCTIONS:
  - measure_time: Context manager for measuring execution time
  - format_duration: Format milliseconds to human-readable duration
  - chunks: Split an iterable into fixed-size batches
  - write_json / read_json: JSON files used by the persist/load helpers

================================================================================
"""

import json
import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, List, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def measure_time(operation_name: str):
    """
    Context manager to measure execution time.

    Usage:
        with measure_time("ingestion run"):
            ...
        # Logs: "ingestion run completed in 125.5ms"
    """
    start_time = time.perf_counter()
    logger.debug(f"Starting: {operation_name}")

    try:
        yield
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(f"{operation_name} completed in {format_duration(duration_ms)}")


def format_duration(milliseconds: float) -> str:
    """
    Format milliseconds to human-readable duration.

    Examples:
        >>> format_duration(125)
        '125.0ms'
        >>> format_duration(1250)
        '1.25s'
        >>> format_duration(65000)
        '1m 5s'
    """
    if milliseconds < 1000:
        return f"{milliseconds:.1f}ms"

    seconds = milliseconds / 1000
    if seconds < 60:
        return f"{seconds:.2f}s"

    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}m {secs}s"


def chunks(iterable: Iterable[T], size: int) -> Iterator[List[T]]:
    """
    Split iterable into chunks of given size.

    Examples:
        >>> list(chunks([1, 2, 3, 4, 5], 2))
        [[1, 2], [3, 4], [5]]
    """
    if size < 1:
        raise ValueError("size must be >= 1")

    items: List[T] = []
    for item in iterable:
        items.append(item)
        if len(items) == size:
            yield items
            items = []

    if items:
        yield items


def write_json(path: Union[str, Path], data: Any) -> None:
    """Write JSON to `path`, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f)
    tmp_path.replace(path)


def read_json(path: Union[str, Path]) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
