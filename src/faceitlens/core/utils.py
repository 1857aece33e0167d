"""
Utility functions for FaceitLens.

This module provides:
- Lenient number parsing for upstream stat values
- Timing helpers
"""

import logging
import math
import re
import time
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

# Type variable for generic decorators
F = TypeVar("F", bound=Callable[..., Any])

_NON_NUMERIC = re.compile(r"[^\d.]")
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_stat_number(value: Any) -> float:
    """
    Parse a loosely typed stat value into a float.

    Every character except digits and "." is dropped, then the leading
    numeric prefix is read. Missing or unparseable values yield 0.

    Examples:
        >>> parse_stat_number("42%")
        42.0
        >>> parse_stat_number(1600)
        1600.0
        >>> parse_stat_number(None)
        0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)) and math.isfinite(value) and value >= 0:
        return float(value)
    cleaned = _NON_NUMERIC.sub("", str(value))
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return 0.0
    return float(match.group(0))


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning default when the denominator is not positive."""
    if denominator > 0:
        return numerator / denominator
    return default


def now_ms() -> int:
    """Current epoch time in milliseconds."""
    return int(time.time() * 1000)


def timed(func: F) -> F:
    """
    Decorator to measure and log coroutine execution time.

    Usage:
        @timed
        async def my_function():
            ...
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start_time
            logger.debug(f"{func.__name__} completed in {elapsed:.3f}s")

    return wrapper  # type: ignore
