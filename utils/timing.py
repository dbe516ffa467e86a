"""
Timing-safe comparison and wall-clock helpers.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from typing import Any, Awaitable, Callable, Tuple, TypeVar, Union

T = TypeVar("T")

Comparable = Union[str, bytes, bytearray, memoryview]


def _as_bytes(value: Comparable):
    if isinstance(value, str):
        return value.encode("utf-8", "surrogatepass")
    return value


def time_safe_compare(a: Comparable, b: Comparable) -> bool:
    """
    Compare two strings / byte sequences without an early exit.

    Every position up to ``max(len(a), len(b))`` is visited exactly once,
    whatever the position of the first difference.  Non-string inputs
    compare unequal.
    """
    if not isinstance(a, (str, bytes, bytearray, memoryview)):
        return False
    if not isinstance(b, (str, bytes, bytearray, memoryview)):
        return False

    a_bytes = _as_bytes(a)
    b_bytes = _as_bytes(b)
    len_a = len(a_bytes)
    len_b = len(b_bytes)

    result = len_a ^ len_b
    for i in range(max(len_a, len_b)):
        x = a_bytes[i] if i < len_a else 0
        y = b_bytes[i] if i < len_b else 0
        result |= x ^ y
    return result == 0


def constant_time_compare(a: Comparable, b: Comparable) -> bool:
    """Like ``time_safe_compare`` but still does a full pass on length mismatch."""
    if not isinstance(a, (str, bytes, bytearray, memoryview)):
        return False
    if not isinstance(b, (str, bytes, bytearray, memoryview)):
        return False
    if len(a) != len(b):
        time_safe_compare(a, a)
        return False
    return time_safe_compare(a, b)


async def pad_to_minimum(started_at: float, min_ms: float) -> None:
    """
    Sleep until at least ``min_ms`` have passed since ``started_at``
    (a ``time.perf_counter()`` reading).  Best-effort smoothing only.
    """
    remaining = min_ms / 1000.0 - (time.perf_counter() - started_at)
    if remaining > 0:
        await asyncio.sleep(remaining)


async def secure_compare(a: Comparable, b: Comparable, min_ms: float = 50) -> bool:
    """``time_safe_compare`` padded to a minimum wall-clock duration."""
    started = time.perf_counter()
    is_equal = time_safe_compare(a, b)
    await pad_to_minimum(started, min_ms)
    return is_equal


async def measure_execution_time(
    fn: Callable[[], Union[T, Awaitable[T]]],
) -> Tuple[Any, float]:
    """Run ``fn`` (sync or async) and return ``(result, elapsed_ms)``."""
    started = time.perf_counter()
    result = fn()
    if inspect.isawaitable(result):
        result = await result
    return result, (time.perf_counter() - started) * 1000.0
