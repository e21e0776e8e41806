"""Millisecond clock and interruptible sleeping."""

from __future__ import annotations

import time
from typing import Callable

_POLL_SECONDS = 0.001


def now_ms() -> int:
    """Return the current time in whole milliseconds."""
    return time.monotonic_ns() // 1_000_000


def sleep_ms(duration_ms: int, should_continue: Callable[[], bool] | None = None) -> bool:
    """Sleep for duration_ms, polling should_continue about once a millisecond.

    Returns True when the full duration passed, False when should_continue
    returned a false value first.
    """
    start = now_ms()
    while True:
        if now_ms() - start >= duration_ms:
            return True
        if should_continue is not None and not should_continue():
            return False
        time.sleep(_POLL_SECONDS)