"""Timestamps stored on documents, as integer epoch milliseconds."""

import time


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def next_modified(previous: int | None) -> int:
    """
    Return a lastModified value strictly greater than previous.

    Two mutations within the same millisecond still produce increasing stamps.
    """
    now = now_ms()
    if previous is not None and now <= previous:
        return previous + 1
    return now
