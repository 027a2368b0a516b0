"""Timing helpers that log elapsed spans."""

import time
from contextlib import contextmanager

from ingred.logging import get_logger

logger = get_logger(__name__)

# Prefix for timing logs so they are easy to grep
_TIMING_PREFIX = "[TIMING]"


def _format_duration(ms: int) -> str:
    """Return human-readable duration: e.g. 12500 -> '12.5s', 750 -> '750ms'."""
    if ms >= 1000:
        return f"{ms / 1000:.1f}s"
    return f"{ms}ms"


@contextmanager
def time_span(name: str, **extra: object):
    """Log how long the wrapped block took, with optional extra log fields."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = int((time.perf_counter() - start) * 1000)
        parts = [f"elapsed_ms={elapsed}", f"({_format_duration(elapsed)})"] + [
            f"{k}={v}" for k, v in extra.items()
        ]
        logger.info("%s %s %s", _TIMING_PREFIX, name, " ".join(parts))
