"""Centralized clock access so engines and tests share one time source."""

from __future__ import annotations

import time

from structlog import get_logger

logger = get_logger("core.timebase")

NS_PER_MS = 1_000_000
NS_PER_S = 1_000_000_000


def perf_ns() -> int:
    """High-resolution monotonic clock in nanoseconds for profiling."""
    return time.perf_counter_ns()


def ns_to_ms(value_ns: int) -> float:
    return value_ns / NS_PER_MS


def clock_resolution_ns() -> int:
    """Resolution of the perf counter, rounded up to whole nanoseconds."""
    info = time.get_clock_info("perf_counter")
    resolution_ns = max(1, int(round(info.resolution * NS_PER_S)))
    logger.debug("perf clock", implementation=info.implementation, resolution_ns=resolution_ns)
    return resolution_ns
