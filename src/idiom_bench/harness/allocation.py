"""Allocation probe: how much memory a batch of invocations churns through.

Runs outside the timing phase; tracemalloc slows every allocation down.
"""

from __future__ import annotations

import gc
import tracemalloc
from dataclasses import dataclass
from typing import Sequence

from structlog import get_logger

from idiom_bench.harness.errors import ConfigurationFault
from idiom_bench.harness.variant import Variant

logger = get_logger("harness.allocation")


@dataclass(frozen=True, slots=True)
class AllocationResult:
    variant_name: str
    invocations: int
    peak_bytes: int
    net_bytes: int

    @property
    def peak_kib(self) -> float:
        return self.peak_bytes / 1024


def probe_allocations(variant: Variant, invocations: int) -> AllocationResult:
    if invocations <= 0:
        raise ConfigurationFault(f"invocations must be > 0, got {invocations}")
    if tracemalloc.is_tracing():
        raise ConfigurationFault("tracemalloc is already tracing; refusing to nest allocation probes")

    invoke = variant.invoke
    gc.collect()
    tracemalloc.start()
    try:
        before, _ = tracemalloc.get_traced_memory()
        tracemalloc.reset_peak()
        for _ in range(invocations):
            invoke()
        after, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()

    result = AllocationResult(
        variant_name=variant.name,
        invocations=invocations,
        peak_bytes=max(0, peak - before),
        net_bytes=after - before,
    )
    logger.debug("Allocation probe", variant=variant.name, peak_bytes=result.peak_bytes)
    return result


def render_allocations(title: str, results: Sequence[AllocationResult]) -> str:
    lines = [f"--- {title}: allocations ({results[0].invocations:,} invocations) ---"]
    width = max(len(r.variant_name) for r in results)
    for r in results:
        lines.append(f"{r.variant_name:<{width}}  peak ~{r.peak_kib:,.1f} KiB  net {r.net_bytes:+,} B")
    return "\n".join(lines)
