"""Single-threaded timing protocol: warmup, then a clocked measured phase."""

from __future__ import annotations

from dataclasses import dataclass

from structlog import get_logger

from idiom_bench.core import timebase
from idiom_bench.harness.errors import ConfigurationFault
from idiom_bench.harness.variant import Variant

logger = get_logger("harness.timing")


@dataclass(frozen=True, slots=True)
class BenchmarkResult:
    variant_name: str
    elapsed_ns: int
    iterations: int

    @property
    def elapsed_ms(self) -> float:
        return timebase.ns_to_ms(self.elapsed_ns)

    @property
    def per_call_ns(self) -> float:
        return self.elapsed_ns / self.iterations


def validate_iterations(warmup_iters: int, measured_iters: int) -> None:
    if warmup_iters < 0:
        raise ConfigurationFault(f"warmup_iters must be >= 0, got {warmup_iters}")
    if measured_iters <= 0:
        raise ConfigurationFault(f"measured_iters must be > 0, got {measured_iters}")


def measure(variant: Variant, warmup_iters: int, measured_iters: int) -> BenchmarkResult:
    """Time ``measured_iters`` calls of ``variant.invoke`` after a discarded warmup.

    Exceptions raised by the variant propagate as-is; a benchmark never
    absorbs a fault.
    """
    validate_iterations(warmup_iters, measured_iters)

    invoke = variant.invoke
    for _ in range(warmup_iters):
        invoke()

    start = timebase.perf_ns()
    for _ in range(measured_iters):
        invoke()
    end = timebase.perf_ns()

    elapsed = max(0, end - start)
    logger.debug(
        "Variant measured",
        variant=variant.name,
        warmup_iters=warmup_iters,
        measured_iters=measured_iters,
        elapsed_ns=elapsed,
    )
    return BenchmarkResult(variant_name=variant.name, elapsed_ns=elapsed, iterations=measured_iters)
