from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

if TYPE_CHECKING:
    from idiom_bench.harness.stability import StabilityResult
    from idiom_bench.harness.timing import BenchmarkResult


class MetricsRegistry:
    _instance: "MetricsRegistry | None" = None

    def __init__(self) -> None:
        # Private registry so repeated construction (tests) never collides with the global one.
        self.registry = CollectorRegistry()

        # Timing
        self.bench_variant_elapsed_ns = Histogram(
            "bench_variant_elapsed_ns",
            "Elapsed time of a measured phase",
            ["scenario", "variant"],
            buckets=[1e6, 1e7, 1e8, 1e9, 1e10],  # 1ms to 10s
            registry=self.registry,
        )
        self.bench_variant_runs_total = Counter(
            "bench_variant_runs_total", "Measured phases completed", ["scenario", "variant"], registry=self.registry
        )

        # Stability
        self.stability_failures_total = Counter(
            "stability_failures_total", "Absence faults observed", ["scenario", "variant"], registry=self.registry
        )
        self.stability_invocations_total = Counter(
            "stability_invocations_total", "Variant invocations under contention", ["scenario"], registry=self.registry
        )

        self.scenarios_run_total = Counter("scenarios_run_total", "Scenarios completed", registry=self.registry)

    @classmethod
    def get(cls) -> "MetricsRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_for_tests(cls) -> None:
        cls._instance = None

    def record_benchmark(self, scenario: str, result: BenchmarkResult) -> None:
        self.bench_variant_elapsed_ns.labels(scenario=scenario, variant=result.variant_name).observe(result.elapsed_ns)
        self.bench_variant_runs_total.labels(scenario=scenario, variant=result.variant_name).inc()

    def record_stability(self, scenario: str, result: StabilityResult) -> None:
        self.stability_failures_total.labels(scenario=scenario, variant=result.variant_name).inc(result.failure_count)
        self.stability_invocations_total.labels(scenario=scenario).inc(result.total_invocations)

    def render_latest(self) -> str:
        return generate_latest(self.registry).decode("utf-8")
