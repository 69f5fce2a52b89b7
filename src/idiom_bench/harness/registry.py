"""Scenario definitions and the orchestration that runs them.

A scenario is a fixture, the variants built from it, and the iteration counts
every variant in it shares. Scenarios that carry a :class:`StabilityPlan` are
additionally stress tested against a shared, swappable resource.
"""

from __future__ import annotations

import dataclasses as dc
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from structlog import get_logger

from idiom_bench.core.atomic import AtomicReference
from idiom_bench.harness.allocation import AllocationResult, probe_allocations
from idiom_bench.harness.bytecode import BytecodeProfile, instruction_profile
from idiom_bench.harness.errors import ConfigurationFault
from idiom_bench.harness.policy import MutationPolicy
from idiom_bench.harness.report import ComparisonReport, StabilityReport, compare, summarize_stability
from idiom_bench.harness.stability import StabilityResult, stress_test, validate_stress_params
from idiom_bench.harness.timing import BenchmarkResult, measure, validate_iterations
from idiom_bench.harness.variant import Variant, validate_variants, variant_names
from idiom_bench.observability.metrics import MetricsRegistry

logger = get_logger("harness.registry")

# A stability plan's variants are built around the shared cell they race on.
CellVariantsFactory = Callable[[AtomicReference], Sequence[Variant]]


@dc.dataclass(frozen=True, slots=True)
class StabilityPlan:
    build_variants: CellVariantsFactory
    # Value the cell holds when a variant's run starts.
    initial_value: Callable[[], Any]
    # Value swapped in when the policy asks for a present resource at iteration i.
    present_factory: Callable[[int], Any]
    thread_count: int = 8
    iterations_per_thread: int = 10_000
    policy: MutationPolicy = dc.field(default_factory=MutationPolicy)
    switch_interval_s: Optional[float] = 1e-5


@dc.dataclass(frozen=True, slots=True)
class Scenario:
    name: str
    build_fixture: Callable[[], Any]
    build_variants: Callable[[Any], Sequence[Variant]]
    title: Optional[str] = None
    warmup_iters: int = 1_000
    measured_iters: int = 100_000
    baseline_index: int = 0
    stability: Optional[StabilityPlan] = None
    # 0 disables the allocation probe.
    allocation_probe_iters: int = 0
    bytecode_profile: bool = False

    @property
    def display_title(self) -> str:
        return self.title or self.name

    def validate(self) -> None:
        if not self.name:
            raise ConfigurationFault("Scenario name must be non-empty")
        validate_iterations(self.warmup_iters, self.measured_iters)
        if self.allocation_probe_iters < 0:
            raise ConfigurationFault(f"{self.name}: allocation_probe_iters must be >= 0")
        if self.stability is not None:
            validate_stress_params(self.stability.thread_count, self.stability.iterations_per_thread)

    def scaled(self, scale: float = 1.0, threads: Optional[int] = None) -> "Scenario":
        """Copy with every iteration count multiplied by ``scale``.

        The same factor applies to every variant, so comparisons within the
        scenario stay fair.
        """
        if scale <= 0:
            raise ConfigurationFault(f"scale must be > 0, got {scale}")
        stability = self.stability
        if stability is not None:
            stability = dc.replace(
                stability,
                iterations_per_thread=max(1, int(stability.iterations_per_thread * scale)),
                thread_count=threads if threads is not None else stability.thread_count,
            )
        return dc.replace(
            self,
            warmup_iters=int(self.warmup_iters * scale),
            measured_iters=max(1, int(self.measured_iters * scale)),
            allocation_probe_iters=int(self.allocation_probe_iters * scale) if self.allocation_probe_iters else 0,
            stability=stability,
        )


@dc.dataclass(frozen=True, slots=True)
class ScenarioOutcome:
    scenario: Scenario
    benchmarks: tuple[BenchmarkResult, ...]
    comparison: ComparisonReport
    stability: Optional[StabilityReport] = None
    allocations: tuple[AllocationResult, ...] = ()
    bytecode: tuple[BytecodeProfile, ...] = ()


def verify_equivalence(scenario_name: str, variants: Sequence[Variant]) -> Any:
    """Invoke each variant once and require identical outputs."""
    expected = variants[0].invoke()
    for variant in variants[1:]:
        got = variant.invoke()
        if got != expected:
            raise ConfigurationFault(
                f"{scenario_name}: variant {variant.name!r} returned {got!r}, "
                f"expected {expected!r} like {variants[0].name!r}"
            )
    return expected


def run_stability(scenario: Scenario) -> StabilityReport:
    plan = scenario.stability
    if plan is None:
        raise ConfigurationFault(f"{scenario.name} declares no stability plan")

    probe = plan.build_variants(AtomicReference(plan.initial_value()))
    validate_variants(probe)

    metrics = MetricsRegistry.get()
    results: List[StabilityResult] = []
    for idx in range(len(probe)):
        # Fresh cell per variant; nothing carries over between runs.
        cell: AtomicReference = AtomicReference(plan.initial_value())
        variant = plan.build_variants(cell)[idx]
        result = stress_test(
            variant,
            plan.thread_count,
            plan.iterations_per_thread,
            plan.policy,
            cell,
            plan.present_factory,
            switch_interval_s=plan.switch_interval_s,
        )
        metrics.record_stability(scenario.name, result)
        results.append(result)
    return summarize_stability(results)


def run_scenario(scenario: Scenario, *, run_stability_test: bool = True) -> ScenarioOutcome:
    scenario.validate()
    logger.info("Scenario started", scenario=scenario.name)

    fixture = scenario.build_fixture()
    variants = list(scenario.build_variants(fixture))
    validate_variants(variants)
    if not 0 <= scenario.baseline_index < len(variants):
        raise ConfigurationFault(
            f"{scenario.name}: baseline_index {scenario.baseline_index} out of range for {len(variants)} variants"
        )
    verify_equivalence(scenario.name, variants)
    logger.debug("Variants equivalent", scenario=scenario.name, variants=variant_names(variants))

    metrics = MetricsRegistry.get()
    benchmarks: List[BenchmarkResult] = []
    for variant in variants:
        result = measure(variant, scenario.warmup_iters, scenario.measured_iters)
        metrics.record_benchmark(scenario.name, result)
        benchmarks.append(result)
    comparison = compare(benchmarks, scenario.baseline_index)

    allocations: tuple[AllocationResult, ...] = ()
    if scenario.allocation_probe_iters:
        allocations = tuple(probe_allocations(v, scenario.allocation_probe_iters) for v in variants)

    bytecode: tuple[BytecodeProfile, ...] = ()
    if scenario.bytecode_profile:
        bytecode = tuple(instruction_profile(v) for v in variants)

    stability = None
    if run_stability_test and scenario.stability is not None:
        stability = run_stability(scenario)

    metrics.scenarios_run_total.inc()
    logger.info(
        "Scenario finished",
        scenario=scenario.name,
        fastest=comparison.fastest().variant_name,
        stability_failures=stability.total_failures if stability else None,
    )
    return ScenarioOutcome(
        scenario=scenario,
        benchmarks=tuple(benchmarks),
        comparison=comparison,
        stability=stability,
        allocations=allocations,
        bytecode=bytecode,
    )


class ScenarioRegistry:
    """Ordered, name-addressed collection of scenarios."""

    __slots__ = ("_scenarios",)

    def __init__(self) -> None:
        self._scenarios: Dict[str, Scenario] = {}

    def register(self, scenario: Scenario) -> None:
        if scenario.name in self._scenarios:
            raise ConfigurationFault(f"Duplicate scenario name: {scenario.name}")
        scenario.validate()
        self._scenarios[scenario.name] = scenario

    def get(self, name: str) -> Scenario:
        try:
            return self._scenarios[name]
        except KeyError as exc:
            raise ConfigurationFault(f"Unknown scenario: {name}") from exc

    def names(self) -> tuple[str, ...]:
        return tuple(self._scenarios)

    def select(self, names: Optional[Iterable[str]] = None) -> List[Scenario]:
        if not names:
            return list(self._scenarios.values())
        return [self.get(name) for name in names]

    def run(
        self,
        names: Optional[Iterable[str]] = None,
        *,
        scale: float = 1.0,
        threads: Optional[int] = None,
        run_stability_test: bool = True,
    ) -> Iterator[ScenarioOutcome]:
        # Resolve (and reject unknown names) before anything is timed.
        selected = [sc.scaled(scale, threads) for sc in self.select(names)]
        for scenario in selected:
            scenario.validate()
        for scenario in selected:
            yield run_scenario(scenario, run_stability_test=run_stability_test)

    @classmethod
    def from_scenarios(cls, scenarios: Iterable[Scenario]) -> "ScenarioRegistry":
        registry = cls()
        for scenario in scenarios:
            registry.register(scenario)
        return registry

    def __len__(self) -> int:
        return len(self._scenarios)
