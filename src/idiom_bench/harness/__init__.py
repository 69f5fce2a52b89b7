from idiom_bench.harness.errors import ConfigurationFault, ExpectedAbsenceFault, HarnessError
from idiom_bench.harness.policy import MutationAction, MutationPolicy
from idiom_bench.harness.registry import (
    Scenario,
    ScenarioOutcome,
    ScenarioRegistry,
    StabilityPlan,
    run_scenario,
    run_stability,
)
from idiom_bench.harness.report import ComparisonReport, ComparisonRow, StabilityReport, compare, summarize_stability
from idiom_bench.harness.stability import StabilityResult, stress_test
from idiom_bench.harness.timing import BenchmarkResult, measure
from idiom_bench.harness.variant import Variant, require_present

__all__ = [
    "BenchmarkResult",
    "ComparisonReport",
    "ComparisonRow",
    "ConfigurationFault",
    "ExpectedAbsenceFault",
    "HarnessError",
    "MutationAction",
    "MutationPolicy",
    "Scenario",
    "ScenarioOutcome",
    "ScenarioRegistry",
    "StabilityPlan",
    "StabilityReport",
    "StabilityResult",
    "Variant",
    "compare",
    "measure",
    "require_present",
    "run_scenario",
    "run_stability",
    "stress_test",
    "summarize_stability",
]
