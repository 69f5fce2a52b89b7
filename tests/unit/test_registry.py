from functools import partial

import pytest

from idiom_bench.harness.errors import ConfigurationFault
from idiom_bench.harness.policy import MutationPolicy
from idiom_bench.harness.registry import (
    Scenario,
    ScenarioRegistry,
    StabilityPlan,
    run_scenario,
    run_stability,
    verify_equivalence,
)
from idiom_bench.harness.variant import Variant, require_present
from idiom_bench.observability.metrics import MetricsRegistry


def _double(x):
    return x * 2


def _add(x):
    return x + x


def _tiny(name="tiny", **kwargs):
    return Scenario(
        name=name,
        build_fixture=lambda: 21,
        build_variants=lambda x: [Variant("mul", partial(_double, x)), Variant("add", partial(_add, x))],
        warmup_iters=10,
        measured_iters=100,
        **kwargs,
    )


def _cell_variants(cell):
    def _unsafe():
        return require_present(cell.get()) + 1

    def _safe():
        value = cell.get()
        return value + 1 if value is not None else None

    return [Variant("unsafe", _unsafe), Variant("safe", _safe)]


def _plan(**kwargs):
    defaults = dict(
        build_variants=_cell_variants,
        initial_value=lambda: 1,
        present_factory=lambda i: i,
        thread_count=2,
        iterations_per_thread=200,
        policy=MutationPolicy(period=10, absent_every=2),
        switch_interval_s=None,
    )
    defaults.update(kwargs)
    return StabilityPlan(**defaults)


def test_register_rejects_duplicates():
    registry = ScenarioRegistry()
    registry.register(_tiny())
    with pytest.raises(ConfigurationFault):
        registry.register(_tiny())
    assert len(registry) == 1


def test_register_validates_iteration_counts():
    registry = ScenarioRegistry()
    with pytest.raises(ConfigurationFault):
        registry.register(Scenario(name="bad", build_fixture=int, build_variants=list, measured_iters=0))


def test_get_unknown_scenario():
    registry = ScenarioRegistry.from_scenarios([_tiny()])
    with pytest.raises(ConfigurationFault):
        registry.get("missing")


def test_select_preserves_requested_order():
    registry = ScenarioRegistry.from_scenarios([_tiny("a"), _tiny("b"), _tiny("c")])
    assert registry.names() == ("a", "b", "c")
    assert [s.name for s in registry.select(["c", "a"])] == ["c", "a"]
    assert [s.name for s in registry.select(None)] == ["a", "b", "c"]


def test_run_rejects_unknown_names_before_timing():
    calls = []

    def _fixture():
        calls.append(1)
        return 1

    ok = Scenario(name="ok", build_fixture=_fixture, build_variants=lambda x: [Variant("v", lambda: x)])
    registry = ScenarioRegistry.from_scenarios([ok])
    with pytest.raises(ConfigurationFault):
        list(registry.run(["ok", "nope"]))
    assert calls == []


def test_scaled_applies_same_factor():
    scenario = _tiny(stability=_plan(), allocation_probe_iters=50)
    scaled = scenario.scaled(0.5, threads=3)
    assert scaled.warmup_iters == 5
    assert scaled.measured_iters == 50
    assert scaled.allocation_probe_iters == 25
    assert scaled.stability.iterations_per_thread == 100
    assert scaled.stability.thread_count == 3
    # Original untouched.
    assert scenario.measured_iters == 100


def test_scaled_keeps_counts_positive():
    scaled = _tiny(stability=_plan()).scaled(0.0001)
    assert scaled.measured_iters == 1
    assert scaled.stability.iterations_per_thread == 1


def test_scaled_rejects_non_positive_scale():
    with pytest.raises(ConfigurationFault):
        _tiny().scaled(0)


def test_run_scenario_produces_comparison():
    outcome = run_scenario(_tiny())
    assert [b.variant_name for b in outcome.benchmarks] == ["mul", "add"]
    assert all(b.iterations == 100 for b in outcome.benchmarks)
    assert outcome.comparison.baseline_name == "mul"
    assert outcome.stability is None
    assert outcome.allocations == ()
    assert outcome.bytecode == ()


def test_run_scenario_optional_profiles():
    outcome = run_scenario(_tiny(allocation_probe_iters=5, bytecode_profile=True))
    assert [a.variant_name for a in outcome.allocations] == ["mul", "add"]
    assert [p.variant_name for p in outcome.bytecode] == ["mul", "add"]


def test_run_scenario_bad_baseline_index():
    with pytest.raises(ConfigurationFault):
        run_scenario(_tiny(baseline_index=2))


def test_run_scenario_rejects_diverging_variants():
    scenario = Scenario(
        name="diverge",
        build_fixture=lambda: 1,
        build_variants=lambda x: [Variant("one", lambda: x), Variant("two", lambda: x + 1)],
        warmup_iters=0,
        measured_iters=1,
    )
    with pytest.raises(ConfigurationFault, match="two"):
        run_scenario(scenario)


def test_verify_equivalence_returns_shared_output():
    assert verify_equivalence("eq", [Variant("a", lambda: (1, 2)), Variant("b", lambda: (1, 2))]) == (1, 2)


def test_run_stability_per_variant():
    report = run_stability(_tiny(stability=_plan()))
    assert [row.variant_name for row in report.rows] == ["unsafe", "safe"]
    safe = report.rows[1]
    assert safe.failure_count == 0
    assert report.rows[0].failure_count <= report.rows[0].total_invocations


def test_run_scenario_skips_stability_on_request():
    outcome = run_scenario(_tiny(stability=_plan()), run_stability_test=False)
    assert outcome.stability is None


def test_run_stability_without_plan():
    with pytest.raises(ConfigurationFault):
        run_stability(_tiny())


def test_run_records_metrics():
    outcome = run_scenario(_tiny(stability=_plan()))
    assert outcome.stability is not None
    text = MetricsRegistry.get().render_latest()
    assert 'bench_variant_runs_total{scenario="tiny",variant="mul"} 1.0' in text
    assert 'stability_invocations_total{scenario="tiny"} 800.0' in text
    assert "scenarios_run_total 1.0" in text


def test_stability_cells_are_fresh_per_variant():
    seen = []

    def _initial():
        seen.append(1)
        return 5

    run_stability(_tiny(stability=_plan(initial_value=_initial)))
    # One build to list the variants, plus one per variant.
    assert len(seen) == 3
