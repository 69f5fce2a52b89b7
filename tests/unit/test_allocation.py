import tracemalloc

import pytest

from idiom_bench.harness.allocation import AllocationResult, probe_allocations, render_allocations
from idiom_bench.harness.errors import ConfigurationFault
from idiom_bench.harness.variant import Variant


def _build_list():
    return [object() for _ in range(1_000)]


def test_probe_reports_peak_for_allocating_variant():
    result = probe_allocations(Variant("alloc", _build_list), 10)
    assert result.variant_name == "alloc"
    assert result.invocations == 10
    # 1000 object() instances alone are well over 10 KiB.
    assert result.peak_bytes > 10 * 1024


def test_probe_leaves_tracing_off():
    probe_allocations(Variant("noop", lambda: None), 5)
    assert not tracemalloc.is_tracing()


def test_probe_stops_tracing_when_variant_fails():
    def _fail():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        probe_allocations(Variant("fail", _fail), 1)
    assert not tracemalloc.is_tracing()


def test_probe_rejects_non_positive_invocations():
    with pytest.raises(ConfigurationFault):
        probe_allocations(Variant("noop", lambda: None), 0)


def test_probe_refuses_to_nest():
    tracemalloc.start()
    try:
        with pytest.raises(ConfigurationFault):
            probe_allocations(Variant("noop", lambda: None), 1)
    finally:
        tracemalloc.stop()


def test_render_allocations():
    text = render_allocations(
        "Concat",
        [AllocationResult("plus", 100, 2048, 0), AllocationResult("join", 100, 1024, -16)],
    )
    lines = text.splitlines()
    assert lines[0] == "--- Concat: allocations (100 invocations) ---"
    assert "peak ~2.0 KiB" in lines[1]
    assert "net -16 B" in lines[2]
