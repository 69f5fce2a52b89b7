import sys

import pytest

from idiom_bench.core.atomic import AtomicCounter, AtomicReference
from idiom_bench.harness import stability
from idiom_bench.harness.errors import ConfigurationFault, ExpectedAbsenceFault
from idiom_bench.harness.policy import MutationPolicy
from idiom_bench.harness.stability import StabilityResult, stress_test, switch_interval
from idiom_bench.harness.variant import Variant, require_present


def _unsafe(cell):
    return Variant("unsafe", lambda: require_present(cell.get(), "payload"))


def _safe(cell):
    def _invoke():
        value = cell.get()
        return value is not None

    return Variant("safe", _invoke)


def _present(i):
    return {"i": i}


def test_single_thread_failures_follow_policy_exactly():
    cell = AtomicReference({"i": -1})
    result = stress_test(_unsafe(cell), 1, 100, MutationPolicy(period=10, absent_every=2), cell, _present)
    # Absent at i=0,20,40,60,80 and present again at i=10,30,...; invocations 1..10 of each block fail.
    assert result.failure_count == 50
    assert result.total_invocations == 100
    assert result.failure_rate == 0.5


def test_safe_variant_never_fails_under_contention():
    cell = AtomicReference({"i": -1})
    result = stress_test(
        _safe(cell), 8, 5_000, MutationPolicy(period=100, absent_every=2), cell, _present, switch_interval_s=1e-5
    )
    assert result.failure_count == 0
    assert result.thread_count == 8
    assert result.iterations_per_thread == 5_000


def test_unsafe_failures_bounded_by_invocations():
    cell = AtomicReference({"i": -1})
    result = stress_test(
        _unsafe(cell), 4, 2_000, MutationPolicy(period=50, absent_every=2), cell, _present, switch_interval_s=1e-5
    )
    assert 0 <= result.failure_count <= result.total_invocations
    assert result.failure_count > 0


def test_every_invocation_fails_when_never_present():
    cell = AtomicReference(None)
    result = stress_test(_unsafe(cell), 3, 300, MutationPolicy(period=10, absent_every=1), cell, _present)
    assert result.failure_count == 900


def test_zero_threads_rejected_before_any_invocation():
    calls = []
    variant = Variant("rec", lambda: calls.append(1))
    with pytest.raises(ConfigurationFault):
        stress_test(variant, 0, 10, MutationPolicy(), AtomicReference(None), _present)
    with pytest.raises(ConfigurationFault):
        stress_test(variant, 2, 0, MutationPolicy(), AtomicReference(None), _present)
    assert calls == []


def test_unexpected_fault_is_reraised_after_join():
    boom = ZeroDivisionError("boom")

    def _invoke():
        raise boom

    with pytest.raises(ZeroDivisionError) as excinfo:
        stress_test(Variant("broken", _invoke), 4, 1_000, MutationPolicy(), AtomicReference(None), _present)
    assert excinfo.value is boom


def test_unexpected_fault_from_present_factory_is_reraised():
    def _bad_factory(_i):
        raise KeyError("factory")

    cell = AtomicReference({"i": 0})
    with pytest.raises(KeyError):
        stress_test(_safe(cell), 2, 500, MutationPolicy(period=10, absent_every=2), cell, _bad_factory)


def test_switch_interval_restores_previous_value():
    before = sys.getswitchinterval()
    with switch_interval(1e-4):
        assert sys.getswitchinterval() == pytest.approx(1e-4)
    assert sys.getswitchinterval() == before


def test_switch_interval_restores_on_error():
    before = sys.getswitchinterval()
    with pytest.raises(ExpectedAbsenceFault):
        with switch_interval(1e-4):
            raise ExpectedAbsenceFault()
    assert sys.getswitchinterval() == before


def test_switch_interval_none_is_noop():
    before = sys.getswitchinterval()
    with switch_interval(None):
        assert sys.getswitchinterval() == before


def test_switch_interval_rejects_non_positive():
    with pytest.raises(ConfigurationFault):
        with switch_interval(0):
            pass


def test_result_properties():
    result = StabilityResult("v", thread_count=4, iterations_per_thread=250, failure_count=10)
    assert result.total_invocations == 1_000
    assert result.failure_rate == 0.01


class _Abort(BaseException):
    pass


def test_base_exception_from_variant_is_reraised():
    def _invoke():
        raise _Abort()

    with pytest.raises(_Abort):
        stress_test(Variant("aborts", _invoke), 2, 10, MutationPolicy(), AtomicReference(None), _present)


def test_base_exception_stops_other_workers_early():
    calls = AtomicCounter()

    def _invoke():
        calls.increment()
        raise _Abort()

    with pytest.raises(_Abort):
        stress_test(Variant("aborts", _invoke), 4, 1_000, MutationPolicy(), AtomicReference(None), _present)
    assert calls.value < 4 * 1_000


class _BrokenLogger:
    def error(self, *args, **kwargs):
        raise ValueError("I/O operation on closed file")

    def debug(self, *args, **kwargs):
        pass


def test_fault_survives_a_failing_log_sink(monkeypatch):
    monkeypatch.setattr(stability, "logger", _BrokenLogger())
    boom = ZeroDivisionError("boom")

    def _invoke():
        raise boom

    with pytest.raises(ZeroDivisionError) as excinfo:
        stress_test(Variant("broken", _invoke), 2, 10, MutationPolicy(), AtomicReference(None), _present)
    assert excinfo.value is boom
