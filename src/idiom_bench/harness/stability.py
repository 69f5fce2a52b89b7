"""Concurrent stability tester.

Workers share one :class:`AtomicReference`, invoke the variant bound to it and
swap it according to a :class:`MutationPolicy`. Absence faults are counted on
a shared :class:`AtomicCounter`; anything else stops the run and is re-raised
to the caller once every worker has been joined.

Nothing here takes a lock. Which reference a worker observes between its own
swaps is left to the scheduler on purpose.
"""

from __future__ import annotations

import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional

from structlog import get_logger

from idiom_bench.core import timebase
from idiom_bench.core.atomic import AtomicCounter, AtomicReference
from idiom_bench.harness.errors import ConfigurationFault, ExpectedAbsenceFault
from idiom_bench.harness.policy import MutationAction, MutationPolicy
from idiom_bench.harness.variant import Variant

logger = get_logger("harness.stability")

PresentFactory = Callable[[int], Any]


@dataclass(frozen=True, slots=True)
class StabilityResult:
    variant_name: str
    thread_count: int
    iterations_per_thread: int
    failure_count: int
    elapsed_ns: int = 0

    @property
    def total_invocations(self) -> int:
        return self.thread_count * self.iterations_per_thread

    @property
    def failure_rate(self) -> float:
        return self.failure_count / self.total_invocations


def validate_stress_params(thread_count: int, iterations_per_thread: int) -> None:
    if thread_count <= 0:
        raise ConfigurationFault(f"thread_count must be > 0, got {thread_count}")
    if iterations_per_thread <= 0:
        raise ConfigurationFault(f"iterations_per_thread must be > 0, got {iterations_per_thread}")


@contextmanager
def switch_interval(seconds: Optional[float]) -> Iterator[None]:
    """Temporarily shorten the interpreter's thread switch interval.

    A shorter interval lets workers interleave between a variant's check and
    its use often enough for the difference between access patterns to show.
    """
    if seconds is None:
        yield
        return
    if seconds <= 0:
        raise ConfigurationFault(f"switch interval must be > 0, got {seconds}")
    previous = sys.getswitchinterval()
    sys.setswitchinterval(seconds)
    try:
        yield
    finally:
        sys.setswitchinterval(previous)


def stress_test(
    variant: Variant,
    thread_count: int,
    iterations_per_thread: int,
    policy: MutationPolicy,
    cell: AtomicReference,
    present_factory: PresentFactory,
    *,
    switch_interval_s: Optional[float] = None,
) -> StabilityResult:
    """Run ``variant`` from ``thread_count`` threads against the shared ``cell``.

    ``variant.invoke`` must read ``cell``; ``present_factory(i)`` builds the
    value a worker swaps in at local iteration ``i`` when the policy asks for a
    present value.
    """
    validate_stress_params(thread_count, iterations_per_thread)

    failures = AtomicCounter()
    # list.append is atomic; the first entry is the fault surfaced to the caller.
    errors: List[BaseException] = []
    invoke = variant.invoke
    should_mutate = policy.should_mutate

    def _worker() -> None:
        try:
            for i in range(iterations_per_thread):
                if errors:
                    return
                try:
                    invoke()
                except ExpectedAbsenceFault:
                    failures.increment()
                action = should_mutate(i)
                if action is MutationAction.SET_PRESENT:
                    cell.set(present_factory(i))
                elif action is MutationAction.SET_ABSENT:
                    cell.set(None)
        except BaseException as exc:
            errors.append(exc)

    workers = [
        threading.Thread(target=_worker, name=f"stability-{variant.name}-{idx}")
        for idx in range(thread_count)
    ]

    with switch_interval(switch_interval_s):
        start = timebase.perf_ns()
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()
        elapsed = max(0, timebase.perf_ns() - start)

    if errors:
        try:
            logger.error(
                "Stability run aborted by unexpected fault",
                variant=variant.name,
                error=repr(errors[0]),
                faults=len(errors),
            )
        finally:
            raise errors[0]

    result = StabilityResult(
        variant_name=variant.name,
        thread_count=thread_count,
        iterations_per_thread=iterations_per_thread,
        failure_count=failures.value,
        elapsed_ns=elapsed,
    )
    logger.debug(
        "Variant stress tested",
        variant=variant.name,
        thread_count=thread_count,
        iterations_per_thread=iterations_per_thread,
        failure_count=result.failure_count,
        swaps_per_thread=policy.mutations_for(iterations_per_thread),
    )
    return result
