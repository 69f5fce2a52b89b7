from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from idiom_bench.harness.errors import ConfigurationFault


class MutationAction(IntEnum):
    NONE = 0
    SET_PRESENT = 1
    SET_ABSENT = 2


@dataclass(frozen=True, slots=True)
class MutationPolicy:
    """Iteration-indexed rule for swapping the shared resource.

    Every ``period``-th local iteration swaps the cell; every
    ``period * absent_every``-th of those swaps it to absent instead of a fresh
    present value. Iteration 0 therefore always swaps to absent.
    """

    period: int = 100
    absent_every: int = 2

    def __post_init__(self) -> None:
        if self.period <= 0:
            raise ConfigurationFault(f"period must be > 0, got {self.period}")
        if self.absent_every <= 0:
            raise ConfigurationFault(f"absent_every must be > 0, got {self.absent_every}")

    def should_mutate(self, iteration: int) -> MutationAction:
        if iteration % self.period != 0:
            return MutationAction.NONE
        if iteration % (self.period * self.absent_every) == 0:
            return MutationAction.SET_ABSENT
        return MutationAction.SET_PRESENT

    def mutations_for(self, iterations: int) -> tuple[int, int]:
        """Return (present_swaps, absent_swaps) a worker performs over ``iterations``."""
        if iterations <= 0:
            return 0, 0
        total = (iterations - 1) // self.period + 1
        absent = (iterations - 1) // (self.period * self.absent_every) + 1
        return total - absent, absent
