"""Presence check on a nullable view-model field.

Two ways to ask "is the current edit a clip?": check the field, then read it
again through an unsafe dereference; or read it once and branch on that local.
Under concurrent swaps only the first can observe the field vanishing between
its check and its use.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import List

from idiom_bench.core.atomic import AtomicReference
from idiom_bench.harness.policy import MutationPolicy
from idiom_bench.harness.registry import Scenario, StabilityPlan
from idiom_bench.harness.variant import Variant, require_present


@dataclass(frozen=True, slots=True)
class EditData:
    is_clip: bool


def recheck_then_require(cell: AtomicReference) -> bool:
    if cell.get() is not None and require_present(cell.get(), "edit_data").is_clip:
        return True
    return False


def single_read_guard(cell: AtomicReference) -> bool:
    data = cell.get()
    return data is not None and data.is_clip


def getattr_default(cell: AtomicReference) -> bool:
    return getattr(cell.get(), "is_clip", False) is True


def build_variants(cell: AtomicReference) -> List[Variant]:
    return [
        Variant("recheck_then_require", partial(recheck_then_require, cell)),
        Variant("single_read_guard", partial(single_read_guard, cell)),
        Variant("getattr_default", partial(getattr_default, cell)),
    ]


def _present(_iteration: int) -> EditData:
    return EditData(is_clip=True)


def scenarios() -> List[Scenario]:
    return [
        Scenario(
            name="null_check",
            title="Presence check in a condition",
            build_fixture=lambda: EditData(is_clip=True),
            build_variants=lambda fixture: build_variants(AtomicReference(fixture)),
            warmup_iters=10_000,
            measured_iters=1_000_000,
            bytecode_profile=True,
            stability=StabilityPlan(
                build_variants=build_variants,
                initial_value=lambda: EditData(is_clip=True),
                present_factory=_present,
                thread_count=8,
                iterations_per_thread=20_000,
                policy=MutationPolicy(period=100, absent_every=2),
            ),
        )
    ]
