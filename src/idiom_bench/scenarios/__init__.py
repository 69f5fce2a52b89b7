from typing import List

from idiom_bench.harness.registry import Scenario, ScenarioRegistry
from idiom_bench.scenarios import (
    assignments,
    chained_access,
    dispatch,
    higher_order,
    null_check,
    strings,
    traversal,
    value_objects,
)

_MODULES = (
    null_check,
    chained_access,
    assignments,
    traversal,
    strings,
    dispatch,
    value_objects,
    higher_order,
)


def default_scenarios() -> List[Scenario]:
    scs: List[Scenario] = []
    for module in _MODULES:
        scs += module.scenarios()
    return scs


def default_registry() -> ScenarioRegistry:
    return ScenarioRegistry.from_scenarios(default_scenarios())


__all__ = ["default_registry", "default_scenarios"]
