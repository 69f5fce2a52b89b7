"""Mapping small integers to names: branch chains versus table lookups."""

from __future__ import annotations

from functools import partial
from typing import Dict, List, Tuple

from idiom_bench.harness.registry import Scenario
from idiom_bench.harness.variant import Variant

NAMES: Tuple[str, ...] = ("One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine", "Ten")
OTHER = "Other"

_NAME_BY_VALUE: Dict[int, str] = {idx + 1: name for idx, name in enumerate(NAMES)}


def build_values() -> Tuple[int, ...]:
    return tuple(range(1, 16))


def _if_elif(value: int) -> str:
    if value == 1:
        return "One"
    elif value == 2:
        return "Two"
    elif value == 3:
        return "Three"
    elif value == 4:
        return "Four"
    elif value == 5:
        return "Five"
    elif value == 6:
        return "Six"
    elif value == 7:
        return "Seven"
    elif value == 8:
        return "Eight"
    elif value == 9:
        return "Nine"
    elif value == 10:
        return "Ten"
    else:
        return OTHER


def _match(value: int) -> str:
    match value:
        case 1:
            return "One"
        case 2:
            return "Two"
        case 3:
            return "Three"
        case 4:
            return "Four"
        case 5:
            return "Five"
        case 6:
            return "Six"
        case 7:
            return "Seven"
        case 8:
            return "Eight"
        case 9:
            return "Nine"
        case 10:
            return "Ten"
        case _:
            return OTHER


def _range_bucket(value: int) -> str:
    # Narrow to a bucket first, then index inside it.
    if 1 <= value <= 3:
        return NAMES[value - 1]
    if 4 <= value <= 7:
        return NAMES[value - 1]
    if 8 <= value <= 10:
        return NAMES[value - 1]
    return OTHER


def if_elif_chain(values: Tuple[int, ...]) -> Tuple[str, ...]:
    return tuple([_if_elif(v) for v in values])


def match_statement(values: Tuple[int, ...]) -> Tuple[str, ...]:
    return tuple([_match(v) for v in values])


def range_buckets(values: Tuple[int, ...]) -> Tuple[str, ...]:
    return tuple([_range_bucket(v) for v in values])


def dict_lookup(values: Tuple[int, ...]) -> Tuple[str, ...]:
    get = _NAME_BY_VALUE.get
    return tuple([get(v, OTHER) for v in values])


def build_variants(values: Tuple[int, ...]) -> List[Variant]:
    return [
        Variant("if_elif_chain", partial(if_elif_chain, values)),
        Variant("match_statement", partial(match_statement, values)),
        Variant("range_buckets", partial(range_buckets, values)),
        Variant("dict_lookup", partial(dict_lookup, values)),
    ]


def scenarios() -> List[Scenario]:
    return [
        Scenario(
            name="branch_dispatch",
            title="Branch dispatch: if/elif vs match vs lookup",
            build_fixture=build_values,
            build_variants=build_variants,
            warmup_iters=5_000,
            measured_iters=100_000,
        )
    ]
