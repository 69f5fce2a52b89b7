"""Building "Item1, Item2, ..., Item20, " from twenty short strings."""

from __future__ import annotations

import io
from functools import partial
from typing import List, Tuple

from idiom_bench.harness.registry import Scenario
from idiom_bench.harness.variant import Variant

SEPARATOR = ", "


def build_items(count: int = 20) -> Tuple[str, ...]:
    return tuple(f"Item{i}" for i in range(1, count + 1))


def plus_operator(items: Tuple[str, ...]) -> str:
    result = ""
    for item in items:
        result = result + item + SEPARATOR
    return result


def list_join(items: Tuple[str, ...]) -> str:
    parts = []
    for item in items:
        parts.append(item)
        parts.append(SEPARATOR)
    return "".join(parts)


def string_io(items: Tuple[str, ...]) -> str:
    buf = io.StringIO()
    for item in items:
        buf.write(item)
        buf.write(SEPARATOR)
    return buf.getvalue()


def separator_join(items: Tuple[str, ...]) -> str:
    # join puts the separator between items only; the trailing one is added back.
    return SEPARATOR.join(items) + SEPARATOR


def fstring_accumulate(items: Tuple[str, ...]) -> str:
    result = ""
    for item in items:
        result = f"{result}{item}{SEPARATOR}"
    return result


def build_variants(items: Tuple[str, ...]) -> List[Variant]:
    return [
        Variant("plus_operator", partial(plus_operator, items)),
        Variant("list_join", partial(list_join, items)),
        Variant("string_io", partial(string_io, items)),
        Variant("separator_join", partial(separator_join, items)),
        Variant("fstring_accumulate", partial(fstring_accumulate, items)),
    ]


def scenarios() -> List[Scenario]:
    return [
        Scenario(
            name="string_concat",
            title="String concatenation",
            build_fixture=build_items,
            build_variants=build_variants,
            warmup_iters=1_000,
            measured_iters=50_000,
            allocation_probe_iters=100,
        )
    ]
