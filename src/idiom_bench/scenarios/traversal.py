"""Sum of doubled even numbers over 1..1000, six ways."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial, reduce
from typing import List, Tuple

import numpy as np

from idiom_bench.harness.registry import Scenario
from idiom_bench.harness.variant import Variant


@dataclass(frozen=True, slots=True)
class NumberSeries:
    values: Tuple[int, ...]
    array: np.ndarray


def build_series(size: int = 1000) -> NumberSeries:
    values = tuple(range(1, size + 1))
    array = np.arange(1, size + 1, dtype=np.int64)
    array.flags.writeable = False
    return NumberSeries(values=values, array=array)


def for_loop(series: NumberSeries) -> int:
    total = 0
    for i in series.values:
        if i % 2 == 0:
            total += i * 2
    return total


def reduce_fold(series: NumberSeries) -> int:
    return reduce(lambda acc, i: acc + i * 2 if i % 2 == 0 else acc, series.values, 0)


def eager_filter_map(series: NumberSeries) -> int:
    evens = list(filter(lambda i: i % 2 == 0, series.values))
    doubled = list(map(lambda i: i * 2, evens))
    return sum(doubled)


def lazy_generator(series: NumberSeries) -> int:
    return sum(i * 2 for i in series.values if i % 2 == 0)


def conditional_sum(series: NumberSeries) -> int:
    return sum([i * 2 if i % 2 == 0 else 0 for i in series.values])


def numpy_vectorized(series: NumberSeries) -> int:
    arr = series.array
    return int((arr[arr % 2 == 0] * 2).sum())


def build_variants(series: NumberSeries) -> List[Variant]:
    return [
        Variant("for_loop", partial(for_loop, series)),
        Variant("reduce_fold", partial(reduce_fold, series)),
        Variant("eager_filter_map", partial(eager_filter_map, series)),
        Variant("lazy_generator", partial(lazy_generator, series)),
        Variant("conditional_sum", partial(conditional_sum, series)),
        Variant("numpy_vectorized", partial(numpy_vectorized, series)),
    ]


def scenarios() -> List[Scenario]:
    return [
        Scenario(
            name="collections",
            title="Collection traversal",
            build_fixture=build_series,
            build_variants=build_variants,
            warmup_iters=500,
            measured_iters=5_000,
            allocation_probe_iters=200,
        )
    ]
