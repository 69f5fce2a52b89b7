"""Cost of routing work through a higher-order helper versus writing it inline."""

from __future__ import annotations

from functools import partial, singledispatch
from typing import Any, Callable, List, Tuple, TypeVar

from idiom_bench.harness.registry import Scenario
from idiom_bench.harness.variant import Variant

T = TypeVar("T")

CHECKED_TYPES: Tuple[type, ...] = (str, int, float)


def apply(block: Callable[[], T]) -> T:
    return block()


# --- single-expression blocks ---


def lambda_per_call(value: int) -> int:
    return apply(lambda: value)


def hoisted_callable(block: Callable[[], int]) -> int:
    return apply(block)


def inline_expression(value: int) -> int:
    return value


# --- blocks with a loop inside ---


def complex_lambda(seed: int) -> int:
    def block() -> int:
        result = 0
        for j in range(1, 11):
            result += seed * j
        return result

    return apply(block)


def complex_inline(seed: int) -> int:
    result = 0
    for j in range(1, 11):
        result += seed * j
    return result


def complex_builtin(seed: int) -> int:
    return sum(seed * j for j in range(1, 11))


# --- generic type checks ---


def is_instance_of(value: Any, tp: type) -> bool:
    return isinstance(value, tp)


def helper_checks(objects: Tuple[Any, ...]) -> Tuple[Tuple[bool, ...], ...]:
    return tuple(tuple(is_instance_of(obj, tp) for tp in CHECKED_TYPES) for obj in objects)


def inline_checks(objects: Tuple[Any, ...]) -> Tuple[Tuple[bool, ...], ...]:
    return tuple((isinstance(obj, str), isinstance(obj, int), isinstance(obj, float)) for obj in objects)


@singledispatch
def _flags(obj: Any) -> Tuple[bool, bool, bool]:
    return False, False, False


@_flags.register
def _(obj: str) -> Tuple[bool, bool, bool]:
    return True, False, False


@_flags.register
def _(obj: int) -> Tuple[bool, bool, bool]:
    # bool dispatches here too, matching isinstance(True, int).
    return False, True, False


@_flags.register
def _(obj: float) -> Tuple[bool, bool, bool]:
    return False, False, True


def dispatch_checks(objects: Tuple[Any, ...]) -> Tuple[Tuple[bool, ...], ...]:
    return tuple(_flags(obj) for obj in objects)


def _sample_objects() -> Tuple[Any, ...]:
    return ("String", 123, 45.6, True, (1, 2, 3))


def scenarios() -> List[Scenario]:
    return [
        Scenario(
            name="higher_order_calls",
            title="Higher-order call vs inline expression",
            build_fixture=lambda: 42,
            build_variants=lambda value: [
                Variant("lambda_per_call", partial(lambda_per_call, value)),
                Variant("hoisted_callable", partial(hoisted_callable, lambda: value)),
                Variant("inline_expression", partial(inline_expression, value)),
            ],
            warmup_iters=10_000,
            measured_iters=1_000_000,
            bytecode_profile=True,
        ),
        Scenario(
            name="higher_order_complex",
            title="Higher-order call with a loop body",
            build_fixture=lambda: 7,
            build_variants=lambda seed: [
                Variant("complex_lambda", partial(complex_lambda, seed)),
                Variant("complex_inline", partial(complex_inline, seed)),
                Variant("complex_builtin", partial(complex_builtin, seed)),
            ],
            warmup_iters=5_000,
            measured_iters=200_000,
        ),
        Scenario(
            name="type_checks",
            title="Generic type checks",
            build_fixture=_sample_objects,
            build_variants=lambda objects: [
                Variant("helper_function", partial(helper_checks, objects)),
                Variant("inline_isinstance", partial(inline_checks, objects)),
                Variant("singledispatch", partial(dispatch_checks, objects)),
            ],
            warmup_iters=5_000,
            measured_iters=100_000,
        ),
    ]
