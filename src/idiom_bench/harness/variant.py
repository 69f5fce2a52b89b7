from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar

from idiom_bench.harness.errors import ConfigurationFault, ExpectedAbsenceFault

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Variant:
    """One candidate implementation of an idiom.

    ``invoke`` takes no arguments; whatever input it needs is bound when the
    scenario builds its variants.
    """

    name: str
    invoke: Callable[[], Any]

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationFault("Variant name must be non-empty")
        if not callable(self.invoke):
            raise ConfigurationFault(f"Variant {self.name!r} invoke is not callable")


def require_present(value: Optional[T], what: str = "value") -> T:
    """Unsafe dereference: the value is asserted present.

    This is how variants spell "I am sure this is here"; when a concurrent swap
    proved them wrong the stability engine counts the resulting fault.
    """
    if value is None:
        raise ExpectedAbsenceFault(what)
    return value


def validate_variants(variants: Sequence[Variant]) -> None:
    if not variants:
        raise ConfigurationFault("Variant list must not be empty")
    seen = set()
    for variant in variants:
        if variant.name in seen:
            raise ConfigurationFault(f"Duplicate variant name: {variant.name}")
        seen.add(variant.name)


def variant_names(variants: Iterable[Variant]) -> tuple[str, ...]:
    return tuple(v.name for v in variants)
