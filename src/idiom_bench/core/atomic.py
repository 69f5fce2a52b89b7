"""Lock-free primitives shared by stability workers.

Both types lean on operations the interpreter performs as a single step:
rebinding an attribute to a new object, and advancing an ``itertools.count``.
Neither takes a lock, so the races they expose are exactly the races the
variants under test are exposed to.
"""

from __future__ import annotations

import itertools
import re
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

_COUNT_REPR = re.compile(r"^count\((\d+)\)$")


class AtomicReference(Generic[T]):
    """Single-slot cell whose value is only ever replaced wholesale.

    Readers see either the previous object or the new one, never a partially
    written value. There is no compare-and-set: callers that need to act on a
    value must read it once and work with the local binding.
    """

    __slots__ = ("_value",)

    def __init__(self, value: Optional[T] = None) -> None:
        self._value = value

    def get(self) -> Optional[T]:
        return self._value

    def set(self, value: Optional[T]) -> None:
        self._value = value

    def is_present(self) -> bool:
        return self._value is not None

    def __repr__(self) -> str:
        return f"AtomicReference({self._value!r})"


class AtomicCounter:
    """Fetch-and-add counter backed by ``itertools.count``.

    ``next()`` on a count object advances and returns in one step, so
    concurrent increments are never lost.

    A count object exposes no read accessor, so ``value`` parses its repr,
    which CPython and PyPy both render as ``count(<next value>)``. Reading
    never advances the counter; an unrecognised repr raises ``RuntimeError``.
    """

    __slots__ = ("_seq",)

    def __init__(self) -> None:
        self._seq = itertools.count()

    def increment(self) -> int:
        """Add one and return the value held before the increment."""
        return next(self._seq)

    @property
    def value(self) -> int:
        # repr of a count object is "count(<next value>)".
        match = _COUNT_REPR.match(repr(self._seq))
        if match is None:  # pragma: no cover - interpreter specific
            raise RuntimeError(f"Unrecognised counter state: {self._seq!r}")
        return int(match.group(1))

    def __repr__(self) -> str:
        return f"AtomicCounter(value={self.value})"
