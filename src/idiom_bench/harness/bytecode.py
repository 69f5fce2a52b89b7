from __future__ import annotations

import dis
import functools
import types
from dataclasses import dataclass
from typing import Any, Iterator, Sequence

from idiom_bench.harness.errors import ConfigurationFault
from idiom_bench.harness.variant import Variant


@dataclass(frozen=True, slots=True)
class BytecodeProfile:
    variant_name: str
    instructions: int
    calls: int
    attribute_loads: int


def _unwrap(fn: Any) -> Any:
    while True:
        if isinstance(fn, functools.partial):
            fn = fn.func
        elif hasattr(fn, "__wrapped__"):
            fn = fn.__wrapped__
        else:
            return fn


def _code_objects(code: types.CodeType) -> Iterator[types.CodeType]:
    yield code
    for const in code.co_consts:
        if isinstance(const, types.CodeType):
            yield from _code_objects(const)


def instruction_profile(variant: Variant) -> BytecodeProfile:
    """Count instructions in the variant's function and any code nested in it."""
    fn = _unwrap(variant.invoke)
    code = getattr(fn, "__code__", None)
    if code is None:
        raise ConfigurationFault(f"Variant {variant.name!r} has no Python bytecode to profile")

    instructions = calls = attribute_loads = 0
    for obj in _code_objects(code):
        for ins in dis.get_instructions(obj):
            if ins.opname in ("CACHE", "RESUME", "EXTENDED_ARG"):
                continue
            instructions += 1
            if ins.opname.startswith("CALL"):
                calls += 1
            elif ins.opname in ("LOAD_ATTR", "LOAD_METHOD"):
                attribute_loads += 1
    return BytecodeProfile(
        variant_name=variant.name,
        instructions=instructions,
        calls=calls,
        attribute_loads=attribute_loads,
    )


def render_profiles(title: str, profiles: Sequence[BytecodeProfile]) -> str:
    lines = [f"--- {title}: bytecode ---"]
    width = max(len(p.variant_name) for p in profiles)
    for p in profiles:
        lines.append(
            f"{p.variant_name:<{width}}  {p.instructions:>4} instr  {p.calls:>3} calls  {p.attribute_loads:>3} attr loads"
        )
    return "\n".join(lines)
