"""Value-object designs: generated dataclass, hand-written class, cached hash.

Each operation (construction, equality, hashing, copying) is its own
scenario so every table compares like with like.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, List, Tuple

from idiom_bench.harness.registry import Scenario
from idiom_bench.harness.variant import Variant

POPULATION = 100


@dataclass(frozen=True)
class PersonData:
    id: int
    name: str
    age: int
    email: str


class PersonPlain:
    def __init__(self, id: int, name: str, age: int, email: str) -> None:
        self.id = id
        self.name = name
        self.age = age
        self.email = email

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, PersonPlain):
            return NotImplemented
        if self.id != other.id:
            return False
        if self.name != other.name:
            return False
        if self.age != other.age:
            return False
        if self.email != other.email:
            return False
        return True

    def __hash__(self) -> int:
        result = self.id
        result = 31 * result + hash(self.name)
        result = 31 * result + self.age
        result = 31 * result + hash(self.email)
        return result

    def __repr__(self) -> str:
        return f"PersonPlain(id={self.id}, name='{self.name}', age={self.age}, email='{self.email}')"


class PersonCached:
    """Slotted person whose hash is computed once at construction."""

    __slots__ = ("id", "name", "age", "email", "_hash")

    def __init__(self, id: int, name: str, age: int, email: str) -> None:
        self.id = id
        self.name = name
        self.age = age
        self.email = email
        self._hash = hash((id, name, age, email))

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if other is None or type(self) is not type(other):
            return NotImplemented
        return (
            self._hash == other._hash
            and self.id == other.id
            and self.name == other.name
            and self.age == other.age
            and self.email == other.email
        )

    def __hash__(self) -> int:
        return self._hash


PersonFactory = Callable[[int, str, int, str], Any]

KINDS: Tuple[Tuple[str, PersonFactory], ...] = (
    ("dataclass", PersonData),
    ("plain_class", PersonPlain),
    ("cached_hash", PersonCached),
)


@dataclass(frozen=True, slots=True)
class Population:
    people: Dict[str, Tuple[Any, ...]]
    # Equal to ``people`` element-wise but separately constructed.
    twins: Dict[str, Tuple[Any, ...]]


def _person_args(i: int) -> Tuple[int, str, int, str]:
    return i, f"Person{i}", 20 + i % 50, f"person{i}@email.com"


def build_population(size: int = POPULATION) -> Population:
    people = {kind: tuple(factory(*_person_args(i)) for i in range(size)) for kind, factory in KINDS}
    twins = {kind: tuple(factory(*_person_args(i)) for i in range(size)) for kind, factory in KINDS}
    return Population(people=people, twins=twins)


def create(factory: PersonFactory) -> Tuple[int, str, int, str]:
    person = factory(7, "Test", 25, "test@email.com")
    return person.id, person.name, person.age, person.email


def count_equal(people: Tuple[Any, ...], twins: Tuple[Any, ...]) -> int:
    n = len(people)
    matches = 0
    for i in range(n):
        if people[i] == twins[i]:
            matches += 1
        if people[i] == people[(i + 1) % n]:
            matches += 1
    return matches


def distinct_count(people: Tuple[Any, ...], twins: Tuple[Any, ...]) -> int:
    return len(set(people) | set(twins))


def copy_dataclass(person: PersonData) -> Tuple[int, str, int, str]:
    clone = dataclasses.replace(person, age=30)
    return clone.id, clone.name, clone.age, clone.email


def copy_by_constructor(person: Any) -> Tuple[int, str, int, str]:
    clone = type(person)(person.id, person.name, 30, person.email)
    return clone.id, clone.name, clone.age, clone.email


def _pair_variants(fn: Callable[[Tuple[Any, ...], Tuple[Any, ...]], Any], population: Population) -> List[Variant]:
    return [Variant(kind, partial(fn, population.people[kind], population.twins[kind])) for kind, _ in KINDS]


def _copy_variants(population: Population) -> List[Variant]:
    target = 42
    return [
        Variant("dataclass_replace", partial(copy_dataclass, population.people["dataclass"][target])),
        Variant("plain_constructor", partial(copy_by_constructor, population.people["plain_class"][target])),
        Variant("cached_constructor", partial(copy_by_constructor, population.people["cached_hash"][target])),
    ]


def scenarios() -> List[Scenario]:
    return [
        Scenario(
            name="value_object_create",
            title="Value objects: construction",
            build_fixture=lambda: KINDS,
            build_variants=lambda kinds: [Variant(kind, partial(create, factory)) for kind, factory in kinds],
            warmup_iters=5_000,
            measured_iters=200_000,
        ),
        Scenario(
            name="value_object_equals",
            title="Value objects: equality",
            build_fixture=build_population,
            build_variants=partial(_pair_variants, count_equal),
            warmup_iters=200,
            measured_iters=5_000,
        ),
        Scenario(
            name="value_object_hash",
            title="Value objects: hashing into sets",
            build_fixture=build_population,
            build_variants=partial(_pair_variants, distinct_count),
            warmup_iters=200,
            measured_iters=5_000,
        ),
        Scenario(
            name="value_object_copy",
            title="Value objects: copy with one field changed",
            build_fixture=build_population,
            build_variants=_copy_variants,
            warmup_iters=5_000,
            measured_iters=100_000,
        ),
    ]
