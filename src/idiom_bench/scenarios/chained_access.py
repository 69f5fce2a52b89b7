"""Reading many fields out of a nested, partially optional profile."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any, List, Optional, Sequence

from idiom_bench.core.atomic import AtomicReference
from idiom_bench.harness.policy import MutationPolicy
from idiom_bench.harness.registry import Scenario, StabilityPlan
from idiom_bench.harness.variant import Variant, require_present


@dataclass(frozen=True, slots=True)
class Country:
    name: str
    code: str


@dataclass(frozen=True, slots=True)
class City:
    name: str
    country: Optional[Country]


@dataclass(frozen=True, slots=True)
class Address:
    street: str
    city: Optional[City]
    zip_code: Optional[str]


@dataclass(frozen=True, slots=True)
class NotificationSettings:
    email: bool
    push: bool
    frequency: str


@dataclass(frozen=True, slots=True)
class Preferences:
    theme: str
    notifications: Optional[NotificationSettings]


@dataclass(frozen=True, slots=True)
class UserProfile:
    name: str
    address: Optional[Address]
    preferences: Optional[Preferences]


def sample_profile() -> UserProfile:
    return UserProfile(
        name="John Doe",
        address=Address(
            street="123 Main St",
            city=City(name="New York", country=Country("USA", "US")),
            zip_code="10001",
        ),
        preferences=Preferences(
            theme="dark",
            notifications=NotificationSettings(email=True, push=False, frequency="daily"),
        ),
    )


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _chain(cell: AtomicReference, path: Sequence[str], default: Any = "") -> Any:
    # Presence is checked on one read and dereferenced on another.
    if cell.get() is None:
        return default
    node = require_present(cell.get(), "profile")
    for attr in path:
        node = getattr(node, attr)
        if node is None:
            return default
    return node


def chained_lookup(cell: AtomicReference) -> str:
    parts = [
        _chain(cell, ("name",)),
        _chain(cell, ("address", "street")),
        _chain(cell, ("address", "city", "name")),
        _chain(cell, ("address", "city", "country", "name")),
        _chain(cell, ("address", "city", "country", "code")),
        _chain(cell, ("address", "zip_code")),
        _chain(cell, ("preferences", "theme")),
        _flag(_chain(cell, ("preferences", "notifications", "email"), False)),
        _flag(_chain(cell, ("preferences", "notifications", "push"), False)),
        _chain(cell, ("preferences", "notifications", "frequency")),
    ]
    return "".join(parts)


def local_binding(cell: AtomicReference) -> str:
    profile = cell.get()
    if profile is None:
        return ""
    parts = [profile.name]

    address = profile.address
    if address is not None:
        parts.append(address.street)
        city = address.city
        if city is not None:
            parts.append(city.name)
            country = city.country
            if country is not None:
                parts.append(country.name)
                parts.append(country.code)
        parts.append(address.zip_code or "")

    prefs = profile.preferences
    if prefs is not None:
        parts.append(prefs.theme)
        notif = prefs.notifications
        if notif is not None:
            parts.append(_flag(notif.email))
            parts.append(_flag(notif.push))
            parts.append(notif.frequency)

    return "".join(parts)


def getattr_defaults(cell: AtomicReference) -> str:
    profile = cell.get()
    address = getattr(profile, "address", None)
    city = getattr(address, "city", None)
    country = getattr(city, "country", None)
    prefs = getattr(profile, "preferences", None)
    notif = getattr(prefs, "notifications", None)
    return "".join(
        (
            getattr(profile, "name", ""),
            getattr(address, "street", ""),
            getattr(city, "name", ""),
            getattr(country, "name", ""),
            getattr(country, "code", ""),
            getattr(address, "zip_code", None) or "",
            getattr(prefs, "theme", ""),
            _flag(getattr(notif, "email", False)),
            _flag(getattr(notif, "push", False)),
            getattr(notif, "frequency", ""),
        )
    )


def build_variants(cell: AtomicReference) -> List[Variant]:
    return [
        Variant("chained_lookup", partial(chained_lookup, cell)),
        Variant("local_binding", partial(local_binding, cell)),
        Variant("getattr_defaults", partial(getattr_defaults, cell)),
    ]


def _sparse_profile(iteration: int) -> UserProfile:
    return UserProfile(f"User{iteration}", None, None)


def scenarios() -> List[Scenario]:
    return [
        Scenario(
            name="chained_access",
            title="Chained access to nested optional fields",
            build_fixture=sample_profile,
            build_variants=lambda fixture: build_variants(AtomicReference(fixture)),
            warmup_iters=5_000,
            measured_iters=200_000,
            bytecode_profile=True,
            stability=StabilityPlan(
                build_variants=build_variants,
                initial_value=lambda: UserProfile("Test", None, None),
                present_factory=_sparse_profile,
                thread_count=8,
                iterations_per_thread=10_000,
                policy=MutationPolicy(period=100, absent_every=2),
            ),
        )
    ]
