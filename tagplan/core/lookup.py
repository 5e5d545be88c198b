"""Outcome of a best-effort lookup against an external system.

A lookup either found a value, positively found nothing, or could not be
answered (network down, bad token, unexpected payload). The release engine
only ever branches on "found or not"; `Unavailable.reason` exists so the
outer layer can tell the operator why a fallback was used.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeGuard, TypeVar, Union

__all__ = ["Found", "NotFound", "Unavailable", "Lookup", "is_found", "found_or"]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class NotFound:
    pass


@dataclass(frozen=True, slots=True)
class Unavailable:
    reason: str


Lookup = Union[Found[T], NotFound, Unavailable]


def is_found(lookup: Lookup[T]) -> TypeGuard[Found[T]]:
    return isinstance(lookup, Found)


def found_or(lookup: Lookup[T], default: T) -> T:
    """Return the found value, or `default` for NotFound/Unavailable."""
    if isinstance(lookup, Found):
        return lookup.value
    return default
