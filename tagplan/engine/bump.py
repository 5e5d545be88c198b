"""Which bump kind governs this run, and where it came from.

Precedence, first match wins:
1. explicit override (the discovery lookup is not even attempted)
2. a manual selection discovered for the current merge request
3. PATCH
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from tagplan.core.lookup import Found, Lookup
from tagplan.engine.semver import BumpKind

__all__ = ["BumpSource", "BumpResolution", "DiscoverBump", "resolve_bump"]


class BumpSource(StrEnum):
    OVERRIDE = "override"
    DISCOVERED = "merge request selection"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class BumpResolution:
    kind: BumpKind
    source: BumpSource


DiscoverBump = Callable[[str], Lookup[BumpKind]]


@dataclass(frozen=True, slots=True)
class _BumpInputs:
    override: BumpKind | None
    discover: DiscoverBump | None
    is_merge_request: bool
    mr_iid: str


def _from_override(inputs: _BumpInputs) -> BumpKind | None:
    return inputs.override


def _from_merge_request(inputs: _BumpInputs) -> BumpKind | None:
    if inputs.discover is None or not inputs.is_merge_request or not inputs.mr_iid.strip():
        return None
    lookup = inputs.discover(inputs.mr_iid.strip())
    if isinstance(lookup, Found):
        return lookup.value
    return None


_BUMP_RULES: tuple[tuple[BumpSource, Callable[[_BumpInputs], BumpKind | None]], ...] = (
    (BumpSource.OVERRIDE, _from_override),
    (BumpSource.DISCOVERED, _from_merge_request),
)


def resolve_bump(
    override: BumpKind | None,
    discover: DiscoverBump | None,
    *,
    is_merge_request: bool,
    mr_iid: str,
) -> BumpResolution:
    inputs = _BumpInputs(
        override=override,
        discover=discover,
        is_merge_request=is_merge_request,
        mr_iid=mr_iid,
    )
    for source, rule in _BUMP_RULES:
        kind = rule(inputs)
        if kind is not None:
            return BumpResolution(kind=kind, source=source)
    return BumpResolution(kind=BumpKind.PATCH, source=BumpSource.DEFAULT)
