from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from tagplan.engine.errors import FormatError

__all__ = ["BumpKind", "SemanticVersion", "parse_bump_kind", "ZERO"]


_SEGMENT_RE = re.compile(r"[0-9]+")


class BumpKind(StrEnum):
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def parse_bump_kind(text: str) -> BumpKind:
    """Parse "major"/"minor"/"patch" (any case, surrounding whitespace ignored)."""
    s = text.strip().lower()
    for kind in BumpKind:
        if kind.value == s:
            return kind
    raise FormatError(
        f"invalid bump kind: {text!r} (expected one of: major, minor, patch)",
        value=text,
    )


@dataclass(frozen=True, slots=True, order=True)
class SemanticVersion:
    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        if self.major < 0 or self.minor < 0 or self.patch < 0:
            raise ValueError(f"version segments must be non-negative: {self.format()}")

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse exactly `MAJOR.MINOR.PATCH`; no prefix, no pre-release suffix."""
        parts = text.split(".")
        if len(parts) != 3:
            raise FormatError(
                f"invalid version format: expected MAJOR.MINOR.PATCH, got {text!r}",
                value=text,
            )

        numbers: list[int] = []
        for name, part in zip(("major", "minor", "patch"), parts):
            # int() alone would accept "+1", " 1", "1_0" and "1\n".
            if not _SEGMENT_RE.fullmatch(part):
                raise FormatError(f"invalid {name} segment {part!r} in {text!r}", value=text)
            numbers.append(int(part))

        return cls(numbers[0], numbers[1], numbers[2])

    def increment(self, kind: BumpKind) -> SemanticVersion:
        match kind:
            case BumpKind.MAJOR:
                return SemanticVersion(self.major + 1, 0, 0)
            case BumpKind.MINOR:
                return SemanticVersion(self.major, self.minor + 1, 0)
            case BumpKind.PATCH:
                return SemanticVersion(self.major, self.minor, self.patch + 1)
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")

    def compare(self, other: SemanticVersion) -> int:
        """Return -1, 0 or 1 as self is less than, equal to or greater than other."""
        if self < other:
            return -1
        if self > other:
            return 1
        return 0

    def format(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def __str__(self) -> str:
        return self.format()


ZERO = SemanticVersion(0, 0, 0)
