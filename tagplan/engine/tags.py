from __future__ import annotations

import re
from collections.abc import Iterable

__all__ = ["MAX_TAG_LENGTH", "clean_tag", "is_valid_tag", "dedup"]


MAX_TAG_LENGTH = 128

_TAG_RE = re.compile(r"^[a-z0-9_.-]{1,128}$")
_SEPARATORS_RE = re.compile(r"[\s/\\]+")
_HYPHENS_RE = re.compile(r"-{2,}")


def clean_tag(text: str) -> str:
    """Normalize a candidate image tag; may still be invalid (e.g. "feat+x")."""
    s = text.strip().lower()
    if not s:
        return ""
    s = _SEPARATORS_RE.sub("-", s)
    s = _HYPHENS_RE.sub("-", s)
    return s[:MAX_TAG_LENGTH]


def is_valid_tag(tag: str) -> bool:
    return _TAG_RE.fullmatch(tag) is not None


def dedup(items: Iterable[str]) -> tuple[str, ...]:
    """Drop repeats, keeping first-seen order."""
    return tuple(dict.fromkeys(items))
