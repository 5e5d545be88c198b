from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from tagplan.engine.context import RunContext, RunFacts, build_run_context


@pytest.fixture
def make_context() -> Callable[..., RunContext]:
    """Build a RunContext from RunFacts overrides, with a usable registry by default."""

    def _make(**overrides: Any) -> RunContext:
        values: dict[str, Any] = {
            "sha": "abcdef1234567890",
            "default_branch": "main",
            "registry_base": "registry.example.com/group/app",
        }
        values.update(overrides)
        return build_run_context(RunFacts(**values))

    return _make
