from __future__ import annotations

from dataclasses import dataclass


class FormatError(ValueError):
    """Malformed version, bump or flow text.

    Raised by the parsing functions and propagated by the forecaster; never
    defaulted away silently.
    """

    def __init__(self, message: str, *, value: str) -> None:
        super().__init__(message)
        self.value = value


@dataclass(frozen=True, slots=True)
class ConfigurationError:
    """Planning inputs are missing (registry base, application name) or produced no refs."""

    message: str
    hint: str | None = None
