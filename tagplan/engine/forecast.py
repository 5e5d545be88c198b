"""Next-version forecasting from the latest known tag.

Tag histories are not always consistent about a leading "v", so the
forecast keeps whatever prefix style the latest tag used. An empty latest
tag means "never released" and bootstraps from 0.0.0; a non-empty tag that
does not parse is an error, not a bootstrap.
"""

from __future__ import annotations

from dataclasses import dataclass

from tagplan.engine.errors import FormatError
from tagplan.engine.semver import ZERO, BumpKind, SemanticVersion

__all__ = ["Forecast", "DEFAULT_RC_IDENTIFIER", "build_forecast", "forecast_next", "forecast_next_rc"]


DEFAULT_RC_IDENTIFIER = "rc.1"


def forecast_next(latest_tag: str, bump: BumpKind) -> str:
    """Return the version following `latest_tag` for the given bump.

    Raises:
        FormatError: `latest_tag` is non-empty but not `[v]MAJOR.MINOR.PATCH`.
    """
    latest = latest_tag.strip()
    prefix = "v" if latest.startswith("v") else ""
    core = latest[len(prefix) :]

    if not core:
        base = ZERO
    else:
        try:
            base = SemanticVersion.parse(core)
        except FormatError as e:
            raise FormatError(f"unable to parse latest tag {latest_tag!r}: {e}", value=latest_tag) from e

    return prefix + base.increment(bump).format()


def forecast_next_rc(latest_tag: str, bump: BumpKind, identifier: str = "") -> str:
    """Like forecast_next, with a pre-release identifier appended.

    The identifier is opaque (usually a short commit hash); an empty one
    becomes "rc.1".
    """
    next_version = forecast_next(latest_tag, bump)
    return f"{next_version}-{identifier or DEFAULT_RC_IDENTIFIER}"


@dataclass(frozen=True, slots=True)
class Forecast:
    latest_tag: str
    bump: BumpKind
    next_version: str | None
    next_rc: str | None
    error: str | None = None


def build_forecast(latest_tag: str, bump: BumpKind, identifier: str = "") -> Forecast:
    """Compute both forecasts; a malformed latest tag leaves them unset instead of raising."""
    try:
        next_version = forecast_next(latest_tag, bump)
        next_rc = forecast_next_rc(latest_tag, bump, identifier)
    except FormatError as e:
        return Forecast(
            latest_tag=latest_tag,
            bump=bump,
            next_version=None,
            next_rc=None,
            error=str(e),
        )
    return Forecast(latest_tag=latest_tag, bump=bump, next_version=next_version, next_rc=next_rc)
