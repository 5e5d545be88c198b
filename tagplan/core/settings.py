"""Typed settings loading.

Settings come from three layers, lowest precedence first:
- built-in defaults
- an optional tagplan.toml ([plan], [context], [gitlab] tables)
- TAGPLAN_* environment variables

CLI flags are applied on top by the command layer. Values stay primitive
here (bools, strings); the command layer turns them into engine types.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_number, get_str, get_table, parse_flag

__all__ = [
    "Settings",
    "PlanSettings",
    "ContextSettings",
    "GitLabSettings",
    "ConfigError",
    "DEFAULT_CONFIG_FILENAME",
    "load_settings",
    "apply_env",
]


DEFAULT_CONFIG_FILENAME = "tagplan.toml"
DEFAULT_FEATURE_PREFIX = "feature/"
DEFAULT_GITLAB_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when settings cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PlanSettings:
    """Opt-in tags and publishing switches."""

    latest_on_feature: bool = False
    latest_on_default: bool = False
    tag_latest: bool = False
    publish_feature: bool = False
    # Use the short commit SHA as the RC identifier instead of "rc.1".
    rc_short_sha: bool = False


@dataclass(frozen=True, slots=True)
class ContextSettings:
    feature_prefix: str = DEFAULT_FEATURE_PREFIX
    application_name: str | None = None
    bump: str | None = None
    flow: str | None = None


@dataclass(frozen=True, slots=True)
class GitLabSettings:
    timeout_seconds: float = DEFAULT_GITLAB_TIMEOUT_SECONDS
    base_url: str | None = None


@dataclass(frozen=True, slots=True)
class Settings:
    plan: PlanSettings = field(default_factory=PlanSettings)
    context: ContextSettings = field(default_factory=ContextSettings)
    gitlab: GitLabSettings = field(default_factory=GitLabSettings)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Settings:
        """Create Settings from a mapping (parsed TOML)."""
        plan: StrDict = get_table(data, "plan") or {}
        context: StrDict = get_table(data, "context") or {}
        gitlab: StrDict = get_table(data, "gitlab") or {}

        return cls(
            plan=PlanSettings(
                latest_on_feature=get_bool(plan, "latest_on_feature") or False,
                latest_on_default=get_bool(plan, "latest_on_default") or False,
                tag_latest=get_bool(plan, "tag_latest") or False,
                publish_feature=get_bool(plan, "publish_feature") or False,
                rc_short_sha=get_bool(plan, "rc_short_sha") or False,
            ),
            context=ContextSettings(
                feature_prefix=_prefix(context.get("feature_prefix"), DEFAULT_FEATURE_PREFIX),
                application_name=get_str(context, "application_name"),
                bump=get_str(context, "bump"),
                flow=get_str(context, "flow"),
            ),
            gitlab=GitLabSettings(
                timeout_seconds=_positive(get_number(gitlab, "timeout_seconds"))
                or DEFAULT_GITLAB_TIMEOUT_SECONDS,
                base_url=get_str(gitlab, "base_url"),
            ),
        )


def _prefix(value: object, current: str) -> str:
    # An explicit empty prefix is kept: it disables feature branch detection.
    if not isinstance(value, str):
        return current
    return value.strip()


def _positive(value: float | None) -> float | None:
    if value is None or value <= 0:
        return None
    return value


def _env_flag(env: Mapping[str, str], key: str, current: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return current
    parsed = parse_flag(raw)
    return current if parsed is None else parsed


def _env_str(env: Mapping[str, str], key: str, current: str | None) -> str | None:
    raw = env.get(key, "").strip()
    return raw or current


def _env_number(env: Mapping[str, str], key: str) -> float | None:
    raw = env.get(key, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def apply_env(settings: Settings, env: Mapping[str, str]) -> Settings:
    """Overlay TAGPLAN_* environment variables on top of `settings`."""
    plan = PlanSettings(
        latest_on_feature=_env_flag(env, "TAGPLAN_LATEST_ON_FEATURE", settings.plan.latest_on_feature),
        latest_on_default=_env_flag(env, "TAGPLAN_LATEST_ON_DEFAULT", settings.plan.latest_on_default),
        tag_latest=_env_flag(env, "TAGPLAN_TAG_LATEST", settings.plan.tag_latest),
        publish_feature=_env_flag(env, "TAGPLAN_PUBLISH_FEATURE", settings.plan.publish_feature),
        rc_short_sha=_env_flag(env, "TAGPLAN_RC_SHORT_SHA", settings.plan.rc_short_sha),
    )
    context = ContextSettings(
        feature_prefix=_prefix(env.get("TAGPLAN_FEATURE_PREFIX"), settings.context.feature_prefix),
        application_name=_env_str(
            env, "TAGPLAN_APPLICATION_NAME", settings.context.application_name
        ),
        bump=_env_str(env, "TAGPLAN_BUMP", settings.context.bump),
        flow=_env_str(env, "TAGPLAN_FLOW", settings.context.flow),
    )

    timeout = (
        _positive(_env_number(env, "TAGPLAN_GITLAB_TIMEOUT_SECONDS"))
        or settings.gitlab.timeout_seconds
    )
    gitlab = replace(
        settings.gitlab,
        timeout_seconds=timeout,
        base_url=_env_str(env, "GITLAB_BASE_URL", settings.gitlab.base_url),
    )
    return Settings(plan=plan, context=context, gitlab=gitlab)


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling import and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_settings(path: Path) -> Result[Settings, ConfigError]:
    """Load settings from a TOML file.

    Args:
        path: Path to tagplan.toml

    Returns:
        Ok(Settings) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Settings.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))
