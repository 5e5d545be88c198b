"""Flow / version / plan engine. Pure functions over immutable inputs."""

from .bump import BumpResolution, BumpSource, resolve_bump
from .context import RunContext, RunFacts, build_run_context
from .errors import ConfigurationError, FormatError
from .flow import Flow, parse_flow, resolve_flow
from .forecast import Forecast, build_forecast, forecast_next, forecast_next_rc
from .planner import Plan, PlanOptions, plan_build, require_plan
from .semver import BumpKind, SemanticVersion, parse_bump_kind

__all__ = [
    "BumpKind",
    "BumpResolution",
    "BumpSource",
    "ConfigurationError",
    "Flow",
    "Forecast",
    "FormatError",
    "Plan",
    "PlanOptions",
    "RunContext",
    "RunFacts",
    "SemanticVersion",
    "build_forecast",
    "build_run_context",
    "forecast_next",
    "forecast_next_rc",
    "parse_bump_kind",
    "parse_flow",
    "plan_build",
    "require_plan",
    "resolve_bump",
    "resolve_flow",
]
