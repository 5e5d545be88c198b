"""Turns a RunContext + Flow into a Plan (image refs + publish decision).

Rules:
  - feature  -> :<shortsha> [+ :latest if latest_on_feature]
                publish only on a direct push with publish_feature
  - mr       -> :<shortsha>, :<next-rc>                    (publish)
  - default  -> :<shortsha>, :<next-rc>, :<default-branch>
                [+ :latest if latest_on_default]            (publish)
  - release  -> :<tag> [+ :latest if tag_latest]            (publish)
  - fallback -> :<shortsha>, :<next-rc>
                [+ :<default-branch> when on the default branch] (publish)

Planning never raises: candidate tags that do not survive cleaning are
dropped, and a missing RC forecast just leaves the RC tag out.
"""

from __future__ import annotations

from dataclasses import dataclass

from tagplan.core.result import Err, Ok, Result
from tagplan.engine.context import RunContext
from tagplan.engine.errors import ConfigurationError
from tagplan.engine.flow import Flow
from tagplan.engine.forecast import Forecast
from tagplan.engine.tags import clean_tag, dedup, is_valid_tag

__all__ = ["LATEST", "Plan", "PlanOptions", "plan_build", "require_plan", "image_base"]


LATEST = "latest"


@dataclass(frozen=True, slots=True)
class PlanOptions:
    latest_on_feature: bool = False
    latest_on_default: bool = False
    tag_latest: bool = False
    publish_feature: bool = False


@dataclass(frozen=True, slots=True)
class Plan:
    refs: tuple[str, ...]
    publish: bool

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(ref.rsplit(":", 1)[-1] for ref in self.refs)


EMPTY_PLAN = Plan(refs=(), publish=False)


def image_base(context: RunContext) -> str | None:
    registry = context.registry_base.strip()
    app = context.application_name.strip()
    if not registry or not app:
        return None
    return f"{registry.rstrip('/')}/{app}"


def _candidate_tags(
    context: RunContext,
    flow: Flow,
    forecast: Forecast | None,
    options: PlanOptions,
) -> list[str]:
    next_rc = (forecast.next_rc if forecast is not None else None) or ""

    match flow:
        case Flow.FEATURE:
            tags = [context.short_sha]
            if options.latest_on_feature:
                tags.append(LATEST)
        case Flow.MERGE_REQUEST:
            tags = [context.short_sha, next_rc]
        case Flow.DEFAULT:
            tags = [context.short_sha, next_rc, context.default_branch]
            if options.latest_on_default:
                tags.append(LATEST)
        case Flow.RELEASE:
            tags = [context.tag]
            if options.tag_latest:
                tags.append(LATEST)
        case _:
            # Kept apart from DEFAULT: the branch tag here depends on the
            # context, not on the flow.
            tags = [context.short_sha, next_rc]
            if context.is_default_branch and context.default_branch:
                tags.append(context.default_branch)
    return tags


def _should_publish(context: RunContext, flow: Flow, options: PlanOptions) -> bool:
    if flow == Flow.FEATURE:
        return context.is_push and options.publish_feature
    return True


def plan_build(
    context: RunContext,
    flow: Flow,
    *,
    forecast: Forecast | None = None,
    options: PlanOptions | None = None,
) -> Plan:
    base = image_base(context)
    if base is None:
        return EMPTY_PLAN

    opts = options or PlanOptions()
    refs: list[str] = []
    for candidate in _candidate_tags(context, flow, forecast, opts):
        tag = clean_tag(candidate)
        if not tag or not is_valid_tag(tag):
            continue
        refs.append(f"{base}:{tag}")

    return Plan(refs=dedup(refs), publish=_should_publish(context, flow, opts))


def require_plan(
    context: RunContext,
    flow: Flow,
    *,
    forecast: Forecast | None = None,
    options: PlanOptions | None = None,
) -> Result[Plan, ConfigurationError]:
    """plan_build, with missing inputs and empty plans reported as errors."""
    if not context.registry_base.strip():
        return Err(
            ConfigurationError(
                message="registry base is empty",
                hint="Set CI_REGISTRY_IMAGE.",
            )
        )
    if not context.application_name.strip():
        return Err(
            ConfigurationError(
                message="application name is empty",
                hint="Set TAGPLAN_APPLICATION_NAME or use a registry path with a last segment.",
            )
        )

    plan = plan_build(context, flow, forecast=forecast, options=options)
    if not plan.refs:
        return Err(ConfigurationError(message=f"no image refs produced by planner (flow={flow})"))
    return Ok(plan)
