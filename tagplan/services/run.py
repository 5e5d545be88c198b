"""One pipeline run, end to end: facts + lookups -> flow, bump, forecast, plan.

This is the only place where lookups meet the engine. Lookup failures are
absorbed here into documented fallbacks (no latest tag -> 0.0.0, no manual
bump -> PATCH) and kept on the outcome for the summary.
"""

from __future__ import annotations

from dataclasses import dataclass

from tagplan.core.lookup import Lookup, found_or
from tagplan.core.result import Result
from tagplan.core.settings import Settings
from tagplan.engine.bump import BumpResolution, resolve_bump
from tagplan.engine.context import RunContext
from tagplan.engine.errors import ConfigurationError
from tagplan.engine.flow import Flow, resolve_flow
from tagplan.engine.forecast import Forecast, build_forecast
from tagplan.engine.planner import Plan, PlanOptions, require_plan
from tagplan.engine.semver import BumpKind
from tagplan.gitlab.merge_requests import ManualBumpSource
from tagplan.gitlab.tags import TagHistorySource

__all__ = ["RunOutcome", "RunRequest", "evaluate_run", "plan_options"]


@dataclass(frozen=True, slots=True)
class RunRequest:
    context: RunContext
    settings: Settings
    forced_flow: Flow = Flow.AUTO
    bump_override: BumpKind | None = None
    # Explicit latest tag; skips the tag history lookup when set ("" = never released).
    latest_tag: str | None = None


@dataclass(frozen=True, slots=True)
class RunOutcome:
    context: RunContext
    flow: Flow
    bump: BumpResolution
    latest_tag: str
    latest_lookup: Lookup[str] | None
    bump_lookup: Lookup[BumpKind] | None
    forecast: Forecast
    plan: Result[Plan, ConfigurationError]


def plan_options(settings: Settings) -> PlanOptions:
    return PlanOptions(
        latest_on_feature=settings.plan.latest_on_feature,
        latest_on_default=settings.plan.latest_on_default,
        tag_latest=settings.plan.tag_latest,
        publish_feature=settings.plan.publish_feature,
    )


def evaluate_run(
    request: RunRequest,
    *,
    tags: TagHistorySource | None = None,
    manual_bump: ManualBumpSource | None = None,
) -> RunOutcome:
    context = request.context

    bump_lookups: list[Lookup[BumpKind]] = []

    def discover(mr_iid: str) -> Lookup[BumpKind]:
        assert manual_bump is not None
        lookup = manual_bump.bump_for(mr_iid)
        bump_lookups.append(lookup)
        return lookup

    bump = resolve_bump(
        request.bump_override,
        discover if manual_bump is not None else None,
        is_merge_request=context.is_merge_request,
        mr_iid=context.mr_iid,
    )

    latest_lookup: Lookup[str] | None = None
    if request.latest_tag is not None:
        latest_tag = request.latest_tag
    elif tags is not None:
        latest_lookup = tags.latest_semantic_tag()
        latest_tag = found_or(latest_lookup, "")
    else:
        latest_tag = ""

    identifier = context.short_sha if request.settings.plan.rc_short_sha else ""
    forecast = build_forecast(latest_tag, bump.kind, identifier)

    flow = resolve_flow(context, request.forced_flow)
    plan = require_plan(
        context,
        flow,
        forecast=forecast,
        options=plan_options(request.settings),
    )

    return RunOutcome(
        context=context,
        flow=flow,
        bump=bump,
        latest_tag=latest_tag,
        latest_lookup=latest_lookup,
        bump_lookup=bump_lookups[0] if bump_lookups else None,
        forecast=forecast,
        plan=plan,
    )
