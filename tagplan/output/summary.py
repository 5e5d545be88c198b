"""CI run summary: scannable sections printed before the plan."""

from __future__ import annotations

from tagplan.core.lookup import Found, Lookup, NotFound, Unavailable
from tagplan.engine.bump import BumpSource
from tagplan.engine.flow import describe_context
from tagplan.engine.planner import Plan
from tagplan.output.console import ConsoleProtocol, Style
from tagplan.services.run import RunOutcome

__all__ = ["print_summary", "print_plan"]


def _or_none(value: str) -> str:
    return value if value.strip() else "<none>"


def _flag(value: bool) -> str:
    return "yes" if value else "no"


def _lookup_status(lookup: Lookup[object] | None) -> str | None:
    match lookup:
        case Found():
            return "found"
        case NotFound():
            return "not found"
        case Unavailable(reason=reason):
            return f"unavailable ({reason})"
        case _:
            return None


def print_summary(outcome: RunOutcome, console: ConsoleProtocol) -> None:
    c = outcome.context

    console.header("Pipeline")
    console.field("Context", describe_context(c))
    console.field("Pipeline Source", _or_none(c.pipeline_source))
    console.field("Flow", outcome.flow.value)

    console.header("Ref / Commit")
    console.field("Branch or Tag (raw)", _or_none(c.ref_name))
    console.field("Effective Ref", _or_none(c.effective_ref))
    if c.is_tag:
        console.field("Tag", c.tag)
    console.field("Default Branch", _or_none(c.default_branch))
    console.field("Feature Prefix", _or_none(c.feature_prefix))
    console.field("Commit SHA", _or_none(c.sha))
    console.field("Commit Short SHA", _or_none(c.short_sha))

    if c.is_merge_request:
        console.header("Merge Request")
        console.field("Merge Request IID", _or_none(c.mr_iid))
        console.field("Target Branch", _or_none(c.mr_target_branch))

    console.header("Project")
    console.field("Project Path", _or_none(c.project_path))
    console.field("Registry Image", _or_none(c.registry_base))
    console.field("Application Name", _or_none(c.application_name))

    console.header("Derived")
    console.field("Is Merge Request", _flag(c.is_merge_request))
    console.field("Is Default Branch", _flag(c.is_default_branch))
    console.field("Is Feature Branch", _flag(c.is_feature_branch))
    console.field("Is Tag Build", _flag(c.is_tag))
    bump = outcome.bump
    if bump.source == BumpSource.DEFAULT:
        console.field("Bump Type", bump.kind.label)
    else:
        console.field("Bump Type", f"{bump.kind.label} (from {bump.source.value})")
    bump_status = _lookup_status(outcome.bump_lookup)
    if bump_status is not None:
        console.field("MR Bump Lookup", bump_status)

    console.header("Tags")
    latest_status = _lookup_status(outcome.latest_lookup)
    if latest_status is not None:
        console.field("Tag Lookup", latest_status)
    console.field("Latest Tag", outcome.latest_tag or "<none> (starting from 0.0.0)")
    forecast = outcome.forecast
    if forecast.error is not None:
        console.warning(f"version forecast skipped: {forecast.error}")
    else:
        console.field("Next Version", forecast.next_version or "<none>")
        console.field("Next RC Version", forecast.next_rc or "<none>")


def print_plan(plan: Plan, console: ConsoleProtocol) -> None:
    console.header("Plan")
    for ref in plan.refs:
        console.field("tag", ref)
    console.field("Publish", _flag(plan.publish))
    if not plan.publish:
        console.print("  images will be built but not published", Style.DIM)
