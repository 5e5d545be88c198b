"""Classification of a pipeline run into a release flow.

Rules are evaluated top-down and the first match wins. The order is part of
the contract: a tag build whose ref also carries the feature prefix must be
a RELEASE, never a FEATURE.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum

from tagplan.engine.context import RunContext
from tagplan.engine.errors import FormatError

__all__ = ["Flow", "FLOW_RULES", "parse_flow", "resolve_flow", "describe_context"]


class Flow(StrEnum):
    AUTO = "auto"
    FEATURE = "feature"
    MERGE_REQUEST = "mr"
    DEFAULT = "default"
    RELEASE = "release"


_FLOW_ALIASES = {
    "merge_request": Flow.MERGE_REQUEST,
    "merge-request": Flow.MERGE_REQUEST,
}


def parse_flow(text: str) -> Flow:
    s = text.strip().lower()
    if not s:
        return Flow.AUTO
    for flow in Flow:
        if flow.value == s:
            return flow
    alias = _FLOW_ALIASES.get(s)
    if alias is not None:
        return alias
    raise FormatError(
        f"invalid flow: {text!r} (expected one of: auto, feature, mr, default, release)",
        value=text,
    )


FlowRule = tuple[str, Callable[[RunContext], bool], Flow]

FLOW_RULES: tuple[FlowRule, ...] = (
    ("tag build", lambda c: c.is_tag, Flow.RELEASE),
    ("merge request", lambda c: c.is_merge_request, Flow.MERGE_REQUEST),
    ("default branch", lambda c: c.is_default_branch, Flow.DEFAULT),
    ("feature branch", lambda c: c.is_feature_branch, Flow.FEATURE),
)

FALLBACK_FLOW = Flow.DEFAULT


def resolve_flow(context: RunContext, forced: Flow = Flow.AUTO) -> Flow:
    if forced != Flow.AUTO:
        return forced
    for _name, matches, flow in FLOW_RULES:
        if matches(context):
            return flow
    return FALLBACK_FLOW


def describe_context(context: RunContext) -> str:
    """Human label of the run for summaries."""
    if context.is_tag:
        return f"Tag push ({context.tag})"
    if context.is_merge_request:
        return "Merge Request"
    if context.is_default_branch:
        return f"Push to default branch ({context.ref_name})"
    if context.is_feature_branch:
        return f"Feature branch ({context.effective_ref})"
    if context.effective_ref:
        return f"Branch push ({context.effective_ref})"
    return f"Pipeline source: {context.pipeline_source or '<none>'}"
