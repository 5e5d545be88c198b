from __future__ import annotations

from collections.abc import Callable

import pytest

from tagplan.engine.context import RunContext
from tagplan.engine.errors import FormatError
from tagplan.engine.flow import Flow, describe_context, parse_flow, resolve_flow

MakeContext = Callable[..., RunContext]


def test_tag_build_is_release(make_context: MakeContext) -> None:
    c = make_context(tag="v1.0.0", ref_name="v1.0.0")
    assert resolve_flow(c) is Flow.RELEASE


def test_tag_on_feature_prefixed_ref_is_release(make_context: MakeContext) -> None:
    c = make_context(tag="feature/x", ref_name="feature/x", commit_branch="feature/x")
    assert not c.is_feature_branch
    assert resolve_flow(c) is Flow.RELEASE


def test_merge_request_beats_default_and_feature(make_context: MakeContext) -> None:
    c = make_context(
        pipeline_source="merge_request_event",
        ref_name="main",
        mr_iid="12",
        mr_source_branch="feature/login",
    )
    assert c.is_default_branch
    assert c.is_feature_branch
    assert resolve_flow(c) is Flow.MERGE_REQUEST


def test_default_branch_push(make_context: MakeContext) -> None:
    c = make_context(pipeline_source="push", ref_name="main", commit_branch="main")
    assert resolve_flow(c) is Flow.DEFAULT


def test_feature_branch_push(make_context: MakeContext) -> None:
    c = make_context(pipeline_source="push", ref_name="feature/x", commit_branch="feature/x")
    assert resolve_flow(c) is Flow.FEATURE


def test_unclassified_run_falls_back_to_default(make_context: MakeContext) -> None:
    c = make_context(pipeline_source="push", ref_name="hotfix/y", commit_branch="hotfix/y")
    assert resolve_flow(c) is Flow.DEFAULT


def test_forced_flow_is_returned_verbatim(make_context: MakeContext) -> None:
    c = make_context(tag="v1.0.0")
    assert resolve_flow(c, Flow.FEATURE) is Flow.FEATURE
    assert resolve_flow(c, Flow.AUTO) is Flow.RELEASE


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("", Flow.AUTO),
        ("auto", Flow.AUTO),
        ("Feature", Flow.FEATURE),
        ("mr", Flow.MERGE_REQUEST),
        ("merge_request", Flow.MERGE_REQUEST),
        ("merge-request", Flow.MERGE_REQUEST),
        (" default ", Flow.DEFAULT),
        ("RELEASE", Flow.RELEASE),
    ],
)
def test_parse_flow(text: str, expected: Flow) -> None:
    assert parse_flow(text) is expected


def test_parse_flow_rejects_unknown() -> None:
    with pytest.raises(FormatError, match="invalid flow"):
        parse_flow("nightly")


def test_describe_context(make_context: MakeContext) -> None:
    assert describe_context(make_context(tag="v2.0.0")) == "Tag push (v2.0.0)"
    assert describe_context(make_context(mr_iid="3")) == "Merge Request"
    assert describe_context(make_context(ref_name="main")) == "Push to default branch (main)"
    assert describe_context(make_context(ref_name="feature/a")) == "Feature branch (feature/a)"
    assert describe_context(make_context(ref_name="dev")) == "Branch push (dev)"
    assert describe_context(make_context(pipeline_source="schedule")) == "Pipeline source: schedule"
