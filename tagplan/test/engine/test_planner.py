from __future__ import annotations

import re
from collections.abc import Callable

from tagplan.core.result import Err, Ok
from tagplan.engine.context import RunContext
from tagplan.engine.flow import Flow, resolve_flow
from tagplan.engine.forecast import build_forecast
from tagplan.engine.planner import EMPTY_PLAN, PlanOptions, image_base, plan_build, require_plan
from tagplan.engine.semver import BumpKind

MakeContext = Callable[..., RunContext]

BASE = "registry.example.com/group/svc"
TAG_RE = re.compile(r"[a-z0-9_.-]{1,128}")


def _svc(make_context: MakeContext, **overrides: str) -> RunContext:
    values = {
        "registry_base": "registry.example.com/group",
        "application_name": "svc",
        "short_sha": "abc12345",
    }
    values.update(overrides)
    return make_context(**values)


def test_default_branch_without_prior_tags(make_context: MakeContext) -> None:
    c = _svc(make_context, pipeline_source="push", ref_name="main")
    flow = resolve_flow(c)
    plan = plan_build(c, flow, forecast=build_forecast("", BumpKind.PATCH))

    assert flow is Flow.DEFAULT
    assert plan.refs == (f"{BASE}:abc12345", f"{BASE}:0.0.1-rc.1", f"{BASE}:main")
    assert plan.publish is True


def test_feature_push_without_opt_in(make_context: MakeContext) -> None:
    c = _svc(make_context, pipeline_source="push", ref_name="feature/x")
    plan = plan_build(c, resolve_flow(c), forecast=build_forecast("v1.0.0", BumpKind.PATCH))

    assert plan.refs == (f"{BASE}:abc12345",)
    assert plan.publish is False


def test_feature_push_with_opt_in(make_context: MakeContext) -> None:
    c = _svc(make_context, pipeline_source="push", ref_name="feature/x")
    options = PlanOptions(latest_on_feature=True, publish_feature=True)
    plan = plan_build(c, Flow.FEATURE, options=options)

    assert plan.refs == (f"{BASE}:abc12345", f"{BASE}:latest")
    assert plan.publish is True


def test_feature_publish_requires_push(make_context: MakeContext) -> None:
    c = _svc(make_context, pipeline_source="web", ref_name="feature/x")
    plan = plan_build(c, Flow.FEATURE, options=PlanOptions(publish_feature=True))
    assert plan.publish is False


def test_release_tag_build(make_context: MakeContext) -> None:
    c = _svc(make_context, tag="v2.0.0", ref_name="v2.0.0")
    plan = plan_build(c, resolve_flow(c), options=PlanOptions(tag_latest=True))

    assert plan.refs == (f"{BASE}:v2.0.0", f"{BASE}:latest")
    assert plan.publish is True
    assert plan.tags == ("v2.0.0", "latest")


def test_release_without_tag_latest(make_context: MakeContext) -> None:
    c = _svc(make_context, tag="v2.0.0")
    assert plan_build(c, Flow.RELEASE).refs == (f"{BASE}:v2.0.0",)


def test_merge_request(make_context: MakeContext) -> None:
    c = _svc(make_context, mr_iid="7", mr_source_branch="feature/x")
    forecast = build_forecast("v1.4.2", BumpKind.MINOR)
    plan = plan_build(c, resolve_flow(c), forecast=forecast)

    assert plan.refs == (f"{BASE}:abc12345", f"{BASE}:v1.5.0-rc.1")
    assert plan.publish is True


def test_default_with_latest(make_context: MakeContext) -> None:
    c = _svc(make_context, ref_name="main")
    plan = plan_build(
        c,
        Flow.DEFAULT,
        forecast=build_forecast("1.0.0", BumpKind.PATCH),
        options=PlanOptions(latest_on_default=True),
    )
    assert plan.tags == ("abc12345", "1.0.1-rc.1", "main", "latest")


def test_missing_rc_forecast_leaves_rc_out(make_context: MakeContext) -> None:
    c = _svc(make_context, ref_name="main")
    assert plan_build(c, Flow.DEFAULT).tags == ("abc12345", "main")

    broken = build_forecast("not-a-version", BumpKind.PATCH)
    assert plan_build(c, Flow.DEFAULT, forecast=broken).tags == ("abc12345", "main")


def test_auto_flow_plans_like_fallback(make_context: MakeContext) -> None:
    forecast = build_forecast("", BumpKind.PATCH)

    on_default = _svc(make_context, ref_name="main")
    assert plan_build(on_default, Flow.AUTO, forecast=forecast).tags == ("abc12345", "0.0.1-rc.1", "main")

    elsewhere = _svc(make_context, ref_name="hotfix/y")
    plan = plan_build(elsewhere, Flow.AUTO, forecast=forecast)
    assert plan.tags == ("abc12345", "0.0.1-rc.1")
    assert plan.publish is True


def test_candidate_tags_are_cleaned_and_invalid_ones_dropped(make_context: MakeContext) -> None:
    c = _svc(make_context, ref_name="Release/Main", default_branch="Release/Main")
    assert plan_build(c, Flow.DEFAULT).tags == ("abc12345", "release-main")

    bad = _svc(make_context, tag="v1+build")
    assert plan_build(bad, Flow.RELEASE).refs == ()


def test_duplicate_refs_are_removed(make_context: MakeContext) -> None:
    c = _svc(make_context, short_sha="main", ref_name="main")
    assert plan_build(c, Flow.DEFAULT).tags == ("main",)


def test_every_ref_is_a_valid_image_tag(make_context: MakeContext) -> None:
    c = _svc(
        make_context,
        ref_name="Release Main",
        default_branch="Release Main",
        tag="Hot Fix/1",
        pipeline_source="push",
    )
    forecast = build_forecast("v3.1.4", BumpKind.MAJOR)
    options = PlanOptions(
        latest_on_feature=True, latest_on_default=True, tag_latest=True, publish_feature=True
    )
    for flow in Flow:
        for ref in plan_build(c, flow, forecast=forecast, options=options).refs:
            assert ref.startswith(f"{BASE}:")
            tag = ref.rsplit(":", 1)[1]
            assert TAG_RE.fullmatch(tag), tag
            assert " " not in tag

    assert "release-main" in plan_build(c, Flow.DEFAULT, forecast=forecast).tags
    assert plan_build(c, Flow.RELEASE).tags == ("hot-fix-1",)


def test_planning_is_deterministic(make_context: MakeContext) -> None:
    c = _svc(make_context, ref_name="main")
    forecast = build_forecast("v1.0.0", BumpKind.PATCH)
    assert plan_build(c, Flow.DEFAULT, forecast=forecast) == plan_build(c, Flow.DEFAULT, forecast=forecast)


def test_missing_registry_or_app_gives_empty_plan(make_context: MakeContext) -> None:
    no_registry = make_context(registry_base="", application_name="svc", ref_name="main")
    assert image_base(no_registry) is None
    assert plan_build(no_registry, Flow.DEFAULT) == EMPTY_PLAN

    c = _svc(make_context)
    assert image_base(c) == BASE


def test_require_plan_reports_missing_registry(make_context: MakeContext) -> None:
    c = make_context(registry_base="", ref_name="main")
    result = require_plan(c, Flow.DEFAULT)
    assert isinstance(result, Err)
    assert result.error.message == "registry base is empty"
    assert result.error.hint is not None


def test_require_plan_reports_missing_application_name(make_context: MakeContext) -> None:
    c = make_context(registry_base="/", ref_name="main")
    result = require_plan(c, Flow.DEFAULT)
    assert isinstance(result, Err)
    assert result.error.message == "application name is empty"


def test_require_plan_reports_empty_plan(make_context: MakeContext) -> None:
    c = _svc(make_context, tag="v1+build")
    result = require_plan(c, Flow.RELEASE)
    assert isinstance(result, Err)
    assert "flow=release" in result.error.message


def test_require_plan_ok(make_context: MakeContext) -> None:
    c = _svc(make_context, ref_name="main")
    result = require_plan(c, Flow.DEFAULT)
    assert isinstance(result, Ok)
    assert result.value.publish is True
