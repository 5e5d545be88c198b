from __future__ import annotations

import json
from pathlib import Path

from tagplan.core.result import Err, Ok
from tagplan.engine.flow import Flow
from tagplan.engine.forecast import build_forecast
from tagplan.engine.planner import Plan
from tagplan.engine.semver import BumpKind
from tagplan.services.plan_file import PLAN_SCHEMA, PlanFormat, render_plan, write_plan_file

PLAN = Plan(refs=("reg/app:abc12345", "reg/app:0.0.1-rc.1", "reg/app:main"), publish=True)
FORECAST = build_forecast("", BumpKind.PATCH)


def test_render_text() -> None:
    out = render_plan(PLAN, flow=Flow.DEFAULT, forecast=FORECAST, fmt=PlanFormat.text)
    assert out == "reg/app:abc12345\nreg/app:0.0.1-rc.1\nreg/app:main\n"


def test_render_json() -> None:
    out = render_plan(PLAN, flow=Flow.DEFAULT, forecast=FORECAST, fmt=PlanFormat.json)
    data = json.loads(out)
    assert data == {
        "schema": PLAN_SCHEMA,
        "flow": "default",
        "refs": list(PLAN.refs),
        "publish": True,
        "next_version": "0.0.1",
        "next_rc": "0.0.1-rc.1",
    }
    assert out.endswith("\n")


def test_render_json_without_forecast() -> None:
    broken = build_forecast("bogus", BumpKind.PATCH)
    data = json.loads(render_plan(PLAN, flow=Flow.DEFAULT, forecast=broken, fmt=PlanFormat.json))
    assert data["next_version"] is None
    assert data["next_rc"] is None


def test_render_dotenv() -> None:
    plan = Plan(refs=("reg/app:abc12345",), publish=False)
    out = render_plan(plan, flow=Flow.FEATURE, forecast=FORECAST, fmt=PlanFormat.dotenv)
    assert out.splitlines() == [
        "TAGPLAN_FLOW=feature",
        "TAGPLAN_REFS=reg/app:abc12345",
        "TAGPLAN_PUBLISH=false",
        "TAGPLAN_NEXT_VERSION=0.0.1",
        "TAGPLAN_NEXT_RC=0.0.1-rc.1",
    ]


def test_write_plan_file(tmp_path: Path) -> None:
    target = tmp_path / "out" / "plan.json"
    assert write_plan_file(target, "content\n") == Ok(None)
    assert target.read_text(encoding="utf-8") == "content\n"
    assert [p.name for p in target.parent.iterdir()] == ["plan.json"]


def test_write_plan_file_overwrites(tmp_path: Path) -> None:
    target = tmp_path / "plan.txt"
    target.write_text("old", encoding="utf-8")
    assert isinstance(write_plan_file(target, "new"), Ok)
    assert target.read_text(encoding="utf-8") == "new"


def test_write_plan_file_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    result = write_plan_file(blocker / "plan.txt", "x")
    assert isinstance(result, Err)
    assert result.error.path == blocker / "plan.txt"
    assert "failed to write plan file" in result.error.message
