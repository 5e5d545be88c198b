"""Machine-readable plan output for the downstream build/publish job.

- json:   {"schema", "flow", "refs", "publish", "next_version", "next_rc"}
- dotenv: TAGPLAN_* lines, usable as a GitLab `artifacts:reports:dotenv`
- text:   one ref per line
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from tagplan.core.result import Err, Ok, Result
from tagplan.engine.flow import Flow
from tagplan.engine.forecast import Forecast
from tagplan.engine.planner import Plan

__all__ = ["PlanFormat", "PlanFileError", "PLAN_SCHEMA", "render_plan", "write_plan_file"]


PLAN_SCHEMA = 1


class PlanFormat(StrEnum):
    text = "text"
    json = "json"
    dotenv = "dotenv"


@dataclass(frozen=True, slots=True)
class PlanFileError:
    message: str
    path: Path


def render_plan(plan: Plan, *, flow: Flow, forecast: Forecast, fmt: PlanFormat) -> str:
    match fmt:
        case PlanFormat.json:
            payload: dict[str, object] = {
                "schema": PLAN_SCHEMA,
                "flow": flow.value,
                "refs": list(plan.refs),
                "publish": plan.publish,
                "next_version": forecast.next_version,
                "next_rc": forecast.next_rc,
            }
            return json.dumps(payload, indent=2) + "\n"
        case PlanFormat.dotenv:
            lines = [
                f"TAGPLAN_FLOW={flow.value}",
                f"TAGPLAN_REFS={' '.join(plan.refs)}",
                f"TAGPLAN_PUBLISH={'true' if plan.publish else 'false'}",
                f"TAGPLAN_NEXT_VERSION={forecast.next_version or ''}",
                f"TAGPLAN_NEXT_RC={forecast.next_rc or ''}",
            ]
            return "\n".join(lines) + "\n"
        case PlanFormat.text:
            return "".join(f"{ref}\n" for ref in plan.refs)


def write_plan_file(path: Path, content: str) -> Result[None, PlanFileError]:
    """Write `content` atomically (temp file in the same directory, then rename)."""
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_name = handle.name
            handle.write(content)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        return Err(PlanFileError(message=f"failed to write plan file: {e}", path=path))
    finally:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
    return Ok(None)
