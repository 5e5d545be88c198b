"""GitLab CI environment -> RunFacts.

The engine never reads the process environment; this module does it once.
The mapping is injectable so tests never touch os.environ.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from tagplan.core.settings import ContextSettings
from tagplan.engine.context import RunFacts

__all__ = ["read_run_facts", "is_gitlab_ci"]


def is_gitlab_ci(env: Mapping[str, str] | None = None) -> bool:
    e = os.environ if env is None else env
    return e.get("GITLAB_CI", "").strip().lower() == "true"


def read_run_facts(
    context: ContextSettings,
    env: Mapping[str, str] | None = None,
) -> RunFacts:
    e = os.environ if env is None else env

    def var(name: str) -> str:
        return e.get(name, "").strip()

    return RunFacts(
        pipeline_source=var("CI_PIPELINE_SOURCE"),
        ref_name=var("CI_COMMIT_REF_NAME"),
        commit_branch=var("CI_COMMIT_BRANCH"),
        mr_source_branch=var("CI_MERGE_REQUEST_SOURCE_BRANCH_NAME"),
        sha=var("CI_COMMIT_SHA"),
        short_sha=var("CI_COMMIT_SHORT_SHA"),
        mr_iid=var("CI_MERGE_REQUEST_IID"),
        mr_target_branch=var("CI_MERGE_REQUEST_TARGET_BRANCH_NAME"),
        tag=var("CI_COMMIT_TAG"),
        default_branch=var("CI_DEFAULT_BRANCH"),
        feature_prefix=context.feature_prefix,
        registry_base=var("CI_REGISTRY_IMAGE"),
        application_name=context.application_name or "",
        project_path=var("CI_PROJECT_PATH"),
        project_id=var("CI_PROJECT_ID"),
    )
