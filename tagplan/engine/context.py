"""Immutable per-run fact sheet.

`RunFacts` is what the outside world hands in (raw CI values, all strings);
`build_run_context` turns it into a `RunContext` whose derived flags are
computed exactly once. Nothing here reads the process environment.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "DEFAULT_FEATURE_PREFIX",
    "RunFacts",
    "RunContext",
    "build_run_context",
    "derive_short_sha",
    "first_non_empty",
    "resolve_application_name",
]


DEFAULT_FEATURE_PREFIX = "feature/"
SHORT_SHA_LENGTH = 8
MERGE_REQUEST_EVENT = "merge_request_event"


@dataclass(frozen=True, slots=True)
class RunFacts:
    pipeline_source: str = ""
    ref_name: str = ""
    commit_branch: str = ""
    mr_source_branch: str = ""
    sha: str = ""
    short_sha: str = ""
    mr_iid: str = ""
    mr_target_branch: str = ""
    tag: str = ""
    default_branch: str = ""
    feature_prefix: str = DEFAULT_FEATURE_PREFIX
    registry_base: str = ""
    application_name: str = ""  # explicit override
    project_path: str = ""
    project_id: str = ""


@dataclass(frozen=True, slots=True)
class RunContext:
    pipeline_source: str
    ref_name: str
    effective_ref: str
    sha: str
    short_sha: str
    mr_iid: str
    mr_target_branch: str
    tag: str
    default_branch: str
    feature_prefix: str
    registry_base: str
    application_name: str
    project_path: str
    project_id: str

    is_tag: bool
    is_merge_request: bool
    is_default_branch: bool
    is_feature_branch: bool

    @property
    def is_push(self) -> bool:
        return self.pipeline_source.strip().lower() == "push"


def first_non_empty(*values: str) -> str:
    for v in values:
        s = v.strip()
        if s:
            return s
    return ""


def resolve_application_name(override: str, registry_base: str) -> str:
    """Explicit override, else the last path segment of the registry base."""
    if override.strip():
        return override.strip()
    base = registry_base.strip().rstrip("/")
    if not base:
        return ""
    return base.rsplit("/", 1)[-1]


def derive_short_sha(short_sha: str, sha: str) -> str:
    """Supplied short SHA, else the first 8 characters of the full SHA."""
    if short_sha.strip():
        return short_sha.strip()
    return sha.strip()[:SHORT_SHA_LENGTH]


def build_run_context(facts: RunFacts) -> RunContext:
    tag = facts.tag.strip()
    ref_name = facts.ref_name.strip()
    default_branch = facts.default_branch.strip()
    effective_ref = first_non_empty(facts.mr_source_branch, facts.commit_branch, facts.ref_name)
    mr_iid = facts.mr_iid.strip()
    prefix = facts.feature_prefix.strip()

    is_tag = tag != ""
    is_merge_request = mr_iid != "" or facts.pipeline_source.strip() == MERGE_REQUEST_EVENT
    is_default_branch = ref_name != "" and ref_name == default_branch
    # An empty prefix would match every branch; treat it as "no feature branches".
    is_feature_branch = (
        not is_tag
        and prefix != ""
        and effective_ref != ""
        and effective_ref != default_branch
        and effective_ref.startswith(prefix)
    )

    return RunContext(
        pipeline_source=facts.pipeline_source.strip(),
        ref_name=ref_name,
        effective_ref=effective_ref,
        sha=facts.sha.strip(),
        short_sha=derive_short_sha(facts.short_sha, facts.sha),
        mr_iid=mr_iid,
        mr_target_branch=facts.mr_target_branch.strip(),
        tag=tag,
        default_branch=default_branch,
        feature_prefix=prefix,
        registry_base=facts.registry_base.strip(),
        application_name=resolve_application_name(facts.application_name, facts.registry_base),
        project_path=facts.project_path.strip(),
        project_id=facts.project_id.strip(),
        is_tag=is_tag,
        is_merge_request=is_merge_request,
        is_default_branch=is_default_branch,
        is_feature_branch=is_feature_branch,
    )
