"""Manual bump selection from a merge request.

Reviewers pick the release type by ticking a checkbox in a block marked
with RELEASE_TYPE_MARKER, e.g.:

    <!-- tagplan:release-type -->
    - [ ] **Patch**
    - [x] **Minor**
    - [ ] **Major**

The block may live in a note (newest marked note wins) or in the merge
request description.
"""

from __future__ import annotations

import re
from typing import Protocol

from tagplan.core.lookup import Found, Lookup, NotFound, Unavailable
from tagplan.core.result import Err
from tagplan.core.structured import as_str_dict, get_str
from tagplan.engine.semver import BumpKind, parse_bump_kind
from tagplan.gitlab.client import GitLabClient, project_path

__all__ = [
    "RELEASE_TYPE_MARKER",
    "ManualBumpSource",
    "GitLabManualBump",
    "parse_version_bump",
]


RELEASE_TYPE_MARKER = "<!-- tagplan:release-type -->"

_CHECKBOX_RE = re.compile(r"^\s*[-*] \[[xX]\] \*\*(Patch|Minor|Major)\*\*", re.IGNORECASE)


class ManualBumpSource(Protocol):
    def bump_for(self, mr_iid: str) -> Lookup[BumpKind]: ...


def parse_version_bump(text: str) -> BumpKind | None:
    """First checked release-type box in `text`, if any."""
    for line in text.splitlines():
        m = _CHECKBOX_RE.match(line)
        if m is not None:
            return parse_bump_kind(m.group(1))
    return None


class GitLabManualBump:
    def __init__(self, client: GitLabClient) -> None:
        self._client = client

    def _notes_path(self, mr_iid: str) -> str:
        path = project_path(self._client.project_id, "merge_requests", mr_iid, "notes")
        return f"{path}?sort=desc&order_by=created_at"

    def _from_notes(self, mr_iid: str) -> BumpKind | None:
        # Notes are optional; a failed listing falls back to the description.
        result = self._client.get_all(self._notes_path(mr_iid))
        if isinstance(result, Err):
            return None
        for item in result.value:
            note = as_str_dict(item)
            if note is None:
                continue
            body = get_str(note, "body") or ""
            if RELEASE_TYPE_MARKER not in body:
                continue
            bump = parse_version_bump(body)
            if bump is not None:
                return bump
        return None

    def bump_for(self, mr_iid: str) -> Lookup[BumpKind]:
        iid = mr_iid.strip()
        if not iid:
            return NotFound()

        from_notes = self._from_notes(iid)
        if from_notes is not None:
            return Found(from_notes)

        result = self._client.get_json(project_path(self._client.project_id, "merge_requests", iid))
        if isinstance(result, Err):
            return Unavailable(reason=f"failed to fetch merge request !{iid}: {result.error}")

        mr = as_str_dict(result.value)
        if mr is None:
            return Unavailable(reason=f"unexpected merge request payload for !{iid}")

        bump = parse_version_bump(get_str(mr, "description") or "")
        if bump is None:
            return NotFound()
        return Found(bump)
