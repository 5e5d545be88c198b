from __future__ import annotations

from typing import Protocol

from tagplan.core.lookup import Found, Lookup, NotFound, Unavailable
from tagplan.core.result import Err
from tagplan.core.structured import as_str_dict, get_str
from tagplan.engine.errors import FormatError
from tagplan.engine.semver import SemanticVersion
from tagplan.gitlab.client import GitLabClient, project_path

__all__ = ["TagHistorySource", "GitLabTagHistory", "highest_semantic_tag"]


class TagHistorySource(Protocol):
    def latest_semantic_tag(self) -> Lookup[str]: ...


def highest_semantic_tag(names: list[str]) -> str | None:
    """Highest strict MAJOR.MINOR.PATCH name; "v1.2.3" and pre-releases are ignored."""
    best: SemanticVersion | None = None
    for name in names:
        try:
            v = SemanticVersion.parse(name)
        except FormatError:
            continue
        if best is None or v > best:
            best = v
    return None if best is None else best.format()


class GitLabTagHistory:
    def __init__(self, client: GitLabClient) -> None:
        self._client = client

    def latest_semantic_tag(self) -> Lookup[str]:
        result = self._client.get_all(project_path(self._client.project_id, "repository/tags"))
        if isinstance(result, Err):
            return Unavailable(reason=f"failed to list tags: {result.error}")

        names: list[str] = []
        for item in result.value:
            tag = as_str_dict(item)
            if tag is None:
                continue
            name = get_str(tag, "name")
            if name is not None:
                names.append(name)

        latest = highest_semantic_tag(names)
        if latest is None:
            return NotFound()
        return Found(latest)
