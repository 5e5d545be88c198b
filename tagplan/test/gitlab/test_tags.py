from __future__ import annotations

from tagplan.core.lookup import Found, NotFound, Unavailable
from tagplan.gitlab.client import HttpError, MockGitLabClient
from tagplan.gitlab.tags import GitLabTagHistory, highest_semantic_tag

TAGS_PATH = "/projects/1/repository/tags"


def test_highest_semantic_tag() -> None:
    assert highest_semantic_tag(["1.2.0", "1.10.0", "1.9.9"]) == "1.10.0"
    assert highest_semantic_tag(["v9.0.0", "2.0.0-rc.1", "latest", "0.1.0"]) == "0.1.0"
    assert highest_semantic_tag([]) is None
    assert highest_semantic_tag(["v1.0.0"]) is None


def test_latest_semantic_tag_found() -> None:
    client = MockGitLabClient()
    client.set(TAGS_PATH, [{"name": "1.0.0"}, {"name": "1.2.0"}, {"name": "nightly"}, "junk", {"x": 1}])
    assert GitLabTagHistory(client).latest_semantic_tag() == Found("1.2.0")


def test_latest_semantic_tag_not_found() -> None:
    client = MockGitLabClient()
    client.set(TAGS_PATH, [{"name": "nightly"}])
    assert GitLabTagHistory(client).latest_semantic_tag() == NotFound()


def test_latest_semantic_tag_unavailable() -> None:
    client = MockGitLabClient()
    client.set(TAGS_PATH, HttpError(url=TAGS_PATH, status=401, message="Unauthorized"))
    lookup = GitLabTagHistory(client).latest_semantic_tag()
    assert isinstance(lookup, Unavailable)
    assert "failed to list tags" in lookup.reason
    assert "401" in lookup.reason
