"""Read-only GitLab lookups: latest semantic tag and manual bump selection."""

from .client import GitLabClient, HttpError, MockGitLabClient, RealGitLabClient, gitlab_client_from_env
from .merge_requests import GitLabManualBump, ManualBumpSource, parse_version_bump
from .tags import GitLabTagHistory, TagHistorySource

__all__ = [
    "GitLabClient",
    "GitLabManualBump",
    "GitLabTagHistory",
    "HttpError",
    "ManualBumpSource",
    "MockGitLabClient",
    "RealGitLabClient",
    "TagHistorySource",
    "gitlab_client_from_env",
    "parse_version_bump",
]
