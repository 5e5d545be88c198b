"""Read-only GitLab REST client.

This module provides:
- GitLabClient: Protocol for the GET calls the lookups need (injectable for tests)
- RealGitLabClient: Real implementation using urllib
- MockGitLabClient: Mock implementation for testing
- gitlab_client_from_env: builds a RealGitLabClient from CI/local variables
"""

from __future__ import annotations

import json
import os
import ssl
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from tagplan import __version__
from tagplan.ci.environment import is_gitlab_ci
from tagplan.core.result import Err, Ok, Result
from tagplan.core.settings import GitLabSettings
from tagplan.core.structured import as_obj_list

__all__ = [
    "GitLabClient",
    "RealGitLabClient",
    "MockGitLabClient",
    "HttpError",
    "gitlab_client_from_env",
    "project_path",
]


PER_PAGE = 100
MAX_PAGES = 50


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


def project_path(project_id: str, *parts: str) -> str:
    """`/projects/<url-encoded id>/<parts...>`; ids may be numeric or "group/project"."""
    encoded = urllib.parse.quote(project_id, safe="")
    suffix = "/".join(p.strip("/") for p in parts if p)
    return f"/projects/{encoded}/{suffix}" if suffix else f"/projects/{encoded}"


@runtime_checkable
class GitLabClient(Protocol):
    """Protocol for the GitLab calls tagplan makes.

    Paths are relative to /api/v4 (e.g. "/projects/42/repository/tags").
    """

    @property
    def project_id(self) -> str: ...

    def get_json(self, path: str) -> Result[object, HttpError]:
        """GET a single JSON document."""
        ...

    def get_all(self, path: str) -> Result[list[object], HttpError]:
        """GET a paginated JSON list, following X-Next-Page."""
        ...


class RealGitLabClient:
    """GitLab client using urllib.

    Handles:
    - PRIVATE-TOKEN authentication
    - Timeout handling
    - Pagination via X-Next-Page (bounded by MAX_PAGES)
    """

    def __init__(
        self,
        *,
        base_url: str,
        token: str,
        project_id: str,
        timeout: float = 10.0,
        user_agent: str = f"tagplan/{__version__}",
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._project_id = project_id
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    @property
    def project_id(self) -> str:
        return self._project_id

    def _url(self, path: str, params: Mapping[str, str] | None = None) -> str:
        url = f"{self.base_url}/api/v4{path}"
        if params:
            sep = "&" if "?" in url else "?"
            url = f"{url}{sep}{urllib.parse.urlencode(params)}"
        return url

    def _request(self, url: str) -> Result[tuple[bytes, str | None], HttpError]:
        """GET url; returns the body and the X-Next-Page header (if any)."""
        try:
            req = urllib.request.Request(
                url,
                headers={
                    "PRIVATE-TOKEN": self._token,
                    "User-Agent": self.user_agent,
                    "Accept": "application/json",
                },
            )
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                next_page = response.headers.get("X-Next-Page")
                return Ok((response.read(), next_page or None))
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    @staticmethod
    def _decode(url: str, body: bytes) -> Result[object, HttpError]:
        try:
            data: object = json.loads(body.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))
        return Ok(data)

    def get_json(self, path: str) -> Result[object, HttpError]:
        url = self._url(path)
        result = self._request(url)
        if isinstance(result, Err):
            return result
        body, _ = result.value
        return self._decode(url, body)

    def get_all(self, path: str) -> Result[list[object], HttpError]:
        items: list[object] = []
        page: str | None = "1"
        pages = 0
        while page and pages < MAX_PAGES:
            url = self._url(path, {"per_page": str(PER_PAGE), "page": page})
            result = self._request(url)
            if isinstance(result, Err):
                return result
            body, page = result.value
            pages += 1

            decoded = self._decode(url, body)
            if isinstance(decoded, Err):
                return decoded
            chunk = as_obj_list(decoded.value)
            if chunk is None:
                return Err(HttpError(url=url, status=0, message="Expected JSON list"))
            items.extend(chunk)
        if page:
            # A truncated listing must not pass for the whole collection.
            return Err(
                HttpError(
                    url=self._url(path),
                    status=0,
                    message=f"more than {MAX_PAGES} pages of {PER_PAGE} items; listing truncated",
                )
            )
        return Ok(items)


class MockGitLabClient:
    """Mock GitLab client for testing.

    Usage:
        client = MockGitLabClient(project_id="42")
        client.set("/projects/42/repository/tags", [{"name": "1.0.0"}])
        result = client.get_all("/projects/42/repository/tags")
    """

    def __init__(self, project_id: str = "1") -> None:
        self._project_id = project_id
        self._responses: dict[str, object | HttpError] = {}
        self.calls: list[tuple[str, str]] = []

    @property
    def project_id(self) -> str:
        return self._project_id

    def set(self, path: str, response: object | HttpError) -> None:
        """Set the response (or error) for a path."""
        self._responses[path] = response

    def _lookup(self, path: str) -> Result[object, HttpError]:
        if path not in self._responses:
            return Err(HttpError(url=path, status=404, message="Not found (mock)"))
        response = self._responses[path]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def get_json(self, path: str) -> Result[object, HttpError]:
        self.calls.append(("get_json", path))
        return self._lookup(path)

    def get_all(self, path: str) -> Result[list[object], HttpError]:
        self.calls.append(("get_all", path))
        result = self._lookup(path)
        if isinstance(result, Err):
            return result
        items = as_obj_list(result.value)
        if items is None:
            return Err(HttpError(url=path, status=0, message="Expected JSON list"))
        return Ok(items)


def gitlab_client_from_env(
    settings: GitLabSettings,
    env: Mapping[str, str] | None = None,
) -> Result[RealGitLabClient, str]:
    """Build a client from CI variables (inside GitLab CI) or GITLAB_* (locally).

    Returns Err with a human-readable reason when something required is missing.
    """
    e = os.environ if env is None else env

    def var(name: str) -> str:
        return e.get(name, "").strip()

    token = var("TAGPLAN_GITLAB_TOKEN") or var("GITLAB_API_TOKEN")
    if is_gitlab_ci(e):
        base_url = var("CI_API_V4_URL").removesuffix("/").removesuffix("/api/v4")
        project_id = var("CI_PROJECT_ID")
    else:
        base_url = settings.base_url or var("GITLAB_BASE_URL")
        project_id = var("GITLAB_PROJECT_ID")

    if not token:
        return Err("TAGPLAN_GITLAB_TOKEN or GITLAB_API_TOKEN must be set")
    if not project_id:
        return Err("CI_PROJECT_ID or GITLAB_PROJECT_ID must be set")

    parsed = urllib.parse.urlparse(base_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return Err(f"invalid GitLab base URL: {base_url!r}")

    return Ok(
        RealGitLabClient(
            base_url=base_url,
            token=token,
            project_id=project_id,
            timeout=settings.timeout_seconds,
        )
    )
