"""GitHub REST API client for lead time data retrieval."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional
from urllib.parse import urlencode

import requests
from requests.adapters import HTTPAdapter

from .config import Config
from .errors import RemoteError
from .models import Commit, PullRequest, RepositoryRef

logger = logging.getLogger(__name__)

PageTransform = Callable[[List[Dict[str, Any]]], List[Any]]


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse GitHub ISO8601 timestamps into timezone-aware UTC datetimes."""
    if not value:
        return None

    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    parsed = datetime.fromisoformat(normalized)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class GitHubClient:
    """Small, typed client for the GitHub team and pull request APIs.

    Every request goes through :meth:`fetch`, which pauses briefly when the
    remaining rate-limit quota reported by GitHub drops below a low-water mark.
    """

    _API_VERSION = "2022-11-28"
    _PAGE_SIZE = 100
    _RATE_LIMIT_LOW_WATER_MARK = 10
    _RATE_LIMIT_COOLDOWN_SECONDS = 1
    # Sized for the uncapped repository and pull request fan-out.
    _POOL_SIZE = 100

    def __init__(self, config: Config, timeout_seconds: int = 30) -> None:
        """Initialize an authenticated GitHub API client.

        Args:
            config: Validated runtime configuration including the token.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._config = config
        self._timeout_seconds = timeout_seconds
        self._base_url = config.api_url.rstrip("/")

        self._session = requests.Session()
        adapter = HTTPAdapter(pool_connections=self._POOL_SIZE, pool_maxsize=self._POOL_SIZE)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)
        self._session.headers.update(
            {
                "Authorization": f"Bearer {config.token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": self._API_VERSION,
            }
        )

    def _build_url(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Build a fully qualified API URL from a path and query parameters."""
        url = f"{self._base_url}/{path.lstrip('/')}"
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    def _remaining_quota(self, response: requests.Response) -> Optional[int]:
        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining is None:
            return None
        try:
            return int(remaining)
        except ValueError:
            return None

    def _cooldown_if_rate_limited(self, response: requests.Response) -> None:
        remaining = self._remaining_quota(response)
        if remaining is None:
            return

        logger.debug("GitHub rate limit remaining", extra={"remaining": remaining})
        if remaining < self._RATE_LIMIT_LOW_WATER_MARK:
            logger.warning(
                "GitHub rate limit nearly exhausted, cooling down",
                extra={
                    "remaining": remaining,
                    "cooldown_seconds": self._RATE_LIMIT_COOLDOWN_SECONDS,
                },
            )
            time.sleep(self._RATE_LIMIT_COOLDOWN_SECONDS)

    def _error_message(self, response: requests.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
        return response.text or response.reason or "GitHub API request failed"

    def fetch(self, url: str) -> Any:
        """Execute an authenticated GET request and return the decoded JSON body.

        Raises:
            RemoteError: If the request cannot be sent, returns HTTP >= 400,
                or does not return valid JSON.
        """
        try:
            response = self._session.get(url, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise RemoteError(None, f"GET {url} failed: {exc}") from exc

        self._cooldown_if_rate_limited(response)

        if response.status_code >= 400:
            raise RemoteError(response.status_code, self._error_message(response))

        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(
                response.status_code, f"GitHub API returned invalid JSON: GET {url}"
            ) from exc

    def iter_pages(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Iterator[List[Dict[str, Any]]]:
        """Yield raw pages of a list resource until a page is shorter than a full page.

        Pages are numbered from 1 with ``per_page=100``. An empty page ends the
        sequence; so does any page with fewer than 100 items, without requesting
        the next one.
        """
        page = 1
        while True:
            query = dict(params or {})
            query["per_page"] = self._PAGE_SIZE
            query["page"] = page

            url = self._build_url(path, query)
            payload = self.fetch(url)
            if not isinstance(payload, list):
                raise RemoteError(None, f"GitHub API returned unexpected payload shape: GET {url}")

            logger.debug("Fetched page", extra={"path": path, "page": page, "items": len(payload)})
            yield payload

            if len(payload) < self._PAGE_SIZE:
                return
            page += 1

    def read_collection(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        transform: Optional[PageTransform] = None,
    ) -> List[Any]:
        """Concatenate every page of a list resource, optionally transforming each page."""
        items: List[Any] = []
        for page in self.iter_pages(path, params):
            items.extend(transform(page) if transform is not None else page)
        return items

    def list_team_members(self, organization: str, team_slug: str) -> List[str]:
        """List member logins of a team."""
        return self.read_collection(
            f"orgs/{organization}/teams/{team_slug}/members",
            transform=lambda page: [item["login"] for item in page if item.get("login")],
        )

    def list_team_repositories(self, organization: str, team_slug: str) -> List[RepositoryRef]:
        """List repositories on which the team holds maintain permission.

        Repositories without that permission are skipped silently.
        """

        def _maintained(page: List[Dict[str, Any]]) -> List[RepositoryRef]:
            repositories: List[RepositoryRef] = []
            for item in page:
                permissions = item.get("permissions") or {}
                if permissions.get("maintain") is not True or not item.get("name"):
                    continue
                owner = (item.get("owner") or {}).get("login") or organization
                repositories.append(RepositoryRef(owner=str(owner), name=str(item["name"])))
            return repositories

        return self.read_collection(
            f"orgs/{organization}/teams/{team_slug}/repos",
            transform=_maintained,
        )

    def iter_closed_pull_request_pages(self, repository: RepositoryRef) -> Iterator[List[PullRequest]]:
        """Yield pages of closed pull requests, most recently updated first."""
        params = {"state": "closed", "sort": "updated", "direction": "desc"}
        for page in self.iter_pages(f"repos/{repository.full_name}/pulls", params):
            yield [self._parse_pull_request(repository, item) for item in page]

    def list_pull_request_commits(self, repository: RepositoryRef, number: int) -> List[Commit]:
        """List a pull request's commits in the order GitHub returns them."""

        def _commits(page: List[Dict[str, Any]]) -> List[Commit]:
            commits: List[Commit] = []
            for item in page:
                try:
                    author = (item.get("commit") or {}).get("author") or {}
                    authored_at = parse_timestamp(author.get("date"))
                except (AttributeError, TypeError, ValueError) as exc:
                    raise RemoteError(
                        None,
                        "GitHub commit payload is malformed: "
                        f"repository={repository.full_name}, pull_request={number}, error={exc}",
                    ) from exc
                commits.append(Commit(sha=str(item.get("sha", "")), authored_at=authored_at))
            return commits

        return self.read_collection(
            f"repos/{repository.full_name}/pulls/{number}/commits",
            transform=_commits,
        )

    def _parse_pull_request(self, repository: RepositoryRef, item: Dict[str, Any]) -> PullRequest:
        try:
            return self._build_pull_request(repository, item)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise RemoteError(
                None,
                "GitHub pull request payload is malformed: "
                f"repository={repository.full_name}, error={exc}",
            ) from exc

    def _build_pull_request(self, repository: RepositoryRef, item: Dict[str, Any]) -> PullRequest:
        number = item.get("number")
        created_at = parse_timestamp(item.get("created_at"))
        author = (item.get("user") or {}).get("login")

        if number is None or created_at is None:
            raise RemoteError(
                None,
                "GitHub pull request payload is missing required fields: "
                f"repository={repository.full_name}, payload={item}",
            )

        return PullRequest(
            number=int(number),
            title=str(item.get("title") or ""),
            author=str(author or ""),
            created_at=created_at,
            merged_at=parse_timestamp(item.get("merged_at")),
            url=str(item.get("html_url") or ""),
            repository=repository.full_name,
        )
