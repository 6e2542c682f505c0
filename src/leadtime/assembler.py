"""Pull request assembly for a single repository.

For one repository this module:
- Pages through closed pull requests, most recently updated first.
- Keeps pull requests merged after the window start by a team member.
- Attaches each kept pull request's full commit history, fetched concurrently.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import AbstractSet, List

from .errors import RemoteError, RepositoryAssemblyError
from .github_client import GitHubClient
from .models import PullRequest, RepositoryRef

logger = logging.getLogger(__name__)


def is_qualifying(pr: PullRequest, window_start: datetime, team_members: AbstractSet[str]) -> bool:
    """Return whether ``pr`` was merged after ``window_start`` by a team member."""
    return pr.merged_at is not None and pr.merged_at > window_start and pr.author in team_members


def attach_commits(
    client: GitHubClient,
    repository: RepositoryRef,
    pull_requests: List[PullRequest],
) -> List[PullRequest]:
    """Fetch and attach commit histories for ``pull_requests`` concurrently.

    Every pull request gets its own worker; results are joined before returning.
    """
    if not pull_requests:
        return pull_requests

    with ThreadPoolExecutor(max_workers=len(pull_requests)) as executor:
        futures = [
            executor.submit(client.list_pull_request_commits, repository, pr.number)
            for pr in pull_requests
        ]
        for pr, future in zip(pull_requests, futures):
            pr.commits = future.result()

    return pull_requests


def assemble_repository(
    client: GitHubClient,
    repository: RepositoryRef,
    window_start: datetime,
    team_members: AbstractSet[str],
) -> List[PullRequest]:
    """Collect merged team pull requests of ``repository`` with their commits.

    Paging stops when a page keeps no qualifying pull request, when the oldest
    kept pull request on the page merged before ``window_start``, or when the
    page is the last one.

    Raises:
        RepositoryAssemblyError: If assembling this repository fails for any reason.
    """
    pull_requests: List[PullRequest] = []

    try:
        for page in client.iter_closed_pull_request_pages(repository):
            retained = [pr for pr in page if is_qualifying(pr, window_start, team_members)]
            if not retained:
                break

            pull_requests.extend(attach_commits(client, repository, retained))

            oldest = retained[-1]
            if oldest.merged_at is not None and oldest.merged_at < window_start:
                break
    except RemoteError as exc:
        raise RepositoryAssemblyError(
            repository.full_name,
            f"Failed to fetch pull requests for {repository.full_name}: {exc}",
        ) from exc
    except Exception as exc:
        raise RepositoryAssemblyError(
            repository.full_name,
            f"Failed to assemble pull requests for {repository.full_name}: {exc!r}",
        ) from exc

    logger.info(
        "Assembled repository pull requests",
        extra={"repository": repository.full_name, "pull_requests": len(pull_requests)},
    )
    return pull_requests
