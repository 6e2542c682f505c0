"""Lead time analysis orchestration across one or more teams."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Set, Tuple, TypeVar

from .assembler import assemble_repository
from .errors import RemoteError, RepositoryAssemblyError, ResolutionError
from .github_client import GitHubClient
from .models import AnalysisResult, PullRequest, RepositoryRef
from .periods import window_start as compute_window_start
from .reducer import bucket_records, summarize, to_record

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def fan_out(function: Callable[[T], R], items: Sequence[T]) -> List[R]:
    """Run ``function`` over every item concurrently and return results in item order.

    The first exception raised by any branch propagates once all branches finished.
    """
    if not items:
        return []

    with ThreadPoolExecutor(max_workers=len(items)) as executor:
        futures = [executor.submit(function, item) for item in items]
    return [future.result() for future in futures]


def resolve_team_members(client: GitHubClient, organization: str, team_slugs: Sequence[str]) -> Set[str]:
    """Return the union of member logins across ``team_slugs``.

    Raises:
        ResolutionError: If the members of any team cannot be listed.
    """

    def _members(team_slug: str) -> List[str]:
        try:
            return client.list_team_members(organization, team_slug)
        except RemoteError as exc:
            raise ResolutionError(
                team_slug, f"Failed to fetch team members for '{team_slug}': {exc}"
            ) from exc

    members: Set[str] = set()
    for team_members in fan_out(_members, team_slugs):
        members.update(team_members)

    logger.info("Resolved team members", extra={"teams": list(team_slugs), "members": len(members)})
    return members


def resolve_repositories(
    client: GitHubClient,
    organization: str,
    team_slugs: Sequence[str],
) -> List[RepositoryRef]:
    """Return the deduplicated repositories maintained by any of ``team_slugs``.

    Order follows the first team that listed each repository.

    Raises:
        ResolutionError: If the repositories of any team cannot be listed.
    """

    def _repositories(team_slug: str) -> List[RepositoryRef]:
        try:
            return client.list_team_repositories(organization, team_slug)
        except RemoteError as exc:
            raise ResolutionError(
                team_slug, f"Failed to fetch team repositories for '{team_slug}': {exc}"
            ) from exc

    repositories: List[RepositoryRef] = []
    for team_repositories in fan_out(_repositories, team_slugs):
        repositories.extend(team_repositories)
    repositories = list(dict.fromkeys(repositories))

    logger.info(
        "Resolved team repositories",
        extra={"teams": list(team_slugs), "repositories": len(repositories)},
    )
    return repositories


def run_analysis(
    client: GitHubClient,
    organization: str,
    team_slugs: Sequence[str],
    unit: str,
    value: int,
    now: Optional[datetime] = None,
) -> AnalysisResult:
    """Compute team lead time statistics over the trailing ``value`` ``unit`` window.

    Business logic:
    - The window starts ``value`` units before ``now``, floored to the unit.
    - Members and maintained repositories are merged across all teams.
    - Every repository is assembled concurrently. A failing repository is logged,
      recorded in ``warnings`` and contributes no pull requests.
    - All pull requests are reduced into overall and per-period statistics.

    Raises:
        ResolutionError: If team members or repositories cannot be resolved.
    """
    reference = now or datetime.now(timezone.utc)
    start = compute_window_start(reference, unit, value)

    with ThreadPoolExecutor(max_workers=2) as executor:
        members_future = executor.submit(resolve_team_members, client, organization, team_slugs)
        repositories_future = executor.submit(resolve_repositories, client, organization, team_slugs)
    members = members_future.result()
    repositories = repositories_future.result()

    def _assemble(repository: RepositoryRef) -> Tuple[List[PullRequest], Optional[str]]:
        try:
            return assemble_repository(client, repository, start, members), None
        except RepositoryAssemblyError as exc:
            logger.warning(
                "Skipping repository after assembly failure",
                extra={"repository": exc.repository, "error": str(exc)},
            )
            return [], str(exc)

    pull_requests: List[PullRequest] = []
    warnings: List[str] = []
    for repository_pull_requests, warning in fan_out(_assemble, repositories):
        pull_requests.extend(repository_pull_requests)
        if warning is not None:
            warnings.append(warning)

    records = [to_record(pr) for pr in pull_requests]

    logger.info(
        "Computed lead time records",
        extra={
            "organization": organization,
            "repositories": len(repositories),
            "records": len(records),
            "failed_repositories": len(warnings),
        },
    )

    return AnalysisResult(
        organization=organization,
        teams=list(team_slugs),
        unit=unit,
        value=value,
        window_start=start,
        statistics=summarize(records),
        periods=bucket_records(records, unit, value, reference),
        details=records,
        repositories=repositories,
        members=sorted(members),
        warnings=warnings,
    )
