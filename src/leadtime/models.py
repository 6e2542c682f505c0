"""Domain models for GitHub pull request lead time analysis.

These dataclasses intentionally model only the subset of API payload fields that
are required for lead time computation and reporting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class RepositoryRef:
    """Represents a repository held by a team with maintain permission."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(slots=True)
class Commit:
    """Represents the minimal commit data used to find a pull request's first commit."""

    sha: str
    authored_at: Optional[datetime]


@dataclass(slots=True)
class PullRequest:
    """Represents a merged pull request together with its ordered commit history."""

    number: int
    title: str
    author: str
    created_at: datetime
    merged_at: Optional[datetime]
    url: str
    repository: str = ""
    commits: List[Commit] = field(default_factory=list)


@dataclass(slots=True)
class LeadTimeRecord:
    """Represents one pull request's lead time measurement in whole minutes.

    ``lead_time_minutes`` is ``None`` when the pull request has no commits and may
    be negative when the first commit was authored after the merge.
    """

    number: int
    title: str
    author: str
    repository: str
    created_at: datetime
    merged_at: datetime
    first_commit_at: Optional[datetime]
    commit_count: int
    url: str
    lead_time_minutes: Optional[int]
    commits: List[Commit] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "title": self.title,
            "author": self.author,
            "repository": self.repository,
            "created_at": _isoformat(self.created_at),
            "merged_at": _isoformat(self.merged_at),
            "first_commit_at": _isoformat(self.first_commit_at),
            "commit_count": self.commit_count,
            "url": self.url,
            "lead_time_minutes": self.lead_time_minutes,
            "commits": [
                {"sha": commit.sha, "authored_at": _isoformat(commit.authored_at)}
                for commit in self.commits
            ],
        }


@dataclass(slots=True)
class ExtremeLeadTime:
    """The extremal lead time of a record set and the record achieving it."""

    minutes: int = 0
    record: Optional[LeadTimeRecord] = None

    def to_dict(self) -> Dict[str, Any]:
        pull_request = None
        if self.record is not None:
            pull_request = {
                "number": self.record.number,
                "title": self.record.title,
                "url": self.record.url,
                "repository": self.record.repository,
            }
        return {"minutes": self.minutes, "pull_request": pull_request}


@dataclass(slots=True)
class SummaryStatistics:
    """Aggregated lead time statistics for a set of records."""

    average_lead_time_minutes: float = 0
    median_lead_time_minutes: int = 0
    min_lead_time: ExtremeLeadTime = field(default_factory=ExtremeLeadTime)
    max_lead_time: ExtremeLeadTime = field(default_factory=ExtremeLeadTime)
    total_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "average_lead_time_minutes": self.average_lead_time_minutes,
            "median_lead_time_minutes": self.median_lead_time_minutes,
            "min_lead_time": self.min_lead_time.to_dict(),
            "max_lead_time": self.max_lead_time.to_dict(),
            "total_count": self.total_count,
        }


@dataclass(slots=True)
class PeriodMetrics:
    """Statistics and detail records for one calendar period bucket."""

    unit: str
    period_start: date
    period_end: date
    statistics: SummaryStatistics
    average_lead_time_formatted: str
    median_lead_time_formatted: str
    records: List[LeadTimeRecord] = field(default_factory=list)

    @property
    def pull_request_count(self) -> int:
        return self.statistics.total_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unit": self.unit,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "average_lead_time_minutes": self.statistics.average_lead_time_minutes,
            "median_lead_time_minutes": self.statistics.median_lead_time_minutes,
            "average_lead_time_formatted": self.average_lead_time_formatted,
            "median_lead_time_formatted": self.median_lead_time_formatted,
            "pull_request_count": self.pull_request_count,
            "records": [record.to_dict() for record in self.records],
        }


@dataclass(slots=True)
class AnalysisResult:
    """Complete outcome of one lead time analysis run."""

    organization: str
    teams: List[str]
    unit: str
    value: int
    window_start: datetime
    statistics: SummaryStatistics
    periods: List[PeriodMetrics]
    details: List[LeadTimeRecord]
    repositories: List[RepositoryRef] = field(default_factory=list)
    members: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def window_description(self) -> str:
        suffix = "" if self.value == 1 else "s"
        return f"{self.value} {self.unit}{suffix}"

    @property
    def repository_count(self) -> int:
        return len(self.repositories)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "organization": self.organization,
            "teams": list(self.teams),
            "time_period": self.window_description,
            "window_start": _isoformat(self.window_start),
            "repository_count": self.repository_count,
            "repositories": [repository.full_name for repository in self.repositories],
            "members": list(self.members),
            "statistics": self.statistics.to_dict(),
            "periods": [period.to_dict() for period in self.periods],
            "details": [record.to_dict() for record in self.details],
            "warnings": list(self.warnings),
        }
