"""Lead time reduction and formatting helpers.

This module provides utilities for:
- Converting assembled pull requests into per-PR lead time records.
- Aggregating summary statistics (average, upper median, min, max, count).
- Grouping records into contiguous calendar period buckets.
- Formatting minute-based durations as ``1d 2h 3m``.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from .models import ExtremeLeadTime, LeadTimeRecord, PeriodMetrics, PullRequest, SummaryStatistics
from .periods import PeriodKey, trailing_periods

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR


def lead_time_minutes(first_commit_at: Optional[datetime], merged_at: datetime) -> Optional[int]:
    """Return whole minutes from first commit to merge, truncated toward zero.

    Returns ``None`` when there is no first commit. The result is negative when
    the first commit was authored after the merge.
    """
    if first_commit_at is None:
        return None
    elapsed: timedelta = merged_at - first_commit_at
    return int(elapsed.total_seconds() / 60)


def to_record(pr: PullRequest) -> LeadTimeRecord:
    """Convert an assembled pull request into its lead time record.

    The first commit is the first element of the commit list as returned by the API.

    Raises:
        ValueError: If the pull request is not merged.
    """
    if pr.merged_at is None:
        raise ValueError(f"Pull request #{pr.number} is not merged")

    first_commit_at = pr.commits[0].authored_at if pr.commits else None

    return LeadTimeRecord(
        number=pr.number,
        title=pr.title,
        author=pr.author,
        repository=pr.repository,
        created_at=pr.created_at,
        merged_at=pr.merged_at,
        first_commit_at=first_commit_at,
        commit_count=len(pr.commits),
        url=pr.url,
        lead_time_minutes=lead_time_minutes(first_commit_at, pr.merged_at),
        commits=list(pr.commits),
    )


def summarize(records: List[LeadTimeRecord]) -> SummaryStatistics:
    """Compute summary statistics for lead time records.

    Records without a lead time are counted in ``total_count`` but excluded from
    the average, median, min and max. When nothing is measurable the statistics
    are zeroed with no extremal record.

    The median is the element at index ``n // 2`` of the ascending lead times,
    which is the upper median for an even ``n``. Min and max ties resolve to the
    first record in input order.
    """
    measured = [record for record in records if record.lead_time_minutes is not None]
    if not measured:
        return SummaryStatistics(total_count=len(records))

    values = [record.lead_time_minutes for record in measured]
    min_record = measured[0]
    max_record = measured[0]
    for record in measured[1:]:
        if record.lead_time_minutes < min_record.lead_time_minutes:
            min_record = record
        if record.lead_time_minutes > max_record.lead_time_minutes:
            max_record = record

    return SummaryStatistics(
        average_lead_time_minutes=sum(values) / len(values),
        median_lead_time_minutes=sorted(values)[len(values) // 2],
        min_lead_time=ExtremeLeadTime(minutes=min_record.lead_time_minutes, record=min_record),
        max_lead_time=ExtremeLeadTime(minutes=max_record.lead_time_minutes, record=max_record),
        total_count=len(records),
    )


def bucket_records(
    records: Iterable[LeadTimeRecord],
    unit: str,
    value: int,
    now: datetime,
) -> List[PeriodMetrics]:
    """Group records by merge period into exactly ``value`` contiguous buckets.

    Buckets run oldest to newest and end with the period containing ``now``.
    Periods without merges are emitted with zeroed statistics. Each bucket lists
    its records newest merge first.
    """
    grouped: Dict[PeriodKey, List[LeadTimeRecord]] = defaultdict(list)
    for record in records:
        grouped[PeriodKey.containing(record.merged_at, unit)].append(record)

    periods: List[PeriodMetrics] = []
    for key in trailing_periods(now, unit, value):
        period_records = grouped.get(key, [])
        statistics = summarize(period_records)
        periods.append(
            PeriodMetrics(
                unit=unit,
                period_start=key.start_date,
                period_end=key.last_date,
                statistics=statistics,
                average_lead_time_formatted=format_duration(statistics.average_lead_time_minutes),
                median_lead_time_formatted=format_duration(statistics.median_lead_time_minutes),
                records=sorted(period_records, key=lambda record: record.merged_at, reverse=True),
            )
        )

    return periods


def format_duration(minutes: Optional[float]) -> str:
    """Format minutes as ``{d}d {h}h {m}m``, omitting zero units.

    Args:
        minutes: Duration in minutes. Fractions are truncated.

    Returns:
        ``"n/a"`` when ``minutes`` is ``None``, ``"0m"`` when every unit is zero,
        otherwise the formatted duration. Negative durations format their
        magnitude with a leading ``-``.
    """
    if minutes is None:
        return "n/a"

    total_minutes = int(minutes)
    sign = "-" if total_minutes < 0 else ""
    total_minutes = abs(total_minutes)

    days = total_minutes // MINUTES_PER_DAY
    hours = (total_minutes % MINUTES_PER_DAY) // MINUTES_PER_HOUR
    remaining_minutes = total_minutes % MINUTES_PER_HOUR

    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if remaining_minutes:
        parts.append(f"{remaining_minutes}m")

    if not parts:
        return "0m"
    return sign + " ".join(parts)
