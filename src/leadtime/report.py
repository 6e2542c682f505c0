"""Render payloads for lead time analysis results.

Pure functions that turn an :class:`AnalysisResult` into display-ready data:
- ``chart_series`` for time-series charts (lead times converted to days).
- ``generate_report`` for a human-readable terminal report.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List

from .models import AnalysisResult, ExtremeLeadTime
from .reducer import MINUTES_PER_DAY, format_duration


def format_period_label(period_start: date, unit: str) -> str:
    """Format a period start for chart axes (``Oct 19``, ``Week of Oct 13``, ...)."""
    if unit == "day":
        return f"{period_start:%b} {period_start.day}"
    if unit == "week":
        return f"Week of {period_start:%b} {period_start.day}"
    if unit == "month":
        return f"{period_start:%b %Y}"
    if unit == "year":
        return f"{period_start:%Y}"
    return period_start.isoformat()


def minutes_to_days(minutes: float) -> float:
    return minutes / MINUTES_PER_DAY


def chart_series(result: AnalysisResult) -> Dict[str, List[Any]]:
    """Build chart-ready series, one point per period, oldest first."""
    return {
        "labels": [format_period_label(period.period_start, period.unit) for period in result.periods],
        "average_lead_time_days": [
            minutes_to_days(period.statistics.average_lead_time_minutes) for period in result.periods
        ],
        "median_lead_time_days": [
            minutes_to_days(period.statistics.median_lead_time_minutes) for period in result.periods
        ],
        "pull_request_count": [period.pull_request_count for period in result.periods],
    }


def _format_extreme(extreme: ExtremeLeadTime) -> str:
    duration = format_duration(extreme.minutes)
    if extreme.record is None:
        return duration
    return f"{duration} (#{extreme.record.number} {extreme.record.title} - {extreme.record.url})"


def generate_report(result: AnalysisResult) -> str:
    """Generate a human-readable lead time report.

    The report includes overall statistics followed by one line per period.
    All durations are formatted using :func:`format_duration`.
    """
    statistics = result.statistics
    lines = [
        f"Organization: {result.organization}",
        f"Teams: {', '.join(result.teams)}",
        f"Window: last {result.window_description} (since {result.window_start:%Y-%m-%d})",
        f"Repositories: {result.repository_count}",
        "",
        "Lead Time (First Commit to Merge)",
        f"   Pull requests: {statistics.total_count}",
        f"   Average: {format_duration(statistics.average_lead_time_minutes)}",
        f"   Median: {format_duration(statistics.median_lead_time_minutes)}",
        f"   Min: {_format_extreme(statistics.min_lead_time)}",
        f"   Max: {_format_extreme(statistics.max_lead_time)}",
        "",
        "Per Period",
    ]

    for period in result.periods:
        lines.append(
            f"   {period.period_start.isoformat()} .. {period.period_end.isoformat()}"
            f" | PRs={period.pull_request_count}"
            f" | avg={period.average_lead_time_formatted}"
            f" | median={period.median_lead_time_formatted}"
        )

    if result.warnings:
        lines.append("")
        lines.append("Warnings")
        lines.extend(f"   {warning}" for warning in result.warnings)

    return "\n".join(lines)
