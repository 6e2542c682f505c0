"""Tests for lead time records, statistics, bucketing and formatting."""

import sys
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from leadtime.models import Commit, LeadTimeRecord, PullRequest
from leadtime.reducer import bucket_records, format_duration, lead_time_minutes, summarize, to_record


def _utc(month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    return datetime(2026, month, day, hour, minute, second, tzinfo=timezone.utc)


def _record(number: int, minutes: int | None, merged_at: datetime | None = None) -> LeadTimeRecord:
    return LeadTimeRecord(
        number=number,
        title=f"PR {number}",
        author="alice",
        repository="org/api",
        created_at=_utc(1, 1),
        merged_at=merged_at or _utc(10, 1),
        first_commit_at=None if minutes is None else _utc(1, 1),
        commit_count=0 if minutes is None else 1,
        url=f"https://github.com/org/api/pull/{number}",
        lead_time_minutes=minutes,
    )


def test_lead_time_minutes_truncates_to_whole_minutes():
    """Verify elapsed time is truncated, not rounded, to minutes."""
    assert lead_time_minutes(_utc(9, 1, 10, 0, 0), _utc(9, 1, 11, 30, 59)) == 90


def test_lead_time_minutes_passes_negative_values_through():
    """Verify a first commit after the merge yields a negative lead time."""
    assert lead_time_minutes(_utc(9, 1, 12), _utc(9, 1, 11)) == -60


def test_to_record_uses_first_commit_in_list_order():
    """Verify the first listed commit defines the lead time start."""
    pr = PullRequest(
        number=7,
        title="Add feature",
        author="alice",
        created_at=_utc(9, 1, 9),
        merged_at=_utc(9, 2, 10),
        url="https://github.com/org/api/pull/7",
        repository="org/api",
        commits=[
            Commit(sha="late", authored_at=_utc(9, 1, 10)),
            Commit(sha="early", authored_at=_utc(9, 1, 8)),
        ],
    )

    record = to_record(pr)

    assert record.first_commit_at == _utc(9, 1, 10)
    assert record.lead_time_minutes == 24 * 60
    assert record.commit_count == 2
    assert record.repository == "org/api"


def test_to_record_without_commits_has_no_lead_time():
    """Verify a pull request without commits yields an undefined lead time."""
    pr = PullRequest(
        number=8,
        title="Empty",
        author="bob",
        created_at=_utc(9, 1),
        merged_at=_utc(9, 2),
        url="",
    )

    record = to_record(pr)

    assert record.first_commit_at is None
    assert record.lead_time_minutes is None
    assert record.commit_count == 0


def test_to_record_rejects_unmerged_pull_request():
    """Verify unmerged pull requests cannot become records."""
    pr = PullRequest(number=9, title="", author="bob", created_at=_utc(9, 1), merged_at=None, url="")

    with pytest.raises(ValueError):
        to_record(pr)


def test_summarize_empty_returns_zeroed_statistics():
    """Verify empty input yields zeroed statistics without extremal records."""
    stats = summarize([])

    assert stats.average_lead_time_minutes == 0
    assert stats.median_lead_time_minutes == 0
    assert stats.min_lead_time.minutes == 0
    assert stats.min_lead_time.record is None
    assert stats.max_lead_time.minutes == 0
    assert stats.max_lead_time.record is None
    assert stats.total_count == 0


def test_summarize_median_uses_upper_element_for_even_count():
    """Verify the median is the element at index n // 2 of the sorted values."""
    records = [_record(1, 40), _record(2, 10), _record(3, 30), _record(4, 20)]

    stats = summarize(records)

    assert stats.median_lead_time_minutes == 30
    assert stats.average_lead_time_minutes == pytest.approx(25.0)


def test_summarize_median_for_odd_count():
    """Verify the median of an odd-sized sample is its middle element."""
    stats = summarize([_record(1, 50), _record(2, 10), _record(3, 30)])

    assert stats.median_lead_time_minutes == 30


def test_summarize_min_and_max_identify_records():
    """Verify min and max carry the lead time and the record achieving it."""
    records = [_record(1, 120), _record(2, -15), _record(3, 600)]

    stats = summarize(records)

    assert stats.min_lead_time.minutes == -15
    assert stats.min_lead_time.record.number == 2
    assert stats.max_lead_time.minutes == 600
    assert stats.max_lead_time.record.number == 3
    assert stats.min_lead_time.minutes <= stats.average_lead_time_minutes <= stats.max_lead_time.minutes


def test_summarize_ties_resolve_to_first_record_in_input_order():
    """Verify equal extremal lead times pick the earliest record in the input."""
    records = [_record(1, 60), _record(2, 10), _record(3, 60), _record(4, 10)]

    stats = summarize(records)

    assert stats.min_lead_time.record.number == 2
    assert stats.max_lead_time.record.number == 1


def test_summarize_excludes_records_without_lead_time_but_counts_them():
    """Verify undefined lead times are left out of statistics yet counted."""
    records = [_record(1, None), _record(2, 30), _record(3, 90)]

    stats = summarize(records)

    assert stats.total_count == 3
    assert stats.average_lead_time_minutes == pytest.approx(60.0)
    assert stats.median_lead_time_minutes == 90
    assert stats.min_lead_time.record.number == 2


def test_summarize_only_undefined_lead_times_returns_zeroed_statistics_with_count():
    """Verify a set of commitless records is counted but yields zeroed statistics."""
    stats = summarize([_record(1, None), _record(2, None)])

    assert stats.total_count == 2
    assert stats.average_lead_time_minutes == 0
    assert stats.min_lead_time.record is None


def test_bucket_records_emits_contiguous_months_including_empty_ones():
    """Verify exactly `value` monthly buckets are emitted, oldest first, with gaps filled."""
    now = _utc(10, 19, 12)
    records = [
        _record(1, 60, merged_at=_utc(8, 3)),
        _record(2, 120, merged_at=_utc(10, 2)),
        _record(3, 180, merged_at=_utc(10, 15)),
    ]

    periods = bucket_records(records, "month", 3, now)

    assert [period.period_start for period in periods] == [
        date(2026, 8, 1),
        date(2026, 9, 1),
        date(2026, 10, 1),
    ]
    assert [period.period_end for period in periods] == [
        date(2026, 8, 31),
        date(2026, 9, 30),
        date(2026, 10, 31),
    ]
    assert [period.pull_request_count for period in periods] == [1, 0, 2]
    assert periods[1].statistics.average_lead_time_minutes == 0
    assert periods[1].average_lead_time_formatted == "0m"
    assert periods[2].statistics.average_lead_time_minutes == pytest.approx(150.0)
    assert periods[2].average_lead_time_formatted == "2h 30m"
    assert periods[2].median_lead_time_formatted == "3h"
    assert [record.number for record in periods[2].records] == [3, 2]


def test_bucket_records_weeks_start_on_monday():
    """Verify weekly buckets are aligned to Monday in UTC."""
    now = _utc(10, 19, 12)  # a Monday

    periods = bucket_records([_record(1, 5, merged_at=_utc(10, 18, 23))], "week", 2, now)

    assert [period.period_start for period in periods] == [date(2026, 10, 12), date(2026, 10, 19)]
    assert periods[0].period_end == date(2026, 10, 18)
    assert [period.pull_request_count for period in periods] == [1, 0]


def test_bucket_records_with_no_records_still_returns_every_period():
    """Verify an empty record set yields `value` zeroed daily buckets."""
    periods = bucket_records([], "day", 5, _utc(10, 19, 12))

    assert len(periods) == 5
    assert periods[0].period_start == date(2026, 10, 15)
    assert periods[-1].period_start == date(2026, 10, 19)
    assert all(period.pull_request_count == 0 for period in periods)


def test_format_duration_handles_zero_typical_and_large_values():
    """Verify duration formatter omits zero units and truncates."""
    assert format_duration(0) == "0m"
    assert format_duration(90) == "1h 30m"
    assert format_duration(1500) == "1d 1h"
    assert format_duration(1440) == "1d"
    assert format_duration(1441) == "1d 1m"
    assert format_duration(59.9) == "59m"


def test_format_duration_handles_missing_and_negative_values():
    """Verify undefined durations render n/a and negatives keep their sign."""
    assert format_duration(None) == "n/a"
    assert format_duration(-90) == "-1h 30m"
    assert format_duration(-0.5) == "0m"


def test_bucket_records_leaves_oldest_partial_period_out_of_series():
    """Verify merges in the floored start period count overall but fall in no bucket."""
    now = _utc(10, 19, 12)
    records = [
        _record(1, 60, merged_at=_utc(7, 20)),
        _record(2, 120, merged_at=_utc(9, 5)),
    ]

    periods = bucket_records(records, "month", 3, now)

    assert [period.period_start for period in periods] == [
        date(2026, 8, 1),
        date(2026, 9, 1),
        date(2026, 10, 1),
    ]
    assert sum(period.pull_request_count for period in periods) == 1
    assert all(record.number != 1 for period in periods for record in period.records)
    assert summarize(records).total_count == 2
