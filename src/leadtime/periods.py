"""Calendar helpers for trailing windows and period buckets.

All arithmetic is done in UTC. Weeks start on Monday.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import List

from dateutil.relativedelta import MO, relativedelta

TIME_UNITS = ("day", "week", "month", "year")


def normalize_unit(unit: str) -> str:
    """Return the singular calendar unit for ``unit`` (``"months"`` -> ``"month"``).

    Raises:
        ValueError: If ``unit`` is not a supported calendar unit.
    """
    normalized = (unit or "").strip().lower()
    if normalized.endswith("s"):
        normalized = normalized[:-1]
    if normalized not in TIME_UNITS:
        raise ValueError(f"Unsupported time unit: {unit!r}")
    return normalized


def unit_delta(unit: str, count: int = 1) -> relativedelta:
    """Return a calendar-aware offset of ``count`` units."""
    return relativedelta(**{f"{unit}s": count})


def floor_to_unit(instant: datetime, unit: str) -> datetime:
    """Floor ``instant`` to the start of its calendar ``unit`` in UTC."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    start = instant.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)

    if unit == "day":
        return start
    if unit == "week":
        return start + relativedelta(weekday=MO(-1))
    if unit == "month":
        return start.replace(day=1)
    if unit == "year":
        return start.replace(month=1, day=1)
    raise ValueError(f"Unsupported time unit: {unit!r}")


def window_start(now: datetime, unit: str, value: int) -> datetime:
    """Start of the trailing window: ``now`` minus ``value`` units, floored to the unit."""
    return floor_to_unit(now - unit_delta(unit, value), unit)


@dataclass(frozen=True, order=True)
class PeriodKey:
    """Identity of one calendar-aligned, half-open period ``[start, end)``."""

    start: datetime
    unit: str

    @classmethod
    def containing(cls, instant: datetime, unit: str) -> "PeriodKey":
        return cls(start=floor_to_unit(instant, unit), unit=unit)

    @property
    def end(self) -> datetime:
        """Exclusive end of the period."""
        return self.start + unit_delta(self.unit)

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def last_date(self) -> date:
        """Inclusive last calendar day of the period."""
        return (self.end - timedelta(days=1)).date()

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


def trailing_periods(now: datetime, unit: str, value: int) -> List[PeriodKey]:
    """Return the ``value`` most recent periods, oldest first, ending with the one holding ``now``."""
    current = floor_to_unit(now, unit)
    return [
        PeriodKey(start=current - unit_delta(unit, offset), unit=unit)
        for offset in range(value - 1, -1, -1)
    ]
