# src/task_planner/tasks/periods.py

"""
Week / month / year windows used by the planner views.

Weeks start on Monday. All ranges are inclusive and timezone-aware:
`tz=None` means the local timezone, and naive dates/datetimes are read
as wall-clock time in that zone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from enum import StrEnum

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

_ONE_TICK = timedelta(microseconds=1)


class PeriodUnit(StrEnum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class Direction(StrEnum):
    NEXT = "next"
    PREV = "prev"


@dataclass(frozen=True, slots=True)
class DateRange:
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def _local_tz() -> tzinfo:
    return datetime.now().astimezone().tzinfo or UTC


def _as_datetime(value: date | datetime, tz: tzinfo | None) -> datetime:
    zone = tz or _local_tz()
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=zone)
        return value.astimezone(zone)
    return datetime.combine(value, time.min, tzinfo=zone)


def _midnight(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def week_range(value: date | datetime, tz: tzinfo | None = None) -> DateRange:
    dt = _as_datetime(value, tz)
    start = _midnight(dt) - timedelta(days=dt.weekday())
    return DateRange(start=start, end=start + timedelta(days=7) - _ONE_TICK)


def month_range(value: date | datetime, tz: tzinfo | None = None) -> DateRange:
    start = _midnight(_as_datetime(value, tz)).replace(day=1)
    return DateRange(start=start, end=start + relativedelta(months=1) - _ONE_TICK)


def year_range(value: date | datetime, tz: tzinfo | None = None) -> DateRange:
    start = _midnight(_as_datetime(value, tz)).replace(month=1, day=1)
    return DateRange(start=start, end=start + relativedelta(years=1) - _ONE_TICK)


def period_range(
    value: date | datetime, unit: PeriodUnit | str, tz: tzinfo | None = None
) -> DateRange:
    unit = PeriodUnit(unit)
    if unit is PeriodUnit.WEEK:
        return week_range(value, tz)
    if unit is PeriodUnit.MONTH:
        return month_range(value, tz)
    return year_range(value, tz)


def navigate(
    value: date | datetime, direction: Direction | str, unit: PeriodUnit | str
) -> date | datetime:
    """Shift by exactly one unit. Month/year shifts clamp to the end of shorter months."""
    direction = Direction(direction)
    unit = PeriodUnit(unit)

    step: timedelta | relativedelta
    if unit is PeriodUnit.WEEK:
        step = timedelta(weeks=1)
    elif unit is PeriodUnit.MONTH:
        step = relativedelta(months=1)
    else:
        step = relativedelta(years=1)

    return value + step if direction is Direction.NEXT else value - step


def is_current_period(
    value: date | datetime,
    unit: PeriodUnit | str,
    reference: date | datetime | None = None,
    tz: tzinfo | None = None,
) -> bool:
    if reference is None:
        reference = datetime.now(tz or _local_tz())
    return period_range(value, unit, tz).start == period_range(reference, unit, tz).start


def format_range(rng: DateRange, unit: PeriodUnit | str) -> str:
    unit = PeriodUnit(unit)
    if unit is PeriodUnit.MONTH:
        return rng.start.strftime("%B %Y")
    if unit is PeriodUnit.YEAR:
        return rng.start.strftime("%Y")
    return f"{rng.start.strftime('%b %d')} - {rng.end.strftime('%b %d, %Y')}"


def parse_task_date(value: str | None, tz: tzinfo | None = None) -> datetime | None:
    """
    Parse an ISO-8601 timestamp/date string.

    Returns None for empty or unparseable input; never raises.
    """
    if not value or not value.strip():
        return None
    try:
        parsed = isoparse(value.strip())
    except (ValueError, OverflowError):
        logger.debug("Unparseable task date: %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz or _local_tz())
    return parsed
