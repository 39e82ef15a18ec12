"""Calendar arithmetic for period ranges and canonical day keys.

Every function here takes an explicit :class:`CalendarSettings` when the
answer depends on the civil calendar, so the timezone and the first day of
the week are configuration rather than process-wide globals.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum
from typing import Iterator, Optional, Union

DAY_KEY_FORMAT = "%Y-%m-%d"

DateLike = Union[date, datetime]


class TimePeriod(str, Enum):
    """Aggregation granularity for charts."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class WeekStart(str, Enum):
    """First day of the civil week."""

    MONDAY = "monday"
    SUNDAY = "sunday"

    @property
    def weekday(self) -> int:
        """Python ``date.weekday()`` number of this day (Monday is 0)."""
        return 0 if self is WeekStart.MONDAY else 6


@dataclass(frozen=True)
class CalendarSettings:
    """Civil-calendar convention for keying completions.

    ``timezone=None`` means the device-local zone.
    """

    timezone: Optional[tzinfo] = None
    week_start: WeekStart = WeekStart.MONDAY


@dataclass(frozen=True)
class DateRange:
    """Half-open day range ``[start, end)``."""

    start: date
    end: date

    @property
    def day_count(self) -> int:
        return max((self.end - self.start).days, 0)

    def __iter__(self) -> Iterator[date]:
        cursor = self.start
        while cursor < self.end:
            yield cursor
            cursor += timedelta(days=1)

    def __contains__(self, day: object) -> bool:
        if isinstance(day, datetime) or not isinstance(day, date):
            return False
        return self.start <= day < self.end


def to_civil_date(value: DateLike, settings: CalendarSettings) -> date:
    """Return the calendar day ``value`` falls on under ``settings``.

    Plain dates are already civil days. Aware datetimes are converted into the
    configured zone first; naive datetimes are taken as civil wall time.
    """

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(settings.timezone).date()
        return value.date()
    return value


def day_key(value: DateLike, settings: CalendarSettings) -> str:
    """Canonical ``yyyy-MM-dd`` key for the day containing ``value``."""

    return to_civil_date(value, settings).strftime(DAY_KEY_FORMAT)


def parse_day_key(key: str) -> date:
    """Parse a ``yyyy-MM-dd`` key; raises ValueError on malformed input."""

    return datetime.strptime(key.strip(), DAY_KEY_FORMAT).date()


def today(settings: CalendarSettings) -> date:
    """Civil today in the configured zone."""

    return datetime.now(settings.timezone).date()


def _first_of_next_month(day: date) -> date:
    if day.month == 12:
        return date(day.year + 1, 1, 1)
    return date(day.year, day.month + 1, 1)


def resolve_range(
    period: TimePeriod, reference: DateLike, settings: CalendarSettings
) -> DateRange:
    """Return the half-open range of ``period`` that contains ``reference``."""

    day = to_civil_date(reference, settings)
    period = TimePeriod(period)

    if period is TimePeriod.DAY:
        return DateRange(day, day + timedelta(days=1))
    if period is TimePeriod.WEEK:
        offset = (day.weekday() - settings.week_start.weekday) % 7
        start = day - timedelta(days=offset)
        return DateRange(start, start + timedelta(days=7))
    if period is TimePeriod.MONTH:
        start = day.replace(day=1)
        return DateRange(start, _first_of_next_month(start))
    start = date(day.year, 1, 1)
    return DateRange(start, date(day.year + 1, 1, 1))


def shift_reference(reference: date, period: TimePeriod, delta: int) -> date:
    """Move ``reference`` by ``delta`` units of ``period``.

    Month and year shifts clamp the day of month, so Jan 31 + 1 month lands on
    the last day of February.
    """

    period = TimePeriod(period)
    if period is TimePeriod.DAY:
        return reference + timedelta(days=delta)
    if period is TimePeriod.WEEK:
        return reference + timedelta(weeks=delta)

    months = delta if period is TimePeriod.MONTH else delta * 12
    index = reference.year * 12 + (reference.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(reference.day, last_day))


def format_period_label(
    period: TimePeriod, reference: DateLike, settings: CalendarSettings
) -> str:
    """Human label for the period containing ``reference``."""

    period = TimePeriod(period)
    day = to_civil_date(reference, settings)
    if period is TimePeriod.DAY:
        return f"{day:%b} {day.day}, {day.year}"
    if period is TimePeriod.WEEK:
        span = resolve_range(period, day, settings)
        last = span.end - timedelta(days=1)
        return f"{span.start:%b} {span.start.day} - {last:%b} {last.day}"
    if period is TimePeriod.MONTH:
        return f"{day:%B} {day.year}"
    return str(day.year)


__all__ = [
    "CalendarSettings",
    "DAY_KEY_FORMAT",
    "DateRange",
    "TimePeriod",
    "WeekStart",
    "day_key",
    "format_period_label",
    "parse_day_key",
    "resolve_range",
    "shift_reference",
    "to_civil_date",
    "today",
]
