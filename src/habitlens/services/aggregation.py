"""Completion statistics for habit charts.

Everything here is a pure function of its arguments. Results are rebuilt on
every call and never stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from ..domain.habits import Habit
from ..domain.periods import CalendarSettings, DateLike, TimePeriod, resolve_range
from ..domain.selection import Selection, resolve_selection


@dataclass(frozen=True)
class ChartRecord:
    """Completion totals of one habit over one period."""

    habit: Habit
    completed_days: int
    total_days: int
    completion_rate: float


@dataclass(frozen=True)
class PieSummary:
    """Combined completion split for the selected habits."""

    completed_percentage: float
    not_completed_percentage: float
    completed_days: int
    total_days: int
    selected_habits: list[str] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "PieSummary":
        return cls(0.0, 0.0, 0, 0, [])


def _rate(completed: int, total: int) -> float:
    return completed / total if total > 0 else 0.0


def build_chart_data(
    habit: Habit,
    period: TimePeriod,
    reference: DateLike,
    settings: CalendarSettings,
) -> ChartRecord:
    """Completed vs total days for ``habit`` in the period containing ``reference``."""

    if TimePeriod(period) is TimePeriod.DAY:
        completed = 1 if habit.is_completed_on(reference, settings) else 0
        return ChartRecord(habit, completed, 1, float(completed))

    span = resolve_range(period, reference, settings)
    total = span.day_count
    completed = habit.count_in_range(span)
    return ChartRecord(habit, completed, total, _rate(completed, total))


def build_chart_records(
    habits: Sequence[Habit],
    period: TimePeriod,
    reference: DateLike,
    settings: CalendarSettings,
) -> list[ChartRecord]:
    """One :class:`ChartRecord` per habit, in collection order."""

    return [build_chart_data(habit, period, reference, settings) for habit in habits]


def build_pie_data(
    habits: Sequence[Habit],
    selection: Selection,
    period: TimePeriod,
    reference: DateLike,
    settings: CalendarSettings,
) -> PieSummary:
    """Aggregate completion split across the selected habits.

    ``total_days`` is the number of possible completions: days in the period
    times the number of selected habits.
    """

    subset = resolve_selection(habits, selection)
    if not subset:
        return PieSummary.empty()

    if TimePeriod(period) is TimePeriod.DAY:
        day_count = 1
        completed = sum(1 for habit in subset if habit.is_completed_on(reference, settings))
    else:
        span = resolve_range(period, reference, settings)
        day_count = span.day_count
        completed = sum(habit.count_in_range(span) for habit in subset)

    total_possible = day_count * len(subset)
    rate = _rate(completed, total_possible)
    return PieSummary(
        completed_percentage=rate * 100,
        not_completed_percentage=(1 - rate) * 100,
        completed_days=completed,
        total_days=total_possible,
        selected_habits=[habit.name for habit in subset],
    )


def today_completion_rate(
    habits: Sequence[Habit], day: DateLike, settings: CalendarSettings
) -> float:
    """Share of habits completed on ``day``; 0 without habits."""

    if not habits:
        return 0.0
    done = sum(1 for habit in habits if habit.is_completed_on(day, settings))
    return done / len(habits)


__all__ = [
    "ChartRecord",
    "PieSummary",
    "build_chart_data",
    "build_chart_records",
    "build_pie_data",
    "today_completion_rate",
]
