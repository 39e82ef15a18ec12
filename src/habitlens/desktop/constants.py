"""Desktop UI constants."""

from __future__ import annotations

from ..domain.periods import TimePeriod

HABIT_COLOR_OPTIONS: list[tuple[str, str]] = [
    ("#007AFF", "Blue"),
    ("#34C759", "Green"),
    ("#FF9500", "Orange"),
    ("#FF3B30", "Red"),
    ("#AF52DE", "Purple"),
    ("#5AC8FA", "Teal"),
]

PERIOD_LABELS: dict[TimePeriod, str] = {
    TimePeriod.DAY: "Day",
    TimePeriod.WEEK: "Week",
    TimePeriod.MONTH: "Month",
    TimePeriod.YEAR: "Year",
}
