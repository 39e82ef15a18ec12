"""Pure habit, calendar and selection values."""

from .habits import Habit, InvalidHabitName, create_habit
from .periods import CalendarSettings, DateRange, TimePeriod, WeekStart, resolve_range
from .selection import ALL, AllHabits, Selection, SpecificHabits

__all__ = [
    "ALL",
    "AllHabits",
    "CalendarSettings",
    "DateRange",
    "Habit",
    "InvalidHabitName",
    "Selection",
    "SpecificHabits",
    "TimePeriod",
    "WeekStart",
    "create_habit",
    "resolve_range",
]
