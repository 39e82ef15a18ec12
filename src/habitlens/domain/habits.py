"""Habit values and their per-day completion sets."""

from __future__ import annotations

import string
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from .periods import DAY_KEY_FORMAT, CalendarSettings, DateLike, DateRange, day_key, parse_day_key

DEFAULT_COLOR = "#007AFF"


class InvalidHabitName(ValueError):
    """Raised when a habit name is blank after trimming."""


@dataclass(frozen=True)
class Habit:
    """A binary, once-per-day habit.

    Instances are immutable; :meth:`toggle` returns a new value so callers can
    keep the previous one around for rollback.
    """

    id: str
    name: str
    color: str = DEFAULT_COLOR
    completions: frozenset[str] = field(default_factory=frozenset)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def is_completed_on(self, day: DateLike, settings: CalendarSettings) -> bool:
        return day_key(day, settings) in self.completions

    def toggle(self, day: DateLike, settings: CalendarSettings) -> "Habit":
        """Flip completion for ``day``."""

        key = day_key(day, settings)
        if key in self.completions:
            return replace(self, completions=self.completions - {key})
        return replace(self, completions=self.completions | {key})

    def count_in_range(self, span: DateRange) -> int:
        """Number of completed days in ``[span.start, span.end)``."""

        if not self.completions:
            return 0
        return sum(1 for day in span if day.strftime(DAY_KEY_FORMAT) in self.completions)


def normalize_completions(keys: Iterable[str]) -> frozenset[str]:
    """Canonicalize stored day keys so each calendar day appears once."""

    return frozenset(parse_day_key(key).strftime(DAY_KEY_FORMAT) for key in keys)


def parse_hex_color(value: str) -> tuple[float, float, float, float]:
    """Parse ``#RGB``, ``#RRGGBB`` or ``#AARRGGBB`` into RGBA floats in [0, 1]."""

    digits = value.strip().lstrip("#")
    if not digits or any(ch not in string.hexdigits for ch in digits):
        raise ValueError(f"Invalid hex color: {value!r}")

    if len(digits) == 3:
        r, g, b = (int(ch, 16) * 17 for ch in digits)
        a = 255
    elif len(digits) == 6:
        r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
        a = 255
    elif len(digits) == 8:
        a, r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4, 6))
    else:
        raise ValueError(f"Invalid hex color: {value!r}")
    return r / 255, g / 255, b / 255, a / 255


def normalize_color(value: Optional[str], default: str = DEFAULT_COLOR) -> str:
    """Return ``value`` as an upper-case ``#...`` string, or ``default`` if unusable."""

    if not value:
        return default
    try:
        parse_hex_color(value)
    except ValueError:
        return default
    return "#" + value.strip().lstrip("#").upper()


def create_habit(
    name: str,
    color: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
    default_color: str = DEFAULT_COLOR,
) -> Habit:
    """Build a new habit with a fresh id and no completions."""

    clean = (name or "").strip()
    if not clean:
        raise InvalidHabitName("Habit name cannot be empty")
    return Habit(
        id=uuid.uuid4().hex,
        name=clean,
        color=normalize_color(color, default_color),
        completions=frozenset(),
        created_at=now or datetime.now(timezone.utc),
    )


def edit_habit(habit: Habit, name: Optional[str] = None, color: Optional[str] = None) -> Habit:
    """Return ``habit`` with a new name and/or color.

    ``None`` keeps the current value. Names are trimmed and must not be blank;
    an unparseable color keeps the current one.
    """

    new_name = habit.name
    if name is not None:
        new_name = name.strip()
        if not new_name:
            raise InvalidHabitName("Habit name cannot be empty")
    new_color = normalize_color(color, habit.color) if color is not None else habit.color
    return replace(habit, name=new_name, color=new_color)


def sort_for_display(habits: Iterable[Habit]) -> list[Habit]:
    """Oldest habit first; ties are broken by id."""

    return sorted(habits, key=lambda habit: (habit.created_at, habit.id))


def completion_dates(habit: Habit) -> list[date]:
    """Completed days in ascending order."""

    return sorted(parse_day_key(key) for key in habit.completions)


__all__ = [
    "DEFAULT_COLOR",
    "Habit",
    "InvalidHabitName",
    "completion_dates",
    "create_habit",
    "edit_habit",
    "normalize_color",
    "normalize_completions",
    "parse_hex_color",
    "sort_for_display",
]
