"""Tracker state transitions and the stateful service built on them.

``TrackerState`` plus the module-level transition functions are pure: each
takes a state and returns a new one. :class:`HabitTracker` applies them,
writes through a :class:`HabitRepository`, and on a failed completion write
puts the previous habit value back.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

from ..domain.habits import DEFAULT_COLOR, Habit, create_habit, edit_habit, sort_for_display
from ..domain.periods import (
    CalendarSettings,
    DateLike,
    TimePeriod,
    day_key,
    format_period_label,
    shift_reference,
    to_civil_date,
    today,
)
from ..domain.repositories.habit import HabitRepository, HabitStoreError
from ..domain.selection import (
    ALL,
    Selection,
    drop_habit,
    select_only,
    toggle_selection,
)
from ..logging_config import get_logger
from .aggregation import (
    ChartRecord,
    PieSummary,
    build_chart_records,
    build_pie_data,
    today_completion_rate,
)

logger = get_logger("services.tracker")


@dataclass(frozen=True)
class TrackerState:
    """Everything the chart views are derived from."""

    habits: tuple[Habit, ...] = ()
    selection: Selection = ALL
    period: TimePeriod = TimePeriod.WEEK
    reference: date = field(default_factory=date.today)

    def find(self, habit_id: str) -> Optional[Habit]:
        return next((habit for habit in self.habits if habit.id == habit_id), None)

    @property
    def habit_ids(self) -> frozenset[str]:
        return frozenset(habit.id for habit in self.habits)


def add_habit(state: TrackerState, habit: Habit) -> TrackerState:
    return replace(state, habits=tuple(sort_for_display((*state.habits, habit))))


def remove_habit(state: TrackerState, habit_id: str) -> TrackerState:
    if state.find(habit_id) is None:
        return state
    return replace(
        state,
        habits=tuple(habit for habit in state.habits if habit.id != habit_id),
        selection=drop_habit(state.selection, habit_id),
    )


def replace_habit(state: TrackerState, habit: Habit) -> TrackerState:
    """Swap in a new value for an existing habit id; unknown ids are ignored."""

    if state.find(habit.id) is None:
        return state
    return replace(
        state, habits=tuple(habit if h.id == habit.id else h for h in state.habits)
    )


def toggle_completion(
    state: TrackerState, habit_id: str, day: DateLike, settings: CalendarSettings
) -> TrackerState:
    target = state.find(habit_id)
    if target is None:
        return state
    return replace_habit(state, target.toggle(day, settings))


def toggle_selected(state: TrackerState, habit_id: str) -> TrackerState:
    if state.find(habit_id) is None:
        return state
    return replace(
        state, selection=toggle_selection(state.selection, habit_id, state.habit_ids)
    )


def select_all_habits(state: TrackerState) -> TrackerState:
    return replace(state, selection=ALL)


def select_only_habit(state: TrackerState, habit_id: str) -> TrackerState:
    if state.find(habit_id) is None:
        return state
    return replace(state, selection=select_only(habit_id))


def set_period(state: TrackerState, period: TimePeriod) -> TrackerState:
    return replace(state, period=TimePeriod(period))


def navigate(state: TrackerState, delta: int) -> TrackerState:
    """Move the reference date by ``delta`` units of the current period."""

    return replace(state, reference=shift_reference(state.reference, state.period, delta))


def reset_reference(state: TrackerState, day: date) -> TrackerState:
    return replace(state, reference=day)


class HabitTracker:
    """Holds the live tracker state and keeps the repository in step with it."""

    def __init__(
        self,
        repository: HabitRepository,
        settings: CalendarSettings,
        *,
        default_color: str = DEFAULT_COLOR,
        period: TimePeriod = TimePeriod.WEEK,
    ):
        self.repository = repository
        self.settings = settings
        self.default_color = default_color
        self.state = TrackerState(period=period, reference=today(settings))
        self.last_error: Optional[str] = None
        self._state_lock = threading.RLock()
        self._habit_locks: defaultdict[str, threading.Lock] = defaultdict(threading.Lock)

    @property
    def habits(self) -> tuple[Habit, ...]:
        return self.state.habits

    def load(self) -> None:
        """Replace in-memory habits with what the repository holds."""

        habits = self.repository.list_habits()
        with self._state_lock:
            known = frozenset(habit.id for habit in habits)
            selection = self.state.selection
            for habit_id in self.state.habit_ids - known:
                selection = drop_habit(selection, habit_id)
            self.state = replace(
                self.state, habits=tuple(sort_for_display(habits)), selection=selection
            )
        logger.info("Habits loaded", extra={"count": len(habits)})

    def add_habit(self, name: str, color: Optional[str] = None) -> Habit:
        """Create, persist and track a habit. Raises InvalidHabitName on blank names."""

        habit = create_habit(name, color, default_color=self.default_color)
        self.repository.create(habit)
        with self._state_lock:
            self.state = add_habit(self.state, habit)
        logger.info("Habit added", extra={"habit_id": habit.id, "habit_name": habit.name})
        return habit

    def update_habit(
        self, habit_id: str, name: Optional[str] = None, color: Optional[str] = None
    ) -> Optional[Habit]:
        """Rename and/or recolor a habit.

        Returns the updated habit, or None when the id is unknown. Raises
        InvalidHabitName on a blank name and HabitStoreError if the write fails;
        in both cases the tracked habit is unchanged.
        """

        current = self.state.find(habit_id)
        if current is None:
            logger.warning("Update ignored for unknown habit", extra={"habit_id": habit_id})
            return None
        updated = edit_habit(current, name, color)
        if updated == current:
            return current
        self.repository.update(updated)
        with self._state_lock:
            latest = self.state.find(habit_id)
            if latest is not None:
                # Keep completions toggled while the write was in flight.
                updated = replace(latest, name=updated.name, color=updated.color)
                self.state = replace_habit(self.state, updated)
        logger.info("Habit updated", extra={"habit_id": habit_id, "habit_name": updated.name})
        return updated

    def remove_habit(self, habit_id: str) -> bool:
        """Delete a habit. Returns False when the id is unknown."""

        if self.state.find(habit_id) is None:
            logger.warning("Remove ignored for unknown habit", extra={"habit_id": habit_id})
            return False
        self.repository.delete(habit_id)
        with self._state_lock:
            self.state = remove_habit(self.state, habit_id)
        self._habit_locks.pop(habit_id, None)
        logger.info("Habit removed", extra={"habit_id": habit_id})
        return True

    def toggle_completion(self, habit_id: str, day: Optional[DateLike] = None) -> bool:
        """Flip completion for ``day`` (default: civil today).

        The change is visible immediately. If the repository write fails the
        previous habit value is restored, ``last_error`` is set and False is
        returned. Unknown ids are a no-op returning False.
        """

        target_day = to_civil_date(day, self.settings) if day is not None else today(self.settings)
        with self._habit_locks[habit_id]:
            with self._state_lock:
                previous = self.state.find(habit_id)
                if previous is None:
                    logger.warning("Toggle ignored for unknown habit", extra={"habit_id": habit_id})
                    return False
                updated = previous.toggle(target_day, self.settings)
                self.state = replace_habit(self.state, updated)

            key = day_key(target_day, self.settings)
            completed = key in updated.completions
            try:
                self.repository.set_completion(habit_id, key, completed)
            except HabitStoreError as exc:
                with self._state_lock:
                    self.state = replace_habit(self.state, previous)
                self.last_error = str(exc)
                logger.warning(
                    "Completion toggle rolled back",
                    extra={"habit_id": habit_id, "day_key": key, "error": str(exc)},
                )
                return False

        self.last_error = None
        logger.info(
            "Completion toggled",
            extra={"habit_id": habit_id, "day_key": key, "completed": completed},
        )
        return True

    def toggle_selection(self, habit_id: str) -> Selection:
        with self._state_lock:
            self.state = toggle_selected(self.state, habit_id)
            return self.state.selection

    def select_all(self) -> Selection:
        with self._state_lock:
            self.state = select_all_habits(self.state)
            return self.state.selection

    def select_only(self, habit_id: str) -> Selection:
        with self._state_lock:
            self.state = select_only_habit(self.state, habit_id)
            return self.state.selection

    def set_period(self, period: TimePeriod) -> None:
        with self._state_lock:
            self.state = set_period(self.state, period)

    def set_reference(self, day: DateLike) -> None:
        with self._state_lock:
            self.state = reset_reference(self.state, to_civil_date(day, self.settings))

    def next_period(self) -> date:
        with self._state_lock:
            self.state = navigate(self.state, 1)
            return self.state.reference

    def previous_period(self) -> date:
        with self._state_lock:
            self.state = navigate(self.state, -1)
            return self.state.reference

    def reset_reference(self) -> date:
        with self._state_lock:
            self.state = reset_reference(self.state, today(self.settings))
            return self.state.reference

    # Derived views are recomputed from the current state on every call.

    def chart_records(self) -> list[ChartRecord]:
        state = self.state
        return build_chart_records(state.habits, state.period, state.reference, self.settings)

    def pie_summary(self) -> PieSummary:
        state = self.state
        return build_pie_data(
            state.habits, state.selection, state.period, state.reference, self.settings
        )

    def period_label(self) -> str:
        return format_period_label(self.state.period, self.state.reference, self.settings)

    def today_completion_rate(self) -> float:
        return today_completion_rate(self.state.habits, today(self.settings), self.settings)
