"""Which habits feed the aggregate pie view.

A selection is either :class:`AllHabits` or :class:`SpecificHabits`. The
helpers below keep it normalized: an empty specific set and a specific set
covering every habit both collapse back to ``AllHabits``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from .habits import Habit


@dataclass(frozen=True)
class AllHabits:
    """Every current habit, evaluated at query time."""


@dataclass(frozen=True)
class SpecificHabits:
    """An explicit, non-empty set of habit ids."""

    ids: frozenset[str]

    def __post_init__(self) -> None:
        if not self.ids:
            raise ValueError("SpecificHabits requires at least one habit id")


Selection = Union[AllHabits, SpecificHabits]

ALL = AllHabits()


def select_all() -> Selection:
    return ALL


def select_only(habit_id: str) -> Selection:
    return SpecificHabits(frozenset({habit_id}))


def _normalized(ids: frozenset[str], all_ids: frozenset[str]) -> Selection:
    if not ids or ids == all_ids:
        return ALL
    return SpecificHabits(ids)


def toggle_selection(selection: Selection, habit_id: str, all_ids: Iterable[str]) -> Selection:
    """Flip ``habit_id`` in or out of the selection. Ids outside ``all_ids`` are ignored."""

    every = frozenset(all_ids)
    if habit_id not in every:
        return selection
    if isinstance(selection, AllHabits):
        return _normalized(every - {habit_id}, every)
    if habit_id in selection.ids:
        return _normalized(selection.ids - {habit_id}, every)
    return _normalized(selection.ids | {habit_id}, every)


def drop_habit(selection: Selection, habit_id: str) -> Selection:
    """Forget a deleted habit."""

    if isinstance(selection, AllHabits) or habit_id not in selection.ids:
        return selection
    remaining = selection.ids - {habit_id}
    return SpecificHabits(remaining) if remaining else ALL


def is_selected(selection: Selection, habit_id: str) -> bool:
    if isinstance(selection, AllHabits):
        return True
    return habit_id in selection.ids


def resolve_selection(habits: Sequence[Habit], selection: Selection) -> list[Habit]:
    """Selected habits in collection order. Unknown ids are ignored."""

    if isinstance(selection, AllHabits):
        return list(habits)
    return [habit for habit in habits if habit.id in selection.ids]


__all__ = [
    "ALL",
    "AllHabits",
    "Selection",
    "SpecificHabits",
    "drop_habit",
    "is_selected",
    "resolve_selection",
    "select_all",
    "select_only",
    "toggle_selection",
]
