"""Habit repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ..habits import Habit


class HabitStoreError(RuntimeError):
    """Raised when the habit store cannot complete a read or write."""


class HabitRepository(Protocol):
    """Storage for habits and their completion sets."""

    def list_habits(self) -> list[Habit]:
        """All habits, oldest first."""
        ...

    def get(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by id."""
        ...

    def create(self, habit: Habit) -> Habit:
        """Persist a new habit."""
        ...

    def update(self, habit: Habit) -> Habit:
        """Save the name and color of an existing habit."""
        ...

    def delete(self, habit_id: str) -> None:
        """Delete a habit and its completions; unknown ids are ignored."""
        ...

    def set_completion(self, habit_id: str, day_key: str, completed: bool) -> None:
        """Add or remove one completed day."""
        ...
