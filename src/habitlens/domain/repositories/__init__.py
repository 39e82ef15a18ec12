"""Repository protocols."""

from .habit import HabitRepository, HabitStoreError

__all__ = ["HabitRepository", "HabitStoreError"]
