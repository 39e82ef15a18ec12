"""HabitLens test suite."""
