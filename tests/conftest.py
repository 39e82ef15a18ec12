"""Pytest configuration and shared fixtures for HabitLens tests.

Provides an isolated SQLite database per test, calendar settings pinned to a
known zone and week start, and factories for habit values.
"""

from __future__ import annotations

import tempfile
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Iterable

import pytest
from sqlmodel import Session, SQLModel, create_engine

from habitlens import models  # noqa: F401  # register tables with SQLModel metadata
from habitlens.domain.habits import Habit
from habitlens.domain.periods import CalendarSettings, WeekStart, day_key
from habitlens.infra.repositories import SQLModelHabitRepository
from habitlens.services.tracker import HabitTracker, TrackerState

# =============================================================================
# Calendar Fixtures
# =============================================================================


@pytest.fixture
def utc_settings() -> CalendarSettings:
    """UTC days, weeks starting Monday."""
    return CalendarSettings(timezone=timezone.utc, week_start=WeekStart.MONDAY)


@pytest.fixture
def sunday_settings() -> CalendarSettings:
    """UTC days, weeks starting Sunday."""
    return CalendarSettings(timezone=timezone.utc, week_start=WeekStart.SUNDAY)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with all tables created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the ``Callable[[], Session]`` repositories expect."""

    def factory() -> Session:
        return Session(db_engine, expire_on_commit=False)

    return factory


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def tracker(habit_repo, utc_settings) -> HabitTracker:
    """Tracker over an empty database, reference pinned to 2024-01-03 (Wednesday)."""

    tracker = HabitTracker(habit_repo, utc_settings)
    tracker.load()
    tracker.set_reference(date(2024, 1, 3))
    return tracker


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(utc_settings):
    """Factory for in-memory habit values.

    Returns:
        Callable: builds a Habit from a name and completed dates
    """
    counter = {"n": 0}

    def _create_habit(
        name: str = "Test Habit",
        done: Iterable[date] = (),
        color: str = "#007AFF",
        habit_id: str | None = None,
    ) -> Habit:
        counter["n"] += 1
        return Habit(
            id=habit_id or f"habit-{counter['n']}",
            name=name,
            color=color,
            completions=frozenset(day_key(d, utc_settings) for d in done),
            created_at=datetime(2024, 1, 1, 0, counter["n"], tzinfo=timezone.utc),
        )

    return _create_habit


@pytest.fixture
def empty_state() -> TrackerState:
    return TrackerState(reference=date(2024, 1, 3))


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance."""
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"
