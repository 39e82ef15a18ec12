"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import flet as ft
from sqlmodel import Session

from ..config import BaseConfig
from ..domain.periods import CalendarSettings
from ..infra.database import bootstrap_database
from ..infra.repositories import SQLModelHabitRepository
from ..services.tracker import HabitTracker


@dataclass
class AppContext:
    """Configuration, storage and the live tracker shared by views."""

    config: BaseConfig
    settings: CalendarSettings
    session_factory: Callable[[], Session]
    habit_repo: SQLModelHabitRepository
    tracker: HabitTracker

    theme_mode: ft.ThemeMode = ft.ThemeMode.LIGHT
    page: Optional[ft.Page] = None
    dev_mode: bool = False


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create the context and load habits from the database."""

    if config is None:
        config = BaseConfig()

    _engine, session_factory = bootstrap_database(config)
    settings = config.calendar_settings()
    habit_repo = SQLModelHabitRepository(session_factory)
    tracker = HabitTracker(habit_repo, settings, default_color=config.HABIT_COLOR)
    tracker.load()

    return AppContext(
        config=config,
        settings=settings,
        session_factory=session_factory,
        habit_repo=habit_repo,
        tracker=tracker,
        dev_mode=config.DEV_MODE,
    )
