"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from .domain.periods import CalendarSettings, WeekStart

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HabitLens"
    DB_FILENAME = "habitlens.db"
    DEFAULT_HABIT_COLOR = "#007AFF"
    LOCAL_TIMEZONE = "local"

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HABITLENS_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("HABITLENS_DATABASE_URL", self._build_sqlite_url())
        self.TIMEZONE = os.getenv("HABITLENS_TIMEZONE", self.LOCAL_TIMEZONE).strip()
        self.WEEK_START = os.getenv("HABITLENS_WEEK_START", WeekStart.MONDAY.value).strip().lower()
        self.HABIT_COLOR = os.getenv("HABITLENS_DEFAULT_COLOR", self.DEFAULT_HABIT_COLOR)
        # Fail fast on a bad zone or week start instead of at first render.
        self._calendar = self._build_calendar_settings()

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("HABITLENS_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def _build_calendar_settings(self) -> CalendarSettings:
        try:
            week_start = WeekStart(self.WEEK_START)
        except ValueError as exc:
            raise ValueError(
                f"HABITLENS_WEEK_START must be 'monday' or 'sunday', got {self.WEEK_START!r}"
            ) from exc

        if self.TIMEZONE.lower() == self.LOCAL_TIMEZONE:
            return CalendarSettings(timezone=None, week_start=week_start)
        try:
            zone = ZoneInfo(self.TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown HABITLENS_TIMEZONE {self.TIMEZONE!r}") from exc
        return CalendarSettings(timezone=zone, week_start=week_start)

    def calendar_settings(self) -> CalendarSettings:
        """Civil-calendar convention used for day keys and period ranges."""

        return self._calendar

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        return {"connect_args": {"check_same_thread": False}}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False
