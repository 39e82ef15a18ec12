#!/usr/bin/env python
"""Seed the configured database with demo habits and completion history."""

from __future__ import annotations

import random
from datetime import timedelta

from habitlens.config import BaseConfig
from habitlens.infra.database import bootstrap_database
from habitlens.infra.repositories import SQLModelHabitRepository
from habitlens.logging_config import get_logger, setup_logging
from habitlens.services.tracker import HabitTracker

logger = get_logger("scripts.seed_demo")

# name, color, chance of completion on any given day
DEMO_HABITS = [
    ("Morning run", "#FF3B30", 0.55),
    ("Read 20 pages", "#007AFF", 0.75),
    ("Meditate", "#AF52DE", 0.4),
    ("Drink water", "#5AC8FA", 0.9),
]


def seed_demo(days: int = 120, seed: int = 7, config: BaseConfig | None = None) -> HabitTracker:
    cfg = config or BaseConfig()
    setup_logging(cfg)
    _engine, session_factory = bootstrap_database(cfg)
    tracker = HabitTracker(
        SQLModelHabitRepository(session_factory),
        cfg.calendar_settings(),
        default_color=cfg.HABIT_COLOR,
    )
    tracker.load()

    rng = random.Random(seed)
    existing = {habit.name.lower() for habit in tracker.habits}
    today = tracker.state.reference
    for name, color, chance in DEMO_HABITS:
        if name.lower() in existing:
            continue
        habit = tracker.add_habit(name, color)
        for offset in range(1, days + 1):
            if rng.random() < chance:
                tracker.toggle_completion(habit.id, today - timedelta(days=offset))

    logger.info("Demo habits seeded", extra={"habit_count": len(tracker.habits), "days": days})
    return tracker


if __name__ == "__main__":
    seed_demo()
