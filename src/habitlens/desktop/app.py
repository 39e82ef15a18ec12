"""Main Flet desktop application entry point."""

from __future__ import annotations

import flet as ft

from ..devtools import dev_log
from ..logging_config import setup_logging
from .context import create_app_context
from .views.habits import build_habits_view


def main(page: ft.Page) -> None:
    """Main entry point for the Flet desktop app."""

    ctx = create_app_context()
    logger = setup_logging(ctx.config)
    logger.info("HabitLens desktop application starting", extra={"habits": len(ctx.tracker.habits)})

    ctx.page = page
    page.title = "HabitLens (DEV)" if ctx.dev_mode else "HabitLens"
    if ctx.dev_mode:
        dev_log(ctx.config, "Dev mode enabled", context={"data_dir": ctx.config.DATA_DIR})
    page.theme_mode = ctx.theme_mode
    page.padding = 0
    page.window_width = 1100
    page.window_height = 760

    def _on_error(e: ft.ControlEvent):  # pragma: no cover (UI callback)
        logger.error("Flet page error", extra={"data": getattr(e, "data", None)})

    page.on_error = _on_error
    page.views.clear()
    page.views.append(build_habits_view(ctx, page))
    page.update()


if __name__ == "__main__":
    ft.app(target=main)
