"""Reusable UI components for the desktop app."""

from .widgets import build_progress_bar, build_stat_card, empty_state, show_confirm_dialog

__all__ = [
    "build_progress_bar",
    "build_stat_card",
    "empty_state",
    "show_confirm_dialog",
]
