"""Matplotlib figures for habit completion reports."""

from __future__ import annotations

from typing import Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from ..domain.habits import DEFAULT_COLOR, parse_hex_color
from .aggregation import ChartRecord, PieSummary

COMPLETED_COLOR = "#22C55E"
REMAINING_COLOR = "#E5E7EB"


def _rgba(color: str) -> tuple[float, float, float, float]:
    try:
        return parse_hex_color(color)
    except ValueError:
        return parse_hex_color(DEFAULT_COLOR)


def _placeholder(message: str, figsize: tuple[float, float]) -> Figure:
    fig, ax = plt.subplots(figsize=figsize)
    ax.text(0.5, 0.5, message, ha="center", va="center", fontsize=13, color="#666")
    ax.axis("off")
    return fig


def build_pie_chart(summary: PieSummary, *, title: str = "Completion") -> Figure:
    """Donut of completed vs not-completed possible days."""

    if summary.total_days == 0:
        return _placeholder("No habits selected", (6, 5))

    fig, ax = plt.subplots(figsize=(6, 5))
    sizes = [summary.completed_days, summary.total_days - summary.completed_days]
    wedges, _ = ax.pie(
        sizes,
        colors=[COMPLETED_COLOR, REMAINING_COLOR],
        startangle=90,
        counterclock=False,
        wedgeprops=dict(width=0.4, edgecolor="white", linewidth=1.5),
    )

    ax.text(0, 0.08, f"{summary.completed_percentage:.0f}%",
            ha="center", va="center", fontsize=20, fontweight="bold", color="#1F2937")
    ax.text(0, -0.12, f"{summary.completed_days} / {summary.total_days} days",
            ha="center", va="center", fontsize=10, color="#666")

    ax.legend(
        wedges,
        [
            f"Completed ({summary.completed_percentage:.1f}%)",
            f"Not completed ({summary.not_completed_percentage:.1f}%)",
        ],
        loc="lower center",
        bbox_to_anchor=(0.5, -0.12),
        ncol=2,
        fontsize=9,
        frameon=False,
    )
    ax.axis("equal")
    ax.set_title(title, fontsize=14, fontweight="bold", pad=12)
    fig.tight_layout()
    return fig


def build_completion_bars(records: Sequence[ChartRecord], *, title: str = "By habit") -> Figure:
    """Horizontal bars of each habit's completion rate in its own color."""

    if not records:
        return _placeholder("No habits yet\nAdd one to start tracking", (7, 3))

    names = [record.habit.name for record in records]
    rates = [record.completion_rate * 100 for record in records]
    colors = [_rgba(record.habit.color) for record in records]

    fig, ax = plt.subplots(figsize=(7, max(2.5, 0.5 * len(records) + 1)))
    positions = list(range(len(records)))
    ax.barh(positions, [100] * len(records), color=REMAINING_COLOR, height=0.6)
    ax.barh(positions, rates, color=colors, height=0.6)

    for pos, record in zip(positions, records):
        ax.text(101, pos, f"{record.completed_days}/{record.total_days}",
                va="center", fontsize=9, color="#374151")

    ax.set_yticks(positions)
    ax.set_yticklabels(names)
    ax.invert_yaxis()
    ax.set_xlim(0, 115)
    ax.set_xlabel("Completion (%)")
    ax.spines[["top", "right"]].set_visible(False)
    ax.set_title(title, fontsize=14, fontweight="bold", pad=12)
    fig.tight_layout()
    return fig


__all__ = ["build_completion_bars", "build_pie_chart"]
