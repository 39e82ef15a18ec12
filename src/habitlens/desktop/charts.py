"""Chart helpers for Flet views."""

from __future__ import annotations

from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Optional, Sequence

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from ..services.aggregation import ChartRecord, PieSummary
from ..services.reports import build_completion_bars, build_pie_chart


def _save_png(fig: Figure) -> Path:
    with NamedTemporaryFile(delete=False, suffix=".png") as tmp:
        fig.savefig(tmp.name, bbox_inches="tight", dpi=100)
        path = Path(tmp.name)
    plt.close(fig)
    return path


def pie_chart_png(summary: PieSummary, *, title: str = "Completion") -> Path:
    """Render the selection donut and return the PNG path."""
    return _save_png(build_pie_chart(summary, title=title))


def completion_bars_png(records: Sequence[ChartRecord]) -> Path:
    """Render per-habit completion bars and return the PNG path."""
    return _save_png(build_completion_bars(records))


def swap_png(previous_src: Optional[str], new_path: Path) -> str:
    """Return ``new_path`` as an image src and remove the file it replaces.

    A fresh file name per render makes Flet reload the image.
    """

    if previous_src and Path(previous_src) != new_path:
        Path(previous_src).unlink(missing_ok=True)
    return str(new_path)
