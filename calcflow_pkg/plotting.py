"""Rendering of sampled functions: ASCII charts and matplotlib images."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .logging_config import get_logger
from .types import SamplePoint

logger = get_logger("plotting")

EMPTY_PLOT_MESSAGE = "Nothing to plot"


def render_ascii(points: Sequence[SamplePoint], rows: int = 20, cols: int = 60) -> str:
    """Draw sampled points on a character grid with axes.

    Args:
        points: Samples in ascending x order
        rows: Height of the chart in characters
        cols: Width of the chart in characters

    Returns:
        Multi-line chart text, or ``EMPTY_PLOT_MESSAGE`` when there are no points
    """
    if not points:
        return EMPTY_PLOT_MESSAGE

    x_vals = np.array([p.x for p in points], dtype=float)
    y_vals = np.array([p.y for p in points], dtype=float)
    x_min, x_max = float(x_vals.min()), float(x_vals.max())
    y_min, y_max = float(y_vals.min()), float(y_vals.max())
    x_range = x_max - x_min if x_max != x_min else 1.0
    y_range = y_max - y_min if y_max != y_min else 1.0

    grid = [[" " for _ in range(cols)] for _ in range(rows)]

    # Row 0 is the top of the chart
    x_axis_row = int(round(y_max / y_range * (rows - 1))) if y_min <= 0 <= y_max else -1
    y_axis_col = int(round(-x_min / x_range * (cols - 1))) if x_min <= 0 <= x_max else -1
    for r in range(rows):
        for c in range(cols):
            if r == x_axis_row and c == y_axis_col:
                grid[r][c] = "+"
            elif r == x_axis_row:
                grid[r][c] = "-"
            elif c == y_axis_col:
                grid[r][c] = "|"

    cols_idx = np.clip(np.rint((x_vals - x_min) / x_range * (cols - 1)), 0, cols - 1)
    rows_idx = np.clip(np.rint((y_max - y_vals) / y_range * (rows - 1)), 0, rows - 1)
    for r, c in zip(rows_idx.astype(int), cols_idx.astype(int)):
        grid[r][c] = "*"

    lines = ["".join(row) for row in grid]
    lines.append(f"x: [{x_min:g}, {x_max:g}]  y: [{y_min:g}, {y_max:g}]")
    return "\n".join(lines)


def save_plot(points: Sequence[SamplePoint], expression: str, path: str) -> str:
    """Save a line chart of ``points`` as an image file.

    Args:
        points: Samples in ascending x order
        expression: Expression text used for the title and legend
        path: Output file path (format inferred from the extension)

    Returns:
        The path written
    """
    import matplotlib

    matplotlib.use("Agg")  # Non-GUI backend
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(10, 6))
    try:
        ax.plot(
            [p.x for p in points],
            [p.y for p in points],
            linewidth=3,
            color="#a78bfa",
            label=f"f(x) = {expression}",
        )
        ax.set_xlabel("x", fontsize=12, fontweight="bold")
        ax.set_ylabel("f(x)", fontsize=12, fontweight="bold")
        ax.set_title(f"Plot of {expression}", fontsize=14, fontweight="bold")
        ax.grid(True, alpha=0.3, linestyle="--")
        ax.axhline(y=0, color="k", linewidth=0.8, alpha=0.3)
        ax.axvline(x=0, color="k", linewidth=0.8, alpha=0.3)
        if points:
            ax.legend(loc="best", fontsize=10)
        fig.tight_layout()
        fig.savefig(path, dpi=150, bbox_inches="tight")
    finally:
        plt.close(fig)
    logger.info("Plot of %r saved to %s", expression, path)
    return path
