"""
Plotting utilities for firecalc.

Purpose
-------
Matplotlib renderings of the engine's outputs, mirroring the charts of the
interactive calculator:

- "projection": balance vs. inflation-adjusted FIRE number over age, limited
  to the chart window (years 0 .. years_to_fire + 4)
- "montecarlo": p10-p90 and p25-p75 bands, the median, and the
  deterministic expected path
- "scenarios": solved years per scenario card; unreachable cards are
  marked with an infinity sign

Every function accepts ``figsize``, ``title``, ``save_path`` and
``return_fig_ax``. Matplotlib is imported lazily so the engine can be used
without a display backend.

Example
-------
>>> fig, ax = plot_projection(summary, return_fig_ax=True)
>>> plot("montecarlo", points, save_path="bands.png")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from .constants import (
    DEFAULT_ALPHA_BANDS,
    DEFAULT_FIGSIZE,
    DEFAULT_FIGSIZE_WIDE,
    DEFAULT_LINEWIDTH_THICK,
)
from .utils import compact_formatter

if TYPE_CHECKING:
    from .monte_carlo import MonteCarloPoint
    from .projection import FireSummary
    from .scenarios import Scenario

__all__ = [
    "plot",
    "plot_projection",
    "plot_monte_carlo",
    "plot_scenarios",
]


def _finish(fig, ax, save_path: Optional[str], return_fig_ax: bool):
    if save_path:
        fig.savefig(save_path, bbox_inches="tight", dpi=150)
    if return_fig_ax:
        return fig, ax
    return None


def plot_projection(
    summary: FireSummary,
    *,
    full_horizon: bool = False,
    figsize: Optional[tuple] = None,
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    return_fig_ax: bool = False,
):
    """
    Plot the projected balance against the FIRE number.

    Parameters
    ----------
    summary : FireSummary
        Deterministic projection.
    full_horizon : bool, default False
        Plot all projected years instead of the chart window.
    """
    import matplotlib.pyplot as plt
    from matplotlib.ticker import FuncFormatter

    points = summary.projections if full_horizon else summary.chart_window()
    ages = [p.age for p in points]

    fig, ax = plt.subplots(figsize=figsize or DEFAULT_FIGSIZE)
    ax.fill_between(ages, [p.balance for p in points], alpha=DEFAULT_ALPHA_BANDS,
                    color="tab:green")
    ax.plot(ages, [p.balance for p in points], color="tab:green",
            linewidth=DEFAULT_LINEWIDTH_THICK, label="Portfolio balance")
    ax.plot(ages, [p.fire_number for p in points], color="tab:red",
            linewidth=DEFAULT_LINEWIDTH_THICK, linestyle="--", label="FIRE number")

    if summary.retirement_age is not None:
        ax.axvline(summary.retirement_age, color="gray", alpha=0.6, linestyle=":")
        ax.annotate(
            f"FIRE at {summary.retirement_age}",
            xy=(summary.retirement_age, summary.point(summary.years_to_fire).balance),
            xytext=(5, 10), textcoords="offset points", fontsize=9,
        )

    ax.yaxis.set_major_formatter(FuncFormatter(compact_formatter))
    ax.set_xlabel("Age", fontsize=11)
    ax.set_ylabel("Balance", fontsize=11)
    ax.set_title(title or "Path to Financial Independence", fontsize=12, fontweight="bold")
    ax.legend(loc="best", fontsize=10)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()

    return _finish(fig, ax, save_path, return_fig_ax)


def plot_monte_carlo(
    points: Sequence[MonteCarloPoint],
    *,
    figsize: Optional[tuple] = None,
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    return_fig_ax: bool = False,
):
    """Plot Monte Carlo percentile bands with the expected path overlaid."""
    if not points:
        raise ValueError("plot_monte_carlo requires at least one point")

    import matplotlib.pyplot as plt
    from matplotlib.ticker import FuncFormatter

    ages = [p.age for p in points]
    fig, ax = plt.subplots(figsize=figsize or DEFAULT_FIGSIZE)

    ax.fill_between(ages, [p.p10 for p in points], [p.p90 for p in points],
                    color="tab:blue", alpha=DEFAULT_ALPHA_BANDS, label="10th-90th percentile")
    ax.fill_between(ages, [p.p25 for p in points], [p.p75 for p in points],
                    color="tab:blue", alpha=DEFAULT_ALPHA_BANDS * 2, label="25th-75th percentile")
    ax.plot(ages, [p.p50 for p in points], color="tab:blue",
            linewidth=DEFAULT_LINEWIDTH_THICK, label="Median")
    ax.plot(ages, [p.expected for p in points], color="black", linestyle="--",
            linewidth=1.5, label="Expected (deterministic)")

    ax.yaxis.set_major_formatter(FuncFormatter(compact_formatter))
    ax.set_xlabel("Age", fontsize=11)
    ax.set_ylabel("Balance", fontsize=11)
    ax.set_title(title or "Monte Carlo Projection", fontsize=12, fontweight="bold")
    ax.legend(loc="upper left", fontsize=10)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()

    return _finish(fig, ax, save_path, return_fig_ax)


def plot_scenarios(
    scenarios: Sequence[Scenario],
    *,
    figsize: Optional[tuple] = None,
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    return_fig_ax: bool = False,
):
    """Bar chart of years to FIRE per scenario."""
    if not scenarios:
        raise ValueError("plot_scenarios requires at least one scenario")

    import matplotlib.pyplot as plt
    import numpy as np

    labels = [s.name for s in scenarios]
    years = [s.solved_years for s in scenarios]
    reachable = [y for y in years if y is not None]
    # unreachable bars are drawn at the tallest reachable height and hatched
    ceiling = max(reachable) if reachable else 1
    heights = [y if y is not None else ceiling for y in years]

    fig, ax = plt.subplots(figsize=figsize or DEFAULT_FIGSIZE_WIDE)
    colors = plt.cm.Set2(np.linspace(0, 1, len(scenarios)))
    bars = ax.bar(labels, heights, color=colors)

    for bar, s, y in zip(bars, scenarios, years):
        if y is None:
            bar.set_hatch("//")
            bar.set_alpha(0.4)
        label = "∞" if y is None else f"{y} yrs"
        ax.annotate(
            f"{label}\n{s.annual_return_percent:g}% | ${s.annual_savings:,.0f}/yr",
            xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
            xytext=(0, 4), textcoords="offset points", ha="center", fontsize=9,
        )

    ax.set_ylabel("Years to FIRE", fontsize=11)
    ax.set_title(title or "Scenario Analysis", fontsize=12, fontweight="bold")
    ax.grid(True, alpha=0.3, axis="y")
    fig.tight_layout()

    return _finish(fig, ax, save_path, return_fig_ax)


_PLOTTERS = {
    "projection": plot_projection,
    "montecarlo": plot_monte_carlo,
    "scenarios": plot_scenarios,
}


def plot(kind: str, data, **kwargs):
    """
    Dispatch to a plotting function by name.

    Parameters
    ----------
    kind : {"projection", "montecarlo", "scenarios"}
    data
        FireSummary, Monte Carlo points or scenarios respectively.
    """
    try:
        plotter = _PLOTTERS[kind]
    except KeyError:
        raise ValueError(
            f"Unknown plot kind '{kind}'. Valid: {', '.join(_PLOTTERS)}"
        ) from None
    return plotter(data, **kwargs)
