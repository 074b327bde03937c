"""
Global constants for firecalc.

Purpose
-------
Centralizes default values and magic numbers used throughout the engine.

Usage
-----
>>> from firecalc.constants import HORIZON_YEARS, FIRE_MULTIPLIER
>>>
>>> summary = project(profile, horizon=HORIZON_YEARS)
>>> fire_number = annual_expenses * FIRE_MULTIPLIER

Categories
----------
- Projection: horizon, FIRE multiplier, calendar
- Scenario solver: iteration bound
- Monte Carlo: trials, window, return distribution, percentiles
- Achievements: milestone thresholds
- Interface: slider ranges, chart window
- Plotting: figure sizes, transparency values
"""

from typing import Dict, Tuple

__all__ = [
    # Projection
    "HORIZON_YEARS",
    "FIRE_MULTIPLIER",
    "MONTHS_PER_YEAR",
    # Scenario solver
    "MAX_SOLVER_YEARS",
    # Monte Carlo
    "DEFAULT_TRIALS",
    "MC_EXTRA_YEARS",
    "MC_MAX_YEARS",
    "MC_UNIFORM_DRAWS",
    "MC_RETURN_SPREAD",
    "MC_RETURN_FLOOR",
    "MC_RETURN_CAP",
    "PERCENTILES",
    # Achievements
    "FIRST_MILESTONE",
    "HIGH_SAVER_RATE",
    "SUPER_SAVER_RATE",
    "QUARTER_WAY_RATIO",
    "HALFWAY_RATIO",
    # Interface
    "CHART_EXTRA_YEARS",
    "UI_RANGES",
    # Plotting
    "DEFAULT_FIGSIZE",
    "DEFAULT_FIGSIZE_WIDE",
    "DEFAULT_ALPHA_BANDS",
    "DEFAULT_LINEWIDTH_THICK",
]


# =============================================================================
# Projection Defaults
# =============================================================================

HORIZON_YEARS: int = 40
"""Last projected year index (the trajectory covers years 0..40 inclusive)."""

FIRE_MULTIPLIER: float = 25.0
"""FIRE number = annual expenses x 25 (the 4% rule)."""

MONTHS_PER_YEAR: int = 12
"""Number of compounding steps per projected year."""


# =============================================================================
# Scenario Solver
# =============================================================================

MAX_SOLVER_YEARS: int = 100
"""Hard iteration bound for the yearly forward search."""


# =============================================================================
# Monte Carlo Defaults
# =============================================================================

DEFAULT_TRIALS: int = 1000
"""Simulated paths per displayed year."""

MC_EXTRA_YEARS: int = 5
"""Years shown past the deterministic years-to-FIRE."""

MC_MAX_YEARS: int = 30
"""Upper bound of the default Monte Carlo window."""

MC_UNIFORM_DRAWS: int = 4
"""Uniform draws averaged into one bell-shaped annual return."""

MC_RETURN_SPREAD: float = 0.6
"""Width of the annual return distribution around the configured return.

The averaged uniforms lie in [0, 1); centred and scaled by this spread the
draw lies within +/- 30 percentage points of the expected return.
"""

MC_RETURN_FLOOR: float = -0.5
"""Lowest annual return a simulated year may have (-50%)."""

MC_RETURN_CAP: float = 1.0
"""Highest annual return a simulated year may have (+100%)."""

PERCENTILES: Tuple[float, ...] = (0.10, 0.25, 0.50, 0.75, 0.90)
"""Percentile levels reported per Monte Carlo year."""


# =============================================================================
# Achievements
# =============================================================================

FIRST_MILESTONE: float = 10_000.0
"""Net worth that unlocks the first achievement."""

HIGH_SAVER_RATE: float = 0.20
SUPER_SAVER_RATE: float = 0.50
QUARTER_WAY_RATIO: float = 0.25
HALFWAY_RATIO: float = 0.50


# =============================================================================
# Interface
# =============================================================================

CHART_EXTRA_YEARS: int = 5
"""Trajectory chart shows projections up to years-to-FIRE + 5."""

UI_RANGES: Dict[str, Tuple[float, float, float]] = {
    "current_age": (18, 65, 1),
    "current_income": (30_000, 200_000, 5_000),
    "current_savings": (0, 500_000, 5_000),
    "monthly_expenses": (1_000, 10_000, 100),
    "monthly_savings": (100, 8_000, 100),
    "investment_return": (3, 12, 0.5),
}
"""Slider (min, max, step) per profile field. Informational only."""


# =============================================================================
# Plotting Defaults
# =============================================================================

DEFAULT_FIGSIZE: Tuple[int, int] = (12, 7)
DEFAULT_FIGSIZE_WIDE: Tuple[int, int] = (14, 6)
DEFAULT_ALPHA_BANDS: float = 0.2
DEFAULT_LINEWIDTH_THICK: float = 2.0
