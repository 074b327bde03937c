"""
Monte Carlo simulation for firecalc.

Purpose
-------
Expresses outcome uncertainty as percentile bands. For each displayed year
the simulator draws ``trials`` randomized balance paths and reduces the
end-of-year balances to the 10th/25th/50th/75th/90th percentiles.

Return Model
------------
One annual return per simulated year:

    U = mean(U_1, ..., U_4),  U_i ~ Uniform[0, 1)
    R = clip(r/100 + spread * (U - 0.5), -0.5, 1.0)

The average of four uniforms (Irwin-Hall) is a cheap bounded, bell-shaped
stand-in for a normal distribution, centred on the configured return. With
the default spread of 0.6 a year's return stays within +/- 30 points of it
before clamping. Each year applies

    B <- B * (1 + R) + monthly_savings * 12

Percentiles
-----------
Nearest rank on the sorted balances: index = floor(n * p), clamped to
n - 1. Given the same random sequence the reduction is deterministic; the
draws are only reproducible when a seed or generator is supplied.

Cost
----
"independent" (default) simulates fresh paths for every displayed year,
costing O(trials * years^2) steps. "cumulative" simulates one set of paths
and reads every year off it, costing O(trials * years); the per-year bands
are then correlated across years.

Example
-------
>>> summary = project(profile)
>>> points = simulate(profile, summary, trials=1000, seed=42)
>>> points[0].p50 == profile.current_savings
True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Literal, Optional

import numpy as np
import pandas as pd

from .config import FireProfile, MonteCarloConfig
from .constants import (
    DEFAULT_TRIALS,
    MC_EXTRA_YEARS,
    MC_MAX_YEARS,
    MC_RETURN_CAP,
    MC_RETURN_FLOOR,
    MC_RETURN_SPREAD,
    MC_UNIFORM_DRAWS,
    MONTHS_PER_YEAR,
    PERCENTILES,
)
from .exceptions import NumericOverflowError, ValidationError
from .projection import FireSummary
from .utils import compound_year, nearest_rank_percentiles

__all__ = [
    "MonteCarloPoint",
    "default_years_to_show",
    "draw_annual_returns",
    "simulate",
    "simulate_from_config",
    "monte_carlo_frame",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonteCarloPoint:
    """Percentile band of simulated balances for one year."""
    year: int
    age: int
    p10: float
    p25: float
    p50: float
    p75: float
    p90: float
    expected: float

    @property
    def percentiles(self) -> tuple[float, float, float, float, float]:
        return (self.p10, self.p25, self.p50, self.p75, self.p90)


def default_years_to_show(summary: FireSummary) -> int:
    """min(years_to_fire + 5, 30), never past the projected horizon."""
    return min(summary.years_to_fire + MC_EXTRA_YEARS, MC_MAX_YEARS, summary.horizon)


def draw_annual_returns(
    rng: np.random.Generator,
    size,
    expected_return: float,
    spread: float = MC_RETURN_SPREAD,
) -> np.ndarray:
    """
    Sample clamped annual returns.

    Parameters
    ----------
    rng : np.random.Generator
        Source of uniform draws.
    size : int or tuple
        Output shape.
    expected_return : float
        Centre of the distribution, as a fraction (0.07).
    spread : float
        Distribution width (see module docstring).
    """
    shape = (size,) if isinstance(size, (int, np.integer)) else tuple(size)
    u = rng.random(shape + (MC_UNIFORM_DRAWS,)).mean(axis=-1)
    returns = expected_return + spread * (u - 0.5)
    return np.clip(returns, MC_RETURN_FLOOR, MC_RETURN_CAP)


def simulate(
    profile: FireProfile,
    summary: FireSummary,
    trials: int = DEFAULT_TRIALS,
    years_to_show: Optional[int] = None,
    *,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    method: Literal["independent", "cumulative"] = "independent",
    spread: float = MC_RETURN_SPREAD,
) -> List[MonteCarloPoint]:
    """
    Simulate percentile bands for years 0..years_to_show.

    Parameters
    ----------
    profile : FireProfile
        Input profile (start balance, contributions, expected return).
    summary : FireSummary
        Deterministic projection of the same profile; supplies ``expected``
        and the default window.
    trials : int, default 1000
        Paths per displayed year.
    years_to_show : int, optional
        Last simulated year. Defaults to ``default_years_to_show(summary)``.
    rng : np.random.Generator, optional
        Random source. Takes precedence over ``seed``.
    seed : int, optional
        Seed for a fresh generator when ``rng`` is None.
    method : {"independent", "cumulative"}
        Path sampling strategy (see module docstring).
    spread : float
        Width of the annual return distribution.

    Returns
    -------
    list of MonteCarloPoint
        One point per year, in increasing year order.

    Raises
    ------
    ValidationError
        If ``trials`` < 1, ``years_to_show`` is negative or past the
        summary's horizon, or ``method`` is unknown.
    NumericOverflowError
        If a simulated balance leaves the float range.
    """
    if trials < 1:
        raise ValidationError(f"trials must be >= 1, got {trials}")
    if years_to_show is None:
        years_to_show = default_years_to_show(summary)
    if years_to_show < 0:
        raise ValidationError(f"years_to_show must be >= 0, got {years_to_show}")
    if years_to_show > summary.horizon:
        raise ValidationError(
            f"years_to_show ({years_to_show}) exceeds the projected horizon "
            f"({summary.horizon}); project further first."
        )
    if method not in ("independent", "cumulative"):
        raise ValidationError(f"Unknown method '{method}'. Valid: 'independent', 'cumulative'")

    if rng is None:
        rng = np.random.default_rng(seed)

    expected_return = profile.investment_return / 100.0
    annual_savings = profile.monthly_savings * MONTHS_PER_YEAR
    start = float(profile.current_savings)

    logger.debug(
        "Monte Carlo: %d trials x %d years (%s)", trials, years_to_show + 1, method
    )

    def point(year: int, balances: np.ndarray) -> MonteCarloPoint:
        if not np.all(np.isfinite(balances)):
            raise NumericOverflowError(
                f"simulated balance overflows the float range at year {year}"
            )
        p10, p25, p50, p75, p90 = nearest_rank_percentiles(balances, PERCENTILES)
        return MonteCarloPoint(
            year=year,
            age=profile.current_age + year,
            p10=p10,
            p25=p25,
            p50=p50,
            p75=p75,
            p90=p90,
            expected=summary.projections[year].balance,
        )

    points = []
    with np.errstate(over="ignore", invalid="ignore"):
        if method == "independent":
            for year in range(years_to_show + 1):
                balances = np.full(trials, start)
                for _ in range(year):
                    r = draw_annual_returns(rng, trials, expected_return, spread)
                    balances = compound_year(balances, r, annual_savings)
                points.append(point(year, balances))
        else:
            balances = np.full(trials, start)
            points.append(point(0, balances))
            returns = draw_annual_returns(rng, (years_to_show, trials), expected_return, spread)
            for year in range(1, years_to_show + 1):
                balances = compound_year(balances, returns[year - 1], annual_savings)
                points.append(point(year, balances))

    return points


def simulate_from_config(
    profile: FireProfile,
    summary: FireSummary,
    config: MonteCarloConfig,
    rng: Optional[np.random.Generator] = None,
) -> List[MonteCarloPoint]:
    """Run ``simulate`` with the parameters of a MonteCarloConfig."""
    return simulate(
        profile,
        summary,
        trials=config.trials,
        years_to_show=config.years_to_show,
        rng=rng,
        seed=config.seed,
        method=config.method,
        spread=config.spread,
    )


def monte_carlo_frame(points: Iterable[MonteCarloPoint]) -> pd.DataFrame:
    """Percentile bands as a DataFrame indexed by year."""
    rows = [
        {
            "year": p.year,
            "age": p.age,
            "p10": p.p10,
            "p25": p.p25,
            "p50": p.p50,
            "p75": p.p75,
            "p90": p.p90,
            "expected": p.expected,
        }
        for p in points
    ]
    columns = ["year", "age", "p10", "p25", "p50", "p75", "p90", "expected"]
    return pd.DataFrame(rows, columns=columns).set_index("year")
