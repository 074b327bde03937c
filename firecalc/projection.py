"""
Deterministic wealth projection for firecalc.

Purpose
-------
Produces the year-by-year wealth trajectory for one return/savings
assumption and locates the first year in which the balance covers the
inflation-adjusted FIRE number.

Key Model
---------
For each year y in [0, horizon]:

    inflation multiplier   I_y = (1 + inflation/100) ** y
    FIRE number            F_y = monthly_expenses * 12 * I_y * 25
    balance (y > 0)        12 monthly steps  B <- B * (1 + r/100/12) + S

Contributions S land at each month's end (ordinary annuity), so they earn
nothing in the month they are made. ``years_to_fire`` is the first y with
B_y >= F_y; if no such year exists it saturates at ``horizon`` and
``fire_status`` is ``Unreachable(reason="horizon")``.

Example
-------
>>> from firecalc.config import FireProfile
>>> from firecalc.projection import project
>>> summary = project(FireProfile())
>>> summary.fire_number
1200000.0
>>> summary.savings_rate
0.4
>>> len(summary.projections)
41
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import pandas as pd

from .config import FireProfile
from .constants import (
    CHART_EXTRA_YEARS,
    FIRE_MULTIPLIER,
    HORIZON_YEARS,
    MONTHS_PER_YEAR,
)
from .exceptions import NumericOverflowError
from .types import Reached, Unreachable, YearsResult
from .utils import check_non_negative, compound_months, safe_ratio

__all__ = [
    "ProjectionPoint",
    "FireSummary",
    "project",
    "fire_number_for",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProjectionPoint:
    """
    One projected year.

    Attributes
    ----------
    year : int
        Years from today (0 = today).
    age : int
        Age at that year.
    balance : float
        Projected invested balance at the end of the year.
    fire_number : float
        Inflation-adjusted FIRE target for that year.
    fire_progress : float
        balance / fire_number in percent, clamped to [0, 100].
    can_retire : bool
        balance >= fire_number.
    monthly_income : float
        Monthly income the balance would support at the safe withdrawal rate.
    """
    year: int
    age: int
    balance: float
    fire_number: float
    fire_progress: float
    can_retire: bool
    monthly_income: float


@dataclass(frozen=True)
class FireSummary:
    """
    Result of a deterministic projection.

    Attributes
    ----------
    fire_number : float
        Target in today's money: annual expenses x 25.
    current_net_worth : float
        Savings today (copied from the profile).
    amount_needed : float
        fire_number - current_net_worth; negative when already FI.
    savings_rate : float
        Fraction of income saved: monthly_savings * 12 / current_income.
    years_to_fire : int
        First year index whose point can retire; the horizon's last index
        when none can (see ``fire_status`` to tell the two apart).
    fire_status : Reached or Unreachable
        Tagged form of ``years_to_fire``.
    projections : tuple of ProjectionPoint
        Years 0..horizon in increasing order.
    monthly_income_at_retirement : float
        fire_number * SWR / 12, in today's money.
    current_age : int
        Age at year 0.
    """
    fire_number: float
    current_net_worth: float
    amount_needed: float
    savings_rate: float
    years_to_fire: int
    fire_status: YearsResult
    projections: Tuple[ProjectionPoint, ...]
    monthly_income_at_retirement: float
    current_age: int

    @property
    def horizon(self) -> int:
        return len(self.projections) - 1

    @property
    def reached_within_horizon(self) -> bool:
        return isinstance(self.fire_status, Reached)

    @property
    def retirement_age(self) -> Optional[int]:
        """Age at which FIRE is reached, or None if not within the horizon."""
        if not self.reached_within_horizon:
            return None
        return self.current_age + self.years_to_fire

    @property
    def progress_ratio(self) -> Optional[float]:
        """current_net_worth / fire_number; None when the FIRE number is 0."""
        if self.fire_number == 0:
            return None
        return self.current_net_worth / self.fire_number

    def chart_window(self, extra_years: int = CHART_EXTRA_YEARS) -> Tuple[ProjectionPoint, ...]:
        """Points shown on the trajectory chart: years 0 .. years_to_fire + extra - 1."""
        return self.projections[: self.years_to_fire + extra_years]

    def point(self, year: int) -> ProjectionPoint:
        return self.projections[year]

    def to_frame(self) -> pd.DataFrame:
        """Projections as a DataFrame indexed by year."""
        df = pd.DataFrame(
            [
                {
                    "year": p.year,
                    "age": p.age,
                    "balance": p.balance,
                    "fire_number": p.fire_number,
                    "fire_progress": p.fire_progress,
                    "can_retire": p.can_retire,
                    "monthly_income": p.monthly_income,
                }
                for p in self.projections
            ]
        )
        return df.set_index("year")


# ---------------------------------------------------------------------------
# Projector
# ---------------------------------------------------------------------------

def fire_number_for(monthly_expenses: float, inflation_multiplier: float = 1.0) -> float:
    """FIRE number for monthly expenses scaled by an inflation multiplier."""
    return monthly_expenses * inflation_multiplier * MONTHS_PER_YEAR * FIRE_MULTIPLIER


def _inflation_multiplier(base: float, year: int) -> float:
    try:
        return math.pow(base, year)
    except OverflowError:
        return math.inf


def _check_in_range(name: str, value: float, year: int) -> None:
    if not math.isfinite(value):
        raise NumericOverflowError(
            f"{name} overflows the float range at year {year}; "
            "inputs are too large to project"
        )


def _progress(balance: float, target: float) -> float:
    if target <= 0:
        return 100.0
    return min(100.0, max(0.0, balance / target * 100.0))


def project(profile: FireProfile, horizon: int = HORIZON_YEARS) -> FireSummary:
    """
    Project the wealth trajectory and years to FIRE.

    Parameters
    ----------
    profile : FireProfile
        Validated input profile.
    horizon : int, default 40
        Last projected year; the trajectory has ``horizon + 1`` points.

    Returns
    -------
    FireSummary

    Raises
    ------
    ValidationError
        If ``horizon`` is negative.
    UndefinedRatioError
        If ``current_income`` is 0 (savings rate undefined).
    NumericOverflowError
        If a balance or inflation-adjusted FIRE number leaves the float
        range (finite but extreme inputs).

    Examples
    --------
    >>> summary = project(FireProfile(current_savings=2_000_000))
    >>> summary.years_to_fire
    0
    """
    check_non_negative("horizon", horizon)
    savings_rate = safe_ratio(
        profile.monthly_savings * MONTHS_PER_YEAR,
        profile.current_income,
        what="savings rate",
        denominator_name="current_income",
    )
    _check_in_range("savings_rate", savings_rate, 0)

    fire_number = fire_number_for(profile.monthly_expenses)
    monthly_return = profile.investment_return / 100.0 / MONTHS_PER_YEAR
    inflation = 1.0 + profile.inflation_rate / 100.0
    swr = profile.safe_withdrawal_rate / 100.0

    balance = float(profile.current_savings)
    points = []
    first_retire_year: Optional[int] = None

    for year in range(horizon + 1):
        if profile.monthly_expenses > 0:
            adjusted_fire_number = fire_number_for(
                profile.monthly_expenses, _inflation_multiplier(inflation, year)
            )
        else:
            adjusted_fire_number = 0.0

        if year > 0:
            balance = compound_months(balance, monthly_return, profile.monthly_savings)
        _check_in_range("fire_number", adjusted_fire_number, year)
        _check_in_range("balance", balance, year)
        monthly_income = balance * swr / MONTHS_PER_YEAR
        _check_in_range("monthly_income", monthly_income, year)

        can_retire = balance >= adjusted_fire_number
        if can_retire and first_retire_year is None:
            first_retire_year = year

        points.append(
            ProjectionPoint(
                year=year,
                age=profile.current_age + year,
                balance=balance,
                fire_number=adjusted_fire_number,
                fire_progress=_progress(balance, adjusted_fire_number),
                can_retire=can_retire,
                monthly_income=monthly_income,
            )
        )

    monthly_income_at_retirement = fire_number * swr / MONTHS_PER_YEAR
    _check_in_range("monthly_income_at_retirement", monthly_income_at_retirement, 0)

    if first_retire_year is None:
        fire_status: YearsResult = Unreachable(reason="horizon", bound=horizon)
        years_to_fire = horizon
    else:
        fire_status = Reached(first_retire_year)
        years_to_fire = first_retire_year

    summary = FireSummary(
        fire_number=fire_number,
        current_net_worth=float(profile.current_savings),
        amount_needed=fire_number - profile.current_savings,
        savings_rate=savings_rate,
        years_to_fire=years_to_fire,
        fire_status=fire_status,
        projections=tuple(points),
        monthly_income_at_retirement=monthly_income_at_retirement,
        current_age=profile.current_age,
    )
    logger.debug(
        "Projected %d years: fire_number=%.0f years_to_fire=%d (%s)",
        horizon, fire_number, years_to_fire, fire_status.describe(),
    )
    return summary
