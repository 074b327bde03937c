"""
Scenario solver for firecalc.

Purpose
-------
Answers "how many years until the FIRE number?" under alternative
savings/return assumptions, by yearly forward simulation rather than a
closed-form annuity inversion:

    B_0 = current_savings
    B_n = B_{n-1} * (1 + r) + annual_savings

The solver reports the smallest n with B_n >= fire_number, stepping once
per calendar year, capped at ``max_years`` iterations.

Outcomes
--------
- ``Reached(0)``                     fire_number - current_savings <= 0
- ``Unreachable("no-growth")``       annual_savings <= 0 or r <= 0
- ``Reached(n)``                     target met after n yearly steps
- ``Unreachable("bound", max_years)`` cap hit first

Example
-------
>>> solve_years(500_000, 0, 24_000, 0.07)
Reached(years=14)
>>> cards = solve_scenarios(FireProfile())
>>> [c.name for c in cards]
['Conservative', 'Moderate', 'Aggressive']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .config import DEFAULT_SCENARIOS, FireProfile, ScenarioSpec
from .constants import MAX_SOLVER_YEARS, MONTHS_PER_YEAR
from .exceptions import ConfigurationError, ValidationError
from .projection import FireSummary, fire_number_for
from .types import Reached, Unreachable, YearsResult
from .utils import check_finite, compound_year

__all__ = [
    "Scenario",
    "solve_years",
    "replay_balance",
    "solve_scenarios",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scenario:
    """One comparison card: the assumption and its solved years."""
    key: str
    name: str
    annual_return_percent: float
    annual_savings: float
    solved: YearsResult

    @property
    def solved_years(self) -> Optional[int]:
        """Years to FIRE, or None when unreachable."""
        return self.solved.years if isinstance(self.solved, Reached) else None


def solve_years(
    fire_number: float,
    current_savings: float,
    annual_savings: float,
    annual_return_rate: float,
    max_years: int = MAX_SOLVER_YEARS,
) -> YearsResult:
    """
    Years of yearly compounding needed to reach ``fire_number``.

    Parameters
    ----------
    fire_number : float
        Target balance.
    current_savings : float
        Starting balance.
    annual_savings : float
        Contribution added at the end of each year.
    annual_return_rate : float
        Annual return as a fraction (0.07 for 7%).
    max_years : int, default 100
        Iteration cap.

    Returns
    -------
    Reached or Unreachable

    Raises
    ------
    ValidationError
        If an argument is non-finite or ``max_years`` < 1.
    """
    for name, value in (
        ("fire_number", fire_number),
        ("current_savings", current_savings),
        ("annual_savings", annual_savings),
        ("annual_return_rate", annual_return_rate),
    ):
        check_finite(name, value)
    if max_years < 1:
        raise ValidationError(f"max_years must be >= 1, got {max_years}")

    if fire_number - current_savings <= 0:
        return Reached(0)
    if annual_savings <= 0 or annual_return_rate <= 0:
        return Unreachable(reason="no-growth")

    balance = current_savings
    years = 0
    while balance < fire_number and years < max_years:
        balance = compound_year(balance, annual_return_rate, annual_savings)
        years += 1

    if balance >= fire_number:
        return Reached(years)
    return Unreachable(reason="bound", bound=max_years)


def replay_balance(
    current_savings: float,
    annual_savings: float,
    annual_return_rate: float,
    years: int,
) -> float:
    """Balance after ``years`` steps of the solver's yearly recurrence."""
    balance = current_savings
    for _ in range(years):
        balance = compound_year(balance, annual_return_rate, annual_savings)
    return balance


def solve_scenarios(
    profile: FireProfile,
    summary: Optional[FireSummary] = None,
    specs: Sequence[ScenarioSpec] = DEFAULT_SCENARIOS,
    max_years: int = MAX_SOLVER_YEARS,
) -> List[Scenario]:
    """
    Solve every scenario card for a profile.

    Each card saves ``monthly_savings * savings_multiplier`` per month
    (twelve times that per year) at its own return, toward the FIRE number
    in today's money. ``summary`` supplies that FIRE number when available.

    Raises
    ------
    ConfigurationError
        If ``specs`` is empty or keys repeat.
    """
    if not specs:
        raise ConfigurationError("at least one scenario is required")
    keys = [s.key for s in specs]
    duplicates = sorted({k for k in keys if keys.count(k) > 1})
    if duplicates:
        raise ConfigurationError(f"scenario keys must be unique, repeated: {duplicates}")

    fire_number = summary.fire_number if summary is not None else fire_number_for(profile.monthly_expenses)

    cards = []
    for spec in specs:
        annual_savings = profile.monthly_savings * spec.savings_multiplier * MONTHS_PER_YEAR
        solved = solve_years(
            fire_number,
            profile.current_savings,
            annual_savings,
            spec.annual_return_percent / 100.0,
            max_years=max_years,
        )
        cards.append(
            Scenario(
                key=spec.key,
                name=spec.name,
                annual_return_percent=spec.annual_return_percent,
                annual_savings=annual_savings,
                solved=solved,
            )
        )
        logger.debug("Scenario %s: %s", spec.key, solved.describe())
    return cards
