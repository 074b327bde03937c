"""
Type definitions for firecalc.

Purpose
-------
Tagged result types for time-to-goal searches, and TypedDict definitions
for the plain-dictionary shapes produced by ``firecalc.serialization``.

A years-to-goal figure is either ``Reached(years)`` or
``Unreachable(reason, bound)``. Keeping the two apart avoids overloading a
sentinel integer: ``Reached(0)`` means the target is already met, while
``Unreachable`` means no year within the search window qualifies.

Usage
-----
>>> from firecalc.types import Reached, Unreachable, is_reached
>>>
>>> result = solve_years(500_000, 0, 24_000, 0.07)
>>> if is_reached(result):
...     print(f"{result.years} years")
... else:
...     print(result.describe())

Type Definitions
----------------
Reached, Unreachable, YearsResult
    Tagged years-to-goal outcome.

ProjectionPointDict, MonteCarloPointDict, ScenarioDict, AchievementDict
    JSON-ready dictionaries for the engine's output records.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Union

from typing_extensions import NotRequired, TypedDict

__all__ = [
    "Reached",
    "Unreachable",
    "YearsResult",
    "is_reached",
    "years_to_dict",
    "ProjectionPointDict",
    "MonteCarloPointDict",
    "ScenarioDict",
    "AchievementDict",
]


# ---------------------------------------------------------------------------
# Tagged years-to-goal result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Reached:
    """Goal met after ``years`` years (0 = already met)."""
    years: int

    def __post_init__(self):
        if self.years < 0:
            raise ValueError(f"years must be >= 0, got {self.years}")

    @property
    def already_met(self) -> bool:
        return self.years == 0

    def describe(self) -> str:
        if self.already_met:
            return "already reached"
        return f"{self.years} years"


@dataclass(frozen=True)
class Unreachable:
    """
    Goal not met within the search window.

    Parameters
    ----------
    reason : {"bound", "no-growth", "horizon"}
        - "bound": the iteration cap was hit before the target
        - "no-growth": no contributions or no positive return to grow with
        - "horizon": not reached within the projected trajectory
    bound : int, optional
        Size of the window that was searched, when one applies.
    """
    reason: Literal["bound", "no-growth", "horizon"]
    bound: Optional[int] = None

    def describe(self) -> str:
        if self.reason == "no-growth":
            return "unreachable (no savings growth)"
        if self.bound is not None:
            return f"not reached within {self.bound} years"
        return "not reached"


YearsResult = Union[Reached, Unreachable]


def is_reached(result: YearsResult) -> bool:
    """True when ``result`` is a ``Reached`` outcome."""
    return isinstance(result, Reached)


def years_to_dict(result: YearsResult) -> Dict[str, Any]:
    """JSON-ready form: ``{"status": "reached", "years": n}`` or the unreachable tag."""
    if isinstance(result, Reached):
        return {"status": "reached", "years": result.years}
    out: Dict[str, Any] = {"status": "unreachable", "reason": result.reason}
    if result.bound is not None:
        out["bound"] = result.bound
    return out


# ---------------------------------------------------------------------------
# Serialized record shapes
# ---------------------------------------------------------------------------

class ProjectionPointDict(TypedDict):
    """
    One projected year.

    Keys use the camelCase names consumed by the chart layer. Amounts
    that left the float range are None (JSON null).
    """

    year: int
    age: int
    balance: Optional[float]
    fireNumber: Optional[float]
    fireProgress: Optional[float]
    canRetire: bool
    monthlyIncome: Optional[float]


class MonteCarloPointDict(TypedDict):
    """Percentile band for one simulated year."""

    year: int
    age: int
    p10: Optional[float]
    p25: Optional[float]
    p50: Optional[float]
    p75: Optional[float]
    p90: Optional[float]
    expected: Optional[float]


class ScenarioDict(TypedDict):
    """One scenario comparison card."""

    key: str
    name: str
    annualReturnPercent: float
    annualSavings: float
    solvedYears: Dict[str, Any]


class AchievementDict(TypedDict):
    name: str
    achieved: bool
    description: str
    icon: NotRequired[str]
