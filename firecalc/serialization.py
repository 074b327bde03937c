"""
Serialization module for firecalc.

Purpose
-------
JSON persistence for input profiles and JSON-ready conversion of the
engine's output records, for the CLI and for any rendering layer that
consumes plain dictionaries.

Output dictionaries use the camelCase keys of the chart layer
(``fireNumber``, ``canRetire``, ...). With ``rounded=True`` currency and
percentage values are rounded half-up to whole units, as displayed.
Amounts that left the float range are written as ``null``.

Reports are only exported (``save_report``); nothing here loads them back.

Example
-------
>>> from pathlib import Path
>>> from firecalc.config import FireProfile
>>> from firecalc.serialization import save_profile, load_profile
>>>
>>> save_profile(FireProfile(current_age=35), Path("profile.json"))
>>> load_profile(Path("profile.json")).current_age
35
"""

from __future__ import annotations

import json
import math
import warnings
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Union

from .config import FireProfile
from .exceptions import InvalidProfileError
from .types import (
    AchievementDict,
    MonteCarloPointDict,
    ProjectionPointDict,
    ScenarioDict,
    years_to_dict,
)

if TYPE_CHECKING:
    from .achievements import Achievement
    from .engine import EngineReport
    from .monte_carlo import MonteCarloPoint
    from .projection import FireSummary, ProjectionPoint
    from .scenarios import Scenario

__all__ = [
    "SCHEMA_VERSION",
    "profile_to_dict",
    "profile_from_dict",
    "save_profile",
    "load_profile",
    "point_to_dict",
    "summary_to_dict",
    "achievement_to_dict",
    "scenario_to_dict",
    "monte_carlo_to_dict",
    "report_to_dict",
    "save_report",
]


# ---------------------------------------------------------------------------
# Schema Version
# ---------------------------------------------------------------------------

SCHEMA_VERSION = "1.0.0"


def _round(value: float) -> float:
    """Half-up rounding to whole units (2.5 -> 3, -2.5 -> -2)."""
    if not math.isfinite(value):
        return value
    return float(math.floor(value + 0.5))


def _money(value: float, rounded: bool) -> Optional[float]:
    """JSON-safe amount: None stands in for inf and nan."""
    if not math.isfinite(value):
        return None
    return _round(value) if rounded else float(value)


# ---------------------------------------------------------------------------
# Profile Serialization
# ---------------------------------------------------------------------------

def profile_to_dict(profile: FireProfile) -> Dict[str, Any]:
    """
    Convert a profile to its camelCase dictionary form.

    Parameters
    ----------
    profile : FireProfile
        Profile to serialize

    Returns
    -------
    dict
        ``{"currentAge": 30, "currentIncome": 75000.0, ...}``
    """
    return profile.model_dump(by_alias=True)


def profile_from_dict(data: Dict[str, Any]) -> FireProfile:
    """
    Create a profile from a dictionary (camelCase or snake_case keys).

    A ``schema_version`` key is accepted and ignored here; ``load_profile``
    checks it.

    Raises
    ------
    InvalidProfileError
        If the data does not describe a valid profile.
    """
    if not isinstance(data, dict):
        raise InvalidProfileError(f"profile must be a JSON object, got {type(data).__name__}")
    values = {k: v for k, v in data.items() if k != "schema_version"}
    return FireProfile.create(**values)


def save_profile(profile: FireProfile, path: Union[str, Path]) -> Path:
    """
    Save a profile to a JSON file (with schema version).

    Returns
    -------
    Path
        The written path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"schema_version": SCHEMA_VERSION, **profile_to_dict(profile)}
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, allow_nan=False)
    return path


def load_profile(path: Union[str, Path]) -> FireProfile:
    """
    Load a profile from a JSON file.

    Warns when the file was written with a different schema version.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    InvalidProfileError
        If the file is not valid JSON or not a valid profile.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidProfileError(f"{path} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        version = data.get("schema_version", SCHEMA_VERSION)
        if version != SCHEMA_VERSION:
            warnings.warn(
                f"Profile schema version {version} differs from current {SCHEMA_VERSION}. "
                f"Loading may fail or produce unexpected results.",
                UserWarning,
            )
    return profile_from_dict(data)


# ---------------------------------------------------------------------------
# Result Serialization
# ---------------------------------------------------------------------------

def point_to_dict(point: ProjectionPoint, rounded: bool = False) -> ProjectionPointDict:
    return {
        "year": point.year,
        "age": point.age,
        "balance": _money(point.balance, rounded),
        "fireNumber": _money(point.fire_number, rounded),
        "fireProgress": _money(point.fire_progress, rounded),
        "canRetire": point.can_retire,
        "monthlyIncome": _money(point.monthly_income, rounded),
    }


def summary_to_dict(summary: FireSummary, rounded: bool = False) -> Dict[str, Any]:
    """
    Convert a FIRE summary to a JSON-ready dictionary.

    ``yearsToFire`` keeps the saturating integer; ``fireStatus`` carries
    the tagged reached/unreachable outcome.
    """
    return {
        "fireNumber": _money(summary.fire_number, rounded),
        "currentNetWorth": _money(summary.current_net_worth, rounded),
        "amountNeeded": _money(summary.amount_needed, rounded),
        "savingsRate": _money(summary.savings_rate, False),
        "yearsToFire": summary.years_to_fire,
        "fireStatus": years_to_dict(summary.fire_status),
        "monthlyIncomeAtRetirement": _money(summary.monthly_income_at_retirement, rounded),
        "projections": [point_to_dict(p, rounded) for p in summary.projections],
    }


def achievement_to_dict(achievement: Achievement) -> AchievementDict:
    return {
        "name": achievement.name,
        "achieved": achievement.achieved,
        "description": achievement.description,
        "icon": achievement.icon,
    }


def scenario_to_dict(scenario: Scenario) -> ScenarioDict:
    return {
        "key": scenario.key,
        "name": scenario.name,
        "annualReturnPercent": scenario.annual_return_percent,
        "annualSavings": scenario.annual_savings,
        "solvedYears": years_to_dict(scenario.solved),
    }


def monte_carlo_to_dict(
    points: Iterable[MonteCarloPoint], rounded: bool = False
) -> List[MonteCarloPointDict]:
    return [
        {
            "year": p.year,
            "age": p.age,
            "p10": _money(p.p10, rounded),
            "p25": _money(p.p25, rounded),
            "p50": _money(p.p50, rounded),
            "p75": _money(p.p75, rounded),
            "p90": _money(p.p90, rounded),
            "expected": _money(p.expected, rounded),
        }
        for p in points
    ]


def report_to_dict(report: EngineReport, rounded: bool = False) -> Dict[str, Any]:
    """
    Convert an engine report to a JSON-ready dictionary.

    A failed report becomes ``{"ok": false, "error": {"type", "message"}}``.
    """
    if not report.ok:
        return {
            "schema_version": SCHEMA_VERSION,
            "ok": False,
            "error": {
                "type": type(report.error).__name__,
                "message": str(report.error),
            },
        }

    data: Dict[str, Any] = {
        "schema_version": SCHEMA_VERSION,
        "ok": True,
        "profile": profile_to_dict(report.profile),
        "summary": summary_to_dict(report.summary, rounded),
        "achievements": [achievement_to_dict(a) for a in report.achievements],
        "scenarios": [scenario_to_dict(s) for s in report.scenarios],
    }
    if report.monte_carlo is not None:
        data["monteCarlo"] = monte_carlo_to_dict(report.monte_carlo, rounded)
    return data


def save_report(report: EngineReport, path: Union[str, Path], rounded: bool = False) -> Path:
    """
    Export ``report_to_dict(report)`` as indented JSON.

    A one-shot snapshot for other tools to read; reports are never loaded
    back. Non-finite amounts are written as null so the file is strict JSON.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(
            report_to_dict(report, rounded), f, indent=2, ensure_ascii=False, allow_nan=False
        )
    return path
