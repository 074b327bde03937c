"""
Configuration management module for firecalc.

Purpose
-------
Centralized configuration using Pydantic models for type-safe parameter
management, validation, and serialization. The Input Profile itself is a
frozen Pydantic model, so an invalid profile is rejected at the boundary and
a valid one is hashable (it doubles as the engine's memoization key).

Design Principles
-----------------
- Type-safe: Pydantic enforces types and validates ranges
- Immutable: Frozen models prevent accidental mutation
- Serializable: camelCase aliases match the input-collection layer
- Environment-aware: AppSettings reads FIRECALC_* variables and .env files

Example
-------
>>> from firecalc.config import FireProfile, MonteCarloConfig
>>> profile = FireProfile.create(currentAge=30, currentIncome=75_000)
>>> profile.current_income
75000.0
>>> profile.model_dump(by_alias=True)["monthlyExpenses"]
4000.0
>>> mc = MonteCarloConfig(trials=2000, seed=7)
"""

from __future__ import annotations

from typing import Any, List, Literal, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_TRIALS, MC_RETURN_SPREAD, UI_RANGES
from .exceptions import InvalidProfileError

__all__ = [
    "FireProfile",
    "ScenarioSpec",
    "DEFAULT_SCENARIOS",
    "MonteCarloConfig",
    "AppSettings",
]


# ---------------------------------------------------------------------------
# Input Profile
# ---------------------------------------------------------------------------

class FireProfile(BaseModel):
    """
    Validated numeric parameters describing the user's finances.

    Attributes
    ----------
    current_age : int
        Age today, in whole years (>= 0).
    current_income : float
        Gross annual income (>= 0). Zero is accepted, but the savings rate
        is then undefined and the projector reports a domain error.
    current_savings : float
        Invested net worth today (>= 0).
    monthly_expenses : float
        Spending per month in today's money (>= 0).
    monthly_savings : float
        Amount invested at the end of every month (>= 0).
    investment_return : float
        Nominal annual return in percent (7 means 7%).
    inflation_rate : float
        Annual inflation in percent, applied to the FIRE target.
    target_retirement_age : int
        Desired retirement age (>= current_age).
    safe_withdrawal_rate : float
        Sustainable annual drawdown in percent (> 0).

    Notes
    -----
    Non-finite values (NaN, +/-inf) are rejected for every field. Input may
    use either the snake_case field names or the camelCase aliases
    (``currentAge``); ``model_dump(by_alias=True)`` emits the aliases.

    Examples
    --------
    >>> FireProfile(current_age=30, target_retirement_age=50)
    >>> FireProfile.create(currentAge=40, targetRetirementAge=35)
    Traceback (most recent call last):
    ...
    InvalidProfileError: target_retirement_age (35) must be >= current_age (40)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        allow_inf_nan=False,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    current_age: int = Field(default=30, ge=0, description="Current age in years")
    current_income: float = Field(default=75_000.0, ge=0, description="Annual income")
    current_savings: float = Field(default=50_000.0, ge=0, description="Current invested savings")
    monthly_expenses: float = Field(default=4_000.0, ge=0, description="Monthly expenses")
    monthly_savings: float = Field(default=2_500.0, ge=0, description="Monthly contribution")
    investment_return: float = Field(
        default=7.0,
        gt=-100,
        description="Nominal annual return (percent)"
    )
    inflation_rate: float = Field(
        default=3.0,
        gt=-100,
        description="Annual inflation (percent)"
    )
    target_retirement_age: int = Field(default=50, ge=0, description="Target retirement age")
    safe_withdrawal_rate: float = Field(
        default=4.0,
        gt=0,
        description="Safe withdrawal rate (percent)"
    )

    @field_validator("target_retirement_age")
    @classmethod
    def validate_target_age(cls, v, info):
        """Ensure target_retirement_age >= current_age."""
        current_age = info.data.get("current_age")
        if current_age is not None and v < current_age:
            raise ValueError(
                f"target_retirement_age ({v}) must be >= current_age ({current_age})"
            )
        return v

    @classmethod
    def create(cls, **values: Any) -> "FireProfile":
        """Build a profile, raising InvalidProfileError instead of pydantic's error."""
        try:
            return cls.model_validate(values)
        except pydantic.ValidationError as e:
            raise InvalidProfileError(_describe_validation_error(e)) from e

    def with_changes(self, **changes: Any) -> "FireProfile":
        """Copy with some fields replaced, re-validating the result."""
        data = self.model_dump()
        data.update(changes)
        return type(self).create(**data)

    @property
    def years_until_target(self) -> int:
        return self.target_retirement_age - self.current_age

    def out_of_ui_range(self) -> List[str]:
        """Names of fields outside the documented slider ranges.

        The engine accepts such values; callers may want to warn about them.
        """
        out = []
        for name, (lo, hi, _step) in UI_RANGES.items():
            value = getattr(self, name)
            if value < lo or value > hi:
                out.append(name)
        return out


def _describe_validation_error(error: pydantic.ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(x) for x in item.get("loc", ())) or "profile"
        msg = item.get("msg", "invalid value")
        # pydantic prefixes messages raised from validators
        msg = msg.removeprefix("Value error, ")
        parts.append(f"{loc}: {msg}")
    return "Invalid profile: " + "; ".join(parts)


# ---------------------------------------------------------------------------
# Scenario Configuration
# ---------------------------------------------------------------------------

class ScenarioSpec(BaseModel):
    """
    One alternative savings/return assumption for the comparison cards.

    Attributes
    ----------
    key : str
        Stable identifier ("conservative", "moderate", "aggressive").
    name : str
        Display name.
    annual_return_percent : float
        Annual return assumed by the scenario, in percent.
    savings_multiplier : float
        Factor applied to the profile's monthly savings.

    Examples
    --------
    >>> ScenarioSpec(key="frugal", name="Frugal", annual_return_percent=6,
    ...              savings_multiplier=1.5)
    """

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    key: str = Field(min_length=1, max_length=50, description="Scenario identifier")
    name: str = Field(min_length=1, max_length=100, description="Display name")
    annual_return_percent: float = Field(description="Annual return (percent)")
    savings_multiplier: float = Field(default=1.0, ge=0, description="Scale on monthly savings")


DEFAULT_SCENARIOS: tuple[ScenarioSpec, ...] = (
    ScenarioSpec(key="conservative", name="Conservative",
                 annual_return_percent=5.0, savings_multiplier=0.8),
    ScenarioSpec(key="moderate", name="Moderate",
                 annual_return_percent=7.0, savings_multiplier=1.0),
    ScenarioSpec(key="aggressive", name="Aggressive",
                 annual_return_percent=9.0, savings_multiplier=1.2),
)


# ---------------------------------------------------------------------------
# Monte Carlo Configuration
# ---------------------------------------------------------------------------

class MonteCarloConfig(BaseModel):
    """
    Configuration for the stochastic simulation.

    Attributes
    ----------
    trials : int
        Simulated paths per displayed year (1-100,000).
    seed : int, optional
        Random seed. If None, draws are not reproducible.
    years_to_show : int, optional
        Last simulated year. Defaults to min(years_to_fire + 5, 30).
    method : {"independent", "cumulative"}
        "independent" re-simulates fresh paths for every displayed year;
        "cumulative" reuses one set of paths across all years.
    spread : float
        Width of the annual return distribution around the expected return.

    Examples
    --------
    >>> config = MonteCarloConfig(trials=500, seed=42)
    >>> config.method
    'independent'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    trials: int = Field(
        default=DEFAULT_TRIALS,
        ge=1,
        le=100_000,
        description="Simulated paths per year"
    )
    seed: Optional[int] = Field(
        default=None,
        description="Random seed for reproducibility"
    )
    years_to_show: Optional[int] = Field(
        default=None,
        ge=0,
        description="Last simulated year (default: min(years_to_fire + 5, 30))"
    )
    method: Literal["independent", "cumulative"] = Field(
        default="independent",
        description="Path sampling strategy"
    )
    spread: float = Field(
        default=MC_RETURN_SPREAD,
        gt=0,
        le=2.0,
        description="Width of the annual return distribution"
    )


# ---------------------------------------------------------------------------
# Application Settings (Environment Variables)
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Environment variables are prefixed with FIRECALC_ (e.g.
    FIRECALC_LOG_LEVEL=DEBUG); a local .env file is honoured.

    Attributes
    ----------
    debug : bool
        Enable debug mode (forces DEBUG logging).
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR".
    cache_size : int
        Number of profiles whose deterministic results are memoized.
    mc_workers : int
        Worker threads for background Monte Carlo runs.
    default_trials : int
        Trials used when no Monte Carlo configuration is given.

    Examples
    --------
    >>> settings = AppSettings()
    >>> settings.log_level
    'WARNING'
    """

    model_config = SettingsConfigDict(
        env_prefix="FIRECALC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )
    cache_size: int = Field(
        default=128,
        ge=1,
        le=10_000,
        description="Memoized profiles"
    )
    mc_workers: int = Field(
        default=1,
        ge=1,
        le=32,
        description="Background Monte Carlo worker threads"
    )
    default_trials: int = Field(
        default=DEFAULT_TRIALS,
        ge=1,
        le=100_000,
        description="Default Monte Carlo trials"
    )
