"""
Pytest configuration and fixtures for the firecalc test suite.

This module provides reusable fixtures for testing all firecalc components.
Fixtures follow the principle of "arrange-act-assert" with clear separation.
"""

import numpy as np
import pytest

from firecalc.config import AppSettings, FireProfile, MonteCarloConfig
from firecalc.projection import project


# ---------------------------------------------------------------------------
# Random Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def seed() -> int:
    """Standard random seed for reproducibility."""
    return 42


@pytest.fixture
def rng(seed) -> np.random.Generator:
    """Seeded NumPy generator."""
    return np.random.default_rng(seed)


# ---------------------------------------------------------------------------
# Profile Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def example_profile() -> FireProfile:
    """
    Reference profile.

    Age 30, income 75,000/yr, savings 50,000, expenses 4,000/mo,
    saving 2,500/mo at 7% return and 3% inflation, SWR 4%.
    FIRE number 1,200,000; savings rate 40%.
    """
    return FireProfile(
        current_age=30,
        current_income=75_000,
        current_savings=50_000,
        monthly_expenses=4_000,
        monthly_savings=2_500,
        investment_return=7,
        inflation_rate=3,
        target_retirement_age=50,
        safe_withdrawal_rate=4,
    )


@pytest.fixture
def example_payload() -> dict:
    """Reference profile as camelCase input, as sent by a form."""
    return {
        "currentAge": 30,
        "currentIncome": 75000,
        "currentSavings": 50000,
        "monthlyExpenses": 4000,
        "monthlySavings": 2500,
        "investmentReturn": 7,
        "inflationRate": 3,
        "targetRetirementAge": 50,
        "safeWithdrawalRate": 4,
    }


@pytest.fixture
def wealthy_profile() -> FireProfile:
    """Profile already above its FIRE number."""
    return FireProfile(current_savings=2_000_000, monthly_expenses=3_000)


@pytest.fixture
def stalled_profile() -> FireProfile:
    """Profile that never reaches FIRE (no savings, no return)."""
    return FireProfile(
        current_savings=0,
        monthly_savings=0,
        investment_return=0,
        inflation_rate=0,
    )


# ---------------------------------------------------------------------------
# Result Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def example_summary(example_profile):
    """Deterministic projection of the reference profile."""
    return project(example_profile)


@pytest.fixture
def mc_config(seed) -> MonteCarloConfig:
    """Small reproducible Monte Carlo configuration."""
    return MonteCarloConfig(trials=200, seed=seed)


@pytest.fixture
def settings() -> AppSettings:
    """Settings independent of the caller's environment."""
    return AppSettings(
        _env_file=None,
        debug=False,
        log_level="WARNING",
        cache_size=16,
        mc_workers=1,
        default_trials=200,
    )
