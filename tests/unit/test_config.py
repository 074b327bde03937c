"""
Unit tests for config.py module.

Tests profile validation, aliases, scenario and Monte Carlo configuration,
and environment-driven application settings.
"""

import math

import pydantic
import pytest

from firecalc.config import (
    DEFAULT_SCENARIOS,
    AppSettings,
    FireProfile,
    MonteCarloConfig,
    ScenarioSpec,
)
from firecalc.exceptions import InvalidProfileError, ValidationError


# ============================================================================
# FIRE PROFILE TESTS
# ============================================================================

class TestFireProfile:
    """Test FireProfile validation and helpers."""

    def test_defaults_match_reference_profile(self, example_profile):
        """Default construction equals the reference profile."""
        assert FireProfile() == example_profile

    def test_camel_case_aliases_accepted(self, example_payload, example_profile):
        """camelCase keys populate snake_case fields."""
        profile = FireProfile.create(**example_payload)
        assert profile == example_profile

    def test_dump_by_alias(self, example_profile):
        """model_dump(by_alias=True) emits camelCase keys."""
        data = example_profile.model_dump(by_alias=True)
        assert data["monthlyExpenses"] == 4000
        assert data["targetRetirementAge"] == 50
        assert "monthly_expenses" not in data

    def test_frozen(self, example_profile):
        """Profiles cannot be mutated."""
        with pytest.raises(pydantic.ValidationError):
            example_profile.current_age = 40

    def test_hashable_and_equal_by_value(self):
        """Equal profiles hash equally (usable as a cache key)."""
        a = FireProfile(current_age=35)
        b = FireProfile(current_age=35)
        assert a == b
        assert hash(a) == hash(b)
        assert hash(a) != hash(FireProfile(current_age=36))

    def test_negative_age_rejected(self):
        """Negative ages raise InvalidProfileError."""
        with pytest.raises(InvalidProfileError, match="current_?[aA]ge"):
            FireProfile.create(current_age=-1)

    def test_target_age_below_current_age_rejected(self):
        """target_retirement_age must be >= current_age."""
        with pytest.raises(InvalidProfileError, match="must be >= current_age"):
            FireProfile.create(current_age=40, target_retirement_age=35)

    def test_target_age_equal_to_current_age_allowed(self):
        """Retiring at the current age is valid."""
        profile = FireProfile.create(current_age=40, target_retirement_age=40)
        assert profile.years_until_target == 0

    @pytest.mark.parametrize("field", [
        "current_income", "current_savings", "monthly_expenses", "monthly_savings",
    ])
    def test_negative_money_rejected(self, field):
        """Money amounts must be non-negative."""
        with pytest.raises(InvalidProfileError):
            FireProfile.create(**{field: -1})

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, value):
        """NaN and infinities are rejected for every numeric field."""
        with pytest.raises(InvalidProfileError):
            FireProfile.create(investment_return=value)

    def test_zero_swr_rejected(self):
        """Safe withdrawal rate must be positive."""
        with pytest.raises(InvalidProfileError, match="safe_?[wW]ithdrawal"):
            FireProfile.create(safe_withdrawal_rate=0)

    def test_unknown_field_rejected(self):
        """Extra keys are forbidden."""
        with pytest.raises(InvalidProfileError):
            FireProfile.create(salary=100_000)

    def test_zero_income_accepted(self):
        """Zero income passes validation (the projector reports it)."""
        assert FireProfile.create(current_income=0).current_income == 0

    def test_invalid_profile_error_is_validation_error(self):
        """InvalidProfileError can be caught as ValidationError."""
        with pytest.raises(ValidationError):
            FireProfile.create(current_age=-5)

    def test_with_changes_revalidates(self, example_profile):
        """with_changes returns a new validated profile."""
        changed = example_profile.with_changes(monthly_savings=3_000)
        assert changed.monthly_savings == 3_000
        assert example_profile.monthly_savings == 2_500
        with pytest.raises(InvalidProfileError):
            example_profile.with_changes(target_retirement_age=20)

    def test_out_of_ui_range(self, example_profile):
        """Values outside slider ranges are reported, not rejected."""
        assert example_profile.out_of_ui_range() == []
        profile = example_profile.with_changes(current_age=70, target_retirement_age=75,
                                               investment_return=15)
        assert profile.out_of_ui_range() == ["current_age", "investment_return"]


# ============================================================================
# SCENARIO SPEC TESTS
# ============================================================================

class TestScenarioSpec:
    """Test scenario specification model."""

    def test_default_scenarios(self):
        """Three scenarios: 5%/0.8x, 7%/1.0x, 9%/1.2x."""
        assert [s.key for s in DEFAULT_SCENARIOS] == ["conservative", "moderate", "aggressive"]
        assert [s.annual_return_percent for s in DEFAULT_SCENARIOS] == [5.0, 7.0, 9.0]
        assert [s.savings_multiplier for s in DEFAULT_SCENARIOS] == [0.8, 1.0, 1.2]

    def test_negative_multiplier_rejected(self):
        """savings_multiplier must be >= 0."""
        with pytest.raises(pydantic.ValidationError):
            ScenarioSpec(key="x", name="X", annual_return_percent=5, savings_multiplier=-1)

    def test_empty_key_rejected(self):
        """Keys must be non-empty."""
        with pytest.raises(pydantic.ValidationError):
            ScenarioSpec(key="", name="X", annual_return_percent=5)


# ============================================================================
# MONTE CARLO CONFIG TESTS
# ============================================================================

class TestMonteCarloConfig:
    """Test Monte Carlo configuration."""

    def test_defaults(self):
        """Default configuration: 1000 independent trials, unseeded."""
        config = MonteCarloConfig()
        assert config.trials == 1000
        assert config.seed is None
        assert config.years_to_show is None
        assert config.method == "independent"
        assert config.spread == pytest.approx(0.6)

    def test_zero_trials_rejected(self):
        """At least one trial is required."""
        with pytest.raises(pydantic.ValidationError):
            MonteCarloConfig(trials=0)

    def test_unknown_method_rejected(self):
        """Only 'independent' and 'cumulative' are accepted."""
        with pytest.raises(pydantic.ValidationError):
            MonteCarloConfig(method="antithetic")


# ============================================================================
# APP SETTINGS TESTS
# ============================================================================

class TestAppSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Defaults when no FIRECALC_* variables are set."""
        for var in ("FIRECALC_DEBUG", "FIRECALC_LOG_LEVEL", "FIRECALC_CACHE_SIZE"):
            monkeypatch.delenv(var, raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.debug is False
        assert settings.log_level == "WARNING"
        assert settings.cache_size == 128

    def test_reads_environment(self, monkeypatch):
        """FIRECALC_ prefixed variables override defaults."""
        monkeypatch.setenv("FIRECALC_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("FIRECALC_MC_WORKERS", "4")
        settings = AppSettings(_env_file=None)
        assert settings.log_level == "DEBUG"
        assert settings.mc_workers == 4
