"""
Unit tests for CLI module.

Tests command-line interface functionality using Click's testing utilities.
"""

import json

import pytest
from click.testing import CliRunner

from firecalc.cli import __version__, main
from firecalc.config import FireProfile
from firecalc.serialization import load_profile, save_profile


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_profile(tmp_path):
    """Create temporary profile file."""
    return save_profile(FireProfile(current_age=35, target_retirement_age=55),
                        tmp_path / "profile.json")


# ============================================================================
# MAIN COMMAND TESTS
# ============================================================================

class TestMainCommand:
    """Test main CLI entry point."""

    def test_main_help(self, runner):
        """Test main --help lists commands."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("project", "scenarios", "achievements", "montecarlo", "plot", "config"):
            assert command in result.output

    def test_main_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_main_quiet_option(self, runner):
        result = runner.invoke(main, ["--quiet", "--help"])
        assert result.exit_code == 0


# ============================================================================
# PROJECT COMMAND TESTS
# ============================================================================

class TestProjectCommand:
    """Test project command."""

    def test_project_help(self, runner):
        result = runner.invoke(main, ["project", "--help"])
        assert result.exit_code == 0
        assert "--config" in result.output
        assert "--horizon" in result.output
        assert "--monthly-savings" in result.output

    def test_project_defaults(self, runner):
        """Default profile prints the FIRE summary."""
        result = runner.invoke(main, ["--quiet", "project"])
        assert result.exit_code == 0, result.output
        assert "1,200,000" in result.output
        assert "40.0%" in result.output

    def test_project_json(self, runner):
        result = runner.invoke(main, ["project", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["fireNumber"] == 1_200_000
        assert data["savingsRate"] == pytest.approx(0.4)
        assert len(data["projections"]) == 41

    def test_project_horizon(self, runner):
        result = runner.invoke(main, ["project", "--json", "--horizon", "10"])
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.output)["projections"]) == 11

    def test_project_overrides(self, runner):
        result = runner.invoke(main, ["project", "--json", "--expenses", "5000",
                                      "--income", "100000"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["fireNumber"] == 1_500_000
        assert data["savingsRate"] == pytest.approx(0.3)

    def test_project_with_config(self, runner, temp_profile):
        result = runner.invoke(main, ["project", "--json", "--config", str(temp_profile)])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["projections"][0]["age"] == 35

    def test_project_output(self, runner, tmp_path):
        output = tmp_path / "report.json"
        result = runner.invoke(main, ["--quiet", "project", "--output", str(output), "--rounded"])
        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["ok"] is True
        assert data["summary"]["fireNumber"] == 1_200_000

    def test_project_zero_income_fails(self, runner):
        result = runner.invoke(main, ["project", "--income", "0"])
        assert result.exit_code == 1
        assert "current_income" in result.output

    def test_project_overflow_fails(self, runner):
        """Inputs too large to project fail cleanly instead of printing Infinity."""
        result = runner.invoke(main, ["project", "--json", "--return", "1e300"])
        assert result.exit_code == 1
        assert "overflows" in result.output
        assert "Infinity" not in result.output

    def test_project_invalid_override_fails(self, runner):
        result = runner.invoke(main, ["project", "--age", "60", "--retire-age", "50"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_config_file(self, runner, tmp_path):
        result = runner.invoke(main, ["project", "--config", str(tmp_path / "nope.json")])
        assert result.exit_code != 0


# ============================================================================
# SCENARIOS / ACHIEVEMENTS COMMAND TESTS
# ============================================================================

class TestScenariosCommand:
    """Test scenarios command."""

    def test_scenarios_table(self, runner):
        result = runner.invoke(main, ["scenarios"])
        assert result.exit_code == 0, result.output
        assert "Conservative" in result.output
        assert "Aggressive" in result.output

    def test_scenarios_json(self, runner):
        result = runner.invoke(main, ["scenarios", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [c["key"] for c in data] == ["conservative", "moderate", "aggressive"]

    def test_scenarios_unreachable(self, runner):
        result = runner.invoke(main, ["--quiet", "scenarios", "--json", "--monthly-savings", "0"])
        assert result.exit_code == 0, result.output
        assert all(c["solvedYears"]["status"] == "unreachable"
                   for c in json.loads(result.output))


class TestAchievementsCommand:
    """Test achievements command."""

    def test_achievements_list(self, runner):
        result = runner.invoke(main, ["achievements"])
        assert result.exit_code == 0, result.output
        assert "[x]" in result.output and "High Saver" in result.output
        assert "[ ] 🚀 Super Saver" in result.output

    def test_achievements_json(self, runner):
        result = runner.invoke(main, ["achievements", "--json"])
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.output)) == 5


# ============================================================================
# MONTECARLO / PLOT COMMAND TESTS
# ============================================================================

class TestMonteCarloCommand:
    """Test montecarlo command."""

    def test_montecarlo_output(self, runner, tmp_path):
        output = tmp_path / "bands.json"
        result = runner.invoke(main, [
            "--quiet", "montecarlo", "-n", "50", "--years", "5", "--seed", "42",
            "--output", str(output),
        ])
        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert [p["year"] for p in data] == list(range(6))

    def test_montecarlo_cumulative(self, runner):
        result = runner.invoke(main, ["montecarlo", "-n", "20", "-y", "3", "--method", "cumulative"])
        assert result.exit_code == 0, result.output

    def test_montecarlo_invalid_trials(self, runner):
        result = runner.invoke(main, ["montecarlo", "-n", "0"])
        assert result.exit_code == 1

    def test_montecarlo_years_beyond_horizon(self, runner):
        result = runner.invoke(main, ["montecarlo", "-n", "10", "--years", "50"])
        assert result.exit_code == 1
        assert "horizon" in result.output


class TestPlotCommand:
    """Test plot command."""

    @pytest.mark.parametrize("kind", ["projection", "montecarlo", "scenarios"])
    def test_plot_kinds(self, runner, tmp_path, kind):
        output = tmp_path / f"{kind}.png"
        result = runner.invoke(main, ["--quiet", "plot", "--kind", kind, "-o", str(output),
                                      "-n", "20", "-s", "1"])
        assert result.exit_code == 0, result.output
        assert output.exists()

    def test_plot_requires_output(self, runner):
        result = runner.invoke(main, ["plot"])
        assert result.exit_code != 0


# ============================================================================
# CONFIG COMMAND TESTS
# ============================================================================

class TestConfigCommand:
    """Test config subcommands."""

    def test_config_create(self, runner, tmp_path):
        path = tmp_path / "new.json"
        result = runner.invoke(main, ["config", "create", str(path)])
        assert result.exit_code == 0, result.output
        assert load_profile(path) == FireProfile()

    def test_config_validate_valid(self, runner, temp_profile):
        result = runner.invoke(main, ["config", "validate", str(temp_profile)])
        assert result.exit_code == 0
        assert "valid" in result.output.lower()

    def test_config_validate_invalid(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"currentAge": -3}))
        result = runner.invoke(main, ["config", "validate", str(path)])
        assert result.exit_code == 1
        assert "failed" in result.output.lower()

    def test_config_show_json(self, runner, temp_profile):
        result = runner.invoke(main, ["config", "show", str(temp_profile), "--format", "json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["currentAge"] == 35

    def test_config_show_table(self, runner, temp_profile):
        result = runner.invoke(main, ["config", "show", str(temp_profile)])
        assert result.exit_code == 0
        assert "currentAge" in result.output


class TestInfoCommand:
    """Test info command."""

    def test_info(self, runner):
        result = runner.invoke(main, ["info"])
        assert result.exit_code == 0
        assert __version__ in result.output
