"""
Integration test for the full firecalc workflow.

Tests the complete pipeline from a form-style profile payload through the
engine, persistence and charts to verify all components work together.
"""

import json

import numpy as np
import pytest

from firecalc import FireEngine, FireProfile, MonteCarloConfig, Reached
from firecalc.scenarios import replay_balance
from firecalc.serialization import load_profile, report_to_dict, save_profile, save_report


@pytest.mark.integration
class TestFullWorkflow:
    """Integration tests for the complete projection workflow."""

    def test_reference_profile_end_to_end(self, example_payload, settings, tmp_path):
        """
        Profile payload -> engine report -> JSON -> reload.

        This is a smoke test to ensure all components integrate properly.
        """
        # 1. Run the engine on the raw payload
        with FireEngine(settings) as engine:
            report = engine.run(example_payload, monte_carlo=True,
                                mc_config=MonteCarloConfig(trials=1000, seed=42))

        assert report.ok
        summary = report.summary

        # 2. Headline figures
        assert summary.fire_number == pytest.approx(1_200_000)
        assert summary.savings_rate == pytest.approx(0.4)
        achieved = {a.name: a.achieved for a in report.achievements}
        assert achieved["High Saver"] is True
        assert achieved["Super Saver"] is False

        # 3. Trajectory and bands agree on years and start
        assert isinstance(summary.fire_status, Reached)
        assert len(report.monte_carlo) == min(summary.years_to_fire + 5, 30) + 1
        for point in report.monte_carlo:
            assert point.p10 <= point.p25 <= point.p50 <= point.p75 <= point.p90
            assert point.expected == summary.point(point.year).balance

        # 4. Scenario cards replay to their targets
        for card in report.scenarios:
            n = card.solved_years
            rate = card.annual_return_percent / 100
            assert replay_balance(50_000, card.annual_savings, rate, n) >= summary.fire_number
            assert replay_balance(50_000, card.annual_savings, rate, n - 1) < summary.fire_number

        # 5. Persist and reload
        profile_path = save_profile(report.profile, tmp_path / "profile.json")
        assert load_profile(profile_path) == report.profile
        report_path = save_report(report, tmp_path / "report.json", rounded=True)
        data = json.loads(report_path.read_text(encoding="utf-8"))
        assert data["summary"]["fireNumber"] == 1_200_000
        assert len(data["monteCarlo"]) == len(report.monte_carlo)

    def test_input_changes_supersede_background_work(self, example_profile, settings):
        """Slider-style updates: only the newest profile's result survives."""
        with FireEngine(settings) as engine:
            futures = [
                engine.submit_monte_carlo(
                    example_profile.with_changes(monthly_savings=s),
                    MonteCarloConfig(trials=50, years_to_show=5),
                    rng=np.random.default_rng(s),
                )
                for s in (2_000, 2_500, 3_000)
            ]
            results = [f.result(timeout=60) for f in futures]

            assert results[-1] is not None
            assert results[-1].profile.monthly_savings == 3_000
            assert engine.latest() is results[-1]
            # superseded runs never become the latest report
            assert all(r is None or r.generation < results[-1].generation for r in results[:-1])

    def test_error_paths_are_reported(self, settings):
        """Invalid and degenerate inputs produce typed errors, never exceptions."""
        with FireEngine(settings) as engine:
            bad_age = engine.run({"currentAge": -1})
            zero_income = engine.run(FireProfile(current_income=0))
            ok = engine.run(FireProfile())

        assert report_to_dict(bad_age)["error"]["type"] == "InvalidProfileError"
        assert report_to_dict(zero_income)["error"]["type"] == "UndefinedRatioError"
        assert ok.ok

    def test_plot_all_kinds(self, example_profile, tmp_path):
        """Every chart kind renders from a single report."""
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from firecalc.engine import compute_report
        from firecalc.plotting import plot

        report = compute_report(example_profile, monte_carlo=True,
                                mc_config=MonteCarloConfig(trials=100, seed=1))
        for kind, data in (
            ("projection", report.summary),
            ("montecarlo", report.monte_carlo),
            ("scenarios", report.scenarios),
        ):
            path = tmp_path / f"{kind}.png"
            plot(kind, data, save_path=str(path))
            assert path.exists()
        plt.close("all")
