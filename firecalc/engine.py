"""
Engine facade for firecalc.

Purpose
-------
Connects the projector, achievement evaluator, scenario solver and Monte
Carlo simulator behind one entry point that rendering code can call on
every input change:

- ``compute_report``: pure, raising composition of the four components.
- ``FireEngine.run``: same result, but any ``FireCalcError`` is captured in
  ``EngineReport.error`` instead of propagating; deterministic results are
  memoized per profile (an LRU keyed by the frozen profile, so a change in
  any field is a different key).
- ``FireEngine.submit_monte_carlo``: runs the simulation on a worker thread.
  Every ``run``/``submit`` call starts a new input generation; a background
  result whose generation has been superseded is discarded, so it can never
  replace a newer report.

Example
-------
>>> with FireEngine() as engine:
...     report = engine.run({"currentAge": 30, "currentIncome": 75_000})
...     report.ok, report.summary.years_to_fire
...     future = engine.submit_monte_carlo(report.profile, MonteCarloConfig(seed=1))
...     latest = future.result()
"""

from __future__ import annotations

import functools
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .achievements import Achievement, evaluate_achievements
from .config import DEFAULT_SCENARIOS, AppSettings, FireProfile, MonteCarloConfig, ScenarioSpec
from .constants import HORIZON_YEARS
from .exceptions import FireCalcError
from .monte_carlo import MonteCarloPoint, simulate_from_config
from .projection import FireSummary, project
from .scenarios import Scenario, solve_scenarios

__all__ = [
    "EngineReport",
    "compute_report",
    "FireEngine",
]

logger = logging.getLogger(__name__)

ProfileInput = Union[FireProfile, Mapping[str, Any]]


@dataclass(frozen=True)
class EngineReport:
    """
    Everything the rendering layer needs for one profile.

    Attributes
    ----------
    profile : FireProfile, optional
        The validated profile (None when validation failed).
    summary : FireSummary, optional
    achievements : tuple of Achievement
    scenarios : tuple of Scenario
    monte_carlo : tuple of MonteCarloPoint, optional
        Present only when the simulation was requested.
    error : FireCalcError, optional
        Set instead of the results when the computation failed.
    generation : int
        Input generation this report belongs to (0 outside FireEngine).
    """
    profile: Optional[FireProfile] = None
    summary: Optional[FireSummary] = None
    achievements: Tuple[Achievement, ...] = ()
    scenarios: Tuple[Scenario, ...] = ()
    monte_carlo: Optional[Tuple[MonteCarloPoint, ...]] = None
    error: Optional[FireCalcError] = None
    generation: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def _as_profile(profile: ProfileInput) -> FireProfile:
    if isinstance(profile, FireProfile):
        return profile
    return FireProfile.create(**dict(profile))


def compute_report(
    profile: ProfileInput,
    *,
    monte_carlo: bool = False,
    mc_config: Optional[MonteCarloConfig] = None,
    rng: Optional[np.random.Generator] = None,
    horizon: int = HORIZON_YEARS,
    scenarios: Sequence[ScenarioSpec] = DEFAULT_SCENARIOS,
) -> EngineReport:
    """
    Compute a full report, raising on the first error.

    Raises
    ------
    FireCalcError
        Any validation or domain error from the components.
    """
    profile = _as_profile(profile)
    summary = project(profile, horizon=horizon)
    achievements = tuple(evaluate_achievements(summary))
    cards = tuple(solve_scenarios(profile, summary, scenarios))
    mc_points = None
    if monte_carlo:
        mc_points = tuple(
            simulate_from_config(profile, summary, mc_config or MonteCarloConfig(), rng=rng)
        )
    return EngineReport(
        profile=profile,
        summary=summary,
        achievements=achievements,
        scenarios=cards,
        monte_carlo=mc_points,
    )


class FireEngine:
    """
    Memoizing, error-capturing engine with background Monte Carlo.

    Parameters
    ----------
    settings : AppSettings, optional
        Cache size, worker count and default trials. Read from the
        environment when omitted.
    horizon : int, default 40
        Projection horizon.
    scenarios : sequence of ScenarioSpec
        Scenario cards to solve.
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        horizon: int = HORIZON_YEARS,
        scenarios: Sequence[ScenarioSpec] = DEFAULT_SCENARIOS,
    ):
        self.settings = settings or AppSettings()
        self.horizon = horizon
        self.scenarios = tuple(scenarios)
        self._deterministic = functools.lru_cache(maxsize=self.settings.cache_size)(
            self._compute_deterministic
        )
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()
        self._generation = 0
        self._latest: Optional[EngineReport] = None

    # -------------------- Lifecycle --------------------
    def __enter__(self) -> "FireEngine":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Shut down the worker pool (pending simulations are cancelled)."""
        with self._lock:
            executor, self._executor = self._executor, None
        # Workers publish under the lock, so wait outside it.
        if executor is not None:
            executor.shutdown(wait=True, cancel_futures=True)

    # -------------------- Generations --------------------
    @property
    def generation(self) -> int:
        return self._generation

    def _next_generation(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def latest(self) -> Optional[EngineReport]:
        """Newest report that has not been superseded, if any."""
        with self._lock:
            if self._latest is not None and self._latest.generation == self._generation:
                return self._latest
            return None

    def _publish(self, report: EngineReport) -> bool:
        with self._lock:
            if report.generation != self._generation:
                logger.debug(
                    "Discarding stale report (generation %d, current %d)",
                    report.generation, self._generation,
                )
                return False
            self._latest = report
            return True

    # -------------------- Computation --------------------
    def _compute_deterministic(
        self, profile: FireProfile
    ) -> Tuple[FireSummary, Tuple[Achievement, ...], Tuple[Scenario, ...]]:
        summary = project(profile, horizon=self.horizon)
        return (
            summary,
            tuple(evaluate_achievements(summary)),
            tuple(solve_scenarios(profile, summary, self.scenarios)),
        )

    def _compute(
        self,
        profile: ProfileInput,
        generation: int,
        monte_carlo: bool,
        mc_config: Optional[MonteCarloConfig],
        rng: Optional[np.random.Generator],
    ) -> EngineReport:
        validated: Optional[FireProfile] = None
        try:
            validated = _as_profile(profile)
            summary, achievements, cards = self._deterministic(validated)
            mc_points = None
            if monte_carlo:
                config = mc_config or MonteCarloConfig(trials=self.settings.default_trials)
                mc_points = tuple(simulate_from_config(validated, summary, config, rng=rng))
        except FireCalcError as e:
            logger.warning("Projection failed: %s", e)
            return EngineReport(profile=validated, error=e, generation=generation)

        return EngineReport(
            profile=validated,
            summary=summary,
            achievements=achievements,
            scenarios=cards,
            monte_carlo=mc_points,
            generation=generation,
        )

    def run(
        self,
        profile: ProfileInput,
        *,
        monte_carlo: bool = False,
        mc_config: Optional[MonteCarloConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> EngineReport:
        """
        Compute a report synchronously.

        Starts a new input generation, so any background simulation still
        running for an older profile will be discarded.

        Returns
        -------
        EngineReport
            With ``error`` set (and no results) when validation or a domain
            check failed.
        """
        generation = self._next_generation()
        report = self._compute(profile, generation, monte_carlo, mc_config, rng)
        self._publish(report)
        return report

    def submit_monte_carlo(
        self,
        profile: ProfileInput,
        mc_config: Optional[MonteCarloConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> "Future[Optional[EngineReport]]":
        """
        Run a full report with Monte Carlo on a worker thread.

        The future resolves to the report, or to None when a newer ``run``
        or ``submit_monte_carlo`` call superseded it before it finished.
        """
        generation = self._next_generation()
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.settings.mc_workers,
                    thread_name_prefix="firecalc-mc",
                )
            executor = self._executor
        return executor.submit(self._background, profile, generation, mc_config, rng)

    def _background(
        self,
        profile: ProfileInput,
        generation: int,
        mc_config: Optional[MonteCarloConfig],
        rng: Optional[np.random.Generator],
    ) -> Optional[EngineReport]:
        if not self.is_current(generation):
            logger.debug("Skipping superseded simulation (generation %d)", generation)
            return None
        report = self._compute(profile, generation, True, mc_config, rng)
        return report if self._publish(report) else None

    # -------------------- Cache --------------------
    def cache_info(self):
        return self._deterministic.cache_info()

    def clear_cache(self) -> None:
        self._deterministic.cache_clear()
