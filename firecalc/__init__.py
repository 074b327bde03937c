"""
firecalc - Financial Independence projection engine

Projects a wealth trajectory toward the FIRE number (25x annual expenses,
inflation-adjusted), compares savings/return scenarios, derives milestone
achievements and simulates uncertainty with Monte Carlo percentile bands.

Modules
-------
- config        : Input profile, scenario and Monte Carlo models, settings
- projection    : Deterministic year-by-year projection and FIRE summary
- achievements  : Milestone badge catalog
- scenarios     : Yearly forward solver for years to FIRE
- monte_carlo   : Randomized percentile bands
- engine        : Memoizing facade with background Monte Carlo
- serialization : JSON profiles and report export
- plotting      : Matplotlib charts
- utils         : Shared utilities (compounding, percentiles, formatting)

"""

from .config import FireProfile, MonteCarloConfig, ScenarioSpec
from .projection import project
from .achievements import evaluate_achievements
from .scenarios import solve_years, solve_scenarios
from .monte_carlo import simulate
from .engine import FireEngine, EngineReport, compute_report
from .types import Reached, Unreachable
from . import utils
