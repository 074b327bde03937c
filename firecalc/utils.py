"""General utilities for firecalc

Contents
--------
- Validation helpers
- Compounding primitives (monthly and yearly steps)
- Percentile helpers (nearest-rank extraction)
- Safe ratio helper
- Formatters (currency, percentage, compact matplotlib ticks)
- Logging setup
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from .constants import MONTHS_PER_YEAR
from .exceptions import UndefinedRatioError, ValidationError

if TYPE_CHECKING:
    from .config import AppSettings

__all__ = [
    # Validation
    "check_finite",
    "check_non_negative",
    # Compounding
    "compound_months",
    "compound_year",
    # Percentiles
    "nearest_rank",
    "nearest_rank_percentiles",
    # Ratios
    "safe_ratio",
    # Formatters
    "format_currency",
    "format_percentage",
    "compact_formatter",
    # Logging
    "configure_logging",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def check_finite(name: str, value: float) -> None:
    """Raise if *value* is NaN or infinite."""
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be a finite number (got {value}).")


def check_non_negative(name: str, value: float) -> None:
    """Raise if *value* is negative (strict)."""
    if value < 0:
        raise ValidationError(f"{name} must be non-negative (got {value}).")


# ---------------------------------------------------------------------------
# Compounding primitives
# ---------------------------------------------------------------------------

def compound_months(
    balance: float,
    monthly_rate: float,
    contribution: float,
    months: int = MONTHS_PER_YEAR,
) -> float:
    """Advance *balance* through ``months`` end-of-month contributions.

    Each step is ``balance * (1 + monthly_rate) + contribution``: the
    contribution lands at month end and earns nothing in its own month
    (ordinary annuity).
    """
    for _ in range(months):
        balance = balance * (1.0 + monthly_rate) + contribution
    return balance


def compound_year(balance, annual_rate, contribution):
    """One yearly step ``balance * (1 + annual_rate) + contribution``.

    Works element-wise on NumPy arrays as well as on scalars.
    """
    return balance * (1.0 + annual_rate) + contribution


# ---------------------------------------------------------------------------
# Percentiles
# ---------------------------------------------------------------------------

def nearest_rank(sorted_values: np.ndarray, p: float) -> float:
    """Nearest-rank percentile of an ascending array.

    Index is ``floor(n * p)`` clamped to ``[0, n - 1]``; an empty array
    yields 0.0.
    """
    n = len(sorted_values)
    if n == 0:
        return 0.0
    idx = min(max(int(math.floor(n * p)), 0), n - 1)
    return float(sorted_values[idx])


def nearest_rank_percentiles(values: Sequence[float] | np.ndarray, levels: Sequence[float]) -> list[float]:
    """Sort *values* ascending and extract every level in *levels*."""
    arr = np.sort(np.asarray(values, dtype=float))
    return [nearest_rank(arr, p) for p in levels]


# ---------------------------------------------------------------------------
# Ratios
# ---------------------------------------------------------------------------

def safe_ratio(
    numerator: float,
    denominator: float,
    *,
    what: str = "ratio",
    denominator_name: str = "denominator",
) -> float:
    """Return ``numerator / denominator`` or raise UndefinedRatioError on a zero denominator."""
    if denominator == 0:
        raise UndefinedRatioError(f"{what} is undefined: {denominator_name} is 0")
    return numerator / denominator


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------

def format_currency(value: float, symbol: str = "$") -> str:
    """
    Whole-currency display with thousands separators.

    Examples
    --------
    >>> format_currency(1_200_000)
    '$1,200,000'
    >>> format_currency(-2_500.4)
    '-$2,500'
    """
    if not math.isfinite(value):
        return "∞" if value > 0 else "-∞" if value < 0 else "n/a"
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.0f}"


def format_percentage(fraction: Optional[float], decimals: int = 1) -> str:
    """Format a fraction (0.4) as a percentage string ("40.0%")."""
    if fraction is None:
        return "n/a"
    return f"{fraction * 100:.{decimals}f}%"


def compact_formatter(x, pos):
    """
    Format axis values compactly for matplotlib FuncFormatter.

    - 1_250_000 → "$1.25M"
    - 750_000 → "$750K"
    - 0 → "$0"

    Examples
    --------
    >>> from matplotlib.ticker import FuncFormatter
    >>> ax.yaxis.set_major_formatter(FuncFormatter(compact_formatter))
    """
    if x == 0:
        return "$0"
    sign = "-" if x < 0 else ""
    x = abs(x)
    if x >= 1e6:
        return f"{sign}${x / 1e6:.2f}M".replace(".00M", "M")
    if x >= 1e3:
        return f"{sign}${x / 1e3:.0f}K"
    return f"{sign}${x:.0f}"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """Apply ``AppSettings.log_level`` (DEBUG when ``debug``) to the package logger."""
    if settings is None:
        from .config import AppSettings
        settings = AppSettings()

    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level)
    pkg_logger = logging.getLogger("firecalc")
    pkg_logger.setLevel(level)
    if not pkg_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        pkg_logger.addHandler(handler)
    logger.debug("Logging configured at %s", logging.getLevelName(level))
