"""
Custom exceptions for firecalc.

Purpose
-------
Provides a unified exception hierarchy for consistent error handling
across the projection engine. All exceptions inherit from FireCalcError,
enabling catch-all handling by the engine facade, which turns them into
typed report errors instead of letting them reach rendering code.

Exception Hierarchy
-------------------
FireCalcError (base)
├── ConfigurationError - Invalid settings or scenario specifications
├── ValidationError - Invalid arguments
│   └── InvalidProfileError - Invalid Input Profile
└── DomainError - Numeric result is undefined
    ├── UndefinedRatioError - Ratio with a zero denominator
    └── NumericOverflowError - Result exceeds the float range

Reaching the Scenario Solver's iteration bound is NOT an exception: it is
reported as ``Unreachable(reason="bound")`` (see ``firecalc.types``).

Usage
-----
>>> from firecalc.exceptions import UndefinedRatioError
>>>
>>> try:
...     summary = project(profile)
... except FireCalcError as e:
...     print(f"firecalc error: {e}")
"""


class FireCalcError(Exception):
    """
    Base exception for all firecalc errors.

    Examples
    --------
    >>> try:
    ...     engine.run(profile)
    ... except FireCalcError as e:
    ...     logger.error(f"Projection failed: {e}")
    """
    pass


class ConfigurationError(FireCalcError):
    """
    Invalid configuration or parameters.

    Raised when engine configuration is invalid, such as:
    - Duplicate scenario keys
    - Empty scenario list
    - Monte Carlo settings out of range

    Examples
    --------
    >>> raise ConfigurationError("scenario keys must be unique, got 'moderate' twice")
    """
    pass


class ValidationError(FireCalcError):
    """
    Argument validation failures.

    Raised when a function argument fails validation checks, such as:
    - Negative horizon
    - Non-finite solver inputs
    - Monte Carlo window beyond the projected horizon

    Examples
    --------
    >>> raise ValidationError(f"horizon must be >= 0, got {horizon}")
    """
    pass


class InvalidProfileError(ValidationError):
    """
    Input Profile rejected at the boundary.

    Raised for negative ages, a target retirement age below the current
    age, negative money amounts or non-finite numbers.

    Examples
    --------
    >>> raise InvalidProfileError(
    ...     "target_retirement_age (25) must be >= current_age (30)"
    ... )
    """
    pass


class DomainError(FireCalcError):
    """
    A requested quantity is mathematically undefined for the given inputs.
    """
    pass


class UndefinedRatioError(DomainError):
    """
    Division by zero while computing a ratio.

    Raised instead of propagating NaN or infinity, e.g. the savings rate
    when ``current_income`` is 0.

    Examples
    --------
    >>> raise UndefinedRatioError(
    ...     "savings rate is undefined: current_income is 0"
    ... )
    """
    pass


class NumericOverflowError(DomainError):
    """
    A projected quantity left the representable float range.

    Raised when finite but extreme inputs (e.g. an inflation rate of 1e10 %)
    drive a balance or an inflation-adjusted target to infinity, instead of
    returning ``inf``/``nan`` values or a raw ``OverflowError``.

    Examples
    --------
    >>> raise NumericOverflowError(
    ...     "fire_number overflows the float range at year 3"
    ... )
    """
    pass
