"""General utilities for retireplan

Contents
--------
- Validation helpers
- Compounding helpers (per-period growth, closed-form factors)
- Rounding helpers (half-up, as the dashboard displays numbers)
- Reporting formatters (format_currency, format_percent)
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

__all__ = [
    # Validation
    "check_non_negative",
    "check_finite",
    # Compounding
    "annual_growth_factor",
    "compound_factor",
    # Rounding
    "round_half_up",
    # Statistics
    "percentile_index",
    "mean_and_std",
    # Formatters
    "format_currency",
    "format_percent",
]

# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def check_non_negative(name: str, value: float) -> None:
    """Raise if *value* is negative (strict)."""
    if value < 0:
        raise ValueError(f"{name} must be non-negative (got {value}).")


def check_finite(name: str, value: float | np.ndarray) -> None:
    """Raise if *value* (scalar or array) contains NaN or infinities."""
    if not np.all(np.isfinite(value)):
        raise ArithmeticError(f"{name} is not finite (got {value!r}).")


# ---------------------------------------------------------------------------
# Compounding helpers
# ---------------------------------------------------------------------------

def annual_growth_factor(rate: float | np.ndarray, frequency: int) -> float | np.ndarray:
    """Growth over one year of *frequency* compounding periods.

    Uses: (1 + r/f) ** f. The per-period factor is floored at zero, so a
    return below -100% per period wipes the balance out instead of
    flipping its sign (or producing NaN for array inputs).
    """
    if frequency < 1:
        raise ValueError(f"frequency must be >= 1 (got {frequency}).")
    per_period = np.maximum(1.0 + np.asarray(rate, dtype=float) / frequency, 0.0)
    factor = per_period ** frequency
    return float(factor) if factor.ndim == 0 else factor


def compound_factor(rate: float, frequency: int, years: float) -> float:
    """Closed-form growth over *years*: (1 + r/f) ** (f * years)."""
    if frequency < 1:
        raise ValueError(f"frequency must be >= 1 (got {frequency}).")
    return float((1.0 + rate / frequency) ** (frequency * years))


# ---------------------------------------------------------------------------
# Rounding helpers
# ---------------------------------------------------------------------------

def round_half_up(value: float, decimals: int = 0) -> float:
    """Round halves toward +inf (2.5 -> 3, -2.5 -> -2), not to even.

    Python's round() uses banker's rounding; reported figures round the
    way a spreadsheet does. With decimals=0 the result is an int.
    """
    scale = 10.0 ** decimals
    rounded = math.floor(value * scale + 0.5) / scale
    return float(rounded) if decimals > 0 else int(rounded)


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

def percentile_index(percentile: float, n: int) -> int:
    """Index of the *percentile* in an ascending sample of size *n*.

    Uses floor(p / 100 * n), clipped to the last element.
    """
    if n <= 0:
        raise ValueError(f"n must be positive (got {n}).")
    return min(int(math.floor(percentile / 100.0 * n)), n - 1)


def mean_and_std(values: Sequence[float] | np.ndarray) -> tuple[float, float]:
    """Mean and population standard deviation (ddof=0)."""
    arr = np.asarray(values, dtype=float)
    return float(arr.mean()), float(arr.std(ddof=0))


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------

def format_currency(value: float, decimals: int = 0, symbol: str = "$") -> str:
    """
    Format currency values for tables and insight messages.

    Examples
    --------
    >>> format_currency(1_834_512.4)
    '$1,834,512'
    >>> format_currency(-2500, decimals=2)
    '-$2,500.00'
    """
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.{decimals}f}"


def format_percent(value: float, decimals: int = 1) -> str:
    """Format a fraction as a percentage: 0.25 -> '25.0%'."""
    return f"{value * 100:.{decimals}f}%"
