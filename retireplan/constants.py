"""
Global constants for retireplan.

Purpose
-------
Centralizes the fixed numbers the engine relies on: risk tier offsets,
statistical constants, Monte Carlo sizing, analysis grids and insight
thresholds.

Usage
-----
>>> from retireplan.constants import DEFAULT_N_SIMS, MARKET_VOLATILITY
>>> beta = volatility / MARKET_VOLATILITY

Categories
----------
- Profile defaults
- Projection
- Risk metrics
- Simulation
- Analysis grids
- Insights
"""

from typing import Dict, Tuple

__all__ = [
    # Profile defaults
    "DEFAULT_LIFE_EXPECTANCY",
    "MONTHS_PER_YEAR",
    # Projection
    "RISK_TOLERANCE_ADJUSTMENTS",
    "MIN_ADJUSTED_RETURN",
    "PROJECTION_SAMPLE_INTERVAL",
    "MAX_LONGEVITY_YEARS",
    # Risk metrics
    "MARKET_VOLATILITY",
    "VAR_Z_SCORE_95",
    "DRAWDOWN_VOLATILITY_MULTIPLE",
    "INFORMATION_RATIO_FACTOR",
    # Simulation
    "DEFAULT_N_SIMS",
    "MAX_N_SIMS",
    "DEFAULT_SEED",
    "SAFE_WITHDRAWAL_MULTIPLE",
    "PERCENTILE_LEVELS",
    # Analysis grids
    "SENSITIVITY_DELTAS",
    "COMPOUNDING_FREQUENCIES",
    # Insights
    "LONGEVITY_TARGET_YEARS",
    "MILLIONAIRE_THRESHOLD",
    "MULTI_MILLIONAIRE_THRESHOLD",
]


# =============================================================================
# Profile Defaults
# =============================================================================

DEFAULT_LIFE_EXPECTANCY: int = 90
"""Life expectancy assumed when the profile omits it."""

MONTHS_PER_YEAR: int = 12
"""Number of monthly contributions per year."""


# =============================================================================
# Projection
# =============================================================================

RISK_TOLERANCE_ADJUSTMENTS: Dict[int, float] = {1: -0.015, 2: 0.0, 3: 0.01}
"""Return offset per risk tier (1 = conservative, 3 = aggressive)."""

MIN_ADJUSTED_RETURN: float = 0.01
"""Floor applied to the risk-adjusted return."""

PROJECTION_SAMPLE_INTERVAL: int = 5
"""Years between sampled projection points."""

MAX_LONGEVITY_YEARS: int = 50
"""Cap on the portfolio longevity simulation."""


# =============================================================================
# Risk Metrics
# =============================================================================

MARKET_VOLATILITY: float = 0.15
"""Assumed market volatility used to derive portfolio beta."""

VAR_Z_SCORE_95: float = 1.645
"""One-tailed standard normal quantile for 95% parametric VaR."""

DRAWDOWN_VOLATILITY_MULTIPLE: float = 2.5
"""Max drawdown heuristic: volatility times this multiple."""

INFORMATION_RATIO_FACTOR: float = 0.8
"""Information ratio approximated as this fraction of the Sharpe ratio."""


# =============================================================================
# Simulation Defaults
# =============================================================================

DEFAULT_N_SIMS: int = 1000
"""Number of Monte Carlo trials per calculation."""

MAX_N_SIMS: int = 10_000
"""Upper bound on trials; bounds worst-case latency."""

DEFAULT_SEED: int = 42
"""Seed used by the CLI and tests when reproducibility is requested."""

SAFE_WITHDRAWAL_MULTIPLE: float = 25.0
"""Success target multiple of current savings (4% rule proxy)."""

PERCENTILE_LEVELS: Tuple[int, ...] = tuple(range(5, 100, 5))
"""Reported Monte Carlo percentiles: 5th, 10th, ..., 95th."""


# =============================================================================
# Analysis Grids
# =============================================================================

SENSITIVITY_DELTAS: Tuple[float, ...] = (-0.02, -0.01, 0.0, 0.01, 0.02)
"""Return-rate perturbations for the sensitivity analysis."""

COMPOUNDING_FREQUENCIES: Dict[int, str] = {
    1: "Annual",
    4: "Quarterly",
    12: "Monthly",
    365: "Daily",
}
"""Compounding frequencies compared in the compounding analysis."""


# =============================================================================
# Insights
# =============================================================================

LONGEVITY_TARGET_YEARS: int = 30
"""Years a portfolio should last through a typical retirement."""

MILLIONAIRE_THRESHOLD: float = 1_000_000.0
MULTI_MILLIONAIRE_THRESHOLD: float = 2_000_000.0
