"""
Monte Carlo simulation of the accumulation phase.

Mathematical Model
------------------
For each trial i and each year y before retirement:

    Z_{i,y} = sqrt(-2 ln(1 - U1)) * cos(2 pi U2)        (Box-Muller)
    R_{i,y} = mu + sigma * Z_{i,y}
    B_{i,y+1} = B_{i,y} * max(1 + R_{i,y}/f, 0)^f + 12 * m_y

with U1, U2 ~ Uniform[0, 1) independent draws. Only the accumulation
phase is simulated; the terminal balances B_{i,n} are sorted and
summarized once every trial is done.

Success is measured against a fixed target of 25x current savings (a
4%-rule proxy that does not look at the profile's withdrawal rate).

Design principles
-----------------
- Injectable randomness: any object with ``uniform(shape)`` can drive the
  simulation; tests pass deterministic sources.
- Vectorized: all trials advance together as (n_sims,) arrays; trials
  never read each other's draws.
- Deterministic with a seed: same seed, same result.

Example
-------
>>> source = GeneratorUniformSource(seed=42)
>>> result = run_monte_carlo(profile, adjusted_return=0.07, source=source)
>>> result.percentiles[0].label, result.n_sims
('5th', 1000)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, Tuple

import numpy as np

from .config import FinancialProfile, SimulationConfig
from .constants import MONTHS_PER_YEAR, PERCENTILE_LEVELS, SAFE_WITHDRAWAL_MULTIPLE
from .utils import annual_growth_factor, mean_and_std, percentile_index

__all__ = [
    "UniformSource",
    "GeneratorUniformSource",
    "PercentilePoint",
    "MonteCarloResult",
    "box_muller",
    "simulate_terminal_balances",
    "summarize_outcomes",
    "run_monte_carlo",
]


# ---------------------------------------------------------------------------
# Randomness
# ---------------------------------------------------------------------------

class UniformSource(Protocol):
    """Supplies independent uniform draws in [0, 1)."""

    def uniform(self, size: Tuple[int, ...]) -> np.ndarray:
        ...


class GeneratorUniformSource:
    """
    Uniform source backed by a NumPy ``Generator``.

    Parameters
    ----------
    seed : int or np.random.Generator, optional
        Seed (or ready generator). None draws fresh OS entropy, so each
        instance owns independent state.
    """

    def __init__(self, seed: Optional[int | np.random.Generator] = None):
        self._rng = seed if isinstance(seed, np.random.Generator) else np.random.default_rng(seed)

    def uniform(self, size: Tuple[int, ...]) -> np.ndarray:
        return self._rng.random(size)


def box_muller(u1: np.ndarray, u2: np.ndarray) -> np.ndarray:
    """
    Standard normal variates from two uniform arrays of the same shape.

    ``1 - u1`` keeps the logarithm finite for draws in [0, 1).
    """
    u1 = np.asarray(u1, dtype=float)
    u2 = np.asarray(u2, dtype=float)
    return np.sqrt(-2.0 * np.log1p(-u1)) * np.cos(2.0 * np.pi * u2)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PercentilePoint:
    percentile: int
    value: float

    @property
    def label(self) -> str:
        return f"{self.percentile}th"


@dataclass(frozen=True)
class MonteCarloResult:
    """
    Aggregated Monte Carlo outcome distribution.

    Attributes
    ----------
    percentiles : tuple of PercentilePoint
        5th..95th in steps of 5, non-decreasing in value.
    success_rate : float
        Percentage of trials ending at or above ``target`` (0-100).
    median, mean, standard_deviation : float
        Statistics of the terminal balances (population std).
    n_sims : int
        Number of trials.
    target : float
        Success threshold (25x current savings).
    outcomes : np.ndarray
        Sorted terminal balances, shape (n_sims,).
    """

    percentiles: Tuple[PercentilePoint, ...]
    success_rate: float
    median: float
    mean: float
    standard_deviation: float
    n_sims: int
    target: float
    outcomes: np.ndarray = field(repr=False, compare=False)


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------

def simulate_terminal_balances(
    current_savings: float,
    monthly_contribution: float,
    contribution_increase_rate: float,
    years: int,
    expected_return: float,
    volatility: float,
    compounding_frequency: int,
    n_sims: int,
    source: UniformSource,
) -> np.ndarray:
    """
    Simulate *n_sims* accumulation paths and return terminal balances.

    Returns
    -------
    np.ndarray, shape (n_sims,)
        Unsorted balances at retirement, one per trial.
    """
    if n_sims <= 0:
        raise ValueError(f"n_sims must be positive, got {n_sims}")
    if years < 0:
        raise ValueError(f"years must be non-negative, got {years}")

    shape = (n_sims, years)
    z = box_muller(source.uniform(shape), source.uniform(shape))
    growth = annual_growth_factor(expected_return + volatility * z, compounding_frequency)

    balance = np.full(n_sims, float(current_savings))
    monthly = float(monthly_contribution)
    for y in range(years):
        balance = balance * growth[:, y] + monthly * MONTHS_PER_YEAR
        monthly *= 1.0 + contribution_increase_rate
    return balance


def summarize_outcomes(outcomes: np.ndarray, target: float) -> MonteCarloResult:
    """
    Aggregate terminal balances into percentiles and summary statistics.

    Percentile p is read at index floor(p/100 * n) of the ascending
    sample; the median is the value at index n // 2.
    """
    sorted_outcomes = np.sort(np.asarray(outcomes, dtype=float))
    n = sorted_outcomes.size
    if n == 0:
        raise ValueError("outcomes cannot be empty")

    percentiles = tuple(
        PercentilePoint(p, float(sorted_outcomes[percentile_index(p, n)]))
        for p in PERCENTILE_LEVELS
    )
    mean, std = mean_and_std(sorted_outcomes)
    successes = int(np.count_nonzero(sorted_outcomes >= target))
    return MonteCarloResult(
        percentiles=percentiles,
        success_rate=successes / n * 100.0,
        median=float(sorted_outcomes[n // 2]),
        mean=mean,
        standard_deviation=std,
        n_sims=n,
        target=float(target),
        outcomes=sorted_outcomes,
    )


def run_monte_carlo(
    profile: FinancialProfile,
    adjusted_return: float,
    config: Optional[SimulationConfig] = None,
    source: Optional[UniformSource] = None,
) -> MonteCarloResult:
    """
    Run the Monte Carlo stage for a validated profile.

    Parameters
    ----------
    profile : FinancialProfile
        Validated input.
    adjusted_return : float
        Mean annual return of the random draws (risk-adjusted).
    config : SimulationConfig, optional
        Trial count and seed. Defaults to 1000 unseeded trials.
    source : UniformSource, optional
        Overrides the generator built from ``config.seed``.

    Notes
    -----
    Unseeded runs differ trial by trial but their summaries are stable.
    The standard error of the mean is about CV / sqrt(n_sims), and a
    35-year horizon at 15% volatility has a coefficient of variation
    near 0.7. Two independent runs therefore agree on mean and median
    within 5% (relative) at 10,000 trials, and within 10% at the default
    1000 trials.
    """
    config = config or SimulationConfig()
    source = source or GeneratorUniformSource(config.seed)
    outcomes = simulate_terminal_balances(
        current_savings=profile.current_savings,
        monthly_contribution=profile.monthly_contribution,
        contribution_increase_rate=profile.contribution_increase_rate,
        years=profile.years_to_retirement,
        expected_return=adjusted_return,
        volatility=profile.volatility,
        compounding_frequency=profile.compounding_frequency,
        n_sims=config.n_sims,
        source=source,
    )
    target = profile.current_savings * SAFE_WITHDRAWAL_MULTIPLE
    return summarize_outcomes(outcomes, target)
