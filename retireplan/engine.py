"""
Calculation pipeline for retireplan.

Connects validation, the deterministic projection, the risk metrics, the
Monte Carlo simulation, the sensitivity/compounding analyses and the
insight rules into one call.

Pipeline
--------
validate_profile
  -> run_projection -> retirement_income, portfolio_longevity
  -> compute_risk_metrics | run_monte_carlo | sensitivity_analysis, compounding_effect
  -> generate_insights
  -> RetirementAnalysis

Failure semantics
-----------------
- Validation errors are raised before any numeric stage runs.
- Anything that goes wrong inside the numeric stages (including NumPy
  floating point errors and non-finite results) surfaces as
  ``ComputationError`` with the original exception chained.

Typical usage
-------------
>>> from retireplan.engine import calculate_retirement
>>> from retireplan.config import SimulationConfig
>>> analysis = calculate_retirement(payload, SimulationConfig(seed=42))
>>> analysis.total_at_retirement
>>> analysis.monte_carlo.success_rate
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, List, Optional

import numpy as np
import structlog

from .config import FinancialProfile, SimulationConfig
from .exceptions import ComputationError, RetirePlanError
from .insights import Insight, InsightMetrics, generate_insights
from .montecarlo import MonteCarloResult, UniformSource, run_monte_carlo
from .projection import (
    ProjectionResult,
    RetirementIncome,
    portfolio_longevity,
    retirement_income,
    run_projection,
)
from .risk import AdvancedMetric, RiskMetrics, advanced_metrics, compute_risk_metrics
from .sensitivity import (
    CompoundingPoint,
    SensitivityPoint,
    compounding_effect,
    sensitivity_analysis,
)
from .utils import check_finite
from .validation import validate_profile

__all__ = [
    "RetirementAnalysis",
    "analyze_profile",
    "calculate_retirement",
]

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RetirementAnalysis:
    """Everything computed for one profile."""

    profile: FinancialProfile
    projection: ProjectionResult
    income: RetirementIncome
    portfolio_longevity: int
    risk: RiskMetrics
    monte_carlo: MonteCarloResult
    sensitivity: List[SensitivityPoint]
    compounding: List[CompoundingPoint]
    insights: List[Insight]
    advanced_metrics: List[AdvancedMetric]

    @property
    def total_at_retirement(self) -> float:
        return self.projection.total_at_retirement

    @property
    def adjusted_return(self) -> float:
        return self.projection.adjusted_return


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def analyze_profile(
    profile: FinancialProfile,
    config: Optional[SimulationConfig] = None,
    source: Optional[UniformSource] = None,
) -> RetirementAnalysis:
    """
    Run every numeric stage for an already validated profile.

    Does not guard against unexpected errors; ``calculate_retirement`` is
    the boundary that wraps them.
    """
    projection = run_projection(profile)
    adjusted = projection.adjusted_return
    total = projection.total_at_retirement

    income = retirement_income(profile, total)
    longevity = portfolio_longevity(
        total,
        income.annual_withdrawal,
        adjusted,
        profile.inflation_rate,
        profile.healthcare_costs,
        profile.healthcare_inflation,
    )

    risk = compute_risk_metrics(
        adjusted,
        profile.risk_free_rate,
        profile.volatility,
        profile.down_side_deviation,
        profile.inflation_rate,
    )
    monte_carlo = run_monte_carlo(profile, adjusted, config, source)
    sensitivity = sensitivity_analysis(profile, adjusted)
    compounding = compounding_effect(profile)

    insights = generate_insights(InsightMetrics(
        total_at_retirement=total,
        income_replacement_ratio=income.income_replacement_ratio,
        income_replacement_goal=profile.income_replacement_goal * 100.0,
        meets_income_goal=income.meets_income_goal,
        portfolio_longevity=longevity,
        sharpe_ratio=risk.sharpe_ratio,
        value_at_risk=risk.value_at_risk,
        years_to_retirement=profile.years_to_retirement,
        monthly_contribution=profile.monthly_contribution,
        current_savings=profile.current_savings,
    ))

    return RetirementAnalysis(
        profile=profile,
        projection=projection,
        income=income,
        portfolio_longevity=longevity,
        risk=risk,
        monte_carlo=monte_carlo,
        sensitivity=sensitivity,
        compounding=compounding,
        insights=insights,
        advanced_metrics=advanced_metrics(risk, monte_carlo.success_rate),
    )


def _check_result(analysis: RetirementAnalysis) -> None:
    check_finite("totalAtRetirement", analysis.total_at_retirement)
    check_finite("projection", analysis.projection.yearly["balance"].to_numpy())
    check_finite("incomeReplacementRatio", analysis.income.income_replacement_ratio)
    check_finite("riskMetrics", np.array(list(analysis.risk.as_dict().values())))
    check_finite("monteCarloResults", analysis.monte_carlo.outcomes)
    check_finite("sensitivityAnalysis", np.array([p.value for p in analysis.sensitivity]))
    check_finite("compoundingEffect", np.array([p.value for p in analysis.compounding]))


def calculate_retirement(
    raw: Any,
    config: Optional[SimulationConfig] = None,
    source: Optional[UniformSource] = None,
) -> RetirementAnalysis:
    """
    Validate *raw* and run the full calculation.

    Parameters
    ----------
    raw : Mapping or FinancialProfile
        Request payload (camelCase keys) or a profile.
    config : SimulationConfig, optional
        Monte Carlo trial count and seed.
    source : UniformSource, optional
        Uniform draws for the Monte Carlo stage (tests).

    Raises
    ------
    SchemaValidationError, CrossFieldConstraintError
        Invalid input; no numeric stage has run.
    ComputationError
        Unexpected failure while computing.
    """
    profile = validate_profile(raw)
    config = config or SimulationConfig()

    started = time.perf_counter()
    try:
        with np.errstate(over="raise", invalid="raise", divide="raise"):
            analysis = analyze_profile(profile, config, source)
            _check_result(analysis)
    except RetirePlanError:
        raise
    except Exception as e:
        logger.exception("calculation.failed", error=str(e))
        raise ComputationError(
            "Failed to calculate retirement projections", details=str(e)
        ) from e

    logger.info(
        "calculation.completed",
        years_to_retirement=profile.years_to_retirement,
        n_sims=analysis.monte_carlo.n_sims,
        total_at_retirement=round(analysis.total_at_retirement, 2),
        success_rate=analysis.monte_carlo.success_rate,
        elapsed_ms=round((time.perf_counter() - started) * 1000.0, 1),
    )
    return analysis
