"""
Serialization module for retireplan.

Purpose
-------
Converts a ``RetirementAnalysis`` into the JSON payload served by the
HTTP endpoint and written by the CLI, and loads/saves profiles and
results as JSON files.

Rounding follows what the dashboard displays: whole currency units for
amounts, one decimal for percentages, two decimals for ratios. Halves
round up (spreadsheet style), not to even.

Example
-------
>>> from retireplan.serialization import load_profile, build_response, save_response
>>> profile = load_profile(Path("profile.json"))
>>> analysis = calculate_retirement(profile, SimulationConfig(seed=42))
>>> response = build_response(analysis)
>>> save_response(response, Path("result.json"))
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, TYPE_CHECKING

from .config import FinancialProfile
from .exceptions import SchemaValidationError
from .types import (
    CalculationResponseDict,
    CalculationsDict,
    MonteCarloDict,
    ProjectionPointDict,
)
from .utils import round_half_up
from .validation import validate_profile

if TYPE_CHECKING:
    from .engine import RetirementAnalysis
    from .montecarlo import MonteCarloResult
    from .projection import ProjectionPoint

__all__ = [
    "analysis_to_dict",
    "build_response",
    "profile_to_dict",
    "load_profile",
    "save_profile",
    "save_response",
]


# ---------------------------------------------------------------------------
# Analysis -> payload
# ---------------------------------------------------------------------------

def _point_to_dict(point: ProjectionPoint) -> ProjectionPointDict:
    return {
        "age": point.age,
        "year": point.year,
        "balance": round_half_up(point.balance),
        "totalContributions": round_half_up(point.total_contributions),
        "growth": round_half_up(point.growth),
        "isRetired": point.is_retired,
    }


def _monte_carlo_to_dict(result: MonteCarloResult) -> MonteCarloDict:
    return {
        "percentiles": [
            {"percentile": p.label, "value": round_half_up(p.value)}
            for p in result.percentiles
        ],
        "successRate": result.success_rate,
        "median": result.median,
        "mean": result.mean,
        "standardDeviation": result.standard_deviation,
        "simulations": result.n_sims,
        "targetAmount": result.target,
    }


def analysis_to_dict(analysis: RetirementAnalysis) -> CalculationsDict:
    """
    Convert an analysis into the ``calculations`` block.

    Parameters
    ----------
    analysis : RetirementAnalysis
        Result of ``calculate_retirement``.

    Returns
    -------
    dict
        JSON-serializable, camelCase keys.
    """
    risk = analysis.risk
    income = analysis.income
    projection = analysis.projection

    calculations: CalculationsDict = {
        "totalAtRetirement": round_half_up(analysis.total_at_retirement),
        "annualWithdrawal": round_half_up(income.annual_withdrawal),
        "monthlyIncome": round_half_up(income.monthly_income),
        "annualIncome": round_half_up(income.annual_income),
        "incomeReplacementRatio": round_half_up(income.income_replacement_ratio, 1),
        "meetsIncomeGoal": income.meets_income_goal,
        "portfolioLongevity": analysis.portfolio_longevity,
        "futureValueCurrentSavings": round_half_up(projection.future_value_current_savings),
        "futureValueContributions": round_half_up(projection.future_value_contributions),
        "adjustedAnnualReturn": round_half_up(analysis.adjusted_return * 100, 1),
        "sharpeRatio": round_half_up(risk.sharpe_ratio, 2),
        "sortinoRatio": round_half_up(risk.sortino_ratio, 2),
        "portfolioBeta": round_half_up(risk.portfolio_beta, 2),
        "valueAtRisk": round_half_up(risk.value_at_risk, 1),
        "maxDrawdown": round_half_up(risk.max_drawdown, 1),
        "calmarRatio": round_half_up(risk.calmar_ratio, 2),
        "treynorRatio": round_half_up(risk.treynor_ratio, 2),
        "informationRatio": round_half_up(risk.information_ratio, 2),
        "monteCarloResults": _monte_carlo_to_dict(analysis.monte_carlo),
        "projections": [_point_to_dict(p) for p in projection.points],
        "insights": [i.message for i in analysis.insights],
        "insightDetails": [
            {"message": i.message, "severity": i.severity, "rule": i.rule}
            for i in analysis.insights
        ],
        "advancedMetrics": [
            {"name": m.name, "value": m.value, "interpretation": m.interpretation}
            for m in analysis.advanced_metrics
        ],
        "compoundingEffect": [
            {
                "frequency": p.label,
                "frequencyValue": p.frequency,
                "value": round_half_up(p.value),
                "difference": round_half_up(p.difference),
            }
            for p in analysis.compounding
        ],
        "sensitivityAnalysis": [
            {
                "returnRate": p.label,
                "variation": p.variation,
                "value": round_half_up(p.value),
                "difference": round_half_up(p.difference),
            }
            for p in analysis.sensitivity
        ],
    }
    depleted = projection.depleted_at_age
    if depleted is not None:
        calculations["depletedAtAge"] = depleted
    return calculations


def build_response(
    analysis: RetirementAnalysis,
    timestamp: Optional[datetime] = None,
) -> CalculationResponseDict:
    """Wrap the calculations in the success envelope with an ISO-8601 timestamp."""
    timestamp = timestamp or datetime.now(timezone.utc)
    return {
        "success": True,
        "calculations": analysis_to_dict(analysis),
        "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
    }


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

def profile_to_dict(profile: FinancialProfile) -> Dict[str, Any]:
    """Wire representation (camelCase) of a profile."""
    return profile.model_dump(by_alias=True)


def load_profile(path: Path) -> FinancialProfile:
    """
    Load and validate a profile from a JSON file.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    SchemaValidationError
        If the file is not valid JSON or the profile is invalid.
    CrossFieldConstraintError
        If the ages are inconsistent.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Profile file not found: {path}")
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SchemaValidationError(
            "Invalid request data",
            details=[{"field": "__root__", "message": f"Invalid JSON: {e}", "type": "json_invalid"}],
        ) from e
    return validate_profile(data)


def save_profile(profile: FinancialProfile, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(profile_to_dict(profile), f, indent=2)


def save_response(response: CalculationResponseDict, path: Path) -> None:
    """Write a response payload as indented JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(response, f, indent=2)
