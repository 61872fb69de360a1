"""
Type definitions for retireplan.

Purpose
-------
TypedDict definitions for the JSON payload produced by
``retireplan.serialization``. Keys are camelCase because the payload is
served as-is by the HTTP endpoint.

Type Definitions
----------------
ProjectionPointDict
    One sampled projection point: {"age", "year", "balance", ...}

PercentileDict
    One Monte Carlo percentile: {"percentile": "5th", "value"}

MonteCarloDict
    Monte Carlo block: {"percentiles", "successRate", "median", ...}

SensitivityPointDict / CompoundingPointDict
    Rows of the two comparison tables.

InsightDict / AdvancedMetricDict
    Guidance message with severity; interpreted metric row.

CalculationsDict
    The whole ``calculations`` block of a successful response.
"""

from typing import List

from typing_extensions import NotRequired, TypedDict

__all__ = [
    "ProjectionPointDict",
    "PercentileDict",
    "MonteCarloDict",
    "SensitivityPointDict",
    "CompoundingPointDict",
    "InsightDict",
    "AdvancedMetricDict",
    "CalculationsDict",
    "CalculationResponseDict",
]


class ProjectionPointDict(TypedDict):
    """
    One sampled point of the deterministic projection.

    Amounts are rounded to whole currency units; ``balance`` is floored
    at 0 and ``growth`` is ``max(0, balance - totalContributions)``.
    """

    age: int
    year: int
    balance: float
    totalContributions: float
    growth: float
    isRetired: bool


class PercentileDict(TypedDict):
    percentile: str
    value: float


class MonteCarloDict(TypedDict):
    """
    Monte Carlo block.

    Attributes
    ----------
    percentiles : List[PercentileDict]
        "5th" through "95th", non-decreasing values.
    successRate : float
        Percentage (0-100) of trials reaching the target.
    median, mean, standardDeviation : float
        Statistics of the terminal balances.
    simulations : int
        Number of trials.
    targetAmount : float
        Success threshold (25x current savings).
    """

    percentiles: List[PercentileDict]
    successRate: float
    median: float
    mean: float
    standardDeviation: float
    simulations: int
    targetAmount: float


class SensitivityPointDict(TypedDict):
    returnRate: str
    variation: float
    value: float
    difference: float


class CompoundingPointDict(TypedDict):
    frequency: str
    frequencyValue: int
    value: float
    difference: float


class InsightDict(TypedDict):
    message: str
    severity: str
    rule: str


class AdvancedMetricDict(TypedDict):
    name: str
    value: str
    interpretation: str


class CalculationsDict(TypedDict):
    """The ``calculations`` block of a successful response."""

    totalAtRetirement: float
    annualWithdrawal: float
    monthlyIncome: float
    annualIncome: float
    incomeReplacementRatio: float
    meetsIncomeGoal: bool
    portfolioLongevity: int
    futureValueCurrentSavings: float
    futureValueContributions: float
    adjustedAnnualReturn: float
    sharpeRatio: float
    sortinoRatio: float
    portfolioBeta: float
    valueAtRisk: float
    maxDrawdown: float
    calmarRatio: float
    treynorRatio: float
    informationRatio: float
    monteCarloResults: MonteCarloDict
    projections: List[ProjectionPointDict]
    insights: List[str]
    insightDetails: List[InsightDict]
    advancedMetrics: List[AdvancedMetricDict]
    compoundingEffect: List[CompoundingPointDict]
    sensitivityAnalysis: List[SensitivityPointDict]
    depletedAtAge: NotRequired[int]


class CalculationResponseDict(TypedDict):
    success: bool
    calculations: CalculationsDict
    timestamp: str
