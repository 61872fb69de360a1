"""
Rule-based guidance messages for retireplan.

Purpose
-------
Turns the computed metrics of a calculation into short, human-readable
guidance. Rules are data: an ordered tuple of ``InsightRule`` objects,
each a predicate over ``InsightMetrics`` plus a message template. Every
rule whose predicate holds contributes one ``Insight``, in rule order, so
identical input always yields the identical list.

Rule order
----------
1. income goal met / income shortfall
2. portfolio longevity met / short
3. Sharpe ratio excellent / good / poor
4. high value at risk
5. savings rate high / low
6. retirement close / far
7. multi-millionaire / millionaire

Example
-------
>>> metrics = InsightMetrics(total_at_retirement=2_300_000, ...)
>>> [i.message for i in generate_insights(metrics)]
["You're on track to meet your income replacement goal of 80%!", ...]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Literal, Sequence, Tuple

from .constants import (
    LONGEVITY_TARGET_YEARS,
    MILLIONAIRE_THRESHOLD,
    MONTHS_PER_YEAR,
    MULTI_MILLIONAIRE_THRESHOLD,
)
from .utils import round_half_up

__all__ = [
    "Severity",
    "Insight",
    "InsightMetrics",
    "InsightRule",
    "DEFAULT_RULES",
    "generate_insights",
]

Severity = Literal["success", "info", "warning"]


@dataclass(frozen=True)
class Insight:
    message: str
    severity: Severity
    rule: str


@dataclass(frozen=True)
class InsightMetrics:
    """
    Everything the rules can look at.

    Attributes
    ----------
    income_replacement_ratio, income_replacement_goal : float
        Both in percent (80.0 means 80%).
    meets_income_goal : bool
        As reported by the retirement income calculation.
    portfolio_longevity : int
        Years the portfolio lasts, capped at 50.
    value_at_risk : float
        Parametric 95% VaR, in percent.
    """

    total_at_retirement: float
    income_replacement_ratio: float
    income_replacement_goal: float
    meets_income_goal: bool
    portfolio_longevity: int
    sharpe_ratio: float
    value_at_risk: float
    years_to_retirement: int
    monthly_contribution: float
    current_savings: float

    @property
    def income_shortfall(self) -> float:
        return self.income_replacement_goal - self.income_replacement_ratio

    @property
    def suggested_additional_contribution(self) -> float:
        return round_half_up(self.income_shortfall * self.monthly_contribution / 10)

    @property
    def savings_rate(self) -> float:
        """Yearly contributions as a percentage of current savings.

        Falls back to a denominator of 1 when there are no savings yet.
        """
        base = self.current_savings if self.current_savings > 0 else 1.0
        return self.monthly_contribution * MONTHS_PER_YEAR / base * 100.0


@dataclass(frozen=True)
class InsightRule:
    """
    One guidance rule.

    ``template`` is formatted with ``str.format(m=metrics)``, so it may
    reference any attribute or property of ``InsightMetrics``.
    """

    name: str
    severity: Severity
    predicate: Callable[[InsightMetrics], bool]
    template: str

    def evaluate(self, metrics: InsightMetrics) -> Insight | None:
        if not self.predicate(metrics):
            return None
        return Insight(self.template.format(m=metrics), self.severity, self.name)


DEFAULT_RULES: Tuple[InsightRule, ...] = (
    InsightRule(
        "income_goal_met", "success",
        lambda m: m.meets_income_goal,
        "You're on track to meet your income replacement goal of {m.income_replacement_goal:g}%!",
    ),
    InsightRule(
        "income_shortfall", "warning",
        lambda m: not m.meets_income_goal,
        "You're {m.income_shortfall:.1f}% short of your income goal. "
        "Consider increasing monthly contributions by ${m.suggested_additional_contribution:,.0f}.",
    ),
    InsightRule(
        "longevity_met", "success",
        lambda m: m.portfolio_longevity >= LONGEVITY_TARGET_YEARS,
        "Your portfolio should last through a typical retirement.",
    ),
    InsightRule(
        "longevity_short", "warning",
        lambda m: m.portfolio_longevity < LONGEVITY_TARGET_YEARS,
        "Your portfolio may only last {m.portfolio_longevity} years. "
        "Consider reducing withdrawal rate or increasing savings.",
    ),
    InsightRule(
        "sharpe_excellent", "success",
        lambda m: m.sharpe_ratio > 1,
        "Excellent risk-adjusted returns expected based on your portfolio.",
    ),
    InsightRule(
        "sharpe_good", "info",
        lambda m: 0.5 < m.sharpe_ratio <= 1,
        "Good risk-adjusted returns expected from your investment strategy.",
    ),
    InsightRule(
        "sharpe_poor", "warning",
        lambda m: m.sharpe_ratio <= 0.5,
        "Consider adjusting your risk/return profile for better outcomes.",
    ),
    InsightRule(
        "high_value_at_risk", "warning",
        lambda m: m.value_at_risk < -20,
        "High portfolio volatility detected - consider diversification to reduce risk.",
    ),
    InsightRule(
        "savings_rate_high", "success",
        lambda m: m.savings_rate > 20,
        "Excellent savings rate! You're aggressively building wealth.",
    ),
    InsightRule(
        "savings_rate_low", "info",
        lambda m: m.savings_rate < 10,
        "Consider increasing your savings rate to accelerate retirement readiness.",
    ),
    InsightRule(
        "retirement_near", "info",
        lambda m: m.years_to_retirement <= 10,
        "With retirement approaching soon, consider shifting to more conservative investments.",
    ),
    InsightRule(
        "retirement_far", "info",
        lambda m: m.years_to_retirement >= 30,
        "You have time on your side - consider maximizing growth-oriented investments.",
    ),
    InsightRule(
        "multi_millionaire", "success",
        lambda m: m.total_at_retirement > MULTI_MILLIONAIRE_THRESHOLD,
        "You're projected to be a multi-millionaire in retirement!",
    ),
    InsightRule(
        "millionaire", "success",
        lambda m: MILLIONAIRE_THRESHOLD < m.total_at_retirement <= MULTI_MILLIONAIRE_THRESHOLD,
        "You're on track to join the millionaire's club by retirement!",
    ),
)


def generate_insights(
    metrics: InsightMetrics,
    rules: Sequence[InsightRule] = DEFAULT_RULES,
) -> List[Insight]:
    """Evaluate *rules* in order and collect the insights that apply."""
    insights = []
    for rule in rules:
        insight = rule.evaluate(metrics)
        if insight is not None:
            insights.append(insight)
    return insights
