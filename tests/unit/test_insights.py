"""
Unit tests for insights.py module.

Rules are tested one by one through a baseline metrics object that
triggers as few of them as possible.
"""

from dataclasses import replace

import pytest

from retireplan.insights import (
    DEFAULT_RULES,
    InsightMetrics,
    InsightRule,
    generate_insights,
)


@pytest.fixture
def metrics() -> InsightMetrics:
    """Goal met, long-lasting portfolio, good Sharpe, moderate savings."""
    return InsightMetrics(
        total_at_retirement=500_000,
        income_replacement_ratio=85.0,
        income_replacement_goal=80.0,
        meets_income_goal=True,
        portfolio_longevity=50,
        sharpe_ratio=0.8,
        value_at_risk=-10.0,
        years_to_retirement=20,
        monthly_contribution=1_000,
        current_savings=80_000,
    )


def _rules(m):
    return [i.rule for i in generate_insights(m)]


class TestInsightMetrics:
    """Test derived metrics."""

    def test_savings_rate(self, metrics):
        assert metrics.savings_rate == pytest.approx(15.0)

    def test_savings_rate_without_savings(self, metrics):
        m = replace(metrics, current_savings=0)
        assert m.savings_rate == pytest.approx(1_200_000.0)

    def test_shortfall(self, metrics):
        m = replace(metrics, income_replacement_ratio=47.5)
        assert m.income_shortfall == pytest.approx(32.5)
        assert m.suggested_additional_contribution == 3250


class TestGenerateInsights:
    """Test generate_insights() and DEFAULT_RULES."""

    def test_baseline(self, metrics):
        assert _rules(metrics) == ["income_goal_met", "longevity_met", "sharpe_good"]

    def test_messages(self, metrics):
        messages = [i.message for i in generate_insights(metrics)]
        assert messages == [
            "You're on track to meet your income replacement goal of 80%!",
            "Your portfolio should last through a typical retirement.",
            "Good risk-adjusted returns expected from your investment strategy.",
        ]

    def test_income_shortfall(self, metrics):
        m = replace(metrics, income_replacement_ratio=47.5, meets_income_goal=False)
        insight = generate_insights(m)[0]
        assert insight.rule == "income_shortfall"
        assert insight.severity == "warning"
        assert insight.message == (
            "You're 32.5% short of your income goal. "
            "Consider increasing monthly contributions by $3,250."
        )

    def test_longevity_short(self, metrics):
        m = replace(metrics, portfolio_longevity=22)
        insight = generate_insights(m)[1]
        assert insight.rule == "longevity_short"
        assert insight.message == (
            "Your portfolio may only last 22 years. "
            "Consider reducing withdrawal rate or increasing savings."
        )

    def test_longevity_boundary(self, metrics):
        assert "longevity_met" in _rules(replace(metrics, portfolio_longevity=30))
        assert "longevity_short" in _rules(replace(metrics, portfolio_longevity=29))

    @pytest.mark.parametrize("sharpe,rule", [
        (1.2, "sharpe_excellent"),
        (1.0, "sharpe_good"),
        (0.51, "sharpe_good"),
        (0.5, "sharpe_poor"),
        (-0.3, "sharpe_poor"),
    ])
    def test_sharpe_tiers(self, metrics, sharpe, rule):
        rules = _rules(replace(metrics, sharpe_ratio=sharpe))
        assert rules[2] == rule
        assert sum(r.startswith("sharpe_") for r in rules) == 1

    def test_high_value_at_risk(self, metrics):
        assert "high_value_at_risk" in _rules(replace(metrics, value_at_risk=-25.0))
        assert "high_value_at_risk" not in _rules(replace(metrics, value_at_risk=-20.0))

    def test_savings_rate_tiers(self, metrics):
        assert "savings_rate_high" in _rules(replace(metrics, current_savings=50_000))
        assert "savings_rate_low" in _rules(replace(metrics, current_savings=200_000))

    def test_retirement_horizon(self, metrics):
        assert "retirement_near" in _rules(replace(metrics, years_to_retirement=10))
        assert "retirement_far" in _rules(replace(metrics, years_to_retirement=30))

    @pytest.mark.parametrize("total,rule", [
        (2_500_000, "multi_millionaire"),
        (2_000_000, "millionaire"),
        (1_000_001, "millionaire"),
    ])
    def test_milestones(self, metrics, total, rule):
        rules = _rules(replace(metrics, total_at_retirement=total))
        assert rules[-1] == rule
        other = {"multi_millionaire", "millionaire"} - {rule}
        assert not other & set(rules)

    def test_no_milestone_at_one_million(self, metrics):
        rules = _rules(replace(metrics, total_at_retirement=1_000_000))
        assert "millionaire" not in rules

    def test_rule_order_is_fixed(self):
        assert [r.name for r in DEFAULT_RULES] == [
            "income_goal_met",
            "income_shortfall",
            "longevity_met",
            "longevity_short",
            "sharpe_excellent",
            "sharpe_good",
            "sharpe_poor",
            "high_value_at_risk",
            "savings_rate_high",
            "savings_rate_low",
            "retirement_near",
            "retirement_far",
            "multi_millionaire",
            "millionaire",
        ]

    def test_deterministic(self, metrics):
        assert generate_insights(metrics) == generate_insights(metrics)

    def test_custom_rules(self, metrics):
        rule = InsightRule(
            "always", "info", lambda m: True, "Saving {m.monthly_contribution:,.0f} a month."
        )
        insights = generate_insights(metrics, rules=[rule])
        assert [i.message for i in insights] == ["Saving 1,000 a month."]
