"""
Unit tests for projection.py module.

Tests the risk adjustment, the closed-form future values, the
year-by-year projection, retirement income and portfolio longevity.
"""

import pytest

from retireplan.projection import (
    adjust_return_for_risk,
    future_value_contributions,
    future_value_current_savings,
    portfolio_longevity,
    project_balances,
    retirement_income,
    run_projection,
)
from retireplan.validation import validate_profile


# ============================================================================
# RISK ADJUSTMENT
# ============================================================================

class TestAdjustReturnForRisk:
    """Test adjust_return_for_risk()."""

    @pytest.mark.parametrize("tier,expected", [
        (1, 0.055),
        (2, 0.07),
        (3, 0.08),
    ])
    def test_tiers(self, tier, expected):
        assert adjust_return_for_risk(0.07, tier) == pytest.approx(expected)

    def test_floor(self):
        assert adjust_return_for_risk(0.0, 1) == 0.01
        assert adjust_return_for_risk(-0.1, 3) == 0.01

    def test_unknown_tier_no_offset(self):
        assert adjust_return_for_risk(0.07, 9) == pytest.approx(0.07)


# ============================================================================
# CLOSED FORMS
# ============================================================================

class TestClosedForms:
    """Test the future value closed forms."""

    def test_savings_annual(self):
        assert future_value_current_savings(1000, 0.10, 1, 2) == pytest.approx(1210.0)

    def test_savings_zero_years(self):
        assert future_value_current_savings(1000, 0.10, 12, 0) == pytest.approx(1000.0)

    def test_savings_negative_rejected(self):
        with pytest.raises(ValueError, match="savings must be non-negative"):
            future_value_current_savings(-1, 0.05, 1, 10)

    def test_contributions_zero_rate(self):
        assert future_value_contributions(100, 0.0, 0.0, 1, 10) == pytest.approx(12_000.0)

    def test_contributions_growing(self):
        # 1,200 then 1,320, no investment growth
        assert future_value_contributions(100, 0.10, 0.0, 1, 2) == pytest.approx(2520.0)

    def test_contributions_end_of_year(self):
        # first deposit compounds once, last deposit not at all
        assert future_value_contributions(100, 0.0, 0.10, 1, 2) == pytest.approx(1200 * 1.1 + 1200)

    def test_contributions_zero_years(self):
        assert future_value_contributions(1000, 0.02, 0.07, 12, 0) == 0.0


# ============================================================================
# YEARLY PROJECTION
# ============================================================================

class TestProjectBalances:
    """Test project_balances()."""

    def test_frame_shape(self, profile):
        frame = project_balances(profile, 0.07)
        assert frame.index.name == "year"
        assert list(frame.columns) == [
            "age", "balance", "contribution", "withdrawal",
            "total_contributions", "is_retired",
        ]
        # today plus one row per year to life expectancy
        assert len(frame) == 61
        assert frame["age"].iloc[0] == 30
        assert frame["age"].iloc[-1] == 90

    def test_initial_row(self, profile):
        frame = project_balances(profile, 0.07)
        first = frame.iloc[0]
        assert first["balance"] == pytest.approx(50_000)
        assert first["total_contributions"] == pytest.approx(50_000)
        assert not first["is_retired"]

    def test_accumulation_then_decumulation(self, profile):
        frame = project_balances(profile, 0.07)
        accumulation = frame.loc[1:35]
        decumulation = frame.loc[36:]
        assert (accumulation["contribution"] == 12_000).all()
        assert (accumulation["withdrawal"] == 0).all()
        assert (decumulation["contribution"] == 0).all()
        # (85,000 * 0.8) - 24,000 in the first retirement year
        assert decumulation["withdrawal"].iloc[0] == pytest.approx(44_000)
        assert decumulation["withdrawal"].iloc[1] == pytest.approx(44_000 * 1.025)

    def test_total_contributions(self, profile):
        frame = project_balances(profile, 0.07)
        assert frame.loc[35, "total_contributions"] == pytest.approx(50_000 + 35 * 12_000)

    def test_is_retired_flag(self, profile):
        frame = project_balances(profile, 0.07)
        assert not frame.loc[34, "is_retired"]
        assert frame.loc[35, "is_retired"]
        assert frame.loc[35, "age"] == 65

    def test_stops_after_depletion(self, base_payload):
        profile = validate_profile({
            **base_payload,
            "currentSavings": 10_000,
            "monthlyContribution": 100,
            "currentAnnualIncome": 200_000,
        })
        frame = project_balances(profile, 0.07)
        assert frame["balance"].iloc[-1] <= 0
        assert (frame["balance"].iloc[:-1] > 0).all()
        assert frame["age"].iloc[-1] < 90

    def test_empty_account_reaches_retirement(self, empty_profile):
        frame = project_balances(empty_profile, 0.07)
        assert 65 in frame["age"].values
        assert (frame.loc[:35, "balance"] == 0).all()


class TestRunProjection:
    """Test run_projection()."""

    def test_total_matches_closed_form(self, profile):
        result = run_projection(profile)
        savings = 50_000 * (1 + 0.07 / 12) ** (12 * 35)
        growth = (1 + 0.07 / 12) ** 12
        contributions = 12_000 * (growth ** 35 - 1) / (growth - 1)
        assert result.future_value_current_savings == pytest.approx(savings)
        assert result.future_value_contributions == pytest.approx(contributions)
        assert result.total_at_retirement == pytest.approx(2_319_300, rel=1e-3)

    def test_series_reconciles_with_closed_form(self, profile):
        result = run_projection(profile)
        at_retirement = result.point_at(65)
        assert at_retirement.balance == pytest.approx(result.total_at_retirement)

    def test_reconciles_with_growing_contributions(self, base_payload):
        profile = validate_profile({**base_payload, "contributionIncreaseRate": 0.03})
        result = run_projection(profile)
        assert result.point_at(65).balance == pytest.approx(result.total_at_retirement)

    def test_adjusted_return(self, base_payload):
        profile = validate_profile({**base_payload, "riskTolerance": 1})
        assert run_projection(profile).adjusted_return == pytest.approx(0.055)

    def test_sampled_points(self, profile):
        result = run_projection(profile)
        assert [p.year for p in result.points] == list(range(0, 61, 5))
        assert [p.age for p in result.points] == list(range(30, 91, 5))

    def test_retirement_age_always_sampled(self, base_payload):
        profile = validate_profile({**base_payload, "currentAge": 32, "lifeExpectancy": 88})
        ages = [p.age for p in run_projection(profile).points]
        assert 65 in ages
        assert ages[-1] == 88

    def test_point_fields(self, profile):
        result = run_projection(profile)
        for point in result.points:
            assert point.balance >= 0
            assert point.growth == pytest.approx(max(0.0, point.balance - point.total_contributions))
            assert point.is_retired == (point.age >= 65)

    def test_point_at_missing(self, profile):
        with pytest.raises(KeyError):
            run_projection(profile).point_at(31)

    def test_not_depleted(self, profile):
        assert run_projection(profile).depleted_at_age is None

    def test_depleted(self, empty_profile):
        result = run_projection(empty_profile)
        assert result.total_at_retirement == 0
        assert result.depleted_at_age == 66
        last = result.points[-1]
        assert last.age == 66
        assert last.balance == 0


# ============================================================================
# RETIREMENT INCOME
# ============================================================================

class TestRetirementIncome:
    """Test retirement_income()."""

    @pytest.fixture
    def income_profile(self, base_payload):
        return validate_profile({
            **base_payload,
            "withdrawalRate": 0.04,
            "taxRate": 0.2,
            "socialSecurityIncome": 12_000,
            "pensionIncome": 6_000,
            "currentAnnualIncome": 100_000,
            "inflationRate": 0.0,
            "incomeReplacementGoal": 0.8,
        })

    def test_figures(self, income_profile):
        income = retirement_income(income_profile, 1_000_000)
        assert income.annual_withdrawal == pytest.approx(40_000)
        assert income.annual_income == pytest.approx(50_000)
        assert income.monthly_income == pytest.approx(50_000 / 12)
        assert income.income_replacement_ratio == pytest.approx(50.0)
        assert not income.meets_income_goal

    def test_meets_goal(self, income_profile):
        income = retirement_income(income_profile, 2_000_000)
        assert income.income_replacement_ratio == pytest.approx(82.0)
        assert income.meets_income_goal

    def test_inflation_adjusts_current_income(self, profile):
        income = retirement_income(profile, 1_000_000)
        assert income.inflation_adjusted_current_income == pytest.approx(85_000 * 1.025 ** 35)

    def test_no_current_income(self, base_payload):
        profile = validate_profile({**base_payload, "currentAnnualIncome": 0})
        income = retirement_income(profile, 1_000_000)
        assert income.income_replacement_ratio == 0.0
        assert income.meets_income_goal


# ============================================================================
# PORTFOLIO LONGEVITY
# ============================================================================

class TestPortfolioLongevity:
    """Test portfolio_longevity()."""

    def test_empty_portfolio(self):
        assert portfolio_longevity(0, 1000, 0.05, 0.02) == 0

    def test_never_depleted_capped(self):
        assert portfolio_longevity(1_000_000, 0, 0.05, 0.02) == 50
        assert portfolio_longevity(1_000_000, 0, 0.05, 0.02, max_years=10) == 10

    def test_depletion_year_counted(self):
        assert portfolio_longevity(100, 50, 0.0, 0.0) == 2
        assert portfolio_longevity(100, 40, 0.0, 0.0) == 3

    def test_withdrawal_inflates(self):
        # 100 - 40 = 60, 60 - 60 = 0
        assert portfolio_longevity(100, 40, 0.0, 0.5) == 2

    def test_healthcare_costs(self):
        assert portfolio_longevity(100, 40, 0.0, 0.0, healthcare_costs=10) == 2
        # 100 - 30 = 70, 70 - 40 = 30, 30 - 60 < 0
        assert portfolio_longevity(100, 20, 0.0, 0.0, 10, 1.0) == 3
