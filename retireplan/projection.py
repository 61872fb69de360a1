"""
Deterministic wealth projection for retireplan.

Mathematical Model
------------------
Let r be the risk-adjusted annual return, f the compounding frequency and
n = retirement_age - current_age. During accumulation, for each year y:

    B_{y+1} = B_y * (1 + r/f)^f + 12 * m_y
    m_{y+1} = m_y * (1 + g)

with B_0 = current savings and g the contribution increase rate. The
balance at retirement has the closed form

    B_n = S * (1 + r/f)^(f*n) + sum_{y=0}^{n-1} 12 * m_y * (1 + r/f)^(f*(n-1-y))

i.e. contributions land at the end of their year and compound for the
remaining years. During decumulation, each year k since retirement:

    B <- B * (1 + r) - max(0, I * q * (1+i)^k - (SS + P) * (1+i)^k)

where I is current income, q the replacement goal, i inflation and
SS + P the guaranteed income.

Key components
--------------
- adjust_return_for_risk: tier offset on the expected return
- future_value_current_savings / future_value_contributions: closed forms
- project_balances: full year-by-year frame (pandas)
- run_projection: closed forms + sampled points -> ProjectionResult
- retirement_income: withdrawal, net income and replacement ratio
- portfolio_longevity: years until an inflating withdrawal depletes the pot

Example
-------
>>> from retireplan.validation import validate_profile
>>> profile = validate_profile(payload)
>>> projection = run_projection(profile)
>>> at_retirement = projection.point_at(profile.retirement_age)
>>> math.isclose(at_retirement.balance, projection.total_at_retirement)
True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

import pandas as pd

from .config import FinancialProfile
from .constants import (
    MAX_LONGEVITY_YEARS,
    MIN_ADJUSTED_RETURN,
    MONTHS_PER_YEAR,
    PROJECTION_SAMPLE_INTERVAL,
    RISK_TOLERANCE_ADJUSTMENTS,
)
from .utils import annual_growth_factor, check_non_negative, compound_factor

__all__ = [
    "ProjectionPoint",
    "ProjectionResult",
    "RetirementIncome",
    "adjust_return_for_risk",
    "future_value_current_savings",
    "future_value_contributions",
    "project_balances",
    "run_projection",
    "retirement_income",
    "portfolio_longevity",
]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProjectionPoint:
    age: int
    year: int
    balance: float
    total_contributions: float
    growth: float
    is_retired: bool


@dataclass(frozen=True)
class ProjectionResult:
    """
    Output of the deterministic projection.

    Attributes
    ----------
    adjusted_return : float
        Risk-adjusted annual return used throughout.
    future_value_current_savings : float
        Current savings compounded to retirement.
    future_value_contributions : float
        Contribution stream compounded to retirement.
    points : tuple of ProjectionPoint
        Sampled series: every 5 years, the retirement age, the last year.
    yearly : pd.DataFrame
        One row per simulated year (index = years from today).
    """

    adjusted_return: float
    future_value_current_savings: float
    future_value_contributions: float
    points: Tuple[ProjectionPoint, ...]
    yearly: pd.DataFrame = field(repr=False, compare=False)

    @property
    def total_at_retirement(self) -> float:
        return self.future_value_current_savings + self.future_value_contributions

    @property
    def depleted_at_age(self) -> Optional[int]:
        """First retired age with a non-positive balance, or None."""
        decumulation = self.yearly[self.yearly["is_retired"]].iloc[1:]
        depleted = decumulation.loc[decumulation["balance"] <= 0, "age"]
        return int(depleted.iloc[0]) if not depleted.empty else None

    def point_at(self, age: int) -> ProjectionPoint:
        for point in self.points:
            if point.age == age:
                return point
        raise KeyError(f"no projection point sampled at age {age}")


@dataclass(frozen=True)
class RetirementIncome:
    annual_withdrawal: float
    monthly_income: float
    annual_income: float
    inflation_adjusted_current_income: float
    income_replacement_ratio: float
    meets_income_goal: bool


# ---------------------------------------------------------------------------
# Closed forms
# ---------------------------------------------------------------------------

def adjust_return_for_risk(expected_return: float, risk_tolerance: int) -> float:
    """
    Apply the risk tier offset to the expected return.

    Tier 1 subtracts 1.5%, tier 2 leaves it unchanged, tier 3 adds 1%.
    Unknown tiers get no offset. The result is floored at 1%.

    Examples
    --------
    >>> adjust_return_for_risk(0.07, 1)
    0.055
    >>> adjust_return_for_risk(0.0, 1)
    0.01
    """
    offset = RISK_TOLERANCE_ADJUSTMENTS.get(risk_tolerance, 0.0)
    return max(MIN_ADJUSTED_RETURN, expected_return + offset)


def future_value_current_savings(
    savings: float,
    rate: float,
    frequency: int,
    years: int,
) -> float:
    """Savings compounded at rate/frequency for frequency * years periods."""
    check_non_negative("savings", savings)
    return savings * compound_factor(rate, frequency, years)


def future_value_contributions(
    monthly_contribution: float,
    increase_rate: float,
    rate: float,
    frequency: int,
    years: int,
) -> float:
    """
    Future value at retirement of a growing yearly contribution stream.

    The contribution of year y (12 * m_y, with m_y growing by
    *increase_rate* each year) is deposited at the end of that year and
    compounds for the remaining ``years - 1 - y`` years.
    """
    check_non_negative("monthly_contribution", monthly_contribution)
    total = 0.0
    monthly = monthly_contribution
    for y in range(years):
        total += monthly * MONTHS_PER_YEAR * compound_factor(rate, frequency, years - 1 - y)
        monthly *= 1.0 + increase_rate
    return total


# ---------------------------------------------------------------------------
# Year-by-year projection
# ---------------------------------------------------------------------------

def project_balances(profile: FinancialProfile, adjusted_return: float) -> pd.DataFrame:
    """
    Simulate the balance year by year from today to life expectancy.

    Row ``year`` holds the state at ``age = current_age + year``, after
    the year that ends at that age has been applied. Years ending at or
    before retirement age accumulate; later years decumulate. Iteration
    stops at the first retirement year whose balance is <= 0. An empty
    account during accumulation still runs to retirement, so the
    retirement-age row always exists.

    Returns
    -------
    pd.DataFrame
        Columns: age, balance, contribution, withdrawal,
        total_contributions, is_retired. Index: year.
    """
    n = profile.years_to_retirement
    horizon = profile.life_expectancy - profile.current_age
    growth = annual_growth_factor(adjusted_return, profile.compounding_frequency)
    guaranteed = profile.social_security_income + profile.pension_income
    required = profile.current_annual_income * profile.income_replacement_goal

    balance = float(profile.current_savings)
    monthly = float(profile.monthly_contribution)
    total_contributions = balance

    rows = [(profile.current_age, balance, 0.0, 0.0, total_contributions, False)]
    for year in range(1, horizon + 1):
        contribution = withdrawal = 0.0
        if year <= n:
            contribution = monthly * MONTHS_PER_YEAR
            balance = balance * growth + contribution
            total_contributions += contribution
            monthly *= 1.0 + profile.contribution_increase_rate
        else:
            inflation = (1.0 + profile.inflation_rate) ** (year - n - 1)
            withdrawal = max(0.0, (required - guaranteed) * inflation)
            balance = balance * (1.0 + adjusted_return) - withdrawal

        age = profile.current_age + year
        rows.append((
            age,
            balance,
            contribution,
            withdrawal,
            total_contributions,
            age >= profile.retirement_age,
        ))
        if year > n and balance <= 0:
            break

    frame = pd.DataFrame(
        rows,
        columns=["age", "balance", "contribution", "withdrawal",
                 "total_contributions", "is_retired"],
    )
    frame.index.name = "year"
    return frame


def _sample_points(frame: pd.DataFrame, retirement_age: int) -> Tuple[ProjectionPoint, ...]:
    last_year = int(frame.index[-1])
    points = []
    for year, row in frame.iterrows():
        age = int(row["age"])
        if year % PROJECTION_SAMPLE_INTERVAL and age != retirement_age and year != last_year:
            continue
        balance = max(0.0, float(row["balance"]))
        contributions = float(row["total_contributions"])
        points.append(ProjectionPoint(
            age=age,
            year=int(year),
            balance=balance,
            total_contributions=contributions,
            growth=max(0.0, balance - contributions),
            is_retired=bool(row["is_retired"]),
        ))
    return tuple(points)


def run_projection(profile: FinancialProfile) -> ProjectionResult:
    """Run the deterministic projection for a validated profile."""
    adjusted = adjust_return_for_risk(profile.expected_annual_return, profile.risk_tolerance)
    n = profile.years_to_retirement
    fv_savings = future_value_current_savings(
        profile.current_savings, adjusted, profile.compounding_frequency, n
    )
    fv_contrib = future_value_contributions(
        profile.monthly_contribution,
        profile.contribution_increase_rate,
        adjusted,
        profile.compounding_frequency,
        n,
    )
    frame = project_balances(profile, adjusted)
    return ProjectionResult(
        adjusted_return=adjusted,
        future_value_current_savings=fv_savings,
        future_value_contributions=fv_contrib,
        points=_sample_points(frame, profile.retirement_age),
        yearly=frame,
    )


# ---------------------------------------------------------------------------
# Retirement income
# ---------------------------------------------------------------------------

def retirement_income(profile: FinancialProfile, total_at_retirement: float) -> RetirementIncome:
    """
    Income figures at retirement.

    Net monthly income is the after-tax withdrawal plus Social Security
    and pension, over 12. The replacement ratio compares the annual net
    income with current income inflated to retirement, in percent. With
    no current income there is nothing to replace: the ratio is 0 and the
    goal counts as met.
    """
    annual_withdrawal = total_at_retirement * profile.withdrawal_rate
    monthly_income = (
        annual_withdrawal * (1.0 - profile.tax_rate)
        + profile.social_security_income
        + profile.pension_income
    ) / MONTHS_PER_YEAR
    annual_income = monthly_income * MONTHS_PER_YEAR
    inflated_income = profile.current_annual_income * (
        (1.0 + profile.inflation_rate) ** profile.years_to_retirement
    )
    if inflated_income > 0:
        ratio = annual_income / inflated_income * 100.0
        meets_goal = ratio >= profile.income_replacement_goal * 100.0
    else:
        ratio = 0.0
        meets_goal = True
    return RetirementIncome(
        annual_withdrawal=annual_withdrawal,
        monthly_income=monthly_income,
        annual_income=annual_income,
        inflation_adjusted_current_income=inflated_income,
        income_replacement_ratio=ratio,
        meets_income_goal=meets_goal,
    )


def portfolio_longevity(
    initial_amount: float,
    annual_withdrawal: float,
    return_rate: float,
    inflation_rate: float,
    healthcare_costs: float = 0.0,
    healthcare_inflation: float = 0.0,
    max_years: int = MAX_LONGEVITY_YEARS,
) -> int:
    """
    Years until the portfolio is depleted, capped at *max_years*.

    Each year the portfolio grows at *return_rate*, then pays the
    withdrawal and healthcare costs; both grow with their own inflation
    for the following year. The year in which the balance drops to zero
    or below is counted.

    Returns
    -------
    int
        In [0, max_years]; exactly max_years if never depleted, 0 when the
        initial amount is not positive.
    """
    portfolio = float(initial_amount)
    withdrawal = float(annual_withdrawal)
    healthcare = float(healthcare_costs)
    years = 0
    while portfolio > 0 and years < max_years:
        portfolio = portfolio * (1.0 + return_rate) - withdrawal - healthcare
        withdrawal *= 1.0 + inflation_rate
        healthcare *= 1.0 + healthcare_inflation
        years += 1
    return years
