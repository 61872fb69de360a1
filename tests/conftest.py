"""
Pytest configuration and fixtures for the retireplan test suite.

Provides reusable payloads, validated profiles and deterministic
randomness for testing all retireplan components.
"""

from typing import Any, Dict, List

import numpy as np
import pytest

from retireplan.config import FinancialProfile, SimulationConfig
from retireplan.constants import DEFAULT_SEED
from retireplan.validation import validate_profile


# ---------------------------------------------------------------------------
# Payload Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def base_payload() -> Dict[str, Any]:
    """
    Typical mid-career saver (camelCase, as sent by the dashboard).

    Age 30 -> 65, $50k saved, $1,000/month, 7% expected return,
    moderate risk, 15% volatility, 3% risk-free rate, monthly compounding.
    Total at retirement is about $2.32M.
    """
    return {
        "currentAge": 30,
        "retirementAge": 65,
        "lifeExpectancy": 90,
        "currentSavings": 50000,
        "monthlyContribution": 1000,
        "contributionIncreaseRate": 0.0,
        "expectedAnnualReturn": 0.07,
        "riskTolerance": 2,
        "volatility": 0.15,
        "riskFreeRate": 0.03,
        "downSideDeviation": 0.10,
        "inflationRate": 0.025,
        "healthcareCosts": 5000,
        "healthcareInflation": 0.05,
        "withdrawalRate": 0.04,
        "taxRate": 0.22,
        "compoundingFrequency": 12,
        "socialSecurityIncome": 24000,
        "pensionIncome": 0,
        "currentAnnualIncome": 85000,
        "incomeReplacementGoal": 0.8,
        "emergencyFund": 15000,
        "otherRetirementAccounts": 0,
        "partTimeIncomeYears": 0,
        "partTimeIncome": 0,
    }


@pytest.fixture
def zero_volatility_payload(base_payload) -> Dict[str, Any]:
    """Same saver with a riskless return assumption."""
    return {**base_payload, "volatility": 0.0}


@pytest.fixture
def empty_account_payload(base_payload) -> Dict[str, Any]:
    """No savings and no contributions."""
    return {**base_payload, "currentSavings": 0, "monthlyContribution": 0}


# ---------------------------------------------------------------------------
# Profile Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def profile(base_payload) -> FinancialProfile:
    return validate_profile(base_payload)


@pytest.fixture
def empty_profile(empty_account_payload) -> FinancialProfile:
    return validate_profile(empty_account_payload)


# ---------------------------------------------------------------------------
# Simulation Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def seed() -> int:
    """Standard random seed for reproducibility."""
    return DEFAULT_SEED


@pytest.fixture
def sim_config(seed) -> SimulationConfig:
    """Small seeded Monte Carlo run."""
    return SimulationConfig(n_sims=200, seed=seed)


class ConstantUniformSource:
    """
    Deterministic uniform source for tests.

    Successive calls return arrays filled with ``values[0]``,
    ``values[1]``, ... (cycling), and every requested shape is recorded.
    """

    def __init__(self, values: List[float]):
        self.values = list(values)
        self.calls: List[tuple] = []

    def uniform(self, size):
        value = self.values[len(self.calls) % len(self.values)]
        self.calls.append(tuple(size))
        return np.full(size, value, dtype=float)


@pytest.fixture
def zero_shock_source() -> ConstantUniformSource:
    """u2 = 0.25 puts cos(2 pi u2) at ~0, so every draw is ~0 shock."""
    return ConstantUniformSource([0.5, 0.25])


@pytest.fixture
def constant_source():
    """Factory for ``ConstantUniformSource`` instances."""
    return ConstantUniformSource
