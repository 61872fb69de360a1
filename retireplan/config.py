"""
Configuration management module for retireplan.

Purpose
-------
Centralized configuration using Pydantic models for type-safe parameter management,
validation, and serialization. Holds the financial profile consumed by the engine,
Monte Carlo parameters, and environment-driven application settings.

Design Principles
-----------------
- Type-safe: Pydantic enforces strict numeric types and validates ranges
- Immutable: Frozen models prevent accidental mutation
- Wire-compatible: camelCase aliases match the HTTP payload, snake_case in Python
- Environment-aware: Supports .env files for application settings

Example
-------
>>> from retireplan.config import FinancialProfile, SimulationConfig
>>> profile = FinancialProfile.model_validate(payload)   # camelCase keys
>>> profile.years_to_retirement
35
>>> sim_config = SimulationConfig(n_sims=1000, seed=42)
>>>
>>> # Serialize back to the wire format
>>> profile.model_dump(by_alias=True)
"""

from __future__ import annotations
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, Field, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_LIFE_EXPECTANCY, DEFAULT_N_SIMS, MAX_N_SIMS

__all__ = [
    "FinancialProfile",
    "SimulationConfig",
    "AppSettings",
]


# ---------------------------------------------------------------------------
# Financial Profile
# ---------------------------------------------------------------------------

def _whole_number(value: Any) -> Any:
    """Accept 30.0 for an integer field; 30.5, bools and strings still fail."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


WholeNumber = Annotated[int, BeforeValidator(_whole_number)]
"""Integer field that also accepts JSON numbers without a fractional part."""


class FinancialProfile(BaseModel):
    """
    Financial profile of one user, as accepted by the calculation endpoint.

    Bounds are inclusive. Cross-field rules (retirement after current age,
    life expectancy after retirement) are enforced by
    ``retireplan.validation.validate_profile`` so they can be reported as a
    distinct error class.

    Attributes
    ----------
    current_age, retirement_age, life_expectancy : int
        Ages in whole years. ``life_expectancy`` defaults to 90.
    current_savings, monthly_contribution : float
        Starting balance and first-year monthly contribution.
    contribution_increase_rate : float
        Yearly growth of the monthly contribution.
    expected_annual_return, volatility : float
        Arithmetic annual return and its standard deviation.
    risk_tolerance : int
        1 = conservative, 2 = moderate, 3 = aggressive.
    risk_free_rate, down_side_deviation : float
        Inputs of the risk-adjusted ratios.
    inflation_rate, healthcare_costs, healthcare_inflation : float
        Cost growth assumptions in retirement.
    withdrawal_rate, tax_rate : float
        Initial withdrawal share and flat tax on withdrawals.
    compounding_frequency : int
        Compounding periods per year (1-365).
    social_security_income, pension_income : float
        Guaranteed annual income in retirement.
    current_annual_income, income_replacement_goal : float
        Pre-retirement income and the fraction of it to replace.

    Examples
    --------
    >>> profile = FinancialProfile(current_age=30, retirement_age=65, ...)
    >>> profile.model_dump(by_alias=True)["currentAge"]
    30
    """

    model_config = ConfigDict(
        frozen=True,
        strict=True,
        populate_by_name=True,
        extra="ignore",
    )

    current_age: WholeNumber = Field(alias="currentAge", ge=18, le=100)
    retirement_age: WholeNumber = Field(alias="retirementAge", ge=50, le=100)
    current_savings: float = Field(alias="currentSavings", ge=0)
    monthly_contribution: float = Field(alias="monthlyContribution", ge=0)
    expected_annual_return: float = Field(alias="expectedAnnualReturn", ge=-0.1, le=0.5)
    risk_tolerance: WholeNumber = Field(alias="riskTolerance", ge=1, le=3)
    inflation_rate: float = Field(alias="inflationRate", ge=0, le=0.2)
    social_security_income: float = Field(alias="socialSecurityIncome", ge=0)
    current_annual_income: float = Field(alias="currentAnnualIncome", ge=0)
    income_replacement_goal: float = Field(alias="incomeReplacementGoal", ge=0.1, le=2)
    contribution_increase_rate: float = Field(alias="contributionIncreaseRate", ge=0, le=0.2)
    withdrawal_rate: float = Field(alias="withdrawalRate", ge=0.01, le=0.1)
    tax_rate: float = Field(alias="taxRate", ge=0, le=0.5)
    compounding_frequency: WholeNumber = Field(alias="compoundingFrequency", ge=1, le=365)
    volatility: float = Field(alias="volatility", ge=0, le=0.5)
    risk_free_rate: float = Field(alias="riskFreeRate", ge=0, le=0.1)
    down_side_deviation: float = Field(alias="downSideDeviation", ge=0, le=0.3)
    healthcare_costs: float = Field(alias="healthcareCosts", ge=0)
    healthcare_inflation: float = Field(alias="healthcareInflation", ge=0, le=0.2)
    emergency_fund: float = Field(alias="emergencyFund", ge=0)
    other_retirement_accounts: float = Field(alias="otherRetirementAccounts", ge=0)
    pension_income: float = Field(alias="pensionIncome", ge=0)
    part_time_income_years: WholeNumber = Field(alias="partTimeIncomeYears", ge=0, le=20)
    part_time_income: float = Field(alias="partTimeIncome", ge=0)
    life_expectancy: WholeNumber = Field(
        default=DEFAULT_LIFE_EXPECTANCY,
        alias="lifeExpectancy",
        ge=65,
        le=120,
    )

    @property
    def years_to_retirement(self) -> int:
        return self.retirement_age - self.current_age

    @property
    def years_in_retirement(self) -> int:
        return self.life_expectancy - self.retirement_age

    @classmethod
    def wire_fields(cls) -> Dict[str, List[str]]:
        """
        Required and optional payload keys (camelCase), in declaration order.

        Used by the documentation endpoint so it always matches validation.
        """
        required, optional = [], []
        for name, info in cls.model_fields.items():
            key = info.alias or name
            (required if info.is_required() else optional).append(key)
        return {"required": required, "optional": optional}


# ---------------------------------------------------------------------------
# Simulation Configuration
# ---------------------------------------------------------------------------

class SimulationConfig(BaseModel):
    """
    Configuration for Monte Carlo simulation parameters.

    Attributes
    ----------
    n_sims : int
        Number of Monte Carlo trials (100-10,000).
    seed : int, optional
        Random seed for reproducibility. If None, draws fresh OS entropy.

    Examples
    --------
    >>> config = SimulationConfig(n_sims=1000, seed=42)
    >>> config.n_sims
    1000
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    n_sims: int = Field(
        default=DEFAULT_N_SIMS,
        ge=100,
        le=MAX_N_SIMS,
        description="Number of Monte Carlo trials"
    )
    seed: Optional[int] = Field(
        default=None,
        ge=0,
        description="Random seed for reproducibility"
    )


# ---------------------------------------------------------------------------
# Application Settings (Environment Variables)
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Supports .env files for local development. Environment variables
    should be prefixed with RETIREPLAN_ (e.g., RETIREPLAN_LOG_LEVEL=DEBUG).

    Attributes
    ----------
    debug : bool
        Enable Flask debug mode.
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR"
    n_sims : int
        Monte Carlo trials per request.
    seed : int, optional
        Fixed seed for every request (tests, demos). None in production.
    host, port : str, int
        Bind address for ``retireplan serve``.

    Examples
    --------
    >>> settings = AppSettings()
    >>> settings.simulation_config().n_sims
    1000
    """

    model_config = SettingsConfigDict(
        env_prefix="RETIREPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )
    n_sims: int = Field(
        default=DEFAULT_N_SIMS,
        ge=100,
        le=MAX_N_SIMS,
        description="Monte Carlo trials per request"
    )
    seed: Optional[int] = Field(
        default=None,
        description="Fixed Monte Carlo seed"
    )
    host: str = Field(
        default="127.0.0.1",
        description="HTTP bind host"
    )
    port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        description="HTTP bind port"
    )

    def simulation_config(self) -> SimulationConfig:
        return SimulationConfig(n_sims=self.n_sims, seed=self.seed)
