"""
retireplan — Retirement Projection and Risk Analytics

Projects a saver's wealth to retirement, simulates the distribution of
outcomes, and reports risk metrics, sensitivity tables and guidance for
a single financial profile.

Modules
-------
- config        : Financial profile, simulation and application settings
- validation    : Raw payload -> FinancialProfile (schema and cross-field rules)
- projection    : Deterministic year-by-year projection and retirement income
- risk          : Parametric risk ratios and the interpreted metrics table
- montecarlo    : Vectorized Monte Carlo of the accumulation phase
- sensitivity   : Return-rate sensitivity and compounding comparison
- insights      : Rule-based guidance messages
- engine        : End-to-end calculation pipeline
- serialization : JSON payloads and profile files
- api           : Flask blueprint and application factory
- cli           : Command-line interface

"""

from .config import AppSettings, FinancialProfile, SimulationConfig
from .engine import RetirementAnalysis, calculate_retirement
from .exceptions import (
    ComputationError,
    CrossFieldConstraintError,
    RetirePlanError,
    SchemaValidationError,
    ValidationError,
)
from .serialization import build_response
from .validation import validate_profile

__version__ = "0.1.0"

__all__ = [
    "AppSettings",
    "FinancialProfile",
    "SimulationConfig",
    "RetirementAnalysis",
    "calculate_retirement",
    "validate_profile",
    "build_response",
    "RetirePlanError",
    "ValidationError",
    "SchemaValidationError",
    "CrossFieldConstraintError",
    "ComputationError",
]
