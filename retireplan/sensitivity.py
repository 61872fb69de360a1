"""Return-rate sensitivity and compounding-frequency comparison.

Both analyses reuse the closed forms of ``retireplan.projection``:

- sensitivity: savings + contribution stream at the risk-adjusted return
  shifted by -2%..+2%, compounded at the profile's frequency. The 0%
  row reproduces the projection's ``total_at_retirement``.
- compounding: savings alone at the stated expected return compounded
  annually, quarterly, monthly and daily, against annual compounding.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from .config import FinancialProfile
from .constants import COMPOUNDING_FREQUENCIES, SENSITIVITY_DELTAS
from .projection import future_value_contributions, future_value_current_savings

__all__ = [
    "SensitivityPoint",
    "CompoundingPoint",
    "sensitivity_analysis",
    "compounding_effect",
]


@dataclass(frozen=True)
class SensitivityPoint:
    variation: float
    return_rate: float
    value: float
    difference: float

    @property
    def label(self) -> str:
        return f"{self.return_rate * 100:.1f}%"


@dataclass(frozen=True)
class CompoundingPoint:
    frequency: int
    label: str
    value: float
    difference: float


def _accumulated_value(profile: FinancialProfile, rate: float, frequency: int) -> float:
    years = profile.years_to_retirement
    return future_value_current_savings(
        profile.current_savings, rate, frequency, years
    ) + future_value_contributions(
        profile.monthly_contribution,
        profile.contribution_increase_rate,
        rate,
        frequency,
        years,
    )


def sensitivity_analysis(
    profile: FinancialProfile,
    base_return: float,
    deltas: Sequence[float] = SENSITIVITY_DELTAS,
) -> List[SensitivityPoint]:
    """
    Value at retirement for each return-rate delta around *base_return*.

    ``difference`` is measured against the zero-delta value, which is
    computed even when 0 is not among *deltas*.
    """
    frequency = profile.compounding_frequency
    baseline = _accumulated_value(profile, base_return, frequency)
    points = []
    for delta in deltas:
        rate = base_return + delta
        value = _accumulated_value(profile, rate, frequency)
        points.append(SensitivityPoint(
            variation=delta,
            return_rate=rate,
            value=value,
            difference=value - baseline,
        ))
    return points


def compounding_effect(profile: FinancialProfile) -> List[CompoundingPoint]:
    """
    Current savings at retirement for each standard compounding frequency.

    Compounds at ``expected_annual_return`` as entered, without the
    risk-tier offset.
    """
    years = profile.years_to_retirement
    base_return = profile.expected_annual_return
    annual = future_value_current_savings(profile.current_savings, base_return, 1, years)
    points = []
    for frequency, label in COMPOUNDING_FREQUENCIES.items():
        value = future_value_current_savings(profile.current_savings, base_return, frequency, years)
        points.append(CompoundingPoint(
            frequency=frequency,
            label=label,
            value=value,
            difference=value - annual,
        ))
    return points
