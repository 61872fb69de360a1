"""
Portfolio risk metrics for retireplan.

Purpose
-------
Derives risk-adjusted return ratios and tail-risk estimates from the
return and volatility assumptions of a profile. No return history is
available, so several metrics are parametric approximations:

    excess        = r - r_f
    sharpe        = excess / sigma
    sortino       = excess / sigma_down
    beta          = sigma / sigma_market           (sigma_market = 0.15)
    VaR_95 (%)    = (r - 1.645 * sigma) * 100      (one-tailed normal)
    max DD (%)    = 2.5 * sigma * 100              (heuristic)
    calmar        = r * 100 / max DD
    treynor       = excess / beta
    information   = 0.8 * sharpe                   (approximation)
    real return   = r - inflation

Every ratio returns 0 when its denominator is 0, never NaN or inf.

Example
-------
>>> metrics = compute_risk_metrics(0.07, 0.03, 0.15, 0.10, inflation_rate=0.025)
>>> round(metrics.sharpe_ratio, 4)
0.2667
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

from .constants import (
    DRAWDOWN_VOLATILITY_MULTIPLE,
    INFORMATION_RATIO_FACTOR,
    MARKET_VOLATILITY,
    VAR_Z_SCORE_95,
)

__all__ = [
    "RiskMetrics",
    "AdvancedMetric",
    "compute_risk_metrics",
    "advanced_metrics",
]


@dataclass(frozen=True)
class RiskMetrics:
    sharpe_ratio: float
    sortino_ratio: float
    portfolio_beta: float
    value_at_risk: float
    max_drawdown: float
    calmar_ratio: float
    treynor_ratio: float
    information_ratio: float
    real_return: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class AdvancedMetric:
    """One row of the metrics table shown next to the projection."""

    name: str
    value: str
    interpretation: str


def _safe_ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def compute_risk_metrics(
    adjusted_return: float,
    risk_free_rate: float,
    volatility: float,
    downside_deviation: float,
    inflation_rate: float = 0.0,
) -> RiskMetrics:
    """
    Compute the risk metric set.

    Parameters
    ----------
    adjusted_return : float
        Risk-adjusted annual return (fraction).
    risk_free_rate : float
        Annual risk-free rate (fraction).
    volatility : float
        Annual standard deviation of returns (fraction).
    downside_deviation : float
        Annual standard deviation of negative returns (fraction).
    inflation_rate : float
        Annual inflation (fraction), for the real return.

    Returns
    -------
    RiskMetrics
        VaR and max drawdown are in percent, real return is a fraction,
        the ratios are unitless.
    """
    excess = adjusted_return - risk_free_rate
    sharpe = _safe_ratio(excess, volatility)
    beta = volatility / MARKET_VOLATILITY
    max_drawdown = volatility * DRAWDOWN_VOLATILITY_MULTIPLE * 100.0
    return RiskMetrics(
        sharpe_ratio=sharpe,
        sortino_ratio=_safe_ratio(excess, downside_deviation),
        portfolio_beta=beta,
        value_at_risk=(adjusted_return - VAR_Z_SCORE_95 * volatility) * 100.0,
        max_drawdown=max_drawdown,
        calmar_ratio=_safe_ratio(adjusted_return * 100.0, max_drawdown),
        treynor_ratio=_safe_ratio(excess, beta),
        information_ratio=sharpe * INFORMATION_RATIO_FACTOR,
        real_return=adjusted_return - inflation_rate,
    )


def advanced_metrics(
    metrics: RiskMetrics,
    success_rate: Optional[float] = None,
) -> List[AdvancedMetric]:
    """
    Build the interpreted metrics table.

    The success probability row is included only when a Monte Carlo
    success rate is available.
    """
    sharpe = metrics.sharpe_ratio
    if sharpe > 1:
        sharpe_text = "Excellent risk-adjusted returns"
    elif sharpe > 0.5:
        sharpe_text = "Good risk-adjusted returns"
    else:
        sharpe_text = "Poor risk-adjusted returns"

    rows = [
        AdvancedMetric("Sharpe Ratio", f"{sharpe:.2f}", sharpe_text),
        AdvancedMetric(
            "Sortino Ratio",
            f"{metrics.sortino_ratio:.2f}",
            "Excellent downside protection" if metrics.sortino_ratio > 1
            else "Moderate downside protection",
        ),
        AdvancedMetric(
            "Information Ratio",
            f"{metrics.information_ratio:.2f}",
            "Measures active return vs tracking error",
        ),
        AdvancedMetric(
            "Calmar Ratio",
            f"{metrics.calmar_ratio:.2f}",
            "Annual return vs maximum drawdown",
        ),
        AdvancedMetric(
            "Treynor Ratio",
            f"{metrics.treynor_ratio:.2f}",
            "Excess return per unit of systematic risk",
        ),
        AdvancedMetric(
            "Portfolio Beta",
            f"{metrics.portfolio_beta:.2f}",
            "More volatile than market" if metrics.portfolio_beta > 1
            else "Less volatile than market",
        ),
        AdvancedMetric(
            "Real Return Rate",
            f"{metrics.real_return * 100:.2f}%",
            "Return after inflation adjustment",
        ),
    ]
    if success_rate is not None:
        rows.append(AdvancedMetric(
            "Success Probability",
            f"{success_rate:.1f}%",
            "Chance of meeting retirement goals",
        ))
    return rows
