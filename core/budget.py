"""
Budget derivation.

Computes the budget status, budget utilization and investment range from
the raw fields of an analysis. All three are pure functions of their
inputs; the status and utilization are never stored independently.
"""

from dataclasses import dataclass
from typing import Optional

from .config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .models import BudgetStatus, InvestmentRange, RawAnalysis


@dataclass(frozen=True)
class BudgetInput:
    """The analysis fields the budget derivations depend on."""
    total_investment: float
    within_budget: Optional[bool]
    budget_remaining: Optional[float]

    @classmethod
    def from_analysis(cls, analysis: Optional[RawAnalysis]) -> Optional["BudgetInput"]:
        """Build input from an analysis, None when there is no analysis."""
        if analysis is None:
            return None
        return cls(
            total_investment=analysis.total_investment or 0.0,
            within_budget=analysis.within_budget,
            budget_remaining=analysis.budget_remaining,
        )


def derive_budget_status(
    budget: Optional[BudgetInput],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> BudgetStatus:
    """
    Derive the budget status of an analysis.

    Un-analyzed properties are optimistically safe so they are not
    penalized by budget filters. An unknown ``within_budget`` is not
    treated as over budget.

    Args:
        budget: Budget fields, or None when no analysis exists.
        config: Supplies the stretch threshold.

    Returns:
        SAFE, STRETCH or OVER_BUDGET.
    """
    if budget is None:
        return BudgetStatus.SAFE
    if budget.within_budget is False:
        return BudgetStatus.OVER_BUDGET

    remaining = budget.budget_remaining or 0.0
    total = budget.total_investment
    if total > 0 and remaining / total < config.stretch_threshold:
        return BudgetStatus.STRETCH
    return BudgetStatus.SAFE


def derive_budget_utilization(budget: Optional[BudgetInput]) -> int:
    """
    Derive budget utilization as a rounded percentage.

    The maximum budget is approximated as total investment plus the
    remaining budget. The result can exceed 100 when over budget.
    """
    if budget is None or budget.total_investment <= 0:
        return 0

    remaining = budget.budget_remaining or 0.0
    max_budget = budget.total_investment + remaining
    if max_budget <= 0:
        return 0

    return _round_half_up(budget.total_investment / max_budget * 100)


def derive_investment_range(
    total_mid: float,
    reno_low: float,
    reno_mid: float,
    reno_high: float,
) -> InvestmentRange:
    """
    Expand a mid investment figure into a low/high range.

    The renovation estimate's spread is the only uncertainty; asking price
    and fixed costs are taken as certain. With a flat renovation estimate
    the range degenerates to a point.
    """
    spread_low = reno_mid - reno_low
    spread_high = reno_high - reno_mid
    return InvestmentRange(
        low=total_mid - spread_low,
        mid=total_mid,
        high=total_mid + spread_high,
    )


def _round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values."""
    return int(value + 0.5)
