"""
Headline numbers for the dashboard ("34 woningen · 8 top matches").
"""

from dataclasses import dataclass
from typing import Sequence

from ..models import BudgetStatus, PropertySummary, Tier


TOP_MATCH_TIERS = (Tier.EXCELLENT, Tier.STRONG)


@dataclass(frozen=True)
class DashboardStats:
    total: int
    filtered: int
    top_matches: int
    over_budget: int
    unanalyzed: int

    @property
    def is_filtered(self) -> bool:
        return self.filtered < self.total

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "filtered": self.filtered,
            "top_matches": self.top_matches,
            "over_budget": self.over_budget,
            "unanalyzed": self.unanalyzed,
            "is_filtered": self.is_filtered,
        }


def dashboard_stats(
    summaries: Sequence[PropertySummary],
    filtered: Sequence[PropertySummary],
) -> DashboardStats:
    """Count totals over all summaries and matches over the filtered set."""
    return DashboardStats(
        total=len(summaries),
        filtered=len(filtered),
        top_matches=sum(1 for s in filtered if s.tier in TOP_MATCH_TIERS),
        over_budget=sum(1 for s in filtered if s.budget_status is BudgetStatus.OVER_BUDGET),
        unanalyzed=sum(1 for s in filtered if not s.has_analysis),
    )
