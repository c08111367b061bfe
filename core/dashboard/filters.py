"""
Dashboard filter state and predicate.

Filtering is a pure AND across the active constraints and preserves
input order; reordering is the sort engine's job.
"""

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Tuple

from ..config import DEFAULT_SCORING_CONFIG, ScoringConfig
from ..models import PropertySummary, RiskLevel, SortOption, Tier


# =============================================================================
# Filter State
# =============================================================================

@dataclass(frozen=True)
class FilterState:
    """
    Declarative dashboard query.

    Built fresh from the request's query string; updates go through
    ``merge`` and produce a new state.
    """
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    min_score: int = 0
    max_risk: Optional[RiskLevel] = None
    cities: Tuple[str, ...] = ()
    tiers: Tuple[Tier, ...] = ()
    starred_only: bool = False
    sort_by: SortOption = SortOption.SCORE_DESC

    @classmethod
    def default(cls, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> "FilterState":
        """The state an empty query parses to."""
        return cls(sort_by=config.default_sort)

    def merge(self, **changes) -> "FilterState":
        """Return a copy with ``changes`` applied on top of this state."""
        if "cities" in changes:
            changes["cities"] = tuple(changes["cities"])
        if "tiers" in changes:
            changes["tiers"] = tuple(changes["tiers"])
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "min_price": self.min_price,
            "max_price": self.max_price,
            "min_score": self.min_score,
            "max_risk": self.max_risk.value if self.max_risk else None,
            "cities": list(self.cities),
            "tiers": [tier.value for tier in self.tiers],
            "starred_only": self.starred_only,
            "sort_by": self.sort_by.value,
        }


def active_filter_count(state: FilterState) -> int:
    """Count the filter constraints that are active. Sort is not a filter."""
    count = 0
    if state.min_price is not None:
        count += 1
    if state.max_price is not None:
        count += 1
    if state.min_score > 0:
        count += 1
    if state.max_risk is not None:
        count += 1
    if state.cities:
        count += 1
    if state.tiers:
        count += 1
    if state.starred_only:
        count += 1
    return count


# =============================================================================
# Filter Predicate
# =============================================================================

def is_risk_within(actual: RiskLevel, ceiling: RiskLevel) -> bool:
    """Whether ``actual`` is at or below ``ceiling`` on low < medium < high."""
    return actual.rank <= ceiling.rank


def matches_filters(summary: PropertySummary, state: FilterState) -> bool:
    """Check a single summary against every active constraint."""
    if state.min_price is not None and summary.asking_price < state.min_price:
        return False
    if state.max_price is not None and summary.asking_price > state.max_price:
        return False
    if summary.match_score < state.min_score:
        return False
    if state.max_risk is not None and not is_risk_within(summary.overall_risk, state.max_risk):
        return False
    if state.cities and summary.city not in state.cities:
        return False
    if state.tiers and summary.tier not in state.tiers:
        return False
    if state.starred_only and not summary.starred:
        return False
    return True


def filter_properties(
    summaries: Iterable[PropertySummary],
    state: FilterState,
) -> List[PropertySummary]:
    """
    Keep the summaries that satisfy ``state``.

    Args:
        summaries: Summaries in display order.
        state: Filter constraints.

    Returns:
        New list with the matching summaries in input order.
    """
    return [summary for summary in summaries if matches_filters(summary, state)]
