"""
Dashboard sort orders.

Every order sorts on a single numeric key with Python's stable ``sorted``,
so equal keys keep their input order. The input is never mutated.
"""

from typing import Any, Callable, Dict, Iterable, List, Tuple, Union

from ..config import DEFAULT_SCORING_CONFIG, ScoringConfig
from ..models import PropertySummary, SortOption


SortKey = Callable[[PropertySummary], float]

# Sort option -> (key function, descending)
SORT_KEYS: Dict[SortOption, Tuple[SortKey, bool]] = {
    SortOption.SCORE_DESC: (lambda s: s.match_score, True),
    SortOption.PRICE_ASC: (lambda s: s.asking_price, False),
    SortOption.PRICE_DESC: (lambda s: s.asking_price, True),
    SortOption.INVESTMENT_ASC: (lambda s: s.investment_mid, False),
    # Unknown days on market count as 0 and end up last
    SortOption.DATE_DESC: (lambda s: s.days_on_market or 0, True),
}


def resolve_sort_option(
    value: Union[SortOption, str, Any],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> SortOption:
    """Resolve a sort name, falling back to the configured default."""
    if isinstance(value, SortOption):
        return value
    return SortOption.from_string(value) or config.default_sort


def sort_properties(
    summaries: Iterable[PropertySummary],
    sort_by: Union[SortOption, str],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> List[PropertySummary]:
    """
    Return the summaries in the requested order.

    Args:
        summaries: Summaries to sort (left untouched).
        sort_by: Sort option or its name; unknown names use the default.
        config: Supplies the default sort option.

    Returns:
        New sorted list.
    """
    key, descending = SORT_KEYS[resolve_sort_option(sort_by, config)]
    return sorted(summaries, key=key, reverse=descending)
