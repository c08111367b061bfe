"""
Query State Codec - FilterState <-> flat multi-valued query.

Recognized keys:
    minPrice, maxPrice  integer price bounds
    minScore            integer minimum match score (default 0)
    maxRisk             low | medium | high
    city                repeated, one value per city
    tier                repeated, one value per tier
    starred             "1" for favorites only
    sort                sort option name (default score_desc)

Unrecognized keys are ignored and malformed values fall back to the
default. Serialization only emits keys whose value differs from the
default, so the default state serializes to an empty query and
``parse(serialize(state)) == state`` for every state.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qsl, urlencode

from ..config import DEFAULT_SCORING_CONFIG, ScoringConfig
from ..models import RiskLevel, SortOption, Tier
from .filters import FilterState


logger = logging.getLogger(__name__)


# Query keys
KEY_MIN_PRICE = "minPrice"
KEY_MAX_PRICE = "maxPrice"
KEY_MIN_SCORE = "minScore"
KEY_MAX_RISK = "maxRisk"
KEY_CITY = "city"
KEY_TIER = "tier"
KEY_STARRED = "starred"
KEY_SORT = "sort"

STARRED_TRUE = "1"

QueryPairs = List[Tuple[str, str]]
QueryInput = Union[str, Mapping[str, Any], Iterable[Tuple[str, str]]]


# =============================================================================
# Query access
# =============================================================================

class QueryParams:
    """Read-only view over multi-valued query pairs."""

    def __init__(self, pairs: QueryPairs):
        self._pairs = pairs

    @classmethod
    def coerce(cls, query: QueryInput) -> "QueryParams":
        """
        Accept a query string, a multi-dict, a plain mapping or pairs.

        Mapping values may be a single string or a list of strings.
        """
        if isinstance(query, QueryParams):
            return query
        if query is None:
            return cls([])
        if isinstance(query, str):
            return cls(parse_qsl(query.lstrip("?"), keep_blank_values=True))
        if hasattr(query, "multi_items"):
            return cls([(str(k), str(v)) for k, v in query.multi_items()])
        if isinstance(query, Mapping):
            pairs = []
            for key, value in query.items():
                values = value if isinstance(value, (list, tuple)) else [value]
                pairs.extend((str(key), str(v)) for v in values if v is not None)
            return cls(pairs)
        return cls([(str(k), str(v)) for k, v in query])

    def get(self, key: str) -> Optional[str]:
        """First value for ``key``."""
        for k, v in self._pairs:
            if k == key:
                return v
        return None

    def get_all(self, key: str) -> List[str]:
        return [v for k, v in self._pairs if k == key]

    def items(self) -> QueryPairs:
        return list(self._pairs)


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse a query integer, None when absent or malformed."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        logger.debug("Ignoring malformed integer query value %r", value)
        return None


# =============================================================================
# Codec
# =============================================================================

def parse_filters(
    query: QueryInput,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> FilterState:
    """
    Build a FilterState from a query.

    Args:
        query: Query string, multi-dict, mapping or (key, value) pairs.
        config: Supplies the default sort option.

    Returns:
        New FilterState; absent or malformed keys take their defaults.
    """
    params = QueryParams.coerce(query)
    default = FilterState.default(config)

    min_score = parse_int(params.get(KEY_MIN_SCORE))

    max_risk = None
    raw_risk = params.get(KEY_MAX_RISK)
    if raw_risk is not None:
        max_risk = RiskLevel.from_string(raw_risk)
        if max_risk is None:
            logger.debug("Ignoring unknown risk ceiling %r", raw_risk)

    tiers = []
    for raw_tier in params.get_all(KEY_TIER):
        tier = Tier.from_string(raw_tier)
        if tier is None:
            logger.debug("Ignoring unknown tier %r", raw_tier)
            continue
        tiers.append(tier)

    sort_by = default.sort_by
    raw_sort = params.get(KEY_SORT)
    if raw_sort is not None:
        sort_by = SortOption.from_string(raw_sort) or default.sort_by

    return FilterState(
        min_price=parse_int(params.get(KEY_MIN_PRICE)),
        max_price=parse_int(params.get(KEY_MAX_PRICE)),
        min_score=min_score if min_score is not None else default.min_score,
        max_risk=max_risk,
        cities=tuple(params.get_all(KEY_CITY)),
        tiers=tuple(tiers),
        starred_only=params.get(KEY_STARRED) == STARRED_TRUE,
        sort_by=sort_by,
    )


def serialize_filters(
    state: FilterState,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> QueryPairs:
    """
    Encode a FilterState as query pairs, omitting default values.

    Args:
        state: State to encode.
        config: Supplies the default sort option.

    Returns:
        (key, value) pairs in a fixed key order.
    """
    default = FilterState.default(config)
    pairs: QueryPairs = []

    if state.min_price is not None:
        pairs.append((KEY_MIN_PRICE, str(state.min_price)))
    if state.max_price is not None:
        pairs.append((KEY_MAX_PRICE, str(state.max_price)))
    if state.min_score != default.min_score:
        pairs.append((KEY_MIN_SCORE, str(state.min_score)))
    if state.max_risk is not None:
        pairs.append((KEY_MAX_RISK, state.max_risk.value))
    for city in state.cities:
        pairs.append((KEY_CITY, city))
    for tier in state.tiers:
        pairs.append((KEY_TIER, tier.value))
    if state.starred_only:
        pairs.append((KEY_STARRED, STARRED_TRUE))
    if state.sort_by != default.sort_by:
        pairs.append((KEY_SORT, state.sort_by.value))

    return pairs


def to_query_string(
    state: FilterState,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> str:
    """Canonical URL query string for ``state`` (empty for the default)."""
    return urlencode(serialize_filters(state, config))
