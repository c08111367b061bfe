"""
Tests for the dashboard query codec.

Verifies:
- Default state <-> empty query
- parse(serialize(state)) == state
- Repeated keys for cities and tiers
- Malformed and unknown values fall back to defaults
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import ScoringConfig
from core.dashboard import (
    FilterState,
    QueryParams,
    parse_filters,
    parse_int,
    serialize_filters,
    to_query_string,
)
from core.models import RiskLevel, SortOption, Tier


class TestParseFilters:

    def test_empty_query_is_default(self):
        assert parse_filters("") == FilterState()
        assert parse_filters({}) == FilterState()
        assert parse_filters(None) == FilterState()

    def test_all_keys(self):
        state = parse_filters(
            "minPrice=200000&maxPrice=450000&minScore=60&maxRisk=medium"
            "&city=Amsterdam&city=Utrecht&tier=excellent&tier=strong"
            "&starred=1&sort=price_asc"
        )

        assert state == FilterState(
            min_price=200000,
            max_price=450000,
            min_score=60,
            max_risk=RiskLevel.MEDIUM,
            cities=("Amsterdam", "Utrecht"),
            tiers=(Tier.EXCELLENT, Tier.STRONG),
            starred_only=True,
            sort_by=SortOption.PRICE_ASC,
        )

    def test_leading_question_mark(self):
        assert parse_filters("?minScore=40").min_score == 40

    def test_malformed_integers_ignored(self):
        state = parse_filters("minPrice=abc&maxPrice=4.5e5&minScore=")
        assert state.min_price is None
        assert state.max_price is None
        assert state.min_score == 0

    def test_unknown_values_ignored(self):
        state = parse_filters("maxRisk=extreme&tier=legendary&tier=weak&sort=newest")

        assert state.max_risk is None
        assert state.tiers == (Tier.WEAK,)
        assert state.sort_by is SortOption.SCORE_DESC

    def test_unknown_keys_ignored(self):
        assert parse_filters("utm_source=mail&page=3") == FilterState()

    def test_starred_requires_one(self):
        assert parse_filters("starred=1").starred_only is True
        assert parse_filters("starred=true").starred_only is False
        assert parse_filters("starred=0").starred_only is False

    def test_first_scalar_value_wins(self):
        assert parse_filters("minScore=40&minScore=80").min_score == 40

    def test_mapping_with_lists(self):
        state = parse_filters({"city": ["Haarlem", "Leiden"], "minPrice": "100000"})
        assert state.cities == ("Haarlem", "Leiden")
        assert state.min_price == 100000

    def test_pairs(self):
        state = parse_filters([("tier", "moderate"), ("tier", "weak")])
        assert state.tiers == (Tier.MODERATE, Tier.WEAK)

    def test_configured_default_sort(self):
        config = ScoringConfig(default_sort=SortOption.DATE_DESC)
        assert parse_filters("", config).sort_by is SortOption.DATE_DESC


class TestSerializeFilters:

    def test_default_is_empty(self):
        assert serialize_filters(FilterState()) == []
        assert to_query_string(FilterState()) == ""

    def test_repeated_keys(self):
        state = FilterState(cities=("Amsterdam", "Den Haag"), tiers=(Tier.STRONG,))
        assert serialize_filters(state) == [
            ("city", "Amsterdam"),
            ("city", "Den Haag"),
            ("tier", "strong"),
        ]

    def test_query_string_encoding(self):
        state = FilterState(cities=("Den Haag",), starred_only=True, sort_by=SortOption.PRICE_DESC)
        assert to_query_string(state) == "city=Den+Haag&starred=1&sort=price_desc"

    def test_default_sort_omitted_per_config(self):
        config = ScoringConfig(default_sort=SortOption.DATE_DESC)
        state = FilterState(sort_by=SortOption.DATE_DESC)

        assert to_query_string(state, config) == ""
        assert to_query_string(FilterState(), config) == "sort=score_desc"


class TestRoundTrip:

    @pytest.mark.parametrize("state", [
        FilterState(),
        FilterState(min_price=0, max_price=0),
        FilterState(min_score=-5),
        FilterState(min_score=100, max_risk=RiskLevel.LOW),
        FilterState(cities=("'s-Hertogenbosch", "Den Haag", "A&B=C"), tiers=(Tier.WEAK, Tier.WEAK)),
        FilterState(starred_only=True, sort_by=SortOption.INVESTMENT_ASC),
    ])
    def test_parse_serialize(self, state):
        assert parse_filters(to_query_string(state)) == state

    def test_serialize_parse_is_canonical(self):
        query = "sort=price_asc&city=Utrecht&minScore=0&bogus=1"
        canonical = to_query_string(parse_filters(query))

        assert canonical == "city=Utrecht&sort=price_asc"
        assert to_query_string(parse_filters(canonical)) == canonical


class TestQueryHelpers:

    def test_parse_int(self):
        assert parse_int("42") == 42
        assert parse_int(" 7 ") == 7
        assert parse_int("-3") == -3
        assert parse_int("4.2") is None
        assert parse_int("") is None
        assert parse_int(None) is None

    def test_query_params(self):
        params = QueryParams.coerce("city=A&city=B&sort=price_asc")

        assert params.get("city") == "A"
        assert params.get_all("city") == ["A", "B"]
        assert params.get("missing") is None
        assert QueryParams.coerce(params) is params
