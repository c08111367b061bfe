"""
Tests for the dashboard filter, sort, pagination and stats engines.

Verifies:
- Filters are an AND, idempotent and order preserving
- Risk ceiling uses the ordinal scale
- Sorts are stable and never mutate their input
- Pagination clamps out-of-range requests
- End-to-end DashboardService views
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.dashboard import (
    DashboardService,
    FilterState,
    Page,
    active_filter_count,
    dashboard_stats,
    filter_properties,
    is_risk_within,
    paginate,
    sort_properties,
)
from core.models import (
    BudgetStatus,
    PropertySummary,
    RawAnalysis,
    RawProperty,
    Recommendation,
    RiskLevel,
    SortOption,
    Tier,
)


# =============================================================================
# Fixtures
# =============================================================================

def make_summary(id, **overrides):
    """PropertySummary with neutral defaults."""
    values = dict(
        id=id,
        slug=id,
        address=f"Straat {id}",
        city="Amsterdam",
        neighborhood=None,
        asking_price=400000.0,
        living_area=80.0,
        rooms=3,
        bedrooms=2,
        bathrooms=1,
        energy_label=None,
        image_url=None,
        image_lqip=None,
        starred=False,
        funda_url=None,
        days_on_market=None,
        match_score=60.0,
        tier=Tier.MODERATE,
        recommendation=Recommendation.NEEDS_RESEARCH,
        has_analysis=True,
        investment_low=400000.0,
        investment_mid=420000.0,
        investment_high=440000.0,
        budget_status=BudgetStatus.SAFE,
        budget_utilization=80,
        overall_risk=RiskLevel.LOW,
    )
    values.update(overrides)
    return PropertySummary(**values)


@pytest.fixture
def summaries():
    return [
        make_summary("a", asking_price=350000, match_score=88, tier=Tier.EXCELLENT,
                     city="Amsterdam", overall_risk=RiskLevel.MEDIUM, starred=True,
                     investment_mid=380000, days_on_market=5),
        make_summary("b", asking_price=500000, match_score=72, tier=Tier.STRONG,
                     city="Utrecht", overall_risk=RiskLevel.HIGH,
                     investment_mid=560000, days_on_market=30,
                     budget_status=BudgetStatus.OVER_BUDGET),
        make_summary("c", asking_price=275000, match_score=72, tier=Tier.STRONG,
                     city="Haarlem", overall_risk=RiskLevel.LOW,
                     investment_mid=300000, days_on_market=None),
        make_summary("d", asking_price=425000, match_score=0, tier=Tier.NOT_RECOMMENDED,
                     city="Amsterdam", has_analysis=False, investment_mid=0,
                     days_on_market=12),
    ]


def ids(items):
    return [item.id for item in items]


# =============================================================================
# Filters
# =============================================================================

class TestFilterProperties:

    def test_default_state_keeps_everything(self, summaries):
        assert ids(filter_properties(summaries, FilterState())) == ["a", "b", "c", "d"]

    def test_price_bounds_inclusive(self, summaries):
        state = FilterState(min_price=350000, max_price=425000)
        assert ids(filter_properties(summaries, state)) == ["a", "d"]

    def test_min_score(self, summaries):
        assert ids(filter_properties(summaries, FilterState(min_score=72))) == ["a", "b", "c"]

    def test_min_score_excludes_unanalyzed(self, summaries):
        assert "d" not in ids(filter_properties(summaries, FilterState(min_score=1)))

    def test_risk_ceiling(self, summaries):
        state = FilterState(max_risk=RiskLevel.MEDIUM)
        assert ids(filter_properties(summaries, state)) == ["a", "c", "d"]

    def test_cities_any_of(self, summaries):
        state = FilterState(cities=("Utrecht", "Haarlem"))
        assert ids(filter_properties(summaries, state)) == ["b", "c"]

    def test_city_match_is_exact(self, summaries):
        assert filter_properties(summaries, FilterState(cities=("amsterdam",))) == []

    def test_tiers_any_of(self, summaries):
        state = FilterState(tiers=(Tier.EXCELLENT, Tier.NOT_RECOMMENDED))
        assert ids(filter_properties(summaries, state)) == ["a", "d"]

    def test_starred_only(self, summaries):
        assert ids(filter_properties(summaries, FilterState(starred_only=True))) == ["a"]

    def test_constraints_combine(self, summaries):
        state = FilterState(cities=("Amsterdam",), min_score=50)
        assert ids(filter_properties(summaries, state)) == ["a"]

    def test_idempotent(self, summaries):
        state = FilterState(max_price=450000, max_risk=RiskLevel.MEDIUM)
        once = filter_properties(summaries, state)
        assert filter_properties(once, state) == once

    def test_preserves_order(self, summaries):
        reversed_input = list(reversed(summaries))
        assert ids(filter_properties(reversed_input, FilterState(min_score=70))) == ["c", "b", "a"]

    def test_empty_input(self):
        assert filter_properties([], FilterState(min_score=90)) == []


class TestRiskWithin:

    @pytest.mark.parametrize("actual,ceiling,expected", [
        (RiskLevel.LOW, RiskLevel.LOW, True),
        (RiskLevel.MEDIUM, RiskLevel.LOW, False),
        (RiskLevel.MEDIUM, RiskLevel.HIGH, True),
        (RiskLevel.HIGH, RiskLevel.MEDIUM, False),
        (RiskLevel.HIGH, RiskLevel.HIGH, True),
    ])
    def test_ordinal_scale(self, actual, ceiling, expected):
        assert is_risk_within(actual, ceiling) is expected


class TestFilterState:

    def test_merge_returns_new_state(self):
        state = FilterState()
        merged = state.merge(cities=["Utrecht"], min_score=60)

        assert merged.cities == ("Utrecht",)
        assert merged.min_score == 60
        assert state.cities == ()

    def test_active_filter_count(self):
        assert active_filter_count(FilterState()) == 0
        assert active_filter_count(FilterState(sort_by=SortOption.PRICE_ASC)) == 0
        state = FilterState(min_price=1, cities=("Utrecht", "Haarlem"), starred_only=True)
        assert active_filter_count(state) == 3

    def test_to_dict(self):
        state = FilterState(max_risk=RiskLevel.HIGH, tiers=(Tier.STRONG,))
        data = state.to_dict()

        assert data["max_risk"] == "high"
        assert data["tiers"] == ["strong"]
        assert data["sort_by"] == "score_desc"


# =============================================================================
# Sorting
# =============================================================================

class TestSortProperties:

    def test_score_desc_is_stable(self, summaries):
        # b and c tie on 72 and keep their input order
        assert ids(sort_properties(summaries, SortOption.SCORE_DESC)) == ["a", "b", "c", "d"]
        swapped = [summaries[2], summaries[1], summaries[0], summaries[3]]
        assert ids(sort_properties(swapped, SortOption.SCORE_DESC)) == ["a", "c", "b", "d"]

    def test_resorting_keeps_tie_order(self, summaries):
        once = sort_properties(summaries, SortOption.SCORE_DESC)
        assert sort_properties(once, SortOption.SCORE_DESC) == once

    def test_price_asc(self, summaries):
        assert ids(sort_properties(summaries, SortOption.PRICE_ASC)) == ["c", "a", "d", "b"]

    def test_price_desc(self, summaries):
        assert ids(sort_properties(summaries, SortOption.PRICE_DESC)) == ["b", "d", "a", "c"]

    def test_investment_asc_puts_unanalyzed_first(self, summaries):
        assert ids(sort_properties(summaries, SortOption.INVESTMENT_ASC)) == ["d", "c", "a", "b"]

    def test_date_desc_unknown_last(self, summaries):
        assert ids(sort_properties(summaries, SortOption.DATE_DESC)) == ["b", "d", "a", "c"]

    def test_accepts_option_name(self, summaries):
        assert ids(sort_properties(summaries, "price_asc")) == ["c", "a", "d", "b"]

    def test_unknown_name_uses_default(self, summaries):
        assert ids(sort_properties(summaries, "newest")) == ids(
            sort_properties(summaries, SortOption.SCORE_DESC)
        )

    def test_does_not_mutate_input(self, summaries):
        original = list(summaries)
        sort_properties(summaries, SortOption.PRICE_DESC)
        assert summaries == original

    def test_permutation(self, summaries):
        for option in SortOption:
            assert sorted(ids(sort_properties(summaries, option))) == ["a", "b", "c", "d"]


# =============================================================================
# Pagination and stats
# =============================================================================

class TestPaginate:

    def test_first_page(self):
        page = paginate(list(range(50)), page=1, page_size=20)

        assert page.items == list(range(20))
        assert page.total == 50
        assert page.total_pages == 3
        assert page.has_next
        assert not page.has_previous

    def test_last_page_partial(self):
        page = paginate(list(range(50)), page=3, page_size=20)
        assert page.items == list(range(40, 50))
        assert not page.has_next

    def test_past_end_clamps(self):
        page = paginate(list(range(5)), page=9, page_size=2)
        assert page.page == 3
        assert page.items == [4]

    def test_invalid_values_default(self):
        page = paginate(list(range(30)), page=0, page_size=-1)
        assert page.page == 1
        assert page.page_size == 24
        assert len(page.items) == 24

    def test_page_size_capped(self):
        page = paginate(list(range(300)), page_size=500, max_page_size=100)
        assert page.page_size == 100

    def test_non_positive_max_page_size(self):
        page = paginate(list(range(3)), page=2, page_size=10, max_page_size=0)

        assert page.page_size == 1
        assert page.items == [1]
        assert page.total_pages == 3

    def test_empty(self):
        page = paginate([], page=4)

        assert page.items == []
        assert page.page == 1
        assert page.total_pages == 1
        assert isinstance(page, Page)


class TestDashboardStats:

    def test_counts(self, summaries):
        filtered = summaries[:3]
        stats = dashboard_stats(summaries, filtered)

        assert stats.total == 4
        assert stats.filtered == 3
        assert stats.top_matches == 3
        assert stats.over_budget == 1
        assert stats.unanalyzed == 0
        assert stats.is_filtered

    def test_unfiltered(self, summaries):
        stats = dashboard_stats(summaries, summaries)
        assert not stats.is_filtered
        assert stats.unanalyzed == 1


# =============================================================================
# Service
# =============================================================================

@pytest.fixture
def records():
    properties = [
        RawProperty(id="p1", address="Damrak 1", city="Amsterdam", asking_price=300000),
        RawProperty(id="p2", address="Oudegracht 5", city="Utrecht", asking_price=450000, starred=True),
        RawProperty(id="p3", address="Grote Markt 3", city="Haarlem", asking_price=390000),
    ]
    analyses = [
        RawAnalysis(id="a1", property_id="p1", match_score=64, total_investment=320000,
                    within_budget=True, budget_remaining=80000, overall_risk_level="low"),
        RawAnalysis(id="a2", property_id="p2", match_score=91, total_investment=470000,
                    within_budget=True, budget_remaining=10000, overall_risk_level="high"),
    ]
    return properties, analyses


class TestDashboardService:

    def test_default_view(self, records):
        view = DashboardService().view(*records, query="")

        assert ids(view.page.items) == ["p2", "p1", "p3"]
        assert view.query_string == ""
        assert view.active_filters == 0
        assert view.stats.total == 3
        assert view.stats.unanalyzed == 1

    def test_filtered_and_sorted(self, records):
        view = DashboardService().view(*records, query="maxRisk=medium&sort=price_desc")

        assert ids(view.page.items) == ["p3", "p1"]
        assert view.stats.filtered == 2
        assert view.stats.total == 3
        assert view.query_string == "maxRisk=medium&sort=price_desc"

    def test_canonicalizes_query(self, records):
        view = DashboardService().view(*records, query="sort=score_desc&minScore=0&foo=bar")
        assert view.query_string == ""

    def test_derived_fields(self, records):
        view = DashboardService().view(*records, query={})
        by_id = {s.id: s for s in view.page.items}

        assert by_id["p2"].tier is Tier.EXCELLENT
        # 10000 / 470000 < 5%
        assert by_id["p2"].budget_status is BudgetStatus.STRETCH
        assert by_id["p1"].budget_utilization == 80

    def test_paging(self, records):
        view = DashboardService(default_page_size=2).view(*records, query="", page=2)

        assert ids(view.page.items) == ["p3"]
        assert view.page.total_pages == 2

    def test_to_dict(self, records):
        data = DashboardService().view(*records, query="city=Utrecht").to_dict()

        assert data["filters"]["cities"] == ["Utrecht"]
        assert data["active_filters"] == 1
        assert data["query"] == "city=Utrecht"
        assert data["pagination"]["total"] == 1
        assert data["items"][0]["id"] == "p2"
