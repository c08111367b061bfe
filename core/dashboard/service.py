"""
Dashboard pipeline: raw records + query -> one rendered page.

    raw records -> SummaryMapper -> filter_properties -> sort_properties -> paginate

The filter state travels explicitly from the codec through filtering and
sorting; nothing is read from ambient request context.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from ..config import DEFAULT_SCORING_CONFIG, ScoringConfig
from ..mapper import SummaryMapper
from ..models import PropertySummary, RawAnalysis, RawProperty
from .filters import FilterState, active_filter_count, filter_properties
from .pagination import MAX_PAGE_SIZE, Page, paginate
from .query import QueryInput, parse_filters, to_query_string
from .sorting import sort_properties
from .stats import DashboardStats, dashboard_stats


@dataclass(frozen=True)
class DashboardView:
    """Everything the dashboard needs to render one request."""
    state: FilterState
    page: Page[PropertySummary]
    stats: DashboardStats
    query_string: str

    @property
    def active_filters(self) -> int:
        return active_filter_count(self.state)

    def to_dict(self) -> dict:
        return {
            "filters": self.state.to_dict(),
            "active_filters": self.active_filters,
            "query": self.query_string,
            "stats": self.stats.to_dict(),
            "pagination": self.page.to_dict(),
            "items": [summary.to_dict() for summary in self.page.items],
        }


class DashboardService:
    """Runs the dashboard pipeline for a snapshot of raw records."""

    def __init__(
        self,
        config: ScoringConfig = DEFAULT_SCORING_CONFIG,
        default_page_size: Optional[int] = None,
        max_page_size: int = MAX_PAGE_SIZE,
    ):
        self._config = config
        self._mapper = SummaryMapper(config)
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    @property
    def config(self) -> ScoringConfig:
        return self._config

    def parse(self, query: QueryInput) -> FilterState:
        return parse_filters(query, self._config)

    def view(
        self,
        properties: Sequence[RawProperty],
        analyses: Sequence[RawAnalysis],
        query: QueryInput,
        page: Optional[int] = 1,
        page_size: Optional[int] = None,
    ) -> DashboardView:
        """
        Build the dashboard view for a request.

        Args:
            properties: Raw property records of the snapshot.
            analyses: Raw analysis records of the snapshot.
            query: The request's filter query.
            page: 1-based page number.
            page_size: Items per page (default: service default).

        Returns:
            DashboardView with the page, stats and canonical query.
        """
        state = self.parse(query)
        summaries = self._mapper.map(properties, analyses)
        filtered = filter_properties(summaries, state)
        ordered = sort_properties(filtered, state.sort_by, self._config)

        return DashboardView(
            state=state,
            page=paginate(
                ordered,
                page,
                page_size or self._default_page_size,
                self._max_page_size,
            ),
            stats=dashboard_stats(summaries, filtered),
            query_string=to_query_string(state, self._config),
        )
