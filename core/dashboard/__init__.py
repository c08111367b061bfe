"""
Dashboard filtering, sorting and query-state handling.

Operates on PropertySummary values produced by the summary mapper.
"""

from .filters import (
    FilterState,
    active_filter_count,
    filter_properties,
    is_risk_within,
    matches_filters,
)
from .sorting import SORT_KEYS, resolve_sort_option, sort_properties
from .query import (
    QueryParams,
    parse_filters,
    parse_int,
    serialize_filters,
    to_query_string,
)
from .pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Page, paginate
from .stats import DashboardStats, dashboard_stats
from .service import DashboardService, DashboardView

__all__ = [
    # Filter engine
    "FilterState",
    "active_filter_count",
    "filter_properties",
    "is_risk_within",
    "matches_filters",
    # Sort engine
    "SORT_KEYS",
    "resolve_sort_option",
    "sort_properties",
    # Query state codec
    "QueryParams",
    "parse_filters",
    "parse_int",
    "serialize_filters",
    "to_query_string",
    # Display
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "Page",
    "paginate",
    "DashboardStats",
    "dashboard_stats",
    "DashboardService",
    "DashboardView",
]
