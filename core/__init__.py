"""
Property Dashboard - Core Scoring & Aggregation Pipeline

Pipeline:
1. Ingestion (field parsers for newly scraped listings)
2. Summary mapping (join properties with their latest analysis)
3. Budget derivation (status, utilization, investment range)
4. Risk aggregation (top risk flags)
5. Tier classification (match score -> tier)
6. Dashboard (filter, sort, paginate under a URL-encoded query state)

Every stage is a pure function of an immutable snapshot of raw records.
"""

from .models import (
    BudgetStatus,
    Condition,
    InvestmentRange,
    PropertySummary,
    PropertyType,
    RawAnalysis,
    RawProperty,
    RawRisk,
    Recommendation,
    RiskFlag,
    RiskLevel,
    SortOption,
    Tier,
)
from .config import DEFAULT_SCORING_CONFIG, ScoringConfig, TierThresholds
from .budget import (
    BudgetInput,
    derive_budget_status,
    derive_budget_utilization,
    derive_investment_range,
)
from .risk import derive_top_risk_flags
from .scoring import TierClassifier, classify_tier
from .mapper import SummaryMapper, latest_analyses, map_summaries
from .snapshot import Snapshot, SnapshotError, load_snapshot

__all__ = [
    # Models
    "BudgetStatus",
    "Condition",
    "InvestmentRange",
    "PropertySummary",
    "PropertyType",
    "RawAnalysis",
    "RawProperty",
    "RawRisk",
    "Recommendation",
    "RiskFlag",
    "RiskLevel",
    "SortOption",
    "Tier",
    # Configuration
    "DEFAULT_SCORING_CONFIG",
    "ScoringConfig",
    "TierThresholds",
    # Budget deriver
    "BudgetInput",
    "derive_budget_status",
    "derive_budget_utilization",
    "derive_investment_range",
    # Risk aggregator
    "derive_top_risk_flags",
    # Tier classifier
    "TierClassifier",
    "classify_tier",
    # Summary mapper
    "SummaryMapper",
    "latest_analyses",
    "map_summaries",
    # Snapshot
    "Snapshot",
    "SnapshotError",
    "load_snapshot",
]
