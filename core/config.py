"""
Scoring configuration.

The stretch threshold, tier boundaries, default sort order and the number
of risk flags shown on a card are shared by the budget, tier, mapper, query
and sort code. They live on one frozen value object that callers build once
and pass explicitly.
"""

from dataclasses import dataclass, field

from .models import SortOption


# =============================================================================
# Defaults
# =============================================================================

# Within budget but less than 5% of the total investment remaining
DEFAULT_STRETCH_THRESHOLD = 0.05

# Minimum score (inclusive) for each tier
DEFAULT_EXCELLENT_THRESHOLD = 85.0
DEFAULT_STRONG_THRESHOLD = 70.0
DEFAULT_MODERATE_THRESHOLD = 50.0
DEFAULT_WEAK_THRESHOLD = 25.0

DEFAULT_TOP_RISK_FLAG_LIMIT = 2


@dataclass(frozen=True)
class TierThresholds:
    """
    Minimum match score for each tier.

    A score equal to a threshold belongs to that (higher) tier. Scores
    below ``weak`` classify as not recommended.
    """
    excellent: float = DEFAULT_EXCELLENT_THRESHOLD
    strong: float = DEFAULT_STRONG_THRESHOLD
    moderate: float = DEFAULT_MODERATE_THRESHOLD
    weak: float = DEFAULT_WEAK_THRESHOLD

    def __post_init__(self):
        """Validate threshold ordering."""
        ordered = [self.excellent, self.strong, self.moderate, self.weak]
        if any(value < 0 or value > 100 for value in ordered):
            raise ValueError("tier thresholds must be between 0 and 100")
        if not (self.excellent > self.strong > self.moderate > self.weak):
            raise ValueError("tier thresholds must be strictly descending")

    def to_dict(self) -> dict:
        return {
            "excellent": self.excellent,
            "strong": self.strong,
            "moderate": self.moderate,
            "weak": self.weak,
        }


@dataclass(frozen=True)
class ScoringConfig:
    """Defaults shared by the scoring and dashboard pipeline."""
    stretch_threshold: float = DEFAULT_STRETCH_THRESHOLD
    tier_thresholds: TierThresholds = field(default_factory=TierThresholds)
    default_sort: SortOption = SortOption.SCORE_DESC
    top_risk_flag_limit: int = DEFAULT_TOP_RISK_FLAG_LIMIT

    def __post_init__(self):
        """Validate configuration values."""
        if not 0 <= self.stretch_threshold < 1:
            raise ValueError("stretch_threshold must be in [0, 1)")
        if self.top_risk_flag_limit < 0:
            raise ValueError("top_risk_flag_limit must be non-negative")
        if not isinstance(self.default_sort, SortOption):
            raise ValueError("default_sort must be a SortOption")

    def to_dict(self) -> dict:
        return {
            "stretch_threshold": self.stretch_threshold,
            "tier_thresholds": self.tier_thresholds.to_dict(),
            "default_sort": self.default_sort.value,
            "top_risk_flag_limit": self.top_risk_flag_limit,
        }


DEFAULT_SCORING_CONFIG = ScoringConfig()
