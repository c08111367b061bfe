"""
Match score tier classification.
"""

from typing import List, Optional, Tuple

from .config import DEFAULT_SCORING_CONFIG, ScoringConfig, TierThresholds
from .models import Tier


class TierClassifier:
    """
    Maps a continuous match score (0-100) to one of five ordered tiers.

    Thresholds are inclusive lower bounds and the highest threshold met
    wins:
    - Excellent: score >= 85
    - Strong: score >= 70
    - Moderate: score >= 50
    - Weak: score >= 25
    - Not recommended: below 25
    """

    def __init__(self, thresholds: Optional[TierThresholds] = None):
        """
        Initialize classifier.

        Args:
            thresholds: Custom thresholds (default: the scoring defaults)
        """
        self._thresholds = thresholds or DEFAULT_SCORING_CONFIG.tier_thresholds

    @classmethod
    def from_config(cls, config: ScoringConfig) -> "TierClassifier":
        return cls(config.tier_thresholds)

    @property
    def thresholds(self) -> TierThresholds:
        return self._thresholds

    def classify(self, score: float) -> Tier:
        """Classify a score into a tier."""
        for tier, minimum in self._bands():
            if score >= minimum:
                return tier
        return Tier.NOT_RECOMMENDED

    def minimum_score(self, tier: Tier) -> float:
        """Lowest score that still classifies into ``tier``."""
        for band, minimum in self._bands():
            if band is tier:
                return minimum
        return 0.0

    def _bands(self) -> List[Tuple[Tier, float]]:
        t = self._thresholds
        return [
            (Tier.EXCELLENT, t.excellent),
            (Tier.STRONG, t.strong),
            (Tier.MODERATE, t.moderate),
            (Tier.WEAK, t.weak),
        ]


def classify_tier(score: float, thresholds: Optional[TierThresholds] = None) -> Tier:
    """Classify a score with default or custom thresholds."""
    return TierClassifier(thresholds).classify(score)
