"""
Summary Mapper - joins properties with their latest analysis.

This is the validation boundary of the pipeline: raw records go in,
fully typed and defaulted PropertySummary values come out. Budget, risk
and tier derivations are applied here so the dashboard engines only ever
see finished summaries.

Join contract:
- An analysis belongs to the property it references (embedded record or
  ``_ref``); analyses without a reference are ignored.
- Only the most recent analysis per property counts. A timestamped
  analysis beats an untimestamped one; otherwise the later one in input
  order wins.
- When no property list is supplied, the properties embedded in the
  latest analyses form the property list. Properties that only exist
  without an analysis cannot appear in that mode.
- Every property in the list yields exactly one summary, analyzed or not.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from .budget import (
    BudgetInput,
    derive_budget_status,
    derive_budget_utilization,
    derive_investment_range,
)
from .config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .models import (
    Condition,
    InvestmentRange,
    PropertySummary,
    RawAnalysis,
    RawProperty,
    Recommendation,
    RiskLevel,
    Tier,
)
from .risk import derive_top_risk_flags
from .scoring import TierClassifier


logger = logging.getLogger(__name__)


class SummaryMapper:
    """
    Builds PropertySummary values from raw property and analysis records.

    Stateless apart from its configuration; safe to share between
    requests.
    """

    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG):
        """
        Initialize mapper.

        Args:
            config: Scoring defaults (stretch threshold, tiers, flag limit)
        """
        self._config = config
        self._classifier = TierClassifier.from_config(config)

    def map(
        self,
        properties: Sequence[RawProperty],
        analyses: Sequence[RawAnalysis],
    ) -> List[PropertySummary]:
        """
        Map raw records to one summary per property.

        Args:
            properties: Property records; may be empty when the analyses
                embed their property.
            analyses: Analysis records, possibly several per property.

        Returns:
            Summaries in property order.
        """
        latest = latest_analyses(analyses)

        if not properties:
            properties = [
                analysis.property
                for analysis in latest.values()
                if analysis.property is not None
            ]

        return [self.summarize(prop, latest.get(prop.id)) for prop in properties]

    def summarize(
        self,
        prop: RawProperty,
        analysis: Optional[RawAnalysis],
    ) -> PropertySummary:
        """Build the summary for a single property and its analysis."""
        if analysis is None:
            return self._unanalyzed_summary(prop)

        reno_low = analysis.renovation_cost_low or 0.0
        reno_mid = analysis.renovation_cost_mid or 0.0
        reno_high = analysis.renovation_cost_high or 0.0
        total_mid = (
            analysis.total_investment
            if analysis.total_investment is not None
            else prop.asking_price
        )

        investment = derive_investment_range(total_mid, reno_low, reno_mid, reno_high)
        if not investment.is_ordered:
            logger.warning(
                "Inverted investment range for property %s (analysis %s): %s / %s / %s",
                prop.id,
                analysis.id,
                investment.low,
                investment.mid,
                investment.high,
            )

        budget = BudgetInput.from_analysis(analysis)
        utilization = derive_budget_utilization(budget)
        if utilization > 100 and analysis.within_budget:
            logger.warning(
                "Analysis %s is within budget but utilization is %s%%",
                analysis.id,
                utilization,
            )

        tier = self._classifier.classify(analysis.match_score)
        if analysis.tier_hint and Tier.from_string(analysis.tier_hint) is not tier:
            logger.debug(
                "Tier hint %r of analysis %s differs from classified tier %s",
                analysis.tier_hint,
                analysis.id,
                tier.value,
            )

        return self._base_summary(
            prop,
            investment,
            match_score=analysis.match_score,
            tier=tier,
            recommendation=(
                Recommendation.from_string(analysis.recommendation) or Recommendation.SKIP
            ),
            has_analysis=True,
            budget_status=derive_budget_status(budget, self._config),
            budget_utilization=utilization,
            overall_risk=RiskLevel.from_string(analysis.overall_risk_level) or RiskLevel.LOW,
            dealbreakers=analysis.dealbreakers,
            top_risk_flags=tuple(
                derive_top_risk_flags(analysis.risks, self._config.top_risk_flag_limit)
            ),
            renovation_condition=Condition.from_string(analysis.overall_condition),
            renovation_estimate_low=reno_low,
            renovation_estimate_mid=reno_mid,
            renovation_estimate_high=reno_high,
            negotiation_signal_count=analysis.negotiation_signal_count,
        )

    def _unanalyzed_summary(self, prop: RawProperty) -> PropertySummary:
        """Fully defaulted summary for a property without an analysis."""
        return self._base_summary(
            prop,
            InvestmentRange(low=0.0, mid=0.0, high=0.0),
            match_score=0.0,
            tier=Tier.NOT_RECOMMENDED,
            recommendation=Recommendation.SKIP,
            has_analysis=False,
            budget_status=derive_budget_status(None, self._config),
            budget_utilization=derive_budget_utilization(None),
            overall_risk=RiskLevel.LOW,
        )

    @staticmethod
    def _base_summary(
        prop: RawProperty,
        investment: InvestmentRange,
        **scoring,
    ) -> PropertySummary:
        return PropertySummary(
            id=prop.id,
            slug=prop.slug,
            address=prop.address,
            city=prop.city,
            neighborhood=prop.neighborhood,
            asking_price=prop.asking_price,
            living_area=prop.living_area,
            rooms=prop.rooms,
            bedrooms=prop.bedrooms,
            bathrooms=prop.bathrooms or 0,
            energy_label=prop.energy_label,
            image_url=prop.image_url,
            image_lqip=prop.image_lqip,
            starred=prop.starred,
            funda_url=prop.funda_url,
            days_on_market=prop.days_on_market,
            investment_low=investment.low,
            investment_mid=investment.mid,
            investment_high=investment.high,
            **scoring,
        )


def latest_analyses(analyses: Iterable[RawAnalysis]) -> Dict[str, RawAnalysis]:
    """
    Pick the most recent analysis per property id.

    Keys keep the position of the first analysis seen for each property.
    """
    latest: Dict[str, RawAnalysis] = {}
    for analysis in analyses:
        if not analysis.property_id:
            logger.debug("Ignoring analysis %s without property reference", analysis.id)
            continue
        current = latest.get(analysis.property_id)
        if current is None or _is_newer(analysis, current):
            if current is not None:
                logger.debug(
                    "Analysis %s supersedes %s for property %s",
                    analysis.id,
                    current.id,
                    analysis.property_id,
                )
            latest[analysis.property_id] = analysis
    return latest


def _is_newer(candidate: RawAnalysis, current: RawAnalysis) -> bool:
    if candidate.analyzed_at is None:
        return current.analyzed_at is None
    if current.analyzed_at is None:
        return True
    return candidate.analyzed_at >= current.analyzed_at


def map_summaries(
    properties: Sequence[RawProperty],
    analyses: Sequence[RawAnalysis],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> List[PropertySummary]:
    """Map raw records to summaries with the given configuration."""
    return SummaryMapper(config).map(properties, analyses)
