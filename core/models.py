"""
Data models for the property dashboard pipeline.

Raw records mirror the content-management query shapes and are parsed
tolerantly: a malformed field becomes ``None`` (or its documented default)
instead of raising. Everything downstream of the raw records operates on
typed, already-defaulted values.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple


# =============================================================================
# Enumerations
# =============================================================================

class _LookupEnum(Enum):
    """Enum with a tolerant, case-insensitive string lookup."""

    @classmethod
    def from_string(cls, value: Any):
        """Convert string to member, returning None for unknown values."""
        if not isinstance(value, str):
            return None
        normalised = value.lower().strip().replace("-", "_").replace(" ", "_")
        for member in cls:
            if member.value == normalised:
                return member
        return None


class Tier(_LookupEnum):
    """
    Qualitative match band, ordered best to worst.

    Derived from the match score by the tier classifier.
    """
    EXCELLENT = "excellent"
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"
    NOT_RECOMMENDED = "not_recommended"

    @property
    def rank(self) -> int:
        """Sort order (0 = best)."""
        return list(Tier).index(self)

    @property
    def label(self) -> str:
        return TIER_LABELS[self]


class Recommendation(_LookupEnum):
    """Suggested next step for a property."""
    VISIT_IMMEDIATELY = "visit_immediately"
    WORTH_VISITING = "worth_visiting"
    NEEDS_RESEARCH = "needs_research"
    SKIP = "skip"

    @property
    def label(self) -> str:
        return RECOMMENDATION_LABELS[self]


class RiskLevel(_LookupEnum):
    """Risk severity on the ordinal scale low < medium < high."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return list(RiskLevel).index(self)

    @property
    def label(self) -> str:
        return RISK_LEVEL_LABELS[self]


class BudgetStatus(_LookupEnum):
    """
    How close the total investment is to the buyer's maximum budget.

    safe: within budget, at least the stretch threshold remaining
    stretch: within budget, less than the stretch threshold remaining
    over_budget: not within budget
    """
    SAFE = "safe"
    STRETCH = "stretch"
    OVER_BUDGET = "over_budget"

    @property
    def label(self) -> str:
        return BUDGET_STATUS_LABELS[self]


class Condition(_LookupEnum):
    """Overall renovation condition of a property."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    BAD = "bad"


class SortOption(_LookupEnum):
    """Named dashboard sort orders."""
    SCORE_DESC = "score_desc"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    INVESTMENT_ASC = "investment_asc"
    DATE_DESC = "date_desc"

    @property
    def label(self) -> str:
        return SORT_LABELS[self]


class PropertyType(_LookupEnum):
    """Dutch property types; OTHER is the catch-all."""
    APPARTEMENT = "appartement"
    TUSSENWONING = "tussenwoning"
    HOEKWONING = "hoekwoning"
    TWEE_ONDER_EEN_KAP = "twee_onder_een_kap"
    VRIJSTAAND = "vrijstaand"
    PENTHOUSE = "penthouse"
    GRACHTENPAND = "grachtenpand"
    BOVENWONING = "bovenwoning"
    BENEDENWONING = "benedenwoning"
    MAISONNETTE = "maisonnette"
    VILLA = "villa"
    WOONBOERDERIJ = "woonboerderij"
    OTHER = "overig"


# Dutch display labels
TIER_LABELS: Dict[Tier, str] = {
    Tier.EXCELLENT: "Topmatch",
    Tier.STRONG: "Goede match",
    Tier.MODERATE: "Redelijke match",
    Tier.WEAK: "Slechte match",
    Tier.NOT_RECOMMENDED: "Niet geschikt",
}

RECOMMENDATION_LABELS: Dict[Recommendation, str] = {
    Recommendation.VISIT_IMMEDIATELY: "Direct bezichtigen",
    Recommendation.WORTH_VISITING: "Bezichtigen",
    Recommendation.NEEDS_RESEARCH: "Nader onderzoek",
    Recommendation.SKIP: "Overslaan",
}

RISK_LEVEL_LABELS: Dict[RiskLevel, str] = {
    RiskLevel.LOW: "Laag",
    RiskLevel.MEDIUM: "Gemiddeld",
    RiskLevel.HIGH: "Hoog",
}

BUDGET_STATUS_LABELS: Dict[BudgetStatus, str] = {
    BudgetStatus.SAFE: "Binnen budget",
    BudgetStatus.STRETCH: "Krap",
    BudgetStatus.OVER_BUDGET: "Boven budget",
}

SORT_LABELS: Dict[SortOption, str] = {
    SortOption.SCORE_DESC: "Score (hoogste eerst)",
    SortOption.PRICE_ASC: "Prijs (laagste eerst)",
    SortOption.PRICE_DESC: "Prijs (hoogste eerst)",
    SortOption.INVESTMENT_ASC: "Investering (laagste eerst)",
    SortOption.DATE_DESC: "Nieuwste eerst",
}


# =============================================================================
# Coercion helpers
# =============================================================================

def _as_float(value: Any) -> Optional[float]:
    """Coerce a loosely typed number, None when not numeric or not finite."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    # NaN and infinity (valid JSON for Python) are treated as missing
    return number if math.isfinite(number) else None


def _as_int(value: Any) -> Optional[int]:
    number = _as_float(value)
    if number is None:
        return None
    return int(number)


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    return None


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    return None


def _as_str_list(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str))


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp; naive values are taken as UTC."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _slug(value: Any) -> str:
    if isinstance(value, dict):
        return _as_str(value.get("current")) or ""
    return _as_str(value) or ""


# =============================================================================
# Raw records
# =============================================================================

@dataclass(frozen=True)
class RawProperty:
    """
    A property listing as returned by the content-management query layer.

    Read-only to this pipeline.
    """
    id: str
    address: str = ""
    slug: str = ""
    city: str = ""
    asking_price: float = 0.0
    living_area: float = 0.0
    rooms: int = 0
    bedrooms: int = 0
    bathrooms: Optional[int] = None
    energy_label: Optional[str] = None
    features: Tuple[str, ...] = ()
    starred: bool = False
    funda_url: Optional[str] = None
    days_on_market: Optional[int] = None
    listing_status: str = ""
    image_url: Optional[str] = None
    image_lqip: Optional[str] = None
    image_alt: Optional[str] = None
    neighborhood: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawProperty":
        """Create instance from a content-management record."""
        data = _as_dict(data)
        main_image = _as_dict(data.get("mainImage"))
        asset = _as_dict(main_image.get("asset"))
        metadata = _as_dict(asset.get("metadata"))
        neighborhood = _as_dict(data.get("neighborhood"))

        return cls(
            id=_as_str(data.get("_id")) or "",
            address=_as_str(data.get("address")) or "",
            slug=_slug(data.get("slug")),
            city=_as_str(data.get("city")) or "",
            asking_price=_as_float(data.get("askingPrice")) or 0.0,
            living_area=_as_float(data.get("livingArea")) or 0.0,
            rooms=_as_int(data.get("rooms")) or 0,
            bedrooms=_as_int(data.get("bedrooms")) or 0,
            bathrooms=_as_int(data.get("bathrooms")),
            energy_label=_as_str(data.get("energyLabel")),
            features=_as_str_list(data.get("features")),
            starred=_as_bool(data.get("starred")) or False,
            funda_url=_as_str(data.get("fundaUrl")),
            days_on_market=_as_int(data.get("daysOnMarket")),
            listing_status=_as_str(data.get("listingStatus")) or "",
            image_url=_as_str(asset.get("url")),
            image_lqip=_as_str(metadata.get("lqip")),
            image_alt=_as_str(main_image.get("alt")),
            neighborhood=_as_str(neighborhood.get("name")),
        )


@dataclass(frozen=True)
class RawRisk:
    """A categorized risk finding from an analysis."""
    category: str
    level: str
    description: str = ""
    mitigation: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawRisk":
        data = _as_dict(data)
        return cls(
            category=_as_str(data.get("category")) or "",
            level=_as_str(data.get("level")) or "",
            description=_as_str(data.get("description")) or "",
            mitigation=_as_str(data.get("mitigation")),
        )


@dataclass(frozen=True)
class RawAnalysis:
    """
    A per-property analysis produced by the external analysis step.

    ``property`` holds the embedded property record when the query
    projected one; ``property_id`` is set whenever the analysis references
    a property at all (embedded or by ``_ref``).
    """
    id: str
    property_id: Optional[str] = None
    property: Optional[RawProperty] = None
    match_score: float = 0.0
    tier_hint: Optional[str] = None
    recommendation: Optional[str] = None
    total_investment: Optional[float] = None
    renovation_cost_low: Optional[float] = None
    renovation_cost_mid: Optional[float] = None
    renovation_cost_high: Optional[float] = None
    overall_condition: Optional[str] = None
    overall_risk_level: Optional[str] = None
    dealbreakers: Tuple[str, ...] = ()
    within_budget: Optional[bool] = None
    budget_remaining: Optional[float] = None
    risks: Tuple[RawRisk, ...] = ()
    negotiation_signal_count: int = 0
    analyzed_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawAnalysis":
        """Create instance from a content-management record."""
        data = _as_dict(data)

        embedded = None
        property_id = _as_str(data.get("propertyId"))
        prop = data.get("property")
        if isinstance(prop, dict):
            if prop.get("_id"):
                embedded = RawProperty.from_dict(prop)
                property_id = embedded.id
            elif prop.get("_ref"):
                property_id = _as_str(prop.get("_ref"))

        risks = data.get("risks")
        signals = data.get("negotiationSignals")

        return cls(
            id=_as_str(data.get("_id")) or "",
            property_id=property_id,
            property=embedded,
            match_score=_as_float(data.get("matchScore")) or 0.0,
            tier_hint=_as_str(data.get("tier")),
            recommendation=_as_str(data.get("recommendation")),
            total_investment=_as_float(data.get("totalInvestment")),
            renovation_cost_low=_as_float(data.get("totalRenovationCostLow")),
            renovation_cost_mid=_as_float(data.get("totalRenovationCostMid")),
            renovation_cost_high=_as_float(data.get("totalRenovationCostHigh")),
            overall_condition=_as_str(data.get("overallCondition")),
            overall_risk_level=_as_str(data.get("overallRiskLevel")),
            dealbreakers=_as_str_list(data.get("dealbreakers")),
            within_budget=_as_bool(data.get("withinBudget")),
            budget_remaining=_as_float(data.get("budgetRemaining")),
            risks=tuple(
                RawRisk.from_dict(r) for r in risks if isinstance(r, dict)
            ) if isinstance(risks, list) else (),
            negotiation_signal_count=len(signals) if isinstance(signals, list) else 0,
            analyzed_at=_as_datetime(data.get("analyzedAt")),
        )


# =============================================================================
# Derived records
# =============================================================================

@dataclass(frozen=True)
class RiskFlag:
    """A compact risk indicator shown on a property card."""
    label: str
    severity: RiskLevel

    def to_dict(self) -> dict:
        return {"label": self.label, "severity": self.severity.value}


@dataclass(frozen=True)
class PropertySummary:
    """
    Flattened, display-ready view of a property and its latest analysis.

    Rebuilt per request; the filter and sort engines operate on these.
    A property without an analysis still gets a summary with zeroed
    scoring fields.
    """
    # Identity and listing
    id: str
    slug: str
    address: str
    city: str
    neighborhood: Optional[str]
    asking_price: float
    living_area: float
    rooms: int
    bedrooms: int
    bathrooms: int
    energy_label: Optional[str]
    image_url: Optional[str]
    image_lqip: Optional[str]
    starred: bool
    funda_url: Optional[str]
    days_on_market: Optional[int]

    # Scoring
    match_score: float
    tier: Tier
    recommendation: Recommendation
    has_analysis: bool

    # Financials
    investment_low: float
    investment_mid: float
    investment_high: float
    budget_status: BudgetStatus
    budget_utilization: int

    # Risk and renovation
    overall_risk: RiskLevel
    dealbreakers: Tuple[str, ...] = ()
    top_risk_flags: Tuple[RiskFlag, ...] = ()
    renovation_condition: Optional[Condition] = None
    renovation_estimate_low: float = 0.0
    renovation_estimate_mid: float = 0.0
    renovation_estimate_high: float = 0.0
    negotiation_signal_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "id": self.id,
            "slug": self.slug,
            "address": self.address,
            "city": self.city,
            "neighborhood": self.neighborhood,
            "asking_price": self.asking_price,
            "living_area": self.living_area,
            "rooms": self.rooms,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "energy_label": self.energy_label,
            "image_url": self.image_url,
            "image_lqip": self.image_lqip,
            "starred": self.starred,
            "funda_url": self.funda_url,
            "days_on_market": self.days_on_market,
            "match_score": self.match_score,
            "tier": self.tier.value,
            "recommendation": self.recommendation.value,
            "has_analysis": self.has_analysis,
            "investment_low": self.investment_low,
            "investment_mid": self.investment_mid,
            "investment_high": self.investment_high,
            "budget_status": self.budget_status.value,
            "budget_utilization": self.budget_utilization,
            "overall_risk": self.overall_risk.value,
            "dealbreakers": list(self.dealbreakers),
            "top_risk_flags": [flag.to_dict() for flag in self.top_risk_flags],
            "renovation_condition": (
                self.renovation_condition.value if self.renovation_condition else None
            ),
            "renovation_estimate_low": self.renovation_estimate_low,
            "renovation_estimate_mid": self.renovation_estimate_mid,
            "renovation_estimate_high": self.renovation_estimate_high,
            "negotiation_signal_count": self.negotiation_signal_count,
        }


@dataclass(frozen=True)
class InvestmentRange:
    """Total investment expanded by the renovation cost spread."""
    low: float
    mid: float
    high: float

    @property
    def is_ordered(self) -> bool:
        return self.low <= self.mid <= self.high
