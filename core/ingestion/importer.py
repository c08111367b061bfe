"""
Listing importer - scraped pyfunda listing -> property document fields.

Runs once per newly ingested listing. Top-level listing fields are used
when present; the free-form ``characteristics`` key/value pairs fill the
gaps through the field parsers.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Final, Optional

from core.ingestion.parsers import (
    is_finite_number,
    parse_area,
    parse_boolean_phrase,
    parse_energy_label,
    parse_property_type,
    parse_vve_contribution,
)
from core.models import PropertyType


logger = logging.getLogger(__name__)


SOURCE_TYPE: Final[str] = "pyfunda"
INITIAL_LISTING_STATUS: Final[str] = "beschikbaar"

# Characteristic keys as they appear on the listing page
KEY_VVE_CONTRIBUTION: Final[str] = "Bijdrage VvE"
KEY_RESERVE_FUND: Final[str] = "Reservefonds aanwezig"
KEY_MAINTENANCE_PLAN: Final[str] = "Onderhoudsplan"
KEY_KVK_REGISTERED: Final[str] = "Inschrijving KvK"
KEY_BUILDING_INSURANCE: Final[str] = "Opstalverzekering"
KEY_LIVING_AREA: Final[str] = "Woonoppervlakte"
KEY_PLOT_AREA: Final[str] = "Perceeloppervlakte"
KEY_ENERGY_LABEL: Final[str] = "Energielabel"

# Boolean listing flag -> Dutch feature name. False means absent, not unknown.
FEATURE_FLAGS: Final[dict[str, str]] = {
    "has_garden": "tuin",
    "has_balcony": "balkon",
    "has_roof_terrace": "dakterras",
    "has_garage": "garage",
    "has_parking": "parkeerplaats",
    "has_storage": "berging",
    "has_elevator": "lift",
    "has_attic": "zolder",
    "has_basement": "kelder",
    "has_solar_panels": "zonnepanelen",
}


# =============================================================================
# Records
# =============================================================================

@dataclass(frozen=True)
class VveData:
    """Homeowners' association (VvE) details; None means unknown."""

    monthly_contribution: Optional[float] = None
    has_reserve_fund: Optional[bool] = None
    has_maintenance_plan: Optional[bool] = None
    kvk_registered: Optional[bool] = None
    has_building_insurance: Optional[bool] = None


@dataclass(frozen=True)
class DataSourceRecord:
    """Provenance of an imported listing."""

    source: str
    fetched_at: datetime
    fields_provided: tuple[str, ...] = ()


@dataclass(frozen=True)
class ImportedProperty:
    """Normalized property fields ready to be written as a document."""

    address: Optional[str]
    zip_code: Optional[str]
    city: Optional[str]
    property_type: PropertyType
    asking_price: Optional[float]
    living_area: Optional[float]
    plot_area: Optional[float]
    rooms: Optional[int]
    bedrooms: Optional[int]
    bathrooms: Optional[int]
    build_year: Optional[int]
    energy_label: Optional[str]
    features: tuple[str, ...]
    description: Optional[str]
    price_per_sqm: Optional[int]
    photo_urls: tuple[str, ...]
    floor_plan_urls: tuple[str, ...]
    funda_url: Optional[str]
    funda_id: Optional[str]
    vve: VveData
    data_source: DataSourceRecord
    source_type: str = SOURCE_TYPE
    listing_status: str = INITIAL_LISTING_STATUS
    listing_date: Optional[str] = None
    raw_data: str = field(default="", repr=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        result = asdict(self)
        result["property_type"] = self.property_type.value
        result["features"] = list(self.features)
        result["photo_urls"] = list(self.photo_urls)
        result["floor_plan_urls"] = list(self.floor_plan_urls)
        result["data_source"]["fetched_at"] = self.data_source.fetched_at.isoformat()
        result["data_source"]["fields_provided"] = list(self.data_source.fields_provided)
        return result


# =============================================================================
# Extraction
# =============================================================================

def extract_vve_data(characteristics: dict[str, Any]) -> VveData:
    """Read the VvE characteristics of a listing."""
    return VveData(
        monthly_contribution=parse_vve_contribution(characteristics.get(KEY_VVE_CONTRIBUTION)),
        has_reserve_fund=parse_boolean_phrase(characteristics.get(KEY_RESERVE_FUND)),
        has_maintenance_plan=parse_boolean_phrase(characteristics.get(KEY_MAINTENANCE_PLAN)),
        kvk_registered=parse_boolean_phrase(characteristics.get(KEY_KVK_REGISTERED)),
        has_building_insurance=parse_boolean_phrase(characteristics.get(KEY_BUILDING_INSURANCE)),
    )


def extract_features(listing: dict[str, Any]) -> list[str]:
    """Dutch feature names for every ``has_*`` flag that is exactly True."""
    return [name for flag, name in FEATURE_FLAGS.items() if listing.get(flag) is True]


def _positive_number(value: Any) -> Optional[float]:
    if is_finite_number(value) and value > 0:
        return float(value)
    return None


def _positive_int(value: Any) -> Optional[int]:
    number = _positive_number(value)
    return int(number) if number is not None else None


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _url_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(url for url in value if isinstance(url, str))


def map_listing_to_property(
    listing: dict[str, Any],
    fetched_at: Optional[datetime] = None,
) -> ImportedProperty:
    """
    Map a raw pyfunda listing to property fields.

    Args:
        listing: Raw listing object as returned by the scraper
        fetched_at: Provenance timestamp (default: now, UTC)

    Returns:
        ImportedProperty with every field normalized or None
    """
    characteristics = listing.get("characteristics")
    if not isinstance(characteristics, dict):
        characteristics = {}

    asking_price = _positive_number(listing.get("asking_price"))
    living_area = _positive_number(listing.get("living_area")) or parse_area(
        characteristics.get(KEY_LIVING_AREA)
    )
    plot_area = _positive_number(listing.get("plot_area")) or parse_area(
        characteristics.get(KEY_PLOT_AREA)
    )

    price_per_sqm = None
    if asking_price and living_area:
        ratio = asking_price / living_area
        if math.isfinite(ratio):
            price_per_sqm = int(ratio + 0.5)

    raw_id = listing.get("id")
    funda_id = _text(listing.get("funda_id")) or (str(raw_id) if raw_id is not None else None)
    if funda_id is None:
        logger.debug("Listing without funda id: %s", listing.get("url"))

    provided = tuple(
        key for key, value in listing.items()
        if value is not None and key != "characteristics"
    )

    return ImportedProperty(
        address=_text(listing.get("address")),
        zip_code=_text(listing.get("zip_code")),
        city=_text(listing.get("city")),
        property_type=parse_property_type(listing.get("property_type")),
        asking_price=asking_price,
        living_area=living_area,
        plot_area=plot_area,
        rooms=_positive_int(listing.get("num_rooms")),
        bedrooms=_positive_int(listing.get("num_bedrooms")),
        bathrooms=_positive_int(listing.get("num_bathrooms")),
        build_year=_positive_int(listing.get("build_year")),
        energy_label=parse_energy_label(
            characteristics.get(KEY_ENERGY_LABEL),
            listing.get("energy_label"),
        ),
        features=tuple(extract_features(listing)),
        description=_text(listing.get("description")),
        price_per_sqm=price_per_sqm,
        photo_urls=_url_list(listing.get("photo_urls")),
        floor_plan_urls=_url_list(listing.get("floorplan_urls")),
        funda_url=_text(listing.get("url")),
        funda_id=funda_id,
        vve=extract_vve_data(characteristics),
        data_source=DataSourceRecord(
            source=SOURCE_TYPE,
            fetched_at=fetched_at or datetime.now(timezone.utc),
            fields_provided=provided,
        ),
        listing_date=_text(listing.get("listing_date")),
        raw_data=json.dumps(listing, default=str, ensure_ascii=False),
    )
