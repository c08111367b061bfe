"""
Ingestion - normalization of newly scraped listings.

Field parsers turn free-form scraped strings into typed values; the
importer applies them to a whole listing.
"""

from core.ingestion.parsers import (
    parse_area,
    parse_boolean_phrase,
    parse_comma_separated,
    parse_currency,
    parse_energy_label,
    parse_property_type,
    parse_vve_contribution,
)
from core.ingestion.importer import (
    DataSourceRecord,
    ImportedProperty,
    VveData,
    extract_features,
    extract_vve_data,
    map_listing_to_property,
)

__all__ = [
    # Field parsers
    "parse_area",
    "parse_boolean_phrase",
    "parse_comma_separated",
    "parse_currency",
    "parse_energy_label",
    "parse_property_type",
    "parse_vve_contribution",
    # Listing importer
    "DataSourceRecord",
    "ImportedProperty",
    "VveData",
    "extract_features",
    "extract_vve_data",
    "map_listing_to_property",
]
