"""
Field parsers for scraped Dutch listing data.

Scraped characteristics arrive as free-form strings ("€ 1.482 per jaar",
"181 m²", "Wat betekent dit?"). Each parser returns a typed value, or
None / an empty list when the input cannot be parsed. None means
"unknown" and is distinct from False or 0. No parser raises.
"""

import logging
import math
import re
from typing import Any, Dict, Final, List, Optional, Pattern

from core.models import PropertyType


logger = logging.getLogger(__name__)


# =============================================================================
# Patterns and vocabularies
# =============================================================================

CURRENCY_SYMBOLS: Final[Pattern] = re.compile(r"€|EUR", re.IGNORECASE)
WHITESPACE: Final[Pattern] = re.compile(r"\s+")
# Trailing unit phrase such as "per maand" / "per jaar" (whitespace removed)
UNIT_SUFFIX: Final[Pattern] = re.compile(r"per.*", re.IGNORECASE)
LEADING_NUMBER: Final[Pattern] = re.compile(r"^[-+]?\d+(?:\.\d+)?")
FIRST_NUMERIC_RUN: Final[Pattern] = re.compile(r"\d[\d.,]*")
YEARLY_PHRASE: Final[Pattern] = re.compile(r"per\s*(?:jaar|year)|jaarlijks", re.IGNORECASE)

# Filler text the scraper returns instead of an energy label
PLACEHOLDER_MARKER: Final[str] = "betekent"

TRUE_PHRASES: Final[frozenset] = frozenset({"ja", "aanwezig", "yes", "true"})
FALSE_PHRASES: Final[frozenset] = frozenset({"nee", "niet aanwezig", "no", "false"})

# Substring -> property type; first match wins
PROPERTY_TYPE_MAP: Final[Dict[str, PropertyType]] = {
    "appartement": PropertyType.APPARTEMENT,
    "apartment": PropertyType.APPARTEMENT,
    "tussenwoning": PropertyType.TUSSENWONING,
    "hoekwoning": PropertyType.HOEKWONING,
    "twee-onder-een-kap": PropertyType.TWEE_ONDER_EEN_KAP,
    "2-onder-1-kap": PropertyType.TWEE_ONDER_EEN_KAP,
    "vrijstaand": PropertyType.VRIJSTAAND,
    "vrijstaande woning": PropertyType.VRIJSTAAND,
    "penthouse": PropertyType.PENTHOUSE,
    "grachtenpand": PropertyType.GRACHTENPAND,
    "bovenwoning": PropertyType.BOVENWONING,
    "benedenwoning": PropertyType.BENEDENWONING,
    "maisonnette": PropertyType.MAISONNETTE,
    "villa": PropertyType.VILLA,
    "woonboerderij": PropertyType.WOONBOERDERIJ,
}


def is_finite_number(value: Any) -> bool:
    """True for real, finite ints and floats (bools, NaN and infinity excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


# =============================================================================
# Parsers
# =============================================================================

def parse_currency(value: Any) -> Optional[float]:
    """
    Parse a Dutch currency string to a number.

    Handles: "€ 123,50", "€ 9.706", "€ 1.482 per jaar", "€ 123,50 per maand",
    "€ 425.000 k.k.". Periods are thousands separators and the decimal
    comma becomes a point.
    """
    if is_finite_number(value):
        return float(value)
    if not isinstance(value, str) or not value:
        return None

    cleaned = CURRENCY_SYMBOLS.sub("", value)
    cleaned = WHITESPACE.sub("", cleaned)
    cleaned = cleaned.replace(".", "").replace(",", ".", 1)
    cleaned = UNIT_SUFFIX.sub("", cleaned)

    match = LEADING_NUMBER.match(cleaned)
    if not match:
        logger.debug("Unparseable currency value %r", value)
        return None
    return float(match.group(0))


def parse_vve_contribution(value: Any) -> Optional[float]:
    """
    Parse a homeowners' association (VvE) contribution as a monthly amount.

    Yearly amounts are divided by 12 and rounded to cents; monthly amounts
    pass through unchanged.
    """
    amount = parse_currency(value)
    if amount is None:
        return None
    if isinstance(value, str) and YEARLY_PHRASE.search(value):
        return math.floor(amount / 12 * 100 + 0.5) / 100
    return amount


def parse_area(value: Any) -> Optional[float]:
    """
    Parse an area such as "181 m²", "85m²" or "1.250 m²" to square meters.

    Uses the first numeric run; periods are thousands separators, a comma
    is the decimal point.
    """
    if is_finite_number(value):
        return float(value)
    if not isinstance(value, str) or not value:
        return None

    match = FIRST_NUMERIC_RUN.search(value)
    if not match:
        logger.debug("Unparseable area value %r", value)
        return None

    cleaned = match.group(0).replace(".", "").replace(",", ".", 1)
    try:
        return float(cleaned)
    except ValueError:
        logger.debug("Unparseable area value %r", value)
        return None


def parse_comma_separated(value: Any) -> List[str]:
    """Split "Dubbel glas, Dakisolatie, Muurisolatie" into trimmed items."""
    if not isinstance(value, str) or not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def parse_property_type(value: Any) -> PropertyType:
    """Map a free-text property type to PropertyType, OTHER when unknown."""
    if not isinstance(value, str) or not value:
        return PropertyType.OTHER
    lower = value.lower()
    for key, property_type in PROPERTY_TYPE_MAP.items():
        if key in lower:
            return property_type
    return PropertyType.OTHER


def _clean_label(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    if PLACEHOLDER_MARKER in value.lower():
        return None
    stripped = value.strip()
    return stripped or None


def parse_energy_label(
    characteristics_value: Any,
    top_level_value: Any,
) -> Optional[str]:
    """
    Pick the energy label, skipping placeholder text.

    The top-level field is more reliable and wins; the characteristics
    value is the fallback. Either may hold "Wat betekent dit?" instead of
    a label.
    """
    return _clean_label(top_level_value) or _clean_label(characteristics_value)


def parse_boolean_phrase(value: Any) -> Optional[bool]:
    """
    Parse "Ja", "Nee", "Aanwezig", "Niet aanwezig" and the like.

    Anything outside the vocabulary is None (unknown), not False.
    """
    if not isinstance(value, str) or not value:
        return None
    lower = value.lower().strip()
    if lower in TRUE_PHRASES:
        return True
    if lower in FALSE_PHRASES:
        return False
    return None
