"""
Formatting utilities for Dutch locale display.
"""


def _round(value: float) -> int:
    """Round half away from zero."""
    if value < 0:
        return -int(-value + 0.5)
    return int(value + 0.5)


def _thousands(amount: int) -> str:
    """Group thousands with periods: 425000 -> '425.000'."""
    return f"{amount:,}".replace(",", ".")


def format_price(amount: float) -> str:
    """
    Format a euro amount without cents.

    Args:
        amount: The amount in euros.

    Returns:
        Formatted price, e.g. 425000 -> "€ 425.000".
    """
    return f"€ {_thousands(_round(amount))}"


def format_price_compact(amount: float) -> str:
    """Format price compact: 425000 -> "€425k", 1250000 -> "€ 1,3 mln"."""
    if amount >= 1_000_000:
        millions = f"{_round(amount / 100_000) / 10:.1f}".replace(".", ",")
        return f"€ {millions} mln"
    if amount >= 1000:
        return f"€{_round(amount / 1000)}k"
    return format_price(amount)


def format_price_range(low: float, high: float) -> str:
    """Format price range: (22500, 68000) -> "€23k – €68k"."""
    if low == 0 and high == 0:
        return "€0"
    if low == high:
        return format_price_compact(low)
    return f"{format_price_compact(low)} – {format_price_compact(high)}"


def format_area(m2: float) -> str:
    """Format area: 85 -> "85 m²"."""
    return f"{m2:g} m²"


def format_days_on_market(days: int) -> str:
    if days == 0:
        return "Vandaag"
    if days == 1:
        return "1 dag"
    return f"{days} dagen"


def format_percent(value: float) -> str:
    """
    Format a number as a whole percentage.

    Args:
        value: The percentage value.

    Returns:
        Formatted percentage string, e.g. 94.3 -> "94%".
    """
    return f"{_round(value)}%"


def format_score(score: float) -> str:
    """Scores always display as integers: 72.4 -> "72"."""
    return str(_round(score))
