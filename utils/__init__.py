"""
Utility modules for the property dashboard.
"""

from .formatting import (
    format_area,
    format_days_on_market,
    format_percent,
    format_price,
    format_price_compact,
    format_price_range,
    format_score,
)
from .config import Config, configure_logging

__all__ = [
    "format_area",
    "format_days_on_market",
    "format_percent",
    "format_price",
    "format_price_compact",
    "format_price_range",
    "format_score",
    "Config",
    "configure_logging",
]
