"""
Configuration management.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Callable, Optional, TypeVar

from core.config import ScoringConfig, TierThresholds
from core.dashboard.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from core.models import SortOption


logger = logging.getLogger(__name__)

T = TypeVar("T")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env(name: str, default: T, cast: Callable[[str], T]) -> T:
    """Read an environment variable, falling back on malformed values."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring malformed %s=%r, using %r", name, raw, default)
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).lower() == "true"


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: _env("PORT", 8000, int))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # Data
    data_dir: str = field(default_factory=lambda: os.getenv("DATA_DIR", "./data"))
    snapshot_file: str = field(default_factory=lambda: os.getenv("SNAPSHOT_FILE", "snapshot.json"))

    # Scoring
    stretch_threshold: float = field(
        default_factory=lambda: _env("STRETCH_THRESHOLD", 0.05, float)
    )
    tier_excellent: float = field(default_factory=lambda: _env("TIER_EXCELLENT", 85.0, float))
    tier_strong: float = field(default_factory=lambda: _env("TIER_STRONG", 70.0, float))
    tier_moderate: float = field(default_factory=lambda: _env("TIER_MODERATE", 50.0, float))
    tier_weak: float = field(default_factory=lambda: _env("TIER_WEAK", 25.0, float))
    default_sort: str = field(
        default_factory=lambda: os.getenv("DEFAULT_SORT", SortOption.SCORE_DESC.value)
    )

    # Dashboard
    page_size: int = field(default_factory=lambda: _env("PAGE_SIZE", DEFAULT_PAGE_SIZE, int))
    max_page_size: int = field(
        default_factory=lambda: _env("MAX_PAGE_SIZE", MAX_PAGE_SIZE, int)
    )

    # Webhook
    revalidate_secret: Optional[str] = field(
        default_factory=lambda: os.getenv("REVALIDATE_SECRET") or None
    )

    def __post_init__(self):
        """Clamp page sizes to at least one item."""
        for name in ("page_size", "max_page_size"):
            value = getattr(self, name)
            if value < 1:
                logger.warning("Ignoring %s=%r, using 1", name, value)
                setattr(self, name, 1)

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    @property
    def snapshot_path(self) -> str:
        return os.path.join(self.data_dir, self.snapshot_file)

    def scoring_config(self) -> ScoringConfig:
        """
        Build the scoring value object.

        Raises:
            ValueError: if the configured thresholds are inconsistent
        """
        return ScoringConfig(
            stretch_threshold=self.stretch_threshold,
            tier_thresholds=TierThresholds(
                excellent=self.tier_excellent,
                strong=self.tier_strong,
                moderate=self.tier_moderate,
                weak=self.tier_weak,
            ),
            default_sort=SortOption.from_string(self.default_sort) or SortOption.SCORE_DESC,
        )

    def to_dict(self) -> dict:
        """Convert config to dictionary (secret redacted)."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "log_level": self.log_level,
            "data_dir": self.data_dir,
            "snapshot_file": self.snapshot_file,
            "stretch_threshold": self.stretch_threshold,
            "tier_excellent": self.tier_excellent,
            "tier_strong": self.tier_strong,
            "tier_moderate": self.tier_moderate,
            "tier_weak": self.tier_weak,
            "default_sort": self.default_sort,
            "page_size": self.page_size,
            "max_page_size": self.max_page_size,
            "revalidate_secret": "***" if self.revalidate_secret else None,
        }


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for entrypoints."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
