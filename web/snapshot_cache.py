"""
Snapshot cache with content-type invalidation.

The snapshot is loaded lazily and reused until a content webhook reports
that one of the tracked document types changed.
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Dict, Final, Optional, Union

from core.snapshot import Snapshot, load_snapshot


logger = logging.getLogger(__name__)


# Content document type -> cache tag
TYPE_TO_TAG: Final[Dict[str, str]] = {
    "property": "property",
    "propertyAnalysis": "propertyAnalysis",
    "neighborhood": "neighborhood",
    "searchProfile": "searchProfile",
}

# Tags whose documents feed the dashboard snapshot
SNAPSHOT_TAGS: Final[frozenset] = frozenset({"property", "propertyAnalysis", "neighborhood"})


class SnapshotCache:
    """Holds the current snapshot until invalidated."""

    def __init__(self, loader: Callable[[], Snapshot]):
        """
        Initialize cache.

        Args:
            loader: Called to (re)load the snapshot; may raise SnapshotError
        """
        self._loader = loader
        self._snapshot: Optional[Snapshot] = None
        self._lock = threading.Lock()

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SnapshotCache":
        return cls(lambda: load_snapshot(path))

    def get(self) -> Snapshot:
        """Return the cached snapshot, loading it first if needed."""
        with self._lock:
            if self._snapshot is None:
                self._snapshot = self._loader()
            return self._snapshot

    def invalidate(self, tag: str) -> bool:
        """
        Drop the cached snapshot if ``tag`` feeds it.

        Returns:
            True if the tag is tracked by the snapshot
        """
        if tag not in SNAPSHOT_TAGS:
            return False
        with self._lock:
            self._snapshot = None
        logger.info("Snapshot invalidated by tag %s", tag)
        return True


def tag_for_type(document_type: str) -> Optional[str]:
    return TYPE_TO_TAG.get(document_type)
