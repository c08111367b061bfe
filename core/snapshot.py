"""
Snapshot loading.

A snapshot is the complete, consistent set of raw records one request
works on. Fetching it from the content backend happens elsewhere; this
module reads an exported snapshot document:

    {"properties": [...], "analyses": [...]}
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

from .models import RawAnalysis, RawProperty


logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot document is missing or malformed."""


@dataclass(frozen=True)
class Snapshot:
    """Immutable raw records for one invocation of the pipeline."""
    properties: List[RawProperty] = field(default_factory=list)
    analyses: List[RawAnalysis] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        """
        Parse a snapshot document.

        Raises:
            SnapshotError: if the document is not an object of record lists
        """
        if not isinstance(data, dict):
            raise SnapshotError("snapshot must be a JSON object")

        properties = data.get("properties", [])
        analyses = data.get("analyses", [])
        if not isinstance(properties, list) or not isinstance(analyses, list):
            raise SnapshotError("snapshot 'properties' and 'analyses' must be lists")

        return cls(
            properties=[RawProperty.from_dict(p) for p in properties if isinstance(p, dict)],
            analyses=[RawAnalysis.from_dict(a) for a in analyses if isinstance(a, dict)],
        )


def load_snapshot(path: Union[str, Path]) -> Snapshot:
    """
    Load a snapshot document from disk.

    Raises:
        SnapshotError: if the file is missing or not valid JSON
    """
    path = Path(path)
    if not path.exists():
        raise SnapshotError(f"snapshot file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SnapshotError(f"invalid snapshot JSON in {path}: {e}") from e
    except OSError as e:
        raise SnapshotError(f"cannot read snapshot {path}: {e}") from e

    snapshot = Snapshot.from_dict(data)
    logger.info(
        "Loaded snapshot %s: %d properties, %d analyses",
        path,
        len(snapshot.properties),
        len(snapshot.analyses),
    )
    return snapshot
