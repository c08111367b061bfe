"""
Risk aggregation for compact display.
"""

import logging
from typing import Iterable, List

from .config import DEFAULT_TOP_RISK_FLAG_LIMIT
from .models import RawRisk, RiskFlag, RiskLevel


logger = logging.getLogger(__name__)


def derive_top_risk_flags(
    risks: Iterable[RawRisk],
    limit: int = DEFAULT_TOP_RISK_FLAG_LIMIT,
) -> List[RiskFlag]:
    """
    Reduce risk findings to the most severe few.

    Low-severity findings are excluded, the rest are ordered by severity
    descending. Ties keep their original order (``sorted`` is stable).
    Findings with an unrecognized severity are dropped.

    Args:
        risks: All categorized findings of an analysis.
        limit: Maximum number of flags to return.

    Returns:
        At most ``limit`` flags, most severe first.
    """
    flags = []
    for risk in risks:
        level = RiskLevel.from_string(risk.level)
        if level is None:
            logger.debug("Ignoring risk %r with unknown level %r", risk.category, risk.level)
            continue
        if level is RiskLevel.LOW:
            continue
        flags.append(RiskFlag(label=risk.category, severity=level))

    flags = sorted(flags, key=lambda flag: flag.severity.rank, reverse=True)
    return flags[:limit]
