"""
Dashboard Routes - Web API for the ranked property dashboard.

The request's query string is the dashboard state: it is parsed into a
FilterState, applied to the current snapshot and echoed back in its
canonical (minimal) form.
"""

from __future__ import annotations

import hmac
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from core.dashboard import (
    DashboardService,
    active_filter_count,
    parse_int,
    to_query_string,
)
from core.models import SortOption, Tier
from core.snapshot import SnapshotError
from web.snapshot_cache import SnapshotCache, tag_for_type


logger = logging.getLogger(__name__)

PAGE_PARAM = "page"
PAGE_SIZE_PARAM = "pageSize"
SECRET_HEADER = "x-sanity-secret"


# =============================================================================
# Router Setup
# =============================================================================

router = APIRouter(prefix="/api", tags=["dashboard"])


def _service(request: Request) -> DashboardService:
    return request.app.state.dashboard_service


def _cache(request: Request) -> SnapshotCache:
    return request.app.state.snapshot_cache


# =============================================================================
# Dashboard
# =============================================================================

@router.get("/properties")
def list_properties(request: Request):
    """
    Ranked, filtered and paginated property summaries.

    Query parameters are the filter keys (minPrice, maxPrice, minScore,
    maxRisk, city, tier, starred, sort) plus page and pageSize. Malformed
    values fall back to defaults instead of failing the request.
    """
    try:
        snapshot = _cache(request).get()
    except SnapshotError as e:
        logger.error("Snapshot unavailable: %s", e)
        return JSONResponse({"error": "Property data unavailable"}, status_code=503)

    params = request.query_params
    view = _service(request).view(
        snapshot.properties,
        snapshot.analyses,
        params,
        page=parse_int(params.get(PAGE_PARAM)),
        page_size=parse_int(params.get(PAGE_SIZE_PARAM)),
    )
    return view.to_dict()


@router.get("/filters")
def describe_filters(request: Request):
    """Parsed filter state plus the options the filter bar offers."""
    service = _service(request)
    state = service.parse(request.query_params)
    return {
        "filters": state.to_dict(),
        "active_filters": active_filter_count(state),
        "query": to_query_string(state, service.config),
        "sort_options": [
            {"value": option.value, "label": option.label} for option in SortOption
        ],
        "tier_options": [
            {"value": tier.value, "label": tier.label} for tier in Tier
        ],
    }


# =============================================================================
# Content Webhook
# =============================================================================

class RevalidatePayload(BaseModel):
    """Webhook body sent by the content backend on publish."""
    document_type: str = Field(alias="_type", min_length=1)


def require_webhook_secret(request: Request) -> None:
    """
    Dependency that validates the webhook secret header.

    Raises HTTPException(401) on a mismatch. Validation is skipped when no
    secret is configured.
    """
    expected_secret = request.app.state.config.revalidate_secret
    if not expected_secret:
        logger.warning("REVALIDATE_SECRET not set - webhook validation disabled")
        return

    provided = request.headers.get(SECRET_HEADER, "")
    if not hmac.compare_digest(provided.encode(), expected_secret.encode()):
        raise HTTPException(status_code=401, detail="Invalid secret")


@router.post("/revalidate", dependencies=[Depends(require_webhook_secret)])
def revalidate(payload: RevalidatePayload, request: Request):
    """
    Content webhook: drop cached data for the changed document type.

    Body: {"_type": "<document type>"}. A missing or empty ``_type`` is
    rejected with 422 before the handler runs.
    """
    document_type = payload.document_type
    tag = tag_for_type(document_type)
    if tag is None:
        return {
            "message": f'No cache tag for type "{document_type}" - skipping',
            "revalidated": False,
        }

    invalidated = _cache(request).invalidate(tag)
    return {
        "message": f"Revalidated tag: {tag}",
        "revalidated": invalidated,
        "tag": tag,
    }
