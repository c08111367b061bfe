"""
FastAPI application for the property dashboard.

Production deployment configuration via environment variables.
"""

import logging
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.dashboard import DashboardService
from utils.config import Config
from web.dashboard_routes import router as dashboard_router
from web.snapshot_cache import SnapshotCache


logger = logging.getLogger(__name__)

# =============================================================================
# Environment Configuration
# =============================================================================

# Production mode detection
IS_PRODUCTION = os.getenv("PRODUCTION", "").lower() == "true"

# CORS configuration - explicit origins only in production
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "").split(",") if os.getenv("ALLOWED_ORIGINS") else []
if not ALLOWED_ORIGINS and not IS_PRODUCTION:
    # Development fallback only
    ALLOWED_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

VERSION = "0.2.0"


def create_app(
    config: Optional[Config] = None,
    snapshot_cache: Optional[SnapshotCache] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration (default: from environment)
        snapshot_cache: Snapshot source (default: the configured snapshot file)
    """
    config = config or Config.load()
    debug = config.debug and not IS_PRODUCTION

    app = FastAPI(
        title="Property Dashboard",
        description="Ranked property investment dashboard",
        version=VERSION,
        docs_url=None if IS_PRODUCTION else "/docs",
        redoc_url=None if IS_PRODUCTION else "/redoc",
        openapi_url=None if IS_PRODUCTION else "/openapi.json",
        debug=debug,
    )

    # Healthchecks are synchronous and perform no IO
    @app.get("/", include_in_schema=False)
    def root():
        return {"status": "ok"}

    @app.get("/health", include_in_schema=False)
    def health():
        return {
            "status": "healthy",
            "version": VERSION,
            "environment": "production" if IS_PRODUCTION else "development",
        }

    if ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    # Scoring configuration is built once and shared by every request
    app.state.config = config
    app.state.dashboard_service = DashboardService(
        config.scoring_config(),
        default_page_size=config.page_size,
        max_page_size=config.max_page_size,
    )
    app.state.snapshot_cache = snapshot_cache or SnapshotCache.from_path(config.snapshot_path)

    app.include_router(dashboard_router)

    logger.info("Property dashboard configured: %s", config.to_dict())
    return app
