# backend/studiobook/routes/v1/health.py
"""
Health check and Prometheus metrics endpoints.
"""

from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Response

from ... import __version__
from ...core.config import settings
from ...core.constants import BRAND_NAME
from ...monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe; does not touch the database."""
    return {
        "status": "healthy",
        "service": f"{BRAND_NAME.lower().replace(' ', '-')}-api",
        "version": __version__,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
    )
