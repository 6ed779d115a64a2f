"""System health endpoint for frontend polling."""

from typing import Any

from fastapi import APIRouter, Depends

from ...context import AppContext
from ..dependencies import get_app_context

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/healthz")
def healthcheck(context: AppContext = Depends(get_app_context)) -> dict[str, Any]:
    """Return coarse-grained backend readiness information."""

    settings = context.settings
    return {
        "status": "ok",
        "environment": settings.environment,
        "storage": settings.storage.backend,
        "geoProvider": settings.geo.provider,
        "entryCount": len(context.store),
        "metrics": context.metrics.snapshot(),
    }
