"""Health check endpoints."""

import logging

from elasticsearch import ApiError, TransportError
from fastapi import APIRouter, Depends

from bankr.schemas.common import HealthResponse
from bankr.services.context import SearchContext
from bankr.services.search_service import get_search_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


def _engine_reachable(context: SearchContext) -> bool:
    try:
        return bool(context.client.ping())
    except (ApiError, TransportError) as e:
        logger.warning(f"Search engine ping failed: {e}")
        return False


@router.get("", response_model=HealthResponse)
def health_check(
    context: SearchContext = Depends(get_search_context),
) -> HealthResponse:
    """
    Check API health status.

    Reports engine reachability and the abbreviation registry in use.
    """
    settings = context.settings
    engine_up = _engine_reachable(context)

    return HealthResponse(
        status="healthy" if engine_up else "degraded",
        version=settings.app_version,
        engine="connected" if engine_up else "disconnected",
        index=settings.index_name,
        abbreviations=len(context.registry),
        abbreviation_source=context.registry.source,
        environment=settings.environment,
    )


@router.get("/ready")
def readiness_check(
    context: SearchContext = Depends(get_search_context),
) -> dict:
    """Returns ready=True once the engine answers."""
    return {"ready": _engine_reachable(context)}


@router.get("/live")
async def liveness_check() -> dict:
    """Returns 200 if the service is alive."""
    return {"alive": True}
