"""Location router: reverse geocoding for the branch locator."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from bankr.schemas.common import MessageResponse
from bankr.services.geocode_service import GeocodeError, GeocodeService, get_geocode_service

router = APIRouter(prefix="/location", tags=["Location"])


@router.get("", responses={502: {"model": MessageResponse}})
async def get_location(
    latitude: Annotated[str, Query(description="Latitude in decimal degrees")],
    longitude: Annotated[str, Query(description="Longitude in decimal degrees")],
    service: GeocodeService = Depends(get_geocode_service),
) -> Any:
    """Resolve a coordinate pair to an address via the geocoding API."""
    try:
        return await service.reverse_geocode(latitude, longitude)
    except GeocodeError:
        return JSONResponse(
            status_code=502,
            content={"message": "Error while getting location"},
        )
