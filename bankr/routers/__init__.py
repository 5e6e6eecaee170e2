"""API routers."""

from bankr.routers.health import router as health_router
from bankr.routers.location import router as location_router
from bankr.routers.search import router as search_router

__all__ = [
    "health_router",
    "location_router",
    "search_router",
]
