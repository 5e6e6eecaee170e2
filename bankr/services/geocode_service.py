"""Reverse geocoding proxy for the branch locator frontend."""

import logging
from typing import Any

import httpx

from fastapi import Request

from bankr.config import Settings, get_settings

logger = logging.getLogger(__name__)


class GeocodeError(Exception):
    """Raised when a location cannot be resolved upstream."""


class GeocodeService:
    """Forwards latitude/longitude lookups to the configured geocoding API."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self._transport = transport

    async def reverse_geocode(self, latitude: str, longitude: str) -> dict[str, Any]:
        """Look up the address for a coordinate pair.

        Raises:
            GeocodeError: If no API key is configured, the upstream call
                fails, or the upstream answer is not a JSON object.
        """
        if not self.settings.geocode_api_key:
            raise GeocodeError("Geocoding API key is not configured")

        params = {
            "latlng": f"{latitude},{longitude}",
            "key": self.settings.geocode_api_key,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.geocode_timeout, transport=self._transport
            ) as client:
                response = await client.get(self.settings.geocode_api_uri, params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Error while getting location: {e}")
            raise GeocodeError("Geocoding request failed") from e
        except ValueError as e:
            logger.error(f"Error while parsing location response: {e}")
            raise GeocodeError("Geocoding response is not JSON") from e

        if not isinstance(data, dict):
            logger.error(f"Unexpected geocoding payload type: {type(data).__name__}")
            raise GeocodeError("Geocoding response is not an object")
        return data


def get_geocode_service(request: Request) -> GeocodeService:
    """FastAPI dependency: a geocoding proxy using the application's settings."""
    return GeocodeService(request.app.state.settings)
