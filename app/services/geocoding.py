"""Geocoding client - address autocomplete via OpenStreetMap Nominatim.

Only the address-search endpoint uses this. Donations arrive with
coordinates already resolved, so nothing else depends on the geocoder.
"""

import logging
from typing import Any

import httpx

from app.config import get_settings
from app.schemas.donation import AddressSuggestion

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3
MAX_RESULTS = 10


def _address_components(address: dict[str, Any]) -> dict[str, str | None]:
    return {
        "country": address.get("country"),
        "state": address.get("state"),
        "city": address.get("city") or address.get("town") or address.get("village"),
        "suburb": address.get("suburb"),
        "road": address.get("road"),
        "house_number": address.get("house_number"),
        "postcode": address.get("postcode"),
    }


class GeocodingClient:
    """Client for the Nominatim search API."""

    def __init__(self, base_url: str | None = None, country_code: str | None = None):
        settings = get_settings()
        self.base_url = (base_url or settings.geocoding_base_url).rstrip("/")
        self.country_code = country_code or settings.geocoding_country_code
        # Nominatim rejects requests without an identifying User-Agent
        self.client = httpx.AsyncClient(
            timeout=8.0,
            headers={"User-Agent": settings.geocoding_user_agent, "Accept": "application/json"},
        )

    async def search_addresses(self, query: str, limit: int = 5) -> list[AddressSuggestion]:
        """Address suggestions for free text, best match first.

        Queries shorter than three characters return nothing without a
        network call. Upstream failures raise ``httpx.HTTPError``.
        """
        if not query or len(query.strip()) < MIN_QUERY_LENGTH:
            return []

        params = {
            "format": "json",
            "q": query.strip(),
            "limit": str(min(limit, MAX_RESULTS)),
            "countrycodes": self.country_code,
            "addressdetails": "1",
        }

        try:
            response = await self.client.get(f"{self.base_url}/search", params=params)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Address search failed for '{query}': {e}")
            raise

        suggestions = []
        for item in response.json():
            try:
                # Nominatim returns strings; keep [lat, lon] order
                coordinates = [float(item["lat"]), float(item["lon"])]
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Skipping address result without coordinates: {item!r}")
                continue
            suggestions.append(
                AddressSuggestion(
                    display_name=item.get("display_name", ""),
                    coordinates=coordinates,
                    type=item.get("type"),
                    importance=item.get("importance") or 0,
                    address_components=_address_components(item.get("address") or {}),
                )
            )
        return suggestions

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
