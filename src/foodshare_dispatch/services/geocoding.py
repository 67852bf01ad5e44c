"""Address geocoding through the Mapbox places API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import quote

import httpx

from ..config import settings
from ..errors import GeocodingError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GeocodeSuggestion:
    place_name: str
    latitude: float
    longitude: float


def geocode_address(
    address: str,
    *,
    token: str | None = None,
    limit: int | None = None,
    client: httpx.Client | None = None,
) -> list[GeocodeSuggestion]:
    """Return up to ``limit`` candidate locations for a free-text address."""

    if not address or not address.strip():
        raise ValueError("Address is required")
    token = token or settings.mapbox_token
    if not token:
        raise GeocodingError("Mapbox token not configured")

    url = f"{settings.mapbox_geocoding_url}/{quote(address.strip())}.json"
    params = {"access_token": token, "limit": limit or settings.geocode_limit}
    logger.info(f"Geocoding address: {address}")

    owned = client is None
    http = client or httpx.Client(timeout=httpx.Timeout(10.0, connect=5.0))
    try:
        response = http.get(url, params=params)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPError as exc:
        raise GeocodingError(f"Geocoding failed: {exc}") from exc
    finally:
        if owned:
            http.close()

    suggestions = [
        GeocodeSuggestion(
            place_name=feature.get("place_name", ""),
            # Mapbox centers are [longitude, latitude]
            latitude=float(feature["center"][1]),
            longitude=float(feature["center"][0]),
        )
        for feature in data.get("features") or []
        if feature.get("center")
    ]
    logger.info(f"Found {len(suggestions)} results for '{address}'")
    return suggestions
