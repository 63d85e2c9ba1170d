"""Thin Open-Meteo client used by the weather panel.

Only two read-only calls are needed: resolve a city name to coordinates and
fetch the current conditions at those coordinates. Both return the decoded
JSON payload fragments the lookup workflow inspects; deciding what an empty
payload means is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

# ---------------------------------------------------------------------------
# HTTP session (no retry adapter: failed calls surface immediately)
# ---------------------------------------------------------------------------
_session = requests.Session()
_session.headers.update({"Accept": "application/json"})


def _http_get(url: str, **kwargs) -> requests.Response:
    return _session.get(url, **kwargs)


@dataclass(frozen=True)
class GeoMatch:
    """First geocoding hit for a city query."""

    latitude: float
    longitude: float
    name: str
    country: str


# --- External API helper functions -----------------------------------------
def geocode_city(
    name: str,
    *,
    url: str = GEOCODING_URL,
    timeout: Optional[float] = None,
) -> Optional[GeoMatch]:
    """Return the best match for ``name`` or ``None`` when nothing matched.

    Network errors and undecodable bodies propagate to the caller.
    """
    response = _http_get(url, params={"name": name, "count": 1}, timeout=timeout)
    data = response.json()
    results = data.get("results") if isinstance(data, dict) else None
    if not results:
        return None
    first = results[0]
    return GeoMatch(
        latitude=first["latitude"],
        longitude=first["longitude"],
        name=first["name"],
        country=first.get("country", ""),
    )


def get_current_weather(
    lat: float,
    lon: float,
    *,
    url: str = FORECAST_URL,
    timeout: Optional[float] = None,
) -> Optional[Dict[str, Any]]:
    """Return the ``current_weather`` block for the coordinates, if present."""
    response = _http_get(
        url,
        params={
            "latitude": lat,
            "longitude": lon,
            "current_weather": "true",
        },
        timeout=timeout,
    )
    data = response.json()
    current = data.get("current_weather") if isinstance(data, dict) else None
    return current or None


__all__ = [
    "FORECAST_URL",
    "GEOCODING_URL",
    "GeoMatch",
    "geocode_city",
    "get_current_weather",
]
