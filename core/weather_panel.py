"""Two-step city weather lookup and the panel that owns its state.

``run_lookup`` is the whole workflow: geocode the city, stop if nothing
matched, fetch current conditions for the first match, stop if the forecast
carries none, otherwise build a ``WeatherResult``. Every failure is folded
into an ``Error`` state; nothing escapes to the caller.

``WeatherPanel`` is the UI component: it keeps the text typed into the city
field and the latest ``LookupState``, ignores blank submissions and flips to
``Loading`` before running the workflow.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from core.lookup_state import (
    IDLE,
    LOADING,
    Error,
    LookupState,
    QueryState,
    Success,
    WeatherResult,
)
from core.weather_client import GeoMatch, geocode_city, get_current_weather

logger = logging.getLogger(__name__)

CITY_NOT_FOUND_MESSAGE = "City not found."
WEATHER_UNAVAILABLE_MESSAGE = "Weather data not available."

GeocodeFn = Callable[[str], Optional[GeoMatch]]
CurrentWeatherFn = Callable[[float, float], Optional[Dict[str, Any]]]


class WeatherLookupError(Exception):
    """Base class for lookups that completed but produced nothing to show."""


class CityNotFoundError(WeatherLookupError):
    def __init__(self) -> None:
        super().__init__(CITY_NOT_FOUND_MESSAGE)


class WeatherUnavailableError(WeatherLookupError):
    def __init__(self) -> None:
        super().__init__(WEATHER_UNAVAILABLE_MESSAGE)


def _error_text(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


def _resolve_weather(city: str, geocode: GeocodeFn, fetch_current: CurrentWeatherFn) -> WeatherResult:
    match = geocode(city)
    if match is None:
        raise CityNotFoundError()

    current = fetch_current(match.latitude, match.longitude)
    if not current:
        raise WeatherUnavailableError()

    return WeatherResult(
        city_name=match.name,
        country_name=match.country,
        temperature_celsius=current["temperature"],
        wind_speed_kph=current["windspeed"],
    )


def run_lookup(
    city: str,
    *,
    geocode: GeocodeFn = geocode_city,
    fetch_current: CurrentWeatherFn = get_current_weather,
) -> LookupState:
    """Resolve ``city`` to current weather and return the terminal state."""
    try:
        result = _resolve_weather(city, geocode, fetch_current)
    except WeatherLookupError as exc:
        logger.info("Weather lookup for %r ended without data: %s", city, exc)
        return Error(str(exc))
    except Exception as exc:
        logger.warning("Weather lookup for %r failed: %s", city, exc)
        return Error(_error_text(exc))

    logger.info("Weather lookup for %r resolved to %s, %s.", city, result.city_name, result.country_name)
    return Success(result)


class WeatherPanel:
    """In-memory state holder for one weather form.

    Overlapping lookups are not coordinated: each one writes its terminal
    state when it finishes, so the last to finish wins.
    """

    def __init__(
        self,
        *,
        geocode: GeocodeFn = geocode_city,
        fetch_current: CurrentWeatherFn = get_current_weather,
    ) -> None:
        self._geocode = geocode
        self._fetch_current = fetch_current
        self._city_input = ""
        self._lookup: LookupState = IDLE

    @property
    def state(self) -> QueryState:
        return QueryState(city_input=self._city_input, lookup=self._lookup)

    def set_city_input(self, text: str) -> None:
        self._city_input = text

    def submit(self, defer: Optional[Callable[..., Any]] = None) -> bool:
        """Start a lookup for the current input unless it is blank.

        The panel switches to ``Loading`` right away. With ``defer`` (e.g.
        ``BackgroundTasks.add_task``) the requests run later through
        ``defer(self.complete_lookup, city)``; otherwise they run inline.
        Returns ``True`` when a lookup was started.
        """
        city = self._city_input
        if not city.strip():
            return False
        self._lookup = LOADING
        if defer is None:
            self.complete_lookup(city)
        else:
            defer(self.complete_lookup, city)
        return True

    def lookup(self, city: str) -> LookupState:
        self._lookup = LOADING
        return self.complete_lookup(city)

    def complete_lookup(self, city: str) -> LookupState:
        outcome = run_lookup(city, geocode=self._geocode, fetch_current=self._fetch_current)
        self._lookup = outcome
        return outcome


__all__ = [
    "CITY_NOT_FOUND_MESSAGE",
    "CityNotFoundError",
    "WEATHER_UNAVAILABLE_MESSAGE",
    "WeatherLookupError",
    "WeatherPanel",
    "WeatherUnavailableError",
    "run_lookup",
]
