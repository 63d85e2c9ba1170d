"""State objects for the weather panel.

``LookupState`` is a small tagged union (idle, loading, error, success) so a
panel can never hold an error message and a weather result at the same time.
``QueryState`` pairs it with the raw text of the city input and exposes the
flat view (loading flag, error message, result) the renderers and the JSON API
consume.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class WeatherResult:
    city_name: str
    country_name: str
    temperature_celsius: float
    wind_speed_kph: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "city_name": self.city_name,
            "country_name": self.country_name,
            "temperature_celsius": self.temperature_celsius,
            "wind_speed_kph": self.wind_speed_kph,
        }


@dataclass(frozen=True)
class Idle:
    """No lookup has run yet."""


@dataclass(frozen=True)
class Loading:
    """A lookup is in flight."""


@dataclass(frozen=True)
class Error:
    message: str


@dataclass(frozen=True)
class Success:
    result: WeatherResult


LookupState = Union[Idle, Loading, Error, Success]

IDLE = Idle()
LOADING = Loading()


@dataclass(frozen=True)
class QueryState:
    """Snapshot of everything the panel renders."""

    city_input: str = ""
    lookup: LookupState = field(default=IDLE)

    @property
    def is_loading(self) -> bool:
        return isinstance(self.lookup, Loading)

    @property
    def error_message(self) -> Optional[str]:
        return self.lookup.message if isinstance(self.lookup, Error) else None

    @property
    def weather_result(self) -> Optional[WeatherResult]:
        return self.lookup.result if isinstance(self.lookup, Success) else None

    def to_dict(self) -> Dict[str, Any]:
        result = self.weather_result
        return {
            "city_input": self.city_input,
            "is_loading": self.is_loading,
            "error_message": self.error_message,
            "weather_result": result.to_dict() if result else None,
        }


__all__ = [
    "Error",
    "IDLE",
    "Idle",
    "LOADING",
    "Loading",
    "LookupState",
    "QueryState",
    "Success",
    "WeatherResult",
]
