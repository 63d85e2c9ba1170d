"""Turn a ``QueryState`` into something a person can read.

Both renderers pick exactly one view, checked in this order: loading, error,
result, idle prompt.
"""

from __future__ import annotations

import math
from decimal import Decimal
from html import escape
from typing import Union

from core.lookup_state import QueryState, WeatherResult

PAGE_TITLE = "🌤 Weather Forecast"
INPUT_PLACEHOLDER = "Enter city name"
LOADING_TEXT = "Loading weather data..."
IDLE_PROMPT = "Enter a city name to see the weather forecast"


def format_number(value: Union[int, float]) -> str:
    """Print numbers the way the browser UI does: ``15.0`` -> ``15``.

    Magnitudes from 1e-7 up to 1e21 print without an exponent, like
    JavaScript's ``Number#toString``; outside that range Python's exponent
    spelling is kept (``1e-08`` rather than ``1e-8``).
    """
    if not isinstance(value, float):
        return str(value)
    magnitude = abs(value)
    if magnitude >= 1e21 or not math.isfinite(value):
        return repr(value)
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text and magnitude >= 1e-7:
        text = format(Decimal(text), "f")
    return text


def _headline(result: WeatherResult) -> str:
    return f"{result.city_name}, {result.country_name}"


def _temperature(result: WeatherResult) -> str:
    return f"{format_number(result.temperature_celsius)}°C"


def _wind(result: WeatherResult) -> str:
    return f"Wind Speed: {format_number(result.wind_speed_kph)} km/h"


# --- Plain text ------------------------------------------------------------
def render_panel_text(state: QueryState) -> str:
    if state.is_loading:
        return LOADING_TEXT
    if state.error_message is not None:
        return f"Error: {state.error_message}"
    result = state.weather_result
    if result is not None:
        return "\n".join([_headline(result), _temperature(result), _wind(result)])
    return IDLE_PROMPT


# --- HTML ------------------------------------------------------------------
def render_panel_html(state: QueryState) -> str:
    """Return the status area below the search form."""
    if state.is_loading:
        return f'<div class="loading"><p>{escape(LOADING_TEXT)}</p></div>'
    if state.error_message is not None:
        return f'<p class="alert" role="alert">{escape(state.error_message)}</p>'
    result = state.weather_result
    if result is not None:
        return (
            '<div class="result">'
            f"<h3>{escape(_headline(result))}</h3>"
            f'<p class="temperature">{escape(_temperature(result))}</p>'
            f'<p class="wind">{escape(_wind(result))}</p>'
            "</div>"
        )
    return f'<p class="prompt">{escape(IDLE_PROMPT)}</p>'


def render_page_html(state: QueryState, *, stylesheet_url: str = "/static/styles.css") -> str:
    """Return the full page: title, search form and the status area."""
    refresh = '<meta http-equiv="refresh" content="1">\n' if state.is_loading else ""
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1">\n'
        f"<title>{escape(PAGE_TITLE)}</title>\n"
        f"{refresh}"
        f'<link rel="stylesheet" href="{escape(stylesheet_url)}">\n'
        "</head>\n"
        "<body>\n"
        '<main class="card">\n'
        f"<h2>{escape(PAGE_TITLE)}</h2>\n"
        '<form method="post" action="/" class="search">\n'
        f'<input type="text" name="city" placeholder="{escape(INPUT_PLACEHOLDER)}" '
        f'value="{escape(state.city_input)}">\n'
        '<button type="submit">Search</button>\n'
        "</form>\n"
        f"{render_panel_html(state)}\n"
        "</main>\n"
        "</body>\n"
        "</html>\n"
    )


__all__ = [
    "IDLE_PROMPT",
    "LOADING_TEXT",
    "format_number",
    "render_page_html",
    "render_panel_html",
    "render_panel_text",
]
