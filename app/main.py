"""Assemble the weather panel and run the interactive CLI loop."""

from __future__ import annotations

from functools import partial

from app.config import (
    configure_logging,
    get_forecast_url,
    get_geocoding_url,
    get_http_timeout,
)
from core.renderer import render_panel_text
from core.weather_client import geocode_city, get_current_weather
from core.weather_panel import WeatherPanel

# -- Panel construction --------------------------------------------------------
def build_panel() -> WeatherPanel:
    """Wire a panel to the configured Open-Meteo endpoints.

    Both entry points (CLI and web) build panels here so they talk to the
    same endpoints with the same timeout.
    """
    timeout = get_http_timeout()
    return WeatherPanel(
        geocode=partial(geocode_city, url=get_geocoding_url(), timeout=timeout),
        fetch_current=partial(get_current_weather, url=get_forecast_url(), timeout=timeout),
    )

# -- Interactive CLI loop ------------------------------------------------------
def main() -> None:
    """Read city names from stdin and print the panel after each lookup.

    Blank lines are ignored just like a blank form submission; ``quit``,
    ``exit``, EOF or Ctrl-C stop the loop.
    """
    configure_logging()
    panel = build_panel()
    print("Weather lookup ready. Type 'quit' or 'exit' to stop.")
    print(render_panel_text(panel.state))

    while True:
        try:
            message = input("City: ")
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            break

        if message.strip().lower() in {"quit", "exit"}:
            print("Goodbye!")
            break

        panel.set_city_input(message)
        if not panel.submit():
            continue
        print()
        print(render_panel_text(panel.state))
        print()


if __name__ == "__main__":
    main()
