"""Centralize defaults and environment lookups for the weather app."""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional

from dotenv import load_dotenv

from core.weather_client import FORECAST_URL, GEOCODING_URL

load_dotenv()

# ---------------------------------------------------------------------------
# Default configuration values
# ---------------------------------------------------------------------------
_DEFAULT_WEB_UI_HOST = "127.0.0.1"
_DEFAULT_WEB_UI_PORT = 9000
_DEFAULT_LOG_LEVEL = "INFO"

# ---------------------------------------------------------------------------
# Environment-derived settings
# ---------------------------------------------------------------------------
def get_geocoding_url(env: Dict[str, str] | None = None) -> str:
    """Return the Open-Meteo geocoding search endpoint.

    Args:
        env: Optional mapping used instead of ``os.environ`` to simplify testing.
    """

    source = env if env is not None else os.environ
    override = (source.get("GEOCODING_URL") or "").strip()
    return override or GEOCODING_URL


def get_forecast_url(env: Dict[str, str] | None = None) -> str:
    """Return the Open-Meteo forecast endpoint."""

    source = env if env is not None else os.environ
    override = (source.get("FORECAST_URL") or "").strip()
    return override or FORECAST_URL


def get_http_timeout(env: Dict[str, str] | None = None) -> Optional[float]:
    """Return the per-request timeout in seconds, or ``None`` to wait indefinitely."""

    source = env if env is not None else os.environ
    raw = source.get("WEATHER_HTTP_TIMEOUT")
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def get_web_ui_host(env: Dict[str, str] | None = None) -> str:
    source = env if env is not None else os.environ
    return source.get("WEB_UI_HOST", _DEFAULT_WEB_UI_HOST)


def get_web_ui_port(env: Dict[str, str] | None = None) -> int:
    source = env if env is not None else os.environ
    raw = source.get("WEB_UI_PORT")
    if raw is None:
        return _DEFAULT_WEB_UI_PORT
    try:
        value = int(raw)
    except ValueError:
        return _DEFAULT_WEB_UI_PORT
    return value if 0 < value <= 65535 else _DEFAULT_WEB_UI_PORT


def get_log_level(env: Dict[str, str] | None = None) -> int:
    """Return the numeric logging level named by ``LOG_LEVEL``."""

    source = env if env is not None else os.environ
    raw = (source.get("LOG_LEVEL") or _DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(raw)
    if isinstance(level, int):
        return level
    return logging.getLevelName(_DEFAULT_LOG_LEVEL)


def configure_logging(env: Dict[str, str] | None = None) -> None:
    """Apply the configured level to the root logger (entry points only)."""

    logging.basicConfig(
        level=get_log_level(env),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
