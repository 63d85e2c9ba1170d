"""Per-browser weather panels for the web UI."""

from __future__ import annotations

import secrets
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from core.weather_panel import WeatherPanel

SESSION_COOKIE_NAME = "weather_panel_session"
SESSION_MAX_AGE_SECONDS = 60 * 60 * 4

PanelFactory = Callable[[], WeatherPanel]


class PanelRegistry:
    """In-memory index (cookie token -> panel).

    Panels not touched for ``max_age_seconds`` are dropped the next time a
    panel is looked up or created, matching the lifetime of the cookie.
    """

    def __init__(
        self,
        factory: PanelFactory = WeatherPanel,
        *,
        max_age_seconds: float = SESSION_MAX_AGE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._factory = factory
        self._max_age = max_age_seconds
        self._clock = clock
        self._panels: Dict[str, WeatherPanel] = {}
        self._last_seen: Dict[str, float] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._panels)

    def _expire_locked(self, now: float) -> None:
        cutoff = now - self._max_age
        stale = [token for token, seen in self._last_seen.items() if seen < cutoff]
        for token in stale:
            self._panels.pop(token, None)
            self._last_seen.pop(token, None)

    def create_panel(self) -> Tuple[str, WeatherPanel]:
        token = secrets.token_urlsafe(32)
        panel = self._factory()
        with self._lock:
            now = self._clock()
            self._expire_locked(now)
            self._panels[token] = panel
            self._last_seen[token] = now
        return token, panel

    def get_panel(self, token: Optional[str]) -> Optional[WeatherPanel]:
        if not token:
            return None
        with self._lock:
            now = self._clock()
            self._expire_locked(now)
            panel = self._panels.get(token)
            if panel is not None:
                self._last_seen[token] = now
            return panel

    def get_or_create(self, token: Optional[str]) -> Tuple[str, WeatherPanel, bool]:
        """Return ``(token, panel, created)`` for the browser holding ``token``."""
        panel = self.get_panel(token)
        if panel is not None and token:
            return token, panel, False
        new_token, panel = self.create_panel()
        return new_token, panel, True

    def destroy_panel(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            self._panels.pop(token, None)
            self._last_seen.pop(token, None)


__all__ = [
    "PanelRegistry",
    "SESSION_COOKIE_NAME",
    "SESSION_MAX_AGE_SECONDS",
]
