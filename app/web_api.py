"""FastAPI application serving the city weather page."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from fastapi import BackgroundTasks, FastAPI, Form, HTTPException, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from app.main import build_panel
from core.lookup_state import QueryState
from core.renderer import render_page_html
from core.sessions import SESSION_COOKIE_NAME, SESSION_MAX_AGE_SECONDS, PanelRegistry
from core.weather_panel import WeatherPanel

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=SESSION_MAX_AGE_SECONDS,
    )


def create_app(
    panel_factory: Optional[Callable[[], WeatherPanel]] = None,
    *,
    static_dir: Optional[Path] = None,
) -> FastAPI:
    """Build the app around a registry of per-browser panels.

    ``panel_factory`` lets tests swap in panels wired to stubbed Open-Meteo
    calls; by default panels come from ``app.main.build_panel``.
    """
    factory = panel_factory or build_panel
    static_root = static_dir or STATIC_DIR

    app = FastAPI(title="City Weather Lookup", version="1.0.0")
    app.state.panel_factory = factory
    app.state.panels = PanelRegistry(factory)

    app.mount("/static", StaticFiles(directory=static_root, check_dir=False), name="static")

    def _panel_for(request: Request) -> tuple[str, WeatherPanel, bool]:
        token, panel, created = app.state.panels.get_or_create(request.cookies.get(SESSION_COOKIE_NAME))
        if created:
            logger.info("Created weather panel for a new browser session.")
        return token, panel, created

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request) -> HTMLResponse:
        """Render this browser's panel, creating it on first visit."""
        token, panel, created = _panel_for(request)
        response = HTMLResponse(render_page_html(panel.state))
        if created:
            _set_session_cookie(response, token)
        return response

    @app.post("/")
    def submit(request: Request, background_tasks: BackgroundTasks, city: str = Form("")) -> RedirectResponse:
        """Handle the search form, then send the browser back to ``/``.

        The lookup runs after the redirect is sent, so the page shows the
        loading view until it finishes. Blank input leaves the panel untouched.
        """
        token, panel, created = _panel_for(request)
        panel.set_city_input(city)
        panel.submit(defer=background_tasks.add_task)
        response = RedirectResponse(url="/", status_code=303)
        if created:
            _set_session_cookie(response, token)
        return response

    @app.get("/api/state")
    def panel_state(request: Request) -> Dict[str, Any]:
        panel = app.state.panels.get_panel(request.cookies.get(SESSION_COOKIE_NAME))
        state = panel.state if panel is not None else QueryState()
        return state.to_dict()

    @app.get("/api/weather")
    def weather(city: str = "") -> Dict[str, Any]:
        """One-off lookup on a throwaway panel; does not touch any session."""
        panel = app.state.panel_factory()
        panel.set_city_input(city)
        if not panel.submit():
            raise HTTPException(status_code=400, detail="City name is required.")
        return panel.state.to_dict()

    @app.post("/api/reset")
    def reset(request: Request, response: Response) -> Dict[str, str]:
        app.state.panels.destroy_panel(request.cookies.get(SESSION_COOKIE_NAME))
        response.delete_cookie(SESSION_COOKIE_NAME)
        return {"status": "ok"}

    @app.get("/api/health")
    def health_check() -> Dict[str, Any]:
        return {
            "status": "ok",
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    from app.config import configure_logging, get_web_ui_host, get_web_ui_port

    configure_logging()
    uvicorn.run(
        "app.web_api:app",
        host=get_web_ui_host(),
        port=get_web_ui_port(),
        reload=False,
    )
