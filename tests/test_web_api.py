from __future__ import annotations

import threading
from pathlib import Path

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from app.web_api import create_app
from core.sessions import SESSION_COOKIE_NAME
from core.weather_client import GeoMatch
from core.weather_panel import WeatherPanel

LONDON = GeoMatch(latitude=51.5, longitude=-0.13, name="London", country="United Kingdom")


class StubOpenMeteo:
    def __init__(self) -> None:
        self.geocode_calls: list[str] = []
        self.fail_with: Exception | None = None

    def geocode(self, city: str):
        self.geocode_calls.append(city)
        if self.fail_with is not None:
            raise self.fail_with
        if city.strip().lower() == "london":
            return LONDON
        return None

    def fetch_current(self, lat: float, lon: float):
        return {"temperature": 15.0, "windspeed": 10.5}

    def panel(self) -> WeatherPanel:
        return WeatherPanel(geocode=self.geocode, fetch_current=self.fetch_current)


def build_client(tmp_path: Path, stub: StubOpenMeteo | None = None) -> tuple[TestClient, StubOpenMeteo]:
    stub = stub or StubOpenMeteo()
    static_dir = tmp_path / "static"
    static_dir.mkdir(parents=True, exist_ok=True)
    (static_dir / "styles.css").write_text("body {}", encoding="utf-8")
    app = create_app(panel_factory=stub.panel, static_dir=static_dir)
    return TestClient(app), stub


def test_index_renders_idle_prompt_and_sets_cookie(tmp_path: Path) -> None:
    client, _ = build_client(tmp_path)

    response = client.get("/")

    assert response.status_code == 200
    assert "Enter a city name to see the weather forecast" in response.text
    assert SESSION_COOKIE_NAME in response.cookies


def test_form_submission_redirects_back_to_index(tmp_path: Path) -> None:
    client, _ = build_client(tmp_path)
    client.get("/")

    response = client.post("/", data={"city": "London"}, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/"


def test_form_submission_renders_result(tmp_path: Path) -> None:
    client, _ = build_client(tmp_path)
    client.get("/")

    response = client.post("/", data={"city": "London"})

    assert response.status_code == 200
    assert "London, United Kingdom" in response.text
    assert "15°C" in response.text
    assert "Wind Speed: 10.5 km/h" in response.text
    assert 'value="London"' in response.text


def test_form_submission_renders_error(tmp_path: Path) -> None:
    client, _ = build_client(tmp_path)
    client.get("/")

    response = client.post("/", data={"city": "Zzzznotacity"})

    assert 'role="alert"' in response.text
    assert "City not found." in response.text


def test_blank_submission_leaves_state_untouched(tmp_path: Path) -> None:
    client, stub = build_client(tmp_path)
    client.get("/")

    client.post("/", data={"city": "   "})
    state = client.get("/api/state").json()

    assert stub.geocode_calls == []
    assert state["city_input"] == "   "
    assert state["is_loading"] is False
    assert state["error_message"] is None
    assert state["weather_result"] is None


def test_state_endpoint_reflects_last_lookup(tmp_path: Path) -> None:
    client, _ = build_client(tmp_path)
    client.post("/", data={"city": "London"})

    state = client.get("/api/state").json()

    assert state == {
        "city_input": "London",
        "is_loading": False,
        "error_message": None,
        "weather_result": {
            "city_name": "London",
            "country_name": "United Kingdom",
            "temperature_celsius": 15.0,
            "wind_speed_kph": 10.5,
        },
    }


def test_state_endpoint_without_session_is_idle(tmp_path: Path) -> None:
    client, _ = build_client(tmp_path)

    state = client.get("/api/state").json()

    assert state["weather_result"] is None
    assert state["error_message"] is None
    assert client.app.state.panels.get_panel(None) is None


def test_browsers_do_not_share_panels(tmp_path: Path) -> None:
    client, _ = build_client(tmp_path)
    other = TestClient(client.app)
    client.post("/", data={"city": "London"})

    response = other.get("/")

    assert "Enter a city name to see the weather forecast" in response.text


def test_reset_tears_down_panel(tmp_path: Path) -> None:
    client, _ = build_client(tmp_path)
    client.post("/", data={"city": "London"})
    assert len(client.app.state.panels) == 1

    response = client.post("/api/reset")

    assert response.json() == {"status": "ok"}
    assert len(client.app.state.panels) == 0
    assert client.get("/api/state").json()["weather_result"] is None


def test_weather_api_returns_result(tmp_path: Path) -> None:
    client, _ = build_client(tmp_path)

    response = client.get("/api/weather", params={"city": "London"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["error_message"] is None
    assert payload["weather_result"]["city_name"] == "London"


def test_weather_api_surfaces_transport_errors(tmp_path: Path) -> None:
    stub = StubOpenMeteo()
    stub.fail_with = ConnectionError("Network error")
    client, _ = build_client(tmp_path, stub)

    payload = client.get("/api/weather", params={"city": "London"}).json()

    assert payload["error_message"] == "Network error"
    assert payload["weather_result"] is None


def test_weather_api_rejects_blank_city(tmp_path: Path) -> None:
    client, stub = build_client(tmp_path)

    response = client.get("/api/weather", params={"city": "  "})

    assert response.status_code == 400
    assert stub.geocode_calls == []


def test_health_endpoint(tmp_path: Path) -> None:
    client, _ = build_client(tmp_path)

    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_stylesheet_is_served(tmp_path: Path) -> None:
    client, _ = build_client(tmp_path)

    response = client.get("/static/styles.css")

    assert response.status_code == 200


class GatedOpenMeteo(StubOpenMeteo):
    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()

    def geocode(self, city: str):
        self.entered.set()
        assert self.release.wait(timeout=5)
        return super().geocode(city)


def test_index_shows_loading_until_lookup_finishes(tmp_path: Path) -> None:
    client, stub = build_client(tmp_path, GatedOpenMeteo())
    client.get("/")
    submitted = threading.Thread(target=client.post, args=("/",), kwargs={"data": {"city": "London"}})
    submitted.start()

    try:
        assert stub.entered.wait(timeout=5)
        loading_page = client.get("/").text
        assert client.get("/api/state").json()["is_loading"] is True
    finally:
        stub.release.set()
        submitted.join(timeout=5)

    assert "Loading weather data..." in loading_page
    assert '<meta http-equiv="refresh" content="1">' in loading_page
    assert "London, United Kingdom" not in loading_page

    done_page = client.get("/").text
    assert "London, United Kingdom" in done_page
    assert 'http-equiv="refresh"' not in done_page
