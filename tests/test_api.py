"""Tests for the FastAPI surface (runs the lifespan against the bundled dataset)."""

import inspect
import json
from pathlib import Path

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from servicemap.api.deps import get_controller
from servicemap.main import app

BUNDLED = Path(__file__).resolve().parent.parent / "servicemap" / "data" / "services.json"


@pytest.fixture(scope="module")
def bundled():
    return json.loads(BUNDLED.read_text(encoding="utf-8"))


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def _ids_of_type(bundled, service_type):
    return [s["id"] for s in bundled if s["type"] == service_type]


class TestBasic:
    def test_root(self, client):
        assert client.get("/").status_code == 200

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_not_ready_without_lifespan(self):
        response = TestClient(app).get("/api/services")
        assert response.status_code == 503


class TestServicesRoutes:
    def test_all(self, client, bundled):
        data = client.get("/api/services").json()
        assert data["origin"] == "file"
        assert data["count"] == len(bundled)

    def test_filtered(self, client, bundled):
        data = client.get("/api/services", params={"service_type": "hostel"}).json()
        assert [s["id"] for s in data["services"]] == _ids_of_type(bundled, "hostel")

    def test_search_does_not_touch_map(self, client, bundled):
        data = client.get("/api/services/search", params={"q": "market"}).json()
        assert [s["id"] for s in data["services"]] == [6]

        state = client.get("/api/map/state").json()
        assert len(state["markers"]) == len(bundled)

    def test_reload(self, client, bundled):
        client.post("/api/map/filter", json={"filter": "taxi"})

        outcome = client.post("/api/services/reload").json()

        assert outcome == {"origin": "file", "count": len(bundled), "error": None}
        assert client.get("/api/map/state").json()["active_filter"] == "all"


class TestMapRoutes:
    def test_initial_state(self, client, bundled):
        state = client.get("/api/map/state").json()
        assert state["center"] == [9.35, 42.8]
        assert state["zoom"] == 14
        assert state["active_filter"] == "all"
        assert len(state["markers"]) == len(bundled)
        assert state["user_markers"] == []

    def test_filter(self, client, bundled):
        data = client.post("/api/map/filter", json={"filter": "hospital"}).json()
        assert data["active_filter"] == "hospital"
        assert data["count"] == len(_ids_of_type(bundled, "hospital"))
        assert {m["type"] for m in data["markers"]} == {"hospital"}

    def test_unknown_filter_renders_nothing(self, client):
        data = client.post("/api/map/filter", json={"filter": "pharmacy"}).json()
        assert data["count"] == 0

    def test_search_and_empty_search(self, client, bundled):
        client.post("/api/map/filter", json={"filter": "taxi"})

        data = client.post("/api/map/search", json={"term": "Hospital"}).json()
        assert {m["type"] for m in data["markers"]} == {"hospital"}

        data = client.post("/api/map/search", json={"term": ""}).json()
        assert data["count"] == len(_ids_of_type(bundled, "taxi"))

    def test_page(self, client):
        response = client.get("/map", params={"filter": "hostel"})
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert 'value="hostel" class="filter-btn active"' in response.text
        assert "fa-bed" in response.text
        assert "fa-taxi" not in response.text

    def test_page_search(self, client):
        response = client.get("/map", params={"q": "market"})
        assert 'value="market"' in response.text
        assert "City Taxi Service" in response.text


class TestLocateRoute:
    def test_success(self, client):
        outcome = client.post("/api/map/locate", json={"lat": 9.36, "lng": 42.81}).json()
        assert outcome["status"] == "ok"
        assert outcome["zoom"] == 15

        state = client.get("/api/map/state").json()
        assert state["center"] == [9.36, 42.81]
        assert len(state["user_markers"]) == 1

    def test_error_alert_shown_once(self, client):
        outcome = client.post("/api/map/locate", json={"error": "User denied Geolocation"}).json()
        assert outcome["status"] == "error"

        page = client.get("/map").text
        assert "Unable to get your location: User denied Geolocation" in page
        assert client.get("/api/map/state").json()["alerts"] == []

    def test_state_drains_alerts(self, client):
        client.post("/api/map/locate", json={"error": "User denied Geolocation"})

        state = client.get("/api/map/state").json()
        assert state["alerts"] == ["Unable to get your location: User denied Geolocation"]
        assert client.get("/api/map/state").json()["alerts"] == []
        assert "Unable to get your location" not in client.get("/map").text

    def test_unsupported(self, client):
        outcome = client.post("/api/map/locate", json={}).json()
        assert outcome["status"] == "unsupported"
        assert outcome["message"] == "Geolocation is not supported by your browser"

    def test_invalid_coordinates(self, client):
        response = client.post("/api/map/locate", json={"lat": 200, "lng": 42.8})
        assert response.status_code == 422

    @pytest.mark.parametrize("body", [{"lat": 9.36}, {"lng": 42.81}, {"lat": 9.36, "error": None}])
    def test_partial_coordinates_rejected(self, client, body):
        response = client.post("/api/map/locate", json=body)
        assert response.status_code == 422
        assert client.get("/api/map/state").json()["alerts"] == []


class TestRoutesRunOnEventLoop:
    """Handlers that touch the shared map must not run in the threadpool."""

    @pytest.mark.parametrize(
        "path",
        [
            "/map",
            "/api/map/filter",
            "/api/map/search",
            "/api/map/locate",
            "/api/map/state",
            "/api/services",
            "/api/services/search",
            "/api/services/reload",
        ],
    )
    def test_handler_is_coroutine(self, path):
        [route] = [r for r in app.routes if isinstance(r, APIRoute) and r.path == path]
        assert inspect.iscoroutinefunction(route.endpoint)

    def test_dependency_is_coroutine(self):
        assert inspect.iscoroutinefunction(get_controller)

