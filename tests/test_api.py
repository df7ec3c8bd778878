"""Tests for the API module."""

import json
import random
import socket
import time
import urllib.error
import urllib.request

import pytest

from plantwatch.api import ApiError, ApiServer
from plantwatch.config import DashboardConfig, ServerConfig
from plantwatch.data import FACILITIES
from plantwatch.state import DashboardState


def get_free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("", 0))
        return s.getsockname()[1]


def _server(state: DashboardState | None = None) -> ApiServer:
    config = ServerConfig(enabled=True, host="127.0.0.1", port=get_free_port())
    return ApiServer(
        config,
        FACILITIES,
        state,
        DashboardConfig(title="Test <Plant> Monitor", refresh_seconds=15),
        random.Random(7),
    )


class TestApiServer:
    """Tests for ApiServer class."""

    def test_starts_and_stops(self) -> None:
        """Server starts and stops without errors."""
        server = _server()

        server.start()
        assert server.is_running

        server.stop()
        assert not server.is_running

    def test_start_twice_is_safe(self) -> None:
        """Calling start() twice doesn't cause errors."""
        server = _server()

        try:
            server.start()
            server.start()  # Should not raise
            assert server.is_running
        finally:
            server.stop()

    def test_stop_without_start_is_safe(self) -> None:
        """Calling stop() without start() doesn't cause errors."""
        _server().stop()  # Should not raise

    def test_raises_on_port_conflict(self) -> None:
        """Raises ApiError when port is already in use."""
        server1 = _server()
        server2 = ApiServer(server1.config, FACILITIES)

        try:
            server1.start()
            with pytest.raises(ApiError, match="already in use"):
                server2.start()
        finally:
            server1.stop()
            server2.stop()

    def test_idle_connection_does_not_block_requests(self) -> None:
        """An open connection that never sends a request does not stall others."""
        server = _server()
        server.start()
        try:
            with socket.create_connection(("127.0.0.1", server.config.port), timeout=5):
                url = f"http://127.0.0.1:{server.config.port}/health"
                with urllib.request.urlopen(url, timeout=3) as response:
                    assert json.loads(response.read().decode("utf-8")) == {"status": "ok"}
        finally:
            server.stop()

    def test_creates_state_when_not_given(self) -> None:
        """A fresh session state starts on the overview."""
        assert _server().state.facility_id == ""


class TestApiEndpoints:
    """Integration tests for API endpoints."""

    @pytest.fixture
    def running_server(self) -> ApiServer:
        """Start a server and yield it, stopping after test."""
        server = _server(DashboardState())
        server.start()
        # Give server time to start
        time.sleep(0.1)
        yield server
        server.stop()

    def _url(self, server: ApiServer, path: str) -> str:
        return f"http://127.0.0.1:{server.config.port}{path}"

    def _get(self, server: ApiServer, path: str) -> tuple:
        """Make a GET request and return (status_code, json_body)."""
        try:
            with urllib.request.urlopen(self._url(server, path), timeout=5) as response:
                body = json.loads(response.read().decode("utf-8"))
                return response.status, body
        except urllib.error.HTTPError as e:
            body = json.loads(e.read().decode("utf-8"))
            return e.code, body

    def _post(self, server: ApiServer, path: str, payload: object = None, raw: bytes | None = None) -> tuple:
        """Make a POST request and return (status_code, json_body)."""
        data = raw if raw is not None else json.dumps(payload if payload is not None else {}).encode("utf-8")
        request = urllib.request.Request(
            self._url(server, path),
            data=data,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(request, timeout=5) as response:
                return response.status, json.loads(response.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            return e.code, json.loads(e.read().decode("utf-8"))

    def test_health_endpoint(self, running_server: ApiServer) -> None:
        """GET /health returns ok status."""
        status, body = self._get(running_server, "/health")

        assert status == 200
        assert body == {"status": "ok"}

    def test_overview_endpoint(self, running_server: ApiServer) -> None:
        """GET /overview returns the overview payload."""
        status, body = self._get(running_server, "/overview")

        assert status == 200
        assert body["view"] == "overview"
        assert len(body["cards"]) == 3
        assert [i["id"] for i in body["insights"]] == [
            "system-health",
            "critical-0",
            "critical-1",
            "warning-0",
            "predictive",
        ]

    def test_facilities_endpoint(self, running_server: ApiServer) -> None:
        """GET /facilities lists health cards."""
        status, body = self._get(running_server, "/facilities")

        assert status == 200
        assert [f["summary"]["health_score"] for f in body["facilities"]] == [71, 96, 50]

    def test_facility_by_id(self, running_server: ApiServer) -> None:
        """GET /facilities/<id> returns the facility detail."""
        status, body = self._get(running_server, "/facilities/3")

        assert status == 200
        assert body["name"] == "Finished Products Plant"
        assert [p["id"] for p in body["panels"]] == ["C1", "C4", "C2", "C3"]

    def test_facility_not_found(self, running_server: ApiServer) -> None:
        """GET /facilities/<unknown> returns 404."""
        status, body = self._get(running_server, "/facilities/99")

        assert status == 404
        assert body["error"] == "Facility '99' not found"

    def test_insights_endpoint(self, running_server: ApiServer) -> None:
        """GET /insights returns the insight list."""
        status, body = self._get(running_server, "/insights")

        assert status == 200
        assert body["insights"][0]["counts"] == {"ok": 7, "warning": 2, "critical": 3}

    def test_not_found_endpoint(self, running_server: ApiServer) -> None:
        """Unknown paths return 404."""
        status, body = self._get(running_server, "/nonexistent")

        assert status == 404
        assert body == {"error": "Not found"}

    def test_select_panel(self, running_server: ApiServer) -> None:
        """POST /select with a panel switches to the panel view."""
        status, body = self._post(running_server, "/select", {"facility_id": "1", "panel_id": "A3"})

        assert status == 200
        assert body["facility_id"] == "1"
        assert body["panel_id"] == "A3"

        _, overview = self._get(running_server, "/overview")
        assert overview["view"] == "panel"
        assert overview["panel"]["code"] == "CX103"

    def test_select_overview(self, running_server: ApiServer) -> None:
        """Selecting the empty facility id returns to the overview."""
        self._post(running_server, "/select", {"facility_id": "2"})
        self._post(running_server, "/select", {"facility_id": ""})

        _, state = self._get(running_server, "/state")
        assert state["facility_id"] == ""
        assert state["panel_id"] is None

    def test_select_requires_facility(self, running_server: ApiServer) -> None:
        """POST /select without facility_id is a bad request."""
        status, body = self._post(running_server, "/select", {"panel_id": "A1"})

        assert status == 400
        assert body["error"] == "'facility_id' must be a string"

    def test_select_rejects_non_string_panel(self, running_server: ApiServer) -> None:
        """panel_id must be a string when given."""
        status, _ = self._post(running_server, "/select", {"facility_id": "1", "panel_id": 3})

        assert status == 400

    def test_invalid_json(self, running_server: ApiServer) -> None:
        """Malformed bodies are rejected."""
        status, body = self._post(running_server, "/select", raw=b"{not json")

        assert status == 400
        assert body["error"] == "Request body must be valid JSON"

    def test_body_must_be_object(self, running_server: ApiServer) -> None:
        """JSON arrays are rejected."""
        status, _ = self._post(running_server, "/pins", ["1", "A1"])

        assert status == 400

    def test_toggle_pin(self, running_server: ApiServer) -> None:
        """POST /pins toggles and reports the pinned state."""
        _, first = self._post(running_server, "/pins", {"facility_id": "3", "panel_id": "C4"})
        _, overview = self._get(running_server, "/overview")
        _, second = self._post(running_server, "/pins", {"facility_id": "3", "panel_id": "C4"})

        assert first["pinned"] is True
        assert [p["code"] for p in overview["pinned"]] == ["CX304"]
        assert second["pinned"] is False
        assert running_server.state.pinned == ()

    def test_toggle_expand(self, running_server: ApiServer) -> None:
        """POST /expand flips a facility's sidebar section."""
        _, body = self._post(running_server, "/expand", {"facility_id": "2"})
        assert body == {"expanded": True}

        _, overview = self._get(running_server, "/overview")
        assert [f["expanded"] for f in overview["sidebar"]] == [False, True, False]

    def test_search(self, running_server: ApiServer) -> None:
        """POST /search filters the sidebar tree."""
        status, body = self._post(running_server, "/search", {"query": "packaging"})

        assert status == 200
        assert body["search"] == "packaging"
        _, overview = self._get(running_server, "/overview")
        assert [f["id"] for f in overview["sidebar"]] == ["3"]
        assert [p["id"] for p in overview["sidebar"][0]["panels"]] == ["C2"]

    def test_activate_metric_insight(self, running_server: ApiServer) -> None:
        """Activating a metric insight selects its panel."""
        status, body = self._post(running_server, "/insights/predictive/activate")

        assert status == 200
        assert body["activated"] is True
        assert body["state"]["facility_id"] == "3"
        assert body["state"]["panel_id"] == "C4"

    def test_activate_summary_insight(self, running_server: ApiServer) -> None:
        """The system health insight does not navigate."""
        status, body = self._post(running_server, "/insights/system-health/activate")

        assert status == 200
        assert body["activated"] is False
        assert body["state"]["facility_id"] == ""

    def test_activate_unknown_insight(self, running_server: ApiServer) -> None:
        """Unknown insight ids return 404."""
        status, _ = self._post(running_server, "/insights/optimization/activate")

        assert status == 404

    def test_post_unknown_path(self, running_server: ApiServer) -> None:
        """Unknown POST paths return 404."""
        status, _ = self._post(running_server, "/reset")

        assert status == 404

    def test_dashboard_endpoint(self, running_server: ApiServer) -> None:
        """GET / returns HTML dashboard."""
        with urllib.request.urlopen(self._url(running_server, "/"), timeout=5) as response:
            assert response.status == 200
            assert "text/html" in response.headers.get("Content-Type")
            assert response.headers.get("Cache-Control") == "private, no-cache, must-revalidate"
            body = response.read().decode("utf-8")

        assert "<!DOCTYPE html>" in body
        assert "<title>Test &lt;Plant&gt; Monitor</title>" in body
        assert 'id="facilityTree"' in body
        assert 'id="mainView"' in body
        assert "fetchWithTimeout('/overview')" in body
        assert "const REFRESH_INTERVAL = 15000;" in body
        assert "setInterval" in body
