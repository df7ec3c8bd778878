"""HTTP server for the facility dashboard and its JSON endpoints."""

import json
import logging
import random
import threading
from collections.abc import Sequence
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, Optional

from .config import DashboardConfig, ServerConfig
from .data import find_facility
from .insights import activate_insight, generate_insights, insight_to_dict
from .models import Facility
from .state import DashboardState
from .views import build_overview, facility_card, facility_detail, state_to_dict
from ._dashboard import render_dashboard

logger = logging.getLogger(__name__)

# Largest JSON request body accepted by the POST endpoints.
MAX_BODY_BYTES = 64 * 1024


class ApiError(Exception):
    """Raised when an API operation fails."""
    pass


class BadRequest(Exception):
    """Raised by request parsing; turned into a 400 response."""
    pass


def _require_str(body: Dict[str, Any], key: str) -> str:
    value = body.get(key)
    if not isinstance(value, str):
        raise BadRequest(f"'{key}' must be a string")
    return value


class DashboardHandler(BaseHTTPRequestHandler):
    """HTTP request handler for dashboard endpoints."""

    # Class-level references set by factory
    facilities: Sequence[Facility] = ()
    state: Optional[DashboardState] = None
    dashboard_config: DashboardConfig = DashboardConfig()
    rng: Optional[random.Random] = None

    def log_message(self, format: str, *args: Any) -> None:
        """Override to use Python logging instead of stderr."""
        logger.debug("API %s - %s", self.address_string(), format % args)

    def _send_json(self, code: int, data: Any) -> None:
        """Send a JSON response with the given status code."""
        body = json.dumps(data, indent=2).encode("utf-8")
        self.send_response(code)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Connection", "close")
        self.end_headers()
        self.wfile.write(body)

    def _send_error_json(self, code: int, message: str) -> None:
        """Send a JSON error response."""
        self._send_json(code, {"error": message})

    def _send_html(self, code: int, html: str) -> None:
        """Send an HTML response with the given status code."""
        body = html.encode("utf-8")
        self.send_response(code)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Cache-Control", "private, no-cache, must-revalidate")
        self.send_header("Connection", "close")
        self.end_headers()
        self.wfile.write(body)

    def _read_json_body(self) -> Dict[str, Any]:
        """Read and decode the request body as a JSON object."""
        try:
            length = int(self.headers.get("Content-Length", "0"))
        except ValueError:
            raise BadRequest("Invalid Content-Length")
        if length > MAX_BODY_BYTES:
            raise BadRequest("Request body too large")

        raw = self.rfile.read(length) if length > 0 else b""
        if not raw:
            return {}
        try:
            body = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            raise BadRequest("Request body must be valid JSON")
        if not isinstance(body, dict):
            raise BadRequest("Request body must be a JSON object")
        return body

    def do_GET(self) -> None:
        """Handle GET requests."""
        try:
            path = self.path.split("?", 1)[0]
            if path == "/":
                self._handle_dashboard()
            elif path == "/health":
                self._send_json(200, {"status": "ok"})
            elif path == "/overview":
                self._send_json(200, build_overview(self.facilities, self.state, self.rng))
            elif path == "/facilities":
                self._send_json(200, {"facilities": [facility_card(f, self.rng) for f in self.facilities]})
            elif path.startswith("/facilities/"):
                self._handle_facility(path[len("/facilities/"):])
            elif path == "/insights":
                self._send_json(200, {"insights": [insight_to_dict(i) for i in generate_insights(self.facilities)]})
            elif path == "/state":
                self._send_json(200, state_to_dict(self.state))
            else:
                self._send_error_json(404, "Not found")
        except Exception as e:
            logger.exception("Error handling request: %s", e)
            self._send_error_json(500, "Internal server error")

    def do_POST(self) -> None:
        """Handle POST requests that mutate the session state."""
        try:
            body = self._read_json_body()
            path = self.path.split("?", 1)[0]
            if path == "/select":
                self._handle_select(body)
            elif path == "/pins":
                self._handle_toggle_pin(body)
            elif path == "/expand":
                expanded = self.state.toggle_expanded(_require_str(body, "facility_id"))
                self._send_json(200, {"expanded": expanded})
            elif path == "/search":
                self.state.set_search(_require_str(body, "query"))
                self._send_json(200, state_to_dict(self.state))
            elif path.startswith("/insights/") and path.endswith("/activate"):
                self._handle_activate(path[len("/insights/"):-len("/activate")])
            else:
                self._send_error_json(404, "Not found")
        except BadRequest as e:
            self._send_error_json(400, str(e))
        except Exception as e:
            logger.exception("Error handling POST request: %s", e)
            self._send_error_json(500, "Internal server error")

    def _handle_dashboard(self) -> None:
        """Handle GET / endpoint - serve HTML dashboard."""
        self._send_html(200, render_dashboard(self.dashboard_config))

    def _handle_facility(self, facility_id: str) -> None:
        """Handle GET /facilities/<id> endpoint."""
        facility = find_facility(self.facilities, facility_id)
        if facility is None:
            self._send_error_json(404, f"Facility '{facility_id}' not found")
            return
        self._send_json(200, facility_detail(facility, self.state))

    def _handle_select(self, body: Dict[str, Any]) -> None:
        """Handle POST /select - select a facility, a panel, or the overview."""
        facility_id = _require_str(body, "facility_id")
        panel_id = body.get("panel_id")
        if panel_id is None:
            self.state.on_select_facility(facility_id)
        elif isinstance(panel_id, str):
            self.state.on_select_panel(facility_id, panel_id)
        else:
            raise BadRequest("'panel_id' must be a string")
        self._send_json(200, state_to_dict(self.state))

    def _handle_toggle_pin(self, body: Dict[str, Any]) -> None:
        """Handle POST /pins - toggle a panel's pinned state."""
        facility_id = _require_str(body, "facility_id")
        panel_id = _require_str(body, "panel_id")
        pinned = self.state.on_toggle_pin_panel(facility_id, panel_id)
        self._send_json(200, {"facility_id": facility_id, "panel_id": panel_id, "pinned": pinned})

    def _handle_activate(self, insight_id: str) -> None:
        """Handle POST /insights/<id>/activate - navigate to the insight's panel."""
        for insight in generate_insights(self.facilities):
            if insight.id == insight_id:
                activated = activate_insight(insight, self.state.on_select_panel)
                self._send_json(200, {"activated": activated, "state": state_to_dict(self.state)})
                return
        self._send_error_json(404, f"Insight '{insight_id}' not found")


def _create_handler_class(
    facilities: Sequence[Facility],
    state: DashboardState,
    dashboard_config: DashboardConfig,
    rng: Optional[random.Random] = None,
) -> type:
    """Create a handler class with the dataset and session state bound."""

    class BoundDashboardHandler(DashboardHandler):
        pass

    BoundDashboardHandler.facilities = tuple(facilities)
    BoundDashboardHandler.state = state
    BoundDashboardHandler.dashboard_config = dashboard_config
    BoundDashboardHandler.rng = rng
    return BoundDashboardHandler


class ApiServer:
    """Dashboard server handling each request on its own thread.

    Request threads share one ``DashboardState``; the state's handlers
    serialize their updates.
    """

    def __init__(
        self,
        config: ServerConfig,
        facilities: Sequence[Facility],
        state: Optional[DashboardState] = None,
        dashboard_config: Optional[DashboardConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Initialize the API server.

        Args:
            config: Server configuration.
            facilities: Read-only dataset served by every endpoint.
            state: Session state to share between requests (a fresh one by default).
            dashboard_config: Title and refresh settings for the HTML page.
            rng: Random source for the simulated health trend.
        """
        self.config = config
        self.facilities = tuple(facilities)
        self.state = state if state is not None else DashboardState()
        self.dashboard_config = dashboard_config if dashboard_config is not None else DashboardConfig()
        self._rng = rng
        self._server: Optional[ThreadingHTTPServer] = None
        self._thread: Optional[threading.Thread] = None

    def _bind(self) -> ThreadingHTTPServer:
        """Bind the listening socket, translating OS errors into ApiError."""
        handler_class = _create_handler_class(self.facilities, self.state, self.dashboard_config, self._rng)
        address = (self.config.host, self.config.port)
        try:
            server = ThreadingHTTPServer(address, handler_class)
        except OSError as e:
            if e.errno in (48, 98):  # EADDRINUSE on macOS / Linux
                raise ApiError(
                    f"Port {self.config.port} is already in use. "
                    f"Stop the other process or set PLANTWATCH_PORT to a free port."
                )
            if e.errno == 13:  # EACCES
                raise ApiError(
                    f"Permission denied for port {self.config.port}. "
                    f"Ports below 1024 require root privileges."
                )
            raise ApiError(f"Failed to start dashboard server on port {self.config.port}: {e}")
        return server

    def start(self) -> None:
        """Start serving in a background thread.

        Raises:
            ApiError: If the port cannot be bound.
        """
        if self.is_running:
            logger.warning("Dashboard server is already running")
            return

        self._server = self._bind()
        self._thread = threading.Thread(
            target=self._server.serve_forever,
            kwargs={"poll_interval": 0.5},
            name="dashboard-server",
            daemon=True,
        )
        self._thread.start()
        host = self.config.host or "0.0.0.0"
        logger.info("Dashboard server listening on http://%s:%d/", host, self.config.port)

    def stop(self) -> None:
        """Stop serving and release the port. Safe to call when not started."""
        if self._server is None:
            return

        logger.info("Stopping dashboard server...")
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5.0)

        self._server = None
        self._thread = None
        logger.info("Dashboard server stopped")

    @property
    def is_running(self) -> bool:
        """Whether the serving thread is alive."""
        return self._thread is not None and self._thread.is_alive()
