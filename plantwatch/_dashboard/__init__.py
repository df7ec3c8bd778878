"""HTML dashboard served at the root endpoint.

The page is static HTML whose JavaScript fetches /overview and posts
selection, pin and search changes back to the server.
"""

from ..config import DashboardConfig
from ._css import CSS_STYLES
from ._html import build_html
from ._js_core import JS_CORE
from ._js_utils import JS_UTILS


def render_dashboard(config: DashboardConfig) -> str:
    """Render the dashboard page for the given title and refresh settings."""
    return build_html(CSS_STYLES, JS_UTILS, JS_CORE, config.title, config.refresh_seconds)


__all__ = ["render_dashboard"]
