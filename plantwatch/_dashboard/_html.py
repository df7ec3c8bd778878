"""HTML template for the dashboard.

The page skeleton lives in dashboard.html next to this module. It is read
once and re-read only when the file's modification time changes, so edits
show up without restarting the server.
"""

import html
from pathlib import Path
from string import Template

_TEMPLATE_PATH = Path(__file__).parent / "dashboard.html"

# Cache for template and its mtime
_template_cache: Template | None = None
_template_mtime: float = 0.0


def _get_template() -> Template:
    """Get the HTML template, reloading if the file changed."""
    global _template_cache, _template_mtime

    current_mtime = _TEMPLATE_PATH.stat().st_mtime

    if _template_cache is None or current_mtime != _template_mtime:
        _template_cache = Template(_TEMPLATE_PATH.read_text(encoding="utf-8"))
        _template_mtime = current_mtime

    return _template_cache


def build_html(css: str, js_utils: str, js_core: str, title: str, refresh_seconds: int) -> str:
    """Build the complete HTML dashboard from its components.

    Args:
        css: CSS styles string
        js_utils: JavaScript helper functions string
        js_core: JavaScript rendering and event handling string
        title: Page and header title (HTML-escaped here)
        refresh_seconds: Auto-refresh interval for the overview data

    Returns:
        Complete HTML dashboard string
    """
    return _get_template().safe_substitute(
        css=css,
        js_utils=js_utils,
        js_core=js_core,
        title=html.escape(title),
        refresh_ms=str(refresh_seconds * 1000),
    )
