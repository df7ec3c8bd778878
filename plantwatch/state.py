"""Selection, pin and sidebar state for one dashboard session.

The state object is owned by whoever renders the dashboard and is passed
explicitly to the code that reads it. It changes only through the
``on_*`` handlers and ``toggle_expanded``/``set_search``.
"""

import logging
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .data import find_facility, find_panel
from .models import ControlPanel, Facility, PinnedPanel

logger = logging.getLogger(__name__)

# Selecting this facility id shows the overview instead of a facility
OVERVIEW = ""


@dataclass(frozen=True)
class Selection:
    """Resolved selection; either part is None when nothing matches.

    ``is_overview`` is set only for the overview sentinel, so an unknown
    facility id resolves to an empty selection rather than the overview.
    """

    facility: Facility | None
    panel: ControlPanel | None
    is_overview: bool = False


class DashboardState:
    """Process-local UI state: selection, pinned panels, expanded sections, search text.

    All handlers take a lock so the threaded HTTP server can share one
    instance between request handlers.
    """

    def __init__(self, facility_id: str = OVERVIEW) -> None:
        self._facility_id = facility_id
        self._panel_id: str | None = None
        self._pinned: dict[PinnedPanel, None] = {}  # insertion-ordered set
        self._expanded: dict[str, bool] = {facility_id: True} if facility_id else {}
        self._search_query = ""
        self._lock = threading.Lock()

    @property
    def facility_id(self) -> str:
        return self._facility_id

    @property
    def panel_id(self) -> str | None:
        return self._panel_id

    @property
    def search_query(self) -> str:
        return self._search_query

    @property
    def pinned(self) -> tuple[PinnedPanel, ...]:
        """Pinned panels in the order they were pinned."""
        with self._lock:
            return tuple(self._pinned)

    def on_select_facility(self, facility_id: str) -> None:
        """Select a facility (or the overview) and clear the panel selection."""
        with self._lock:
            self._facility_id = facility_id
            self._panel_id = None
        logger.debug("Selected facility %r", facility_id)

    def on_select_panel(self, facility_id: str, panel_id: str) -> None:
        """Select a panel together with its facility."""
        with self._lock:
            self._facility_id = facility_id
            self._panel_id = panel_id
        logger.debug("Selected panel %r in facility %r", panel_id, facility_id)

    def on_toggle_pin_panel(self, facility_id: str, panel_id: str) -> bool:
        """Pin the panel if unpinned, unpin it otherwise.

        Returns:
            True if the panel is pinned after the call.
        """
        pin = PinnedPanel(facility_id=facility_id, panel_id=panel_id)
        with self._lock:
            if pin in self._pinned:
                del self._pinned[pin]
                pinned = False
            else:
                self._pinned[pin] = None
                pinned = True
        logger.debug("Panel %s/%s %s", facility_id, panel_id, "pinned" if pinned else "unpinned")
        return pinned

    def is_pinned(self, facility_id: str, panel_id: str) -> bool:
        with self._lock:
            return PinnedPanel(facility_id, panel_id) in self._pinned

    @property
    def is_current_panel_pinned(self) -> bool:
        with self._lock:
            if not self._facility_id or not self._panel_id:
                return False
            return PinnedPanel(self._facility_id, self._panel_id) in self._pinned

    def toggle_expanded(self, facility_id: str) -> bool:
        """Flip a facility's sidebar section; returns the new expanded state."""
        with self._lock:
            expanded = not self._expanded.get(facility_id, False)
            self._expanded[facility_id] = expanded
        return expanded

    def is_expanded(self, facility_id: str) -> bool:
        with self._lock:
            return self._expanded.get(facility_id, False)

    @property
    def expanded(self) -> list[str]:
        with self._lock:
            return [fid for fid, is_open in self._expanded.items() if is_open]

    def set_search(self, query: str) -> None:
        with self._lock:
            self._search_query = query

    def resolve(self, facilities: Sequence[Facility]) -> Selection:
        """Resolve the selected ids against the dataset.

        Unknown ids resolve to None rather than raising.
        """
        with self._lock:
            facility_id, panel_id = self._facility_id, self._panel_id
        if facility_id == OVERVIEW:
            return Selection(facility=None, panel=None, is_overview=True)
        facility = find_facility(facilities, facility_id)
        return Selection(facility=facility, panel=find_panel(facility, panel_id))

    def pinned_panels(self, facilities: Sequence[Facility]) -> list[tuple[Facility, ControlPanel]]:
        """Resolve pins to (facility, panel) pairs, skipping pins that no longer match."""
        resolved = []
        for pin in self.pinned:
            facility = find_facility(facilities, pin.facility_id)
            panel = find_panel(facility, pin.panel_id)
            if facility is not None and panel is not None:
                resolved.append((facility, panel))
        return resolved


def filter_facilities(facilities: Iterable[Facility], query: str) -> list[Facility]:
    """Filter the sidebar tree by a case-insensitive search query.

    Panels are kept when their name contains the query. A facility is kept
    when its own name matches or at least one of its panels survives; its
    panel list is narrowed to the matching panels either way.
    """
    facilities = list(facilities)
    if not query:
        return facilities

    needle = query.lower()
    result = []
    for facility in facilities:
        panels = tuple(panel for panel in facility.control_panels if needle in panel.name.lower())
        if needle in facility.name.lower() or panels:
            result.append(
                Facility(
                    id=facility.id,
                    name=facility.name,
                    location=facility.location,
                    status=facility.status,
                    control_panels=panels,
                )
            )
    return result
