"""JSON view models for the dashboard: facility cards, panel details, sidebar tree."""

import random
from collections.abc import Sequence
from typing import Any

from .aggregation import (
    FacilitySummary,
    facility_severity,
    health_trend,
    highest_severity,
    panels_by_severity,
    status_color,
    summarize,
)
from .data import display_code
from .insights import generate_insights, insight_to_dict
from .models import ControlPanel, Facility, Metric, Severity
from .state import DashboardState, filter_facilities


def _summary_to_dict(summary: FacilitySummary) -> dict[str, Any]:
    return {
        "counts": {severity.value: count for severity, count in summary.counts.items()},
        "percentages": {severity.value: pct for severity, pct in summary.percentages.items()},
        "total": summary.total,
        "health_score": summary.health_score,
        "rating": summary.rating,
        "color": summary.color,
    }


def _metric_to_dict(metric: Metric) -> dict[str, Any]:
    return {
        "value": metric.value,
        "unit": metric.unit,
        "trend": metric.trend,
        "increasing": metric.is_increasing,
        "status": metric.status.value,
        "color": status_color(metric.status),
    }


def panel_to_dict(facility: Facility, panel: ControlPanel, state: DashboardState | None = None) -> dict[str, Any]:
    """Serialize a control panel with its display code and severity."""
    severity = highest_severity(panel)
    data = {
        "id": panel.id,
        "facility_id": facility.key,
        "code": display_code(panel.id),
        "name": panel.name,
        "severity": severity.value,
        "color": status_color(severity),
        "metrics": {kind.value: _metric_to_dict(metric) for kind, metric in panel.metric_items()},
    }
    if state is not None:
        data["pinned"] = state.is_pinned(facility.key, panel.id)
    return data


def facility_to_dict(facility: Facility) -> dict[str, Any]:
    """Serialize facility identity fields without panels."""
    return {
        "id": facility.key,
        "name": facility.name,
        "location": facility.location,
        "status": facility.status,
        "severity": facility_severity(facility).value,
        "panel_count": len(facility.control_panels),
    }


def facility_card(facility: Facility, rng: random.Random | None = None) -> dict[str, Any]:
    """Overview health card for one facility."""
    summary = summarize(facility)
    data = facility_to_dict(facility)
    data["summary"] = _summary_to_dict(summary)
    data["trend"] = health_trend(summary, rng) if summary.total else 0
    return data


def facility_detail(facility: Facility, state: DashboardState | None = None) -> dict[str, Any]:
    """Facility view: summary plus panels, worst first."""
    data = facility_to_dict(facility)
    data["summary"] = _summary_to_dict(summarize(facility))
    data["panels"] = [panel_to_dict(facility, panel, state) for panel in panels_by_severity(facility)]
    return data


def sidebar_tree(facilities: Sequence[Facility], state: DashboardState) -> list[dict[str, Any]]:
    """Facility/panel tree filtered by the current search text."""
    tree = []
    for facility in filter_facilities(facilities, state.search_query):
        tree.append(
            {
                "id": facility.key,
                "name": facility.name,
                "expanded": state.is_expanded(facility.key) or bool(state.search_query),
                "selected": state.facility_id == facility.key,
                "panels": [
                    {
                        "id": panel.id,
                        "code": display_code(panel.id),
                        "name": panel.name,
                        "severity": highest_severity(panel).value,
                        "pinned": state.is_pinned(facility.key, panel.id),
                        "selected": state.facility_id == facility.key and state.panel_id == panel.id,
                    }
                    for panel in facility.control_panels
                ],
            }
        )
    return tree


def state_to_dict(state: DashboardState) -> dict[str, Any]:
    return {
        "facility_id": state.facility_id,
        "panel_id": state.panel_id,
        "pinned": [{"facility_id": p.facility_id, "panel_id": p.panel_id} for p in state.pinned],
        "expanded": state.expanded,
        "search": state.search_query,
    }


def build_overview(
    facilities: Sequence[Facility],
    state: DashboardState,
    rng: random.Random | None = None,
) -> dict[str, Any]:
    """Assemble everything the single-page dashboard renders in one payload."""
    selection = state.resolve(facilities)

    if selection.is_overview:
        view = "overview"
    elif selection.panel is not None:
        view = "panel"
    elif selection.facility is not None:
        view = "facility"
    else:
        view = "empty"

    payload: dict[str, Any] = {
        "view": view,
        "state": state_to_dict(state),
        "sidebar": sidebar_tree(facilities, state),
        "pinned": [
            {
                "facility_id": facility.key,
                "panel_id": panel.id,
                "code": display_code(panel.id),
                "name": panel.name,
                "severity": highest_severity(panel).value,
            }
            for facility, panel in state.pinned_panels(facilities)
        ],
    }

    if view == "overview":
        payload["cards"] = [facility_card(f, rng) for f in facilities if f.control_panels]
        payload["insights"] = [insight_to_dict(i) for i in generate_insights(facilities)]
    elif view == "facility":
        payload["facility"] = facility_detail(selection.facility, state)
    elif view == "panel":
        payload["facility"] = facility_to_dict(selection.facility)
        payload["panel"] = panel_to_dict(selection.facility, selection.panel, state)

    return payload


def severity_totals(facilities: Sequence[Facility]) -> dict[str, int]:
    """Metric counts per status across all facilities."""
    totals = {severity.value: 0 for severity in Severity}
    for facility in facilities:
        for severity, count in summarize(facility).counts.items():
            totals[severity.value] += count
    return totals
