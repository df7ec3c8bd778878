"""Shared fixtures for building small facility datasets."""

import pytest

from plantwatch.models import ControlPanel, Facility, Metric, MetricKind, Severity


def make_panel(panel_id: str, overrides: dict[MetricKind, Metric] | None = None) -> ControlPanel:
    """Build a panel whose metrics are all normal except for the given overrides."""
    metrics = {kind: Metric(value=1.0, unit="u", trend="-0.1u/hr", status=Severity.NORMAL) for kind in MetricKind}
    metrics.update(overrides or {})
    return ControlPanel(id=panel_id, name=f"Panel {panel_id}", metrics=metrics)


def make_facility(facility_id: int, name: str, panels: list[ControlPanel]) -> Facility:
    return Facility(id=facility_id, name=name, location="Test Site", status="Operational", control_panels=panels)


@pytest.fixture
def all_normal_facilities() -> list[Facility]:
    """Three facilities with four panels each and no abnormal metrics."""
    return [
        make_facility(index, f"Plant {index}", [make_panel(f"{prefix}{n}") for n in range(1, 5)])
        for index, prefix in enumerate("ABC", start=1)
    ]


@pytest.fixture
def two_critical_facilities(all_normal_facilities: list[Facility]) -> list[Facility]:
    """Normal dataset except C1 and C4, which each report a critical temperature."""
    hot = {
        "C1": Metric(value=75.8, unit="°C", trend="+2.9°C/hr", status=Severity.CRITICAL),
        "C4": Metric(value=78.6, unit="°C", trend="+3.0°C/hr", status=Severity.CRITICAL),
    }
    panels = [
        make_panel(panel_id, {MetricKind.TEMPERATURE: hot[panel_id]} if panel_id in hot else None)
        for panel_id in ("C1", "C2", "C3", "C4")
    ]
    return all_normal_facilities[:2] + [make_facility(3, "Plant 3", panels)]
