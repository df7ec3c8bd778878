"""Static facility dataset, panel display codes and dataset loading."""

import logging
from pathlib import Path

import yaml

from .models import ControlPanel, DataError, Facility, Metric, MetricKind, Severity

logger = logging.getLogger(__name__)


def _m(value: float, unit: str, trend: str, status: str) -> Metric:
    return Metric(value=value, unit=unit, trend=trend, status=Severity(status))


def _panel(panel_id: str, name: str, *metrics: Metric) -> ControlPanel:
    """Build a panel from six metrics given in MetricKind order."""
    return ControlPanel(id=panel_id, name=name, metrics=dict(zip(MetricKind, metrics)))


FACILITIES: tuple[Facility, ...] = (
    Facility(
        id=1,
        name="Raw Materials Processing Center",
        location="Jubail Industrial City",
        status="Operational",
        control_panels=(
            _panel(
                "A1",
                "Reactor Input Control Panel",
                _m(68.2, "°C", "+1.2°C/hr", "warning"),
                _m(58, "%", "-2%/day", "normal"),
                _m(12.4, "A", "+0.3A/hr", "normal"),
                _m(224, "V", "-1V/day", "normal"),
                _m(3.2, "mm/s", "+0.5mm/s/hr", "warning"),
                _m(8, "ppm", "+1ppm/hr", "normal"),
            ),
            _panel(
                "A2",
                "Heating System Control Panel",
                _m(55.1, "°C", "-0.5°C/hr", "normal"),
                _m(62, "%", "+1%/day", "normal"),
                _m(8.7, "A", "-0.1A/hr", "normal"),
                _m(228, "V", "+0.5V/day", "normal"),
                _m(1.8, "mm/s", "-0.2mm/s/day", "normal"),
                _m(5, "ppm", "-1ppm/day", "normal"),
            ),
            _panel(
                "A3",
                "Pressure Regulation Control Panel",
                _m(72.4, "°C", "+2.8°C/hr", "critical"),
                _m(45, "%", "-4%/day", "normal"),
                _m(15.8, "A", "+1.2A/hr", "warning"),
                _m(218, "V", "-2V/hr", "warning"),
                _m(4.7, "mm/s", "+1.1mm/s/hr", "critical"),
                _m(18, "ppm", "+5ppm/hr", "warning"),
            ),
            _panel(
                "A4",
                "Material Transport Control Panel",
                _m(59.6, "°C", "+0.3°C/hr", "normal"),
                _m(60, "%", "0%/day", "normal"),
                _m(10.1, "A", "+0.1A/hr", "normal"),
                _m(226, "V", "+0.2V/day", "normal"),
                _m(2.2, "mm/s", "-0.1mm/s/day", "normal"),
                _m(6, "ppm", "0ppm/day", "normal"),
            ),
        ),
    ),
    Facility(
        id=2,
        name="Catalyst Manufacturing Plant",
        location="Dammam Industrial Area 2",
        status="Operational",
        control_panels=(
            _panel(
                "B1",
                "Catalyst Synthesis Control Panel",
                _m(62.1, "°C", "+0.2°C/hr", "normal"),
                _m(54, "%", "-0.5%/day", "normal"),
                _m(10.8, "A", "+0.1A/hr", "normal"),
                _m(226, "V", "+0.2V/day", "normal"),
                _m(2.1, "mm/s", "+0.1mm/s/hr", "normal"),
                _m(6, "ppm", "+0.3ppm/hr", "normal"),
            ),
            _panel(
                "B2",
                "Purification System Control Panel",
                _m(66.2, "°C", "-0.2°C/hr", "normal"),
                _m(57, "%", "-0.3%/day", "normal"),
                _m(11.5, "A", "+0.1A/hr", "normal"),
                _m(224, "V", "+0.2V/day", "normal"),
                _m(2.2, "mm/s", "+0.1mm/s/hr", "normal"),
                _m(8, "ppm", "+0.4ppm/hr", "normal"),
            ),
            _panel(
                "B3",
                "Quality Control Station Control Panel",
                _m(60.0, "°C", "+0.2°C/hr", "normal"),
                _m(64, "%", "+1.0%/day", "normal"),
                _m(9.7, "A", "+0.1A/hr", "normal"),
                _m(227, "V", "+0.2V/day", "normal"),
                _m(1.9, "mm/s", "+0.1mm/s/day", "normal"),
                _m(4, "ppm", "0ppm/day", "normal"),
            ),
            _panel(
                "B4",
                "Storage Environment Control Panel",
                _m(65.1, "°C", "+0.9°C/hr", "normal"),
                _m(57, "%", "-1%/day", "normal"),
                _m(11.5, "A", "+0.2A/hr", "normal"),
                _m(226, "V", "-0.3V/day", "normal"),
                _m(2.9, "mm/s", "+0.3mm/s/hr", "warning"),
                _m(9, "ppm", "+1ppm/hr", "normal"),
            ),
        ),
    ),
    Facility(
        id=3,
        name="Finished Products Plant",
        location="Yanbu Industrial City",
        status="Warning",
        control_panels=(
            _panel(
                "C1",
                "Final Assembly Line Control Panel",
                _m(75.8, "°C", "+2.9°C/hr", "critical"),
                _m(42, "%", "-3.5%/day", "warning"),
                _m(14.6, "A", "+1.1A/hr", "warning"),
                _m(217, "V", "-2.1V/hr", "warning"),
                _m(4.5, "mm/s", "+1.2mm/s/hr", "critical"),
                _m(20, "ppm", "+7ppm/hr", "warning"),
            ),
            _panel(
                "C2",
                "Packaging System Control Panel",
                _m(61.2, "°C", "+0.5°C/hr", "normal"),
                _m(59, "%", "+0.5%/day", "normal"),
                _m(10.3, "A", "+0.1A/hr", "normal"),
                _m(228, "V", "+0.2V/day", "normal"),
                _m(2.3, "mm/s", "+0.1mm/s/day", "normal"),
                _m(6, "ppm", "0ppm/day", "normal"),
            ),
            _panel(
                "C3",
                "Product Testing Station Control Panel",
                _m(57.4, "°C", "-0.2°C/hr", "normal"),
                _m(64, "%", "+1.5%/day", "normal"),
                _m(9.2, "A", "-0.1A/hr", "normal"),
                _m(229, "V", "+0.4V/day", "normal"),
                _m(1.9, "mm/s", "-0.1mm/s/day", "normal"),
                _m(3, "ppm", "-1ppm/day", "normal"),
            ),
            _panel(
                "C4",
                "Distribution Prep Control Panel",
                _m(78.6, "°C", "+3.0°C/hr", "critical"),
                _m(39, "%", "-3.8%/day", "warning"),
                _m(16.2, "A", "+1.3A/hr", "warning"),
                _m(216, "V", "-2.3V/hr", "warning"),
                _m(5.0, "mm/s", "+1.2mm/s/hr", "critical"),
                _m(28, "ppm", "+12ppm/hr", "critical"),
            ),
        ),
    ),
)


# Short panel ids mapped to the plant-floor CX### codes shown in the UI
PANEL_DISPLAY_CODES: dict[str, str] = {
    # Raw Materials Processing Center
    "A1": "CX101",
    "A2": "CX102",
    "A3": "CX103",
    "A4": "CX104",
    # Catalyst Manufacturing Plant
    "B1": "CX201",
    "B2": "CX202",
    "B3": "CX203",
    "B4": "CX204",
    # Finished Products Plant
    "C1": "CX301",
    "C2": "CX302",
    "C3": "CX303",
    "C4": "CX304",
}


def display_code(panel_id: str) -> str:
    """Return the display code for a panel id, or the id itself if unmapped."""
    return PANEL_DISPLAY_CODES.get(panel_id, panel_id)


def find_facility(facilities: tuple[Facility, ...] | list[Facility], facility_id: str) -> Facility | None:
    """Look up a facility by its string id."""
    for facility in facilities:
        if facility.key == facility_id:
            return facility
    return None


def find_panel(facility: Facility | None, panel_id: str | None) -> ControlPanel | None:
    """Look up a panel within a facility; None when either is missing."""
    if facility is None or not panel_id:
        return None
    for panel in facility.control_panels:
        if panel.id == panel_id:
            return panel
    return None


def _parse_metric(data: object, where: str) -> Metric:
    if not isinstance(data, dict):
        raise DataError(f"{where} must be a dictionary")

    for key in ("value", "unit", "trend", "status"):
        if key not in data:
            raise DataError(f"{where} is missing '{key}' field")

    try:
        status = Severity(str(data["status"]))
    except ValueError:
        raise DataError(f"{where} has invalid status '{data['status']}'")

    try:
        value = float(data["value"])
    except (TypeError, ValueError):
        raise DataError(f"{where} has non-numeric value '{data['value']}'")

    return Metric(value=value, unit=str(data["unit"]), trend=str(data["trend"]), status=status)


def _parse_panel(data: object, where: str) -> ControlPanel:
    if not isinstance(data, dict):
        raise DataError(f"{where} must be a dictionary")

    panel_id = data.get("id")
    name = data.get("name")
    metrics_data = data.get("metrics")

    if panel_id is None:
        raise DataError(f"{where} is missing 'id' field")
    if name is None:
        raise DataError(f"{where} is missing 'name' field")
    if not isinstance(metrics_data, dict):
        raise DataError(f"{where} 'metrics' must be a dictionary")

    metrics = {}
    for key, metric_data in metrics_data.items():
        try:
            kind = MetricKind(str(key))
        except ValueError:
            raise DataError(f"{where} has unknown metric kind '{key}'")
        metrics[kind] = _parse_metric(metric_data, f"{where} metric '{key}'")

    return ControlPanel(id=str(panel_id), name=str(name), metrics=metrics)


def _parse_facility(data: object, index: int) -> Facility:
    where = f"Facility entry {index}"
    if not isinstance(data, dict):
        raise DataError(f"{where} must be a dictionary")

    for key in ("id", "name", "location"):
        if data.get(key) is None:
            raise DataError(f"{where} is missing '{key}' field")

    panels_data = data.get("control_panels", [])
    if not isinstance(panels_data, list):
        raise DataError(f"{where} 'control_panels' must be a list")

    try:
        facility_id = int(data["id"])
    except (TypeError, ValueError):
        raise DataError(f"{where} has non-integer id '{data['id']}'")

    panels = tuple(_parse_panel(panel, f"{where} panel {i}") for i, panel in enumerate(panels_data))

    return Facility(
        id=facility_id,
        name=str(data["name"]),
        location=str(data["location"]),
        status=str(data.get("status", "Operational")),
        control_panels=panels,
    )


def load_facilities(path: str) -> tuple[Facility, ...]:
    """Load an alternate facility dataset from a YAML file.

    Args:
        path: Path to a YAML file with a top-level ``facilities`` list.

    Returns:
        Tuple of facilities in file order.

    Raises:
        DataError: If the file cannot be read or is malformed.
    """
    file_path = Path(path)

    if not file_path.exists():
        raise DataError(f"Facilities file not found: {path}")

    try:
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DataError(f"Failed to parse facilities YAML: {e}")
    except OSError as e:
        raise DataError(f"Failed to read facilities file: {e}")

    if not isinstance(data, dict) or "facilities" not in data:
        raise DataError("Facilities file must contain a 'facilities' section")

    entries = data["facilities"]
    if not isinstance(entries, list):
        raise DataError("'facilities' must be a list")

    facilities = tuple(_parse_facility(entry, i) for i, entry in enumerate(entries))

    ids = [facility.id for facility in facilities]
    duplicates = {fid for fid in ids if ids.count(fid) > 1}
    if duplicates:
        raise DataError(f"Duplicate facility ids found: {duplicates}")

    logger.debug("Loaded %d facilities from %s", len(facilities), path)
    return facilities
