"""Tests for the data models."""

import pytest

from plantwatch.models import (
    ControlPanel,
    DataError,
    Facility,
    Metric,
    MetricKind,
    PinnedPanel,
    Severity,
)


def _metric(status: str = "normal", trend: str = "+1°C/hr") -> Metric:
    return Metric(value=50.0, unit="°C", trend=trend, status=Severity(status))


class TestSeverity:
    """Tests for the Severity enum."""

    def test_ranks_are_ordered(self) -> None:
        """normal < warning < critical."""
        assert Severity.NORMAL.rank < Severity.WARNING.rank < Severity.CRITICAL.rank

    def test_compares_equal_to_string(self) -> None:
        """Severity values compare equal to their raw strings."""
        assert Severity.CRITICAL == "critical"
        assert Severity("warning") is Severity.WARNING

    def test_rejects_unknown_status(self) -> None:
        """Unknown status strings are rejected."""
        with pytest.raises(ValueError):
            Severity("broken")


class TestMetricKind:
    """Tests for the MetricKind enum."""

    def test_declaration_order(self) -> None:
        """Six kinds in fixed order."""
        assert [k.value for k in MetricKind] == [
            "temperature",
            "humidity",
            "current",
            "voltage",
            "vibration",
            "smoke",
        ]

    def test_label_is_capitalized(self) -> None:
        """Label capitalizes the first letter."""
        assert MetricKind.VIBRATION.label == "Vibration"


class TestMetric:
    """Tests for the Metric dataclass."""

    def test_increasing_trend(self) -> None:
        """A leading plus sign means increasing."""
        assert _metric(trend="+2.8°C/hr").is_increasing is True

    def test_decreasing_trend(self) -> None:
        """A leading minus sign means not increasing."""
        assert _metric(trend="-2V/hr").is_increasing is False

    def test_flat_trend(self) -> None:
        """An unsigned zero trend is not increasing."""
        assert _metric(trend="0%/day").is_increasing is False

    def test_is_immutable(self) -> None:
        """Metrics cannot be modified after creation."""
        metric = _metric()
        with pytest.raises(AttributeError):
            metric.value = 1.0  # type: ignore[misc]


class TestControlPanel:
    """Tests for the ControlPanel dataclass."""

    def test_requires_all_six_metrics(self) -> None:
        """A panel missing any metric kind is rejected."""
        metrics = {kind: _metric() for kind in MetricKind if kind is not MetricKind.SMOKE}
        with pytest.raises(DataError, match="missing metrics: smoke"):
            ControlPanel(id="X1", name="Panel", metrics=metrics)

    def test_rejects_empty_id(self) -> None:
        """A panel needs an id."""
        with pytest.raises(DataError, match="id cannot be empty"):
            ControlPanel(id="", name="Panel", metrics={kind: _metric() for kind in MetricKind})

    def test_metrics_are_reordered_by_kind(self) -> None:
        """Metrics iterate in kind declaration order regardless of input order."""
        metrics = {kind: _metric() for kind in reversed(list(MetricKind))}
        panel = ControlPanel(id="X1", name="Panel", metrics=metrics)
        assert [kind for kind, _ in panel.metric_items()] == list(MetricKind)

    def test_metrics_are_read_only(self) -> None:
        """The metrics mapping cannot be mutated."""
        panel = ControlPanel(id="X1", name="Panel", metrics={kind: _metric() for kind in MetricKind})
        with pytest.raises(TypeError):
            panel.metrics[MetricKind.SMOKE] = _metric("critical")  # type: ignore[index]


class TestFacility:
    """Tests for the Facility dataclass."""

    def test_allows_no_panels(self) -> None:
        """Empty facilities are valid."""
        facility = Facility(id=9, name="Empty", location="Nowhere", status="Operational")
        assert facility.control_panels == ()
        assert facility.key == "9"

    def test_rejects_unknown_status(self) -> None:
        """Facility status must be one of the known labels."""
        with pytest.raises(DataError, match="Invalid status"):
            Facility(id=1, name="F", location="L", status="Exploded")

    def test_panel_list_becomes_tuple(self) -> None:
        """Panels given as a list are stored as a tuple."""
        panel = ControlPanel(id="X1", name="Panel", metrics={kind: _metric() for kind in MetricKind})
        facility = Facility(id=1, name="F", location="L", status="Warning", control_panels=[panel])
        assert isinstance(facility.control_panels, tuple)


class TestPinnedPanel:
    """Tests for the PinnedPanel dataclass."""

    def test_equal_pairs_hash_equal(self) -> None:
        """Pins with the same ids are interchangeable in sets."""
        assert len({PinnedPanel("1", "A1"), PinnedPanel("1", "A1")}) == 1
