"""Tests for insight generation and activation."""

from unittest.mock import Mock

import pytest

from plantwatch.data import FACILITIES
from plantwatch.insights import (
    MAX_CRITICAL_INSIGHTS,
    OPTIMIZATION_INSIGHT,
    activate_insight,
    count_panels,
    flatten_metrics,
    generate_insights,
    insight_target,
    insight_to_dict,
    trend_magnitude,
)
from plantwatch.models import (
    AdvisoryInsight,
    Facility,
    Metric,
    MetricAlertInsight,
    MetricKind,
    PanelCounts,
    PredictionInsight,
    Severity,
    SystemHealthInsight,
)

from conftest import make_facility, make_panel


class TestTrendMagnitude:
    """Tests for trend_magnitude."""

    @pytest.mark.parametrize(
        "trend,expected",
        [
            ("+2.8°C/hr", 2.8),
            ("-3.5%/day", 3.5),
            ("+12ppm/hr", 12.0),
            ("0ppm/day", 0.0),
            ("0%/day", 0.0),
            ("12ppm/hr", 12.0),
            ("+.5A/hr", 0.5),
        ],
    )
    def test_parses_number_after_sign(self, trend: str, expected: float) -> None:
        """The number after an optional sign character is the magnitude."""
        assert trend_magnitude(trend) == expected

    def test_unparseable_ranks_lowest(self) -> None:
        """Trends without a number sort below everything."""
        assert trend_magnitude("+steady") == float("-inf")
        assert trend_magnitude("steady") == float("-inf")
        assert trend_magnitude("") == float("-inf")


class TestFlattenMetrics:
    """Tests for flatten_metrics."""

    def test_order_and_context(self) -> None:
        """Metrics flatten facility by facility, panel by panel, kind by kind."""
        flat = flatten_metrics(FACILITIES)

        assert len(flat) == 72
        first = flat[0]
        assert (first.facility_id, first.facility_name, first.panel_id, first.kind) == (
            "1",
            "Raw Materials Processing Center",
            "A1",
            MetricKind.TEMPERATURE,
        )
        assert [m.kind for m in flat[:6]] == list(MetricKind)
        assert flat[-1].panel_id == "C4"
        assert flat[-1].kind is MetricKind.SMOKE


class TestCountPanels:
    """Tests for count_panels."""

    def test_builtin_dataset(self) -> None:
        """Seven panels are fine, two warning, three critical."""
        assert count_panels(FACILITIES) == PanelCounts(ok=7, warning=2, critical=3)


class TestGenerateInsightsBuiltIn:
    """Insight list for the shipped dataset."""

    @pytest.fixture
    def insights(self) -> list:
        return generate_insights(FACILITIES)

    def test_order(self, insights: list) -> None:
        """Health first, then criticals, the warning and the prediction."""
        assert [i.id for i in insights] == [
            "system-health",
            "critical-0",
            "critical-1",
            "warning-0",
            "predictive",
        ]

    def test_system_health(self, insights: list) -> None:
        """Critical panels make the summary critical and list affected facilities."""
        health = insights[0]

        assert isinstance(health, SystemHealthInsight)
        assert health.type == "critical"
        assert health.impact == "High"
        assert health.title == "System Health Assessment"
        assert health.counts == PanelCounts(ok=7, warning=2, critical=3)
        assert health.critical_facilities == ("Raw Materials Processing Center", "Finished Products Plant")
        assert health.warning_facilities == ("Catalyst Manufacturing Plant",)

    def test_critical_call_outs(self, insights: list) -> None:
        """The first two critical metrics in flatten order are called out."""
        first, second = insights[1], insights[2]

        assert isinstance(first, MetricAlertInsight)
        assert (first.panel_id, first.metric.kind) == ("A3", MetricKind.TEMPERATURE)
        assert first.title == "Critical Temperature Alert"
        assert first.description == "Temperature exceeds safe operating threshold"
        assert first.recommendation == "Reduce temperature levels or take system offline for inspection"
        assert first.confidence == 89
        assert (second.panel_id, second.metric.kind) == ("A3", MetricKind.VIBRATION)
        assert second.title == "Critical Vibration Alert"

    def test_warning_call_out(self, insights: list) -> None:
        """Only the first warning metric is called out."""
        warning = insights[3]

        assert warning.type == "warning"
        assert (warning.facility_id, warning.panel_id) == ("1", "A1")
        assert warning.title == "Temperature Approaching Threshold"
        assert warning.description == "temperature trending upward at Raw Materials Processing Center"
        assert warning.confidence == 91
        assert warning.timeframe == "Last 2 hours"

    def test_prediction_picks_steepest_rise(self, insights: list) -> None:
        """C4 smoke (+12ppm/hr) is the steepest increasing abnormal trend."""
        prediction = insights[4]

        assert isinstance(prediction, PredictionInsight)
        assert (prediction.facility_id, prediction.panel_id) == ("3", "C4")
        assert prediction.metric.kind is MetricKind.SMOKE
        assert prediction.description == "Predictive analysis shows high risk of smoke failure"
        assert prediction.confidence == 78
        assert prediction.timeframe == "Next 24 hours"

    def test_limits(self, insights: list) -> None:
        """At most two critical and one warning call-out."""
        types = [i.type for i in insights]
        assert types.count("critical") - 1 <= MAX_CRITICAL_INSIGHTS
        assert types.count("warning") == 1


class TestGenerateInsightsScenarios:
    """Insight lists for constructed datasets."""

    def test_two_critical_temperatures(self, two_critical_facilities: list[Facility]) -> None:
        """Two criticals and no warnings: no warning call-out, prediction on the steeper one."""
        insights = generate_insights(two_critical_facilities)

        assert [i.id for i in insights] == ["system-health", "critical-0", "critical-1", "predictive"]
        health = insights[0]
        assert health.type == "critical"
        assert health.counts == PanelCounts(ok=10, warning=0, critical=2)
        assert health.critical_facilities == ("Plant 3",)
        assert health.warning_facilities == ()
        assert [i.panel_id for i in insights[1:3]] == ["C1", "C4"]
        assert insights[3].panel_id == "C4"
        assert insights[3].description == "Predictive analysis shows high risk of temperature failure"

    def test_all_normal(self, all_normal_facilities: list[Facility]) -> None:
        """Nothing abnormal: success summary plus both advisories."""
        insights = generate_insights(all_normal_facilities)

        assert [i.id for i in insights] == ["system-health", "optimization", "success"]
        assert insights[0].type == "success"
        assert insights[0].impact == "Low"
        assert insights[0].counts == PanelCounts(ok=12, warning=0, critical=0)
        assert all(isinstance(i, AdvisoryInsight) for i in insights[1:])

    def test_empty_dataset(self) -> None:
        """No facilities still produces the health summary."""
        insights = generate_insights([])

        assert insights[0].counts == PanelCounts(ok=0, warning=0, critical=0)
        assert insights[0].type == "success"

    def test_no_rising_trend_skips_prediction(self) -> None:
        """A falling abnormal metric yields no prediction."""
        cold = Metric(value=5.0, unit="°C", trend="-2.0°C/hr", status=Severity.WARNING)
        facilities = [make_facility(1, "Plant 1", [make_panel("A1", {MetricKind.TEMPERATURE: cold})])]
        insights = generate_insights(facilities)

        assert [i.id for i in insights] == ["system-health", "warning-0"]
        assert insights[0].type == "warning"
        assert insights[0].impact == "Medium"
        assert insights[0].warning_facilities == ("Plant 1",)

    def test_affected_facilities_capped_at_two(self) -> None:
        """At most two facility names are listed per severity."""
        hot = Metric(value=99.0, unit="°C", trend="+1°C/hr", status=Severity.CRITICAL)
        facilities = [
            make_facility(i, f"Plant {i}", [make_panel(f"P{i}", {MetricKind.TEMPERATURE: hot})]) for i in range(1, 5)
        ]
        health = generate_insights(facilities)[0]

        assert health.critical_facilities == ("Plant 1", "Plant 2")


class TestActivateInsight:
    """Tests for insight_target and activate_insight."""

    def test_metric_insight_navigates(self) -> None:
        """Clicking a metric insight selects its panel."""
        insight = generate_insights(FACILITIES)[1]
        on_select = Mock()

        assert activate_insight(insight, on_select) is True
        on_select.assert_called_once_with("1", "A3")

    def test_prediction_navigates(self) -> None:
        """The prediction points at its metric's panel."""
        prediction = generate_insights(FACILITIES)[-1]
        assert insight_target(prediction) == ("3", "C4")

    def test_summary_does_nothing(self) -> None:
        """System health and advisories have no target."""
        on_select = Mock()

        assert activate_insight(generate_insights(FACILITIES)[0], on_select) is False
        assert activate_insight(OPTIMIZATION_INSIGHT, on_select) is False
        on_select.assert_not_called()


class TestInsightToDict:
    """Tests for insight_to_dict."""

    def test_system_health_fields(self) -> None:
        """The summary carries panel counts and affected facilities."""
        data = insight_to_dict(generate_insights(FACILITIES)[0])

        assert data["id"] == "system-health"
        assert data["counts"] == {"ok": 7, "warning": 2, "critical": 3}
        assert data["critical_facilities"] == ["Raw Materials Processing Center", "Finished Products Plant"]
        assert "confidence" not in data
        assert "metric" not in data

    def test_metric_insight_fields(self) -> None:
        """Metric insights include their metric and navigation target."""
        data = insight_to_dict(generate_insights(FACILITIES)[1])

        assert data["confidence"] == 89
        assert data["facility_id"] == "1"
        assert data["panel_id"] == "A3"
        assert data["metric"]["metric"] == "temperature"
        assert data["metric"]["status"] == "critical"
        assert data["metric"]["panel_name"] == FACILITIES[0].control_panels[2].name

    def test_advisory_fields(self) -> None:
        """Advisories have confidence but no target."""
        data = insight_to_dict(OPTIMIZATION_INSIGHT)

        assert data["confidence"] == 82
        assert "panel_id" not in data
