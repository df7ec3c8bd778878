"""Template-driven insight records derived from the facility dataset.

Insights are regenerated from scratch on every request. They are labelled
"AI" in the dashboard but are plain threshold templates: nothing here is
learned or predicted.
"""

import re
from collections.abc import Callable, Iterable
from typing import Any

from .aggregation import highest_severity
from .models import (
    AdvisoryInsight,
    EnhancedMetric,
    Facility,
    Insight,
    MetricAlertInsight,
    PanelCounts,
    PredictionInsight,
    Severity,
    SystemHealthInsight,
)

# How many call-outs of each kind the insight list carries
MAX_CRITICAL_INSIGHTS = 2
MAX_WARNING_INSIGHTS = 1
MAX_AFFECTED_FACILITIES = 2

_MAGNITUDE_RE = re.compile(r"\s*(\d+(?:\.\d*)?|\.\d+)")


def flatten_metrics(facilities: Iterable[Facility]) -> list[EnhancedMetric]:
    """Flatten every metric in facility, panel, metric-kind order."""
    return [
        EnhancedMetric(
            facility_id=facility.key,
            facility_name=facility.name,
            panel_id=panel.id,
            panel_name=panel.name,
            kind=kind,
            metric=metric,
        )
        for facility in facilities
        for panel in facility.control_panels
        for kind, metric in panel.metric_items()
    ]


def trend_magnitude(trend: str) -> float:
    """Parse the number following a trend's sign ("+2.8°C/hr" -> 2.8).

    Unsigned trends ("0ppm/day") parse as-is. Unparseable trends return
    -inf so they rank below every real value.
    """
    digits = trend[1:] if trend[:1] in ("+", "-") else trend
    match = _MAGNITUDE_RE.match(digits)
    if match is None:
        return float("-inf")
    return float(match.group(1))


def count_panels(facilities: Iterable[Facility]) -> PanelCounts:
    """Count panels by their highest metric severity."""
    counts = {severity: 0 for severity in Severity}
    for facility in facilities:
        for panel in facility.control_panels:
            counts[highest_severity(panel)] += 1
    return PanelCounts(
        ok=counts[Severity.NORMAL],
        warning=counts[Severity.WARNING],
        critical=counts[Severity.CRITICAL],
    )


def _affected_facilities(facilities: list[Facility]) -> tuple[tuple[str, ...], tuple[str, ...]]:
    critical: list[str] = []
    warning: list[str] = []
    for facility in facilities:
        severities = {highest_severity(panel) for panel in facility.control_panels}
        if Severity.CRITICAL in severities:
            critical.append(facility.name)
        elif Severity.WARNING in severities:
            warning.append(facility.name)
    return tuple(critical[:MAX_AFFECTED_FACILITIES]), tuple(warning[:MAX_AFFECTED_FACILITIES])


def _system_health(facilities: list[Facility]) -> SystemHealthInsight:
    counts = count_panels(facilities)
    critical_names, warning_names = _affected_facilities(facilities)

    if counts.critical > 0:
        return SystemHealthInsight(
            type="critical",
            title="System Health Assessment",
            description="Critical issues detected in multiple control panels",
            counts=counts,
            impact="High",
            recommendation="Immediate investigation required for critical systems",
            critical_facilities=critical_names,
            warning_facilities=warning_names,
        )
    if counts.warning > 0:
        return SystemHealthInsight(
            type="warning",
            title="System Health Assessment",
            description="Warning conditions present but no critical failures",
            counts=counts,
            impact="Medium",
            recommendation="Schedule maintenance for affected components",
            warning_facilities=warning_names,
        )
    return SystemHealthInsight(
        type="success",
        title="System Health Assessment",
        description="All systems operating within normal parameters",
        counts=counts,
        impact="Low",
        recommendation="Continue normal monitoring procedures",
    )


def _critical_insight(index: int, metric: EnhancedMetric) -> MetricAlertInsight:
    label = metric.kind.label
    return MetricAlertInsight(
        id=f"critical-{index}",
        type="critical",
        title=f"Critical {label} Alert",
        description=f"{label} exceeds safe operating threshold",
        metric=metric,
        confidence=89,
        impact="High",
        recommendation=f"Reduce {metric.kind.value} levels or take system offline for inspection",
        timeframe="Last 30 minutes",
    )


def _warning_insight(index: int, metric: EnhancedMetric) -> MetricAlertInsight:
    return MetricAlertInsight(
        id=f"warning-{index}",
        type="warning",
        title=f"{metric.kind.label} Approaching Threshold",
        description=f"{metric.kind.value} trending upward at {metric.facility_name}",
        metric=metric,
        confidence=91,
        impact="Medium",
        recommendation=f"Monitor {metric.kind.value} levels and prepare for potential intervention",
        timeframe="Last 2 hours",
    )


def _prediction_insight(abnormal: list[EnhancedMetric]) -> PredictionInsight | None:
    rising = [m for m in abnormal if m.metric.is_increasing]
    if not rising:
        return None
    worst = sorted(rising, key=lambda m: trend_magnitude(m.trend), reverse=True)[0]
    return PredictionInsight(
        metric=worst,
        description=f"Predictive analysis shows high risk of {worst.kind.value} failure",
    )


OPTIMIZATION_INSIGHT = AdvisoryInsight(
    id="optimization",
    type="optimization",
    title="Efficiency Optimization Opportunity",
    description="Algorithm detected potential for energy efficiency improvements",
    confidence=82,
    impact="Medium",
    recommendation="Adjust power distribution during off-peak hours to reduce consumption by 12%",
    timeframe="Ongoing",
)

SUCCESS_INSIGHT = AdvisoryInsight(
    id="success",
    type="success",
    title="Maintenance Effectiveness",
    description="Recent maintenance has successfully stabilized system parameters",
    confidence=91,
    impact="Positive",
    recommendation="Continue with current maintenance schedule",
    timeframe="Past 7 days",
)


def generate_insights(facilities: Iterable[Facility]) -> list[Insight]:
    """Build the ordered insight list for the overview.

    Order: system health, up to two critical metrics, one warning metric,
    then either a failure-risk prediction or, when nothing is abnormal, the
    optimization and success advisories.
    """
    facilities = list(facilities)
    insights: list[Insight] = [_system_health(facilities)]

    all_metrics = flatten_metrics(facilities)
    critical = [m for m in all_metrics if m.status is Severity.CRITICAL]
    warning = [m for m in all_metrics if m.status is Severity.WARNING]

    if not critical and not warning:
        insights.append(OPTIMIZATION_INSIGHT)
        insights.append(SUCCESS_INSIGHT)
        return insights

    for index, metric in enumerate(critical[:MAX_CRITICAL_INSIGHTS]):
        insights.append(_critical_insight(index, metric))

    for index, metric in enumerate(warning[:MAX_WARNING_INSIGHTS]):
        insights.append(_warning_insight(index, metric))

    prediction = _prediction_insight(critical + warning)
    if prediction is not None:
        insights.append(prediction)

    return insights


def insight_target(insight: Insight) -> tuple[str, str] | None:
    """Return the (facility_id, panel_id) an insight points at, if any."""
    if isinstance(insight, (MetricAlertInsight, PredictionInsight)):
        return insight.facility_id, insight.panel_id
    return None


def activate_insight(insight: Insight, on_select_panel: Callable[[str, str], None]) -> bool:
    """Route a click on an insight to the navigation handler.

    Returns:
        True if the insight referenced a panel and navigation was requested.
    """
    target = insight_target(insight)
    if target is None:
        return False
    on_select_panel(*target)
    return True


def _enhanced_metric_to_dict(metric: EnhancedMetric) -> dict[str, Any]:
    return {
        "facility_id": metric.facility_id,
        "facility_name": metric.facility_name,
        "panel_id": metric.panel_id,
        "panel_name": metric.panel_name,
        "metric": metric.kind.value,
        "value": metric.metric.value,
        "unit": metric.metric.unit,
        "trend": metric.metric.trend,
        "status": metric.status.value,
    }


def insight_to_dict(insight: Insight) -> dict[str, Any]:
    """Convert an insight to a JSON-serializable dictionary."""
    data: dict[str, Any] = {
        "id": insight.id,
        "type": insight.type,
        "title": insight.title,
        "description": insight.description,
        "impact": insight.impact,
        "recommendation": insight.recommendation,
        "timeframe": insight.timeframe,
    }

    if isinstance(insight, SystemHealthInsight):
        data["counts"] = {
            "ok": insight.counts.ok,
            "warning": insight.counts.warning,
            "critical": insight.counts.critical,
        }
        data["critical_facilities"] = list(insight.critical_facilities)
        data["warning_facilities"] = list(insight.warning_facilities)
    else:
        data["confidence"] = insight.confidence

    if isinstance(insight, (MetricAlertInsight, PredictionInsight)):
        data["metric"] = _enhanced_metric_to_dict(insight.metric)
        data["facility_id"] = insight.facility_id
        data["panel_id"] = insight.panel_id

    return data
