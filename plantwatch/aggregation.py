"""Severity rollups, facility summaries and health-score banding."""

import math
import random
from dataclasses import dataclass

from .models import ControlPanel, Facility, Severity

# Health score bands. A score at or above a threshold earns that band.
EXCELLENT_THRESHOLD = 90
GOOD_THRESHOLD = 75
FAIR_THRESHOLD = 60

STATUS_COLORS = {
    Severity.NORMAL: "green",
    Severity.WARNING: "amber",
    Severity.CRITICAL: "red",
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, as the dashboard displays it."""
    return math.floor(value + 0.5)


def highest_severity(panel: ControlPanel) -> Severity:
    """Return the worst status among a panel's metrics."""
    statuses = {metric.status for metric in panel.metrics.values()}
    if Severity.CRITICAL in statuses:
        return Severity.CRITICAL
    if Severity.WARNING in statuses:
        return Severity.WARNING
    return Severity.NORMAL


def facility_severity(facility: Facility) -> Severity:
    """Return the worst panel severity in a facility (normal when it has no panels)."""
    return max(
        (highest_severity(panel) for panel in facility.control_panels),
        key=lambda severity: severity.rank,
        default=Severity.NORMAL,
    )


def panels_by_severity(facility: Facility) -> list[ControlPanel]:
    """Return panels critical-first; panels of equal severity keep dataset order."""
    return sorted(facility.control_panels, key=lambda panel: -highest_severity(panel).rank)


@dataclass(frozen=True)
class FacilitySummary:
    """Status breakdown for all metrics of one facility.

    Attributes:
        counts: Number of metrics per status.
        percentages: Share of metrics per status (0-100, rounded).
        total: Total number of metrics considered.
        health_score: Percentage of metrics at normal status (0-100).
    """

    counts: dict[Severity, int]
    percentages: dict[Severity, int]
    total: int
    health_score: int

    @property
    def rating(self) -> str:
        return health_rating(self.health_score)

    @property
    def color(self) -> str:
        return health_color(self.health_score)


def summarize(facility: Facility) -> FacilitySummary:
    """Count metric statuses across every panel of a facility.

    A facility without metrics yields zero percentages and a zero health
    score instead of dividing by zero.
    """
    counts = {severity: 0 for severity in Severity}
    for panel in facility.control_panels:
        for metric in panel.metrics.values():
            counts[metric.status] += 1

    total = sum(counts.values())
    if total == 0:
        return FacilitySummary(
            counts=counts,
            percentages={severity: 0 for severity in Severity},
            total=0,
            health_score=0,
        )

    percentages = {severity: round_half_up(count / total * 100) for severity, count in counts.items()}
    return FacilitySummary(
        counts=counts,
        percentages=percentages,
        total=total,
        health_score=round_half_up(counts[Severity.NORMAL] / total * 100),
    )


def health_rating(score: int) -> str:
    """Map a health score to its rating label."""
    if score >= EXCELLENT_THRESHOLD:
        return "Excellent"
    if score >= GOOD_THRESHOLD:
        return "Good"
    if score >= FAIR_THRESHOLD:
        return "Fair"
    return "Poor"


def health_color(score: int) -> str:
    """Map a health score to its display color."""
    if score >= EXCELLENT_THRESHOLD:
        return "green"
    if score >= GOOD_THRESHOLD:
        return "blue"
    if score >= FAIR_THRESHOLD:
        return "amber"
    return "red"


def status_color(status: str) -> str:
    """Map a metric status to its indicator color; unknown statuses are gray."""
    try:
        return STATUS_COLORS[Severity(status)]
    except ValueError:
        return "gray"


def health_trend(summary: FacilitySummary, rng: random.Random | None = None) -> int:
    """Simulated week-over-week health trend in percent.

    Each critical metric pulls the trend down by 3 and each warning by 1,
    plus uniform jitter in [-2, 3). Pass a seeded ``rng`` for a repeatable
    value.
    """
    source = rng if rng is not None else random
    jitter = source.random() * 5 - 2
    return round_half_up(
        summary.counts[Severity.CRITICAL] * -3 + summary.counts[Severity.WARNING] * -1 + jitter
    )
