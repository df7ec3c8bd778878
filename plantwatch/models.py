"""Data models for facilities, control panels, sensor metrics and insights."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class DataError(Exception):
    """Raised when facility data is malformed or cannot be loaded."""

    pass


class Severity(str, Enum):
    """Tri-state metric status, ordered normal < warning < critical."""

    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.NORMAL: 0, Severity.WARNING: 1, Severity.CRITICAL: 2}


class MetricKind(str, Enum):
    """The six sensor categories every control panel reports.

    Declaration order is the iteration order used everywhere metrics are
    flattened (insights, summaries, the facility view's metric columns).
    """

    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    CURRENT = "current"
    VOLTAGE = "voltage"
    VIBRATION = "vibration"
    SMOKE = "smoke"

    @property
    def label(self) -> str:
        """Capitalized name for display (e.g. "Temperature")."""
        return self.value.capitalize()


# Valid facility status labels
FACILITY_STATUSES = ("Operational", "Warning", "Critical")


@dataclass(frozen=True)
class Metric:
    """A single sensor reading.

    Attributes:
        value: Current reading.
        unit: Display unit (e.g. "°C", "ppm").
        trend: Signed-magnitude change string (e.g. "+2.8°C/hr").
        status: Severity of the reading.
    """

    value: float
    unit: str
    trend: str
    status: Severity

    @property
    def is_increasing(self) -> bool:
        """Whether the trend string has a leading "+" sign."""
        return self.trend.startswith("+")


@dataclass(frozen=True)
class ControlPanel:
    """A control panel and its six metrics.

    The metrics mapping is copied into a read-only view ordered by
    MetricKind declaration order, whatever order it was given in.
    """

    id: str
    name: str
    metrics: Mapping[MetricKind, Metric]

    def __post_init__(self) -> None:
        if not self.id:
            raise DataError("Control panel id cannot be empty")
        missing = [kind.value for kind in MetricKind if kind not in self.metrics]
        if missing:
            raise DataError(f"Control panel '{self.id}' is missing metrics: {', '.join(missing)}")
        ordered = {kind: self.metrics[kind] for kind in MetricKind}
        object.__setattr__(self, "metrics", MappingProxyType(ordered))

    def metric_items(self) -> list[tuple[MetricKind, Metric]]:
        """Return (kind, metric) pairs in declaration order."""
        return list(self.metrics.items())


@dataclass(frozen=True)
class Facility:
    """An industrial facility with its ordered control panels."""

    id: int
    name: str
    location: str
    status: str
    control_panels: tuple[ControlPanel, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.status not in FACILITY_STATUSES:
            raise DataError(
                f"Invalid status '{self.status}' for facility {self.id}. Must be one of: {FACILITY_STATUSES}"
            )
        object.__setattr__(self, "control_panels", tuple(self.control_panels))

    @property
    def key(self) -> str:
        """String form of the id, as used by selection and pin state."""
        return str(self.id)


@dataclass(frozen=True)
class PinnedPanel:
    """A (facility, panel) pair pinned to the sidebar."""

    facility_id: str
    panel_id: str


@dataclass(frozen=True)
class EnhancedMetric:
    """A metric flattened together with its facility and panel context."""

    facility_id: str
    facility_name: str
    panel_id: str
    panel_name: str
    kind: MetricKind
    metric: Metric

    @property
    def status(self) -> Severity:
        return self.metric.status

    @property
    def trend(self) -> str:
        return self.metric.trend


# Insight variants. Each carries only the fields its kind needs; ``type`` is
# the tag the dashboard styles on.


@dataclass(frozen=True)
class PanelCounts:
    """Number of panels whose highest severity is ok/warning/critical."""

    ok: int
    warning: int
    critical: int


@dataclass(frozen=True)
class SystemHealthInsight:
    """Always-first summary of the whole system."""

    type: str
    title: str
    description: str
    counts: PanelCounts
    impact: str
    recommendation: str
    critical_facilities: tuple[str, ...] = ()
    warning_facilities: tuple[str, ...] = ()
    timeframe: str = "Real-time"
    id: str = "system-health"


@dataclass(frozen=True)
class MetricAlertInsight:
    """Call-out for a single critical or warning metric."""

    id: str
    type: str
    title: str
    description: str
    metric: EnhancedMetric
    confidence: int
    impact: str
    recommendation: str
    timeframe: str

    @property
    def facility_id(self) -> str:
        return self.metric.facility_id

    @property
    def panel_id(self) -> str:
        return self.metric.panel_id


@dataclass(frozen=True)
class PredictionInsight:
    """Failure-risk call-out for the steepest increasing abnormal trend."""

    metric: EnhancedMetric
    description: str
    title: str = "Failure Risk Prediction"
    confidence: int = 78
    impact: str = "High"
    recommendation: str = "Schedule preventative maintenance within next operational cycle"
    timeframe: str = "Next 24 hours"
    id: str = "predictive"
    type: str = "prediction"

    @property
    def facility_id(self) -> str:
        return self.metric.facility_id

    @property
    def panel_id(self) -> str:
        return self.metric.panel_id


@dataclass(frozen=True)
class AdvisoryInsight:
    """Canned optimization/success text shown when nothing is abnormal."""

    id: str
    type: str
    title: str
    description: str
    confidence: int
    impact: str
    recommendation: str
    timeframe: str


Insight = SystemHealthInsight | MetricAlertInsight | PredictionInsight | AdvisoryInsight
