"""Core domain models for metric mapping.

Samples come in from the host runtime, rules come from the mapping
configuration, and records go out to the monitoring backend. All of them
are immutable value objects.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class MetricKind(Enum):
    """Kind of a runtime metric sample."""

    COUNTER = "COUNTER"
    GAUGE = "GAUGE"


class Aggregation(Enum):
    """How the values of one bucket are reduced to a single point."""

    SUM = "SUM"
    MEAN = "MEAN"


@dataclass(frozen=True)
class Sample:
    """A single metric observation emitted by the host runtime.

    Attributes:
        name: Source metric name (e.g., program.completed.runs).
        kind: Counter or gauge semantics.
        value: Integer value of the observation.
        tags: Key-value pairs describing where the value came from. Copied
            into a read-only mapping on construction.
    """

    name: str
    kind: MetricKind
    value: int
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sample):
            return NotImplemented
        return (
            self.name == other.name
            and self.kind == other.kind
            and self.value == other.value
            and dict(self.tags) == dict(other.tags)
        )

    def __hash__(self) -> int:
        return hash((self.name, self.kind, self.value, frozenset(self.tags.items())))


@dataclass(frozen=True)
class Literal:
    """Label source holding a fixed value."""

    value: str


@dataclass(frozen=True)
class TagRef:
    """Label source reading the value of a sample tag."""

    tag: str


LabelSource = Literal | TagRef


@dataclass(frozen=True)
class LabelRule:
    """Produces one output label from a literal or a sample tag."""

    output_label: str
    source: LabelSource


@dataclass(frozen=True)
class TagFilter:
    """Restricts a rule to samples whose tag holds one of the allowed values."""

    tag: str
    allowed_values: frozenset[str]

    def accepts(self, tags: Mapping[str, str]) -> bool:
        return self.tag in tags and tags[self.tag] in self.allowed_values


@dataclass(frozen=True)
class MappingRule:
    """Maps one source metric onto an output time series shape.

    Attributes:
        source_metric_name: Name of the runtime metric this rule applies to.
        output_metric_type: Backend metric type (e.g.,
            datafusion.googleapis.com/pipeline/runs_completed_count).
        output_resource_type: Backend monitored resource type.
        metric_label_rules: Rules producing the metric labels.
        resource_label_rules: Rules producing the resource labels.
        autofill_requests: Deployment-wide context keys copied into the
            resource labels.
        tag_filters: All must accept a sample's tags for the rule to match.
        aggregation: Reduction applied to the values of one window.
    """

    source_metric_name: str
    output_metric_type: str
    output_resource_type: str
    metric_label_rules: tuple[LabelRule, ...] = ()
    resource_label_rules: tuple[LabelRule, ...] = ()
    autofill_requests: tuple[str, ...] = ()
    tag_filters: tuple[TagFilter, ...] = ()
    aggregation: Aggregation = Aggregation.SUM


@dataclass(frozen=True)
class OutputIdentity:
    """Business identity of a destination time series.

    Equality and hashing cover exactly these four fields. Metric kind and
    aggregation are deliberately not part of the identity, so samples of
    different kinds that resolve to the same labels share one bucket.
    """

    metric_type: str
    resource_type: str
    metric_labels: Mapping[str, str]
    resource_labels: Mapping[str, str]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "metric_labels", MappingProxyType(dict(self.metric_labels))
        )
        object.__setattr__(
            self, "resource_labels", MappingProxyType(dict(self.resource_labels))
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OutputIdentity):
            return NotImplemented
        return (
            self.metric_type == other.metric_type
            and self.resource_type == other.resource_type
            and dict(self.metric_labels) == dict(other.metric_labels)
            and dict(self.resource_labels) == dict(other.resource_labels)
        )

    def __hash__(self) -> int:
        return hash(
            (
                self.metric_type,
                self.resource_type,
                frozenset(self.metric_labels.items()),
                frozenset(self.resource_labels.items()),
            )
        )


@dataclass
class AggregatedBucket:
    """Values observed for one identity during the current window.

    The kind and aggregation are captured from the first sample inserted.
    """

    kind: MetricKind
    aggregation: Aggregation
    values: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class TimeInterval:
    """Closed interval in epoch seconds."""

    start: int
    end: int


@dataclass(frozen=True)
class OutputRecord:
    """One backend time series carrying a single point."""

    metric_type: str
    resource_type: str
    metric_labels: Mapping[str, str]
    resource_labels: Mapping[str, str]
    interval: TimeInterval
    value: int
