"""metricsbridge - export tagged runtime metrics to Google Cloud Monitoring."""

from metricsbridge.adapters.config_file import load_mapping_config
from metricsbridge.adapters.transport import CloudMonitoringTransport, InMemoryTransport
from metricsbridge.core.config import MappingConfig, parse_mapping_config
from metricsbridge.core.errors import ConfigError, MetricsBridgeError, TransportError
from metricsbridge.core.models import (
    Aggregation,
    LabelRule,
    Literal,
    MappingRule,
    MetricKind,
    OutputIdentity,
    OutputRecord,
    Sample,
    TagFilter,
    TagRef,
    TimeInterval,
)
from metricsbridge.core.samples import counter, gauge
from metricsbridge.writer import CloudMonitoringWriter, WriterContext

__all__ = [
    "Aggregation",
    "CloudMonitoringTransport",
    "CloudMonitoringWriter",
    "ConfigError",
    "InMemoryTransport",
    "LabelRule",
    "Literal",
    "MappingConfig",
    "MappingRule",
    "MetricKind",
    "MetricsBridgeError",
    "OutputIdentity",
    "OutputRecord",
    "Sample",
    "TagFilter",
    "TagRef",
    "TimeInterval",
    "TransportError",
    "WriterContext",
    "counter",
    "gauge",
    "load_mapping_config",
    "parse_mapping_config",
]
