"""Transport adapters implementing TransportPort."""

from metricsbridge.adapters.transport.cloud_monitoring import CloudMonitoringTransport
from metricsbridge.adapters.transport.in_memory import InMemoryTransport

__all__ = [
    "CloudMonitoringTransport",
    "InMemoryTransport",
]
