"""Boundaries between the writer and the outside world.

The writer reaches the monitoring backend only through TransportPort and
reads time only through a Clock, so both can be swapped in tests.
"""

from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable

from metricsbridge.core.models import OutputRecord

Clock = Callable[[], float]


@runtime_checkable
class TransportPort(Protocol):
    """Port for delivering batches of records to the monitoring backend.

    Adapters implementing this protocol send each batch as one request.
    Examples: CloudMonitoringTransport, InMemoryTransport.
    """

    def send(self, batch: Sequence[OutputRecord]) -> None:
        """Send one batch.

        Raises:
            TransportError: If the backend rejects or fails the request.
        """
        ...

    def close(self) -> None:
        """Release any client resources held by the transport."""
        ...
