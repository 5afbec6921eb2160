"""In-memory transport adapter."""

from collections.abc import Sequence

from metricsbridge.core.models import OutputRecord


class InMemoryTransport:
    """In-memory implementation of TransportPort.

    Keeps every batch it is given. Suitable for testing and dry runs
    where nothing should leave the process.
    """

    def __init__(self) -> None:
        self._batches: list[list[OutputRecord]] = []
        self.closed = False

    def send(self, batch: Sequence[OutputRecord]) -> None:
        """Record one batch."""
        self._batches.append(list(batch))

    def close(self) -> None:
        self.closed = True

    @property
    def batches(self) -> list[list[OutputRecord]]:
        """Batches received so far, in send order."""
        return list(self._batches)

    @property
    def records(self) -> list[OutputRecord]:
        """All records received so far, flattened."""
        return [record for batch in self._batches for record in batch]
