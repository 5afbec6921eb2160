"""Exception types raised by metricsbridge."""


class MetricsBridgeError(Exception):
    """Base class for all metricsbridge errors."""


class ConfigError(MetricsBridgeError):
    """The mapping configuration is malformed or inconsistent."""


class TransportError(MetricsBridgeError):
    """A batch could not be delivered to the monitoring backend.

    Attributes:
        batch_index: Position of the failing batch within the invocation,
            or None when the failure is not tied to a batch.
    """

    def __init__(self, message: str, batch_index: int | None = None) -> None:
        super().__init__(message)
        self.batch_index = batch_index
