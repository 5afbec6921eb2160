"""Helper functions for creating Sample objects."""

from metricsbridge.core.models import MetricKind, Sample


def counter(
    name: str,
    value: int = 1,
    tags: dict[str, str] | None = None,
) -> Sample:
    """Create a counter sample.

    Args:
        name: Source metric name (e.g., "program.completed.runs")
        value: Increment observed during the window (default: 1)
        tags: Optional context tags

    Returns:
        Sample with counter semantics
    """
    return Sample(
        name=name,
        kind=MetricKind.COUNTER,
        value=int(value),
        tags=tags or {},
    )


def gauge(
    name: str,
    value: int,
    tags: dict[str, str] | None = None,
) -> Sample:
    """Create a gauge sample.

    Args:
        name: Source metric name (e.g., "system.services.count")
        value: Current reading
        tags: Optional context tags

    Returns:
        Sample with gauge semantics
    """
    return Sample(
        name=name,
        kind=MetricKind.GAUGE,
        value=int(value),
        tags=tags or {},
    )
