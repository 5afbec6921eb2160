"""Conversion of aggregated buckets into output records."""

from collections.abc import Mapping

from metricsbridge.core.aggregation import reduce_values
from metricsbridge.core.models import (
    AggregatedBucket,
    MetricKind,
    OutputIdentity,
    OutputRecord,
    TimeInterval,
)


def build_record(
    identity: OutputIdentity,
    bucket: AggregatedBucket,
    window_start: int,
    window_end: int,
) -> OutputRecord:
    """Build the single-point record for one bucket.

    Counters cover the whole window; gauges are an instantaneous reading
    stamped at the window end.
    """
    if bucket.kind is MetricKind.GAUGE:
        interval = TimeInterval(start=window_end, end=window_end)
    else:
        interval = TimeInterval(start=window_start, end=window_end)
    return OutputRecord(
        metric_type=identity.metric_type,
        resource_type=identity.resource_type,
        metric_labels=dict(identity.metric_labels),
        resource_labels=dict(identity.resource_labels),
        interval=interval,
        value=reduce_values(bucket.values, bucket.aggregation),
    )


def build_records(
    buckets: Mapping[OutputIdentity, AggregatedBucket],
    window_start: int,
    window_end: int,
) -> list[OutputRecord]:
    """Build one record per bucket."""
    return [
        build_record(identity, bucket, window_start, window_end)
        for identity, bucket in buckets.items()
    ]
