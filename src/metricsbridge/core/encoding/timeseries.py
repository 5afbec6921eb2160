"""Encoder for Cloud Monitoring v3 TimeSeries payloads.

See https://cloud.google.com/monitoring/api/ref_v3/rest/v3/TimeSeries
"""

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from metricsbridge.core.models import OutputRecord


def format_timestamp(epoch_seconds: int) -> str:
    """Format epoch seconds as an RFC 3339 UTC timestamp."""
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).strftime(
        "%Y-%m-%dT%H:%M:%SZ"
    )


def encode_record(record: OutputRecord) -> dict[str, Any]:
    """Encode one record as a TimeSeries object with a single point.

    Labels are left out when empty. int64 values are rendered as decimal
    strings, as the REST API expects.
    """
    metric: dict[str, Any] = {"type": record.metric_type}
    if record.metric_labels:
        metric["labels"] = dict(record.metric_labels)

    resource: dict[str, Any] = {"type": record.resource_type}
    if record.resource_labels:
        resource["labels"] = dict(record.resource_labels)

    point = {
        "interval": {
            "startTime": format_timestamp(record.interval.start),
            "endTime": format_timestamp(record.interval.end),
        },
        "value": {"int64Value": str(record.value)},
    }
    return {"metric": metric, "resource": resource, "points": [point]}


def encode_batch(records: Iterable[OutputRecord]) -> dict[str, Any]:
    """Encode a batch as a projects.timeSeries.create request body."""
    return {"timeSeries": [encode_record(record) for record in records]}
