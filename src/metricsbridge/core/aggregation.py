"""Grouping of matched samples into per-identity buckets."""

from collections.abc import Iterable, Mapping

from metricsbridge.core.labels import resolve_identity
from metricsbridge.core.matching import match
from metricsbridge.core.models import (
    AggregatedBucket,
    Aggregation,
    MappingRule,
    OutputIdentity,
    Sample,
)


def aggregate(
    rules: Iterable[MappingRule],
    samples: Iterable[Sample],
    context: Mapping[str, str],
) -> dict[OutputIdentity, AggregatedBucket]:
    """Group the samples matched by rules under their output identity.

    Samples that match no rule are dropped. A bucket takes its kind and
    aggregation from the first sample inserted into it; later samples only
    contribute their values.

    Args:
        rules: Configured mapping rules, in order.
        samples: Samples collected during the window, in any order.
        context: Autofill context for resource labels.

    Returns:
        Mapping of output identity to the bucket of values observed.
    """
    rules = tuple(rules)
    buckets: dict[OutputIdentity, AggregatedBucket] = {}
    for sample in samples:
        rule = match(rules, sample)
        if rule is None:
            continue
        identity = resolve_identity(rule, sample.tags, context)
        bucket = buckets.get(identity)
        if bucket is None:
            bucket = AggregatedBucket(kind=sample.kind, aggregation=rule.aggregation)
            buckets[identity] = bucket
        bucket.values.append(sample.value)
    return buckets


def reduce_values(values: list[int], aggregation: Aggregation | None) -> int:
    """Reduce bucket values to a single integer.

    MEAN truncates toward zero; SUM (also used when aggregation is None)
    returns 0 for an empty list.
    """
    if aggregation is Aggregation.MEAN:
        if not values:
            return 0
        return int(sum(values) / len(values))
    return sum(values)
