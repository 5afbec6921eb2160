"""Label resolution for output time series."""

import logging
from collections.abc import Iterable, Mapping

from metricsbridge.core.models import (
    LabelRule,
    Literal,
    MappingRule,
    OutputIdentity,
    TagRef,
)

logger = logging.getLogger(__name__)


def resolve_labels(
    label_rules: Iterable[LabelRule], tags: Mapping[str, str]
) -> dict[str, str]:
    """Turn label rules plus sample tags into concrete labels.

    Tag-derived labels are emitted only when the tag is present. Literal
    labels are applied afterwards and win on key collision.
    """
    label_rules = list(label_rules)
    labels = {
        rule.output_label: tags[rule.source.tag]
        for rule in label_rules
        if isinstance(rule.source, TagRef) and rule.source.tag in tags
    }
    for rule in label_rules:
        if isinstance(rule.source, Literal):
            labels[rule.output_label] = rule.source.value
    return labels


def resolve_autofill(
    requests: Iterable[str], context: Mapping[str, str]
) -> dict[str, str]:
    """Look up deployment-wide labels requested by a rule.

    Keys missing from the context (or holding no value) are left out of
    the result rather than emitted with an empty value.
    """
    labels = {}
    for request in requests:
        value = context.get(request)
        if value is None:
            logger.debug("No autofill value for %r, omitting label", request)
            continue
        labels[request] = value
    return labels


def resolve_identity(
    rule: MappingRule, tags: Mapping[str, str], context: Mapping[str, str]
) -> OutputIdentity:
    """Build the output identity of a sample matched by rule."""
    resource_labels = resolve_labels(rule.resource_label_rules, tags)
    # autofill wins over tag-derived and literal resource labels
    resource_labels.update(resolve_autofill(rule.autofill_requests, context))
    return OutputIdentity(
        metric_type=rule.output_metric_type,
        resource_type=rule.output_resource_type,
        metric_labels=resolve_labels(rule.metric_label_rules, tags),
        resource_labels=resource_labels,
    )
