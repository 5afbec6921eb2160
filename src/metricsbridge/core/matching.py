"""Rule matching: find the mapping rule a sample belongs to."""

from collections.abc import Iterable, Mapping

from metricsbridge.core.models import MappingRule, Sample, TagFilter


def tags_match(tag_filters: Iterable[TagFilter], tags: Mapping[str, str]) -> bool:
    """Return True if every filter accepts the tags.

    An empty filter list matches any tags.
    """
    return all(tag_filter.accepts(tags) for tag_filter in tag_filters)


def match(rules: Iterable[MappingRule], sample: Sample) -> MappingRule | None:
    """Return the first rule whose name and tag filters match the sample.

    Args:
        rules: Candidate rules, in their configured order.
        sample: The runtime sample to place.

    Returns:
        The matching rule, or None when no rule applies.
    """
    for rule in rules:
        if rule.source_metric_name == sample.name and tags_match(
            rule.tag_filters, sample.tags
        ):
            return rule
    return None
