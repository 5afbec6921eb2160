"""Typed mapping configuration.

The mapping file (JSON or YAML) is parsed by an adapter; this module turns
the resulting plain structure into validated, immutable rules. Expected
shape::

    {"mapping": {
        "program.completed.runs": {
            "metricType": "datafusion.googleapis.com/pipeline/runs_completed_count",
            "resourceType": "datafusion.googleapis.com/Pipeline",
            "metricLabels": [{"label": "state", "value": "completed"}],
            "resourceLabels": [
                {"label": "pipeline_id", "value": "app", "valueIsTag": true}
            ],
            "autoFillLabels": ["resource_container", "location"],
            "tagFilters": [{"tag": "prg", "values": "DataPipelineWorkflow"}],
            "aggregation": "SUM"
        }
    }}
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from metricsbridge.core.errors import ConfigError
from metricsbridge.core.models import (
    Aggregation,
    LabelRule,
    Literal,
    MappingRule,
    TagFilter,
    TagRef,
)


@dataclass(frozen=True)
class MappingConfig:
    """Immutable, ordered set of mapping rules keyed by source metric name.

    Raises:
        ConfigError: If two rules share a source metric name.
    """

    rules: tuple[MappingRule, ...] = ()

    EMPTY: ClassVar[MappingConfig]

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for rule in self.rules:
            if rule.source_metric_name in seen:
                raise ConfigError(
                    f"Duplicate mapping for metric '{rule.source_metric_name}'"
                )
            seen.add(rule.source_metric_name)

    def __iter__(self) -> Iterator[MappingRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def get(self, source_metric_name: str) -> MappingRule | None:
        for rule in self.rules:
            if rule.source_metric_name == source_metric_name:
                return rule
        return None


MappingConfig.EMPTY = MappingConfig()


def _expect(value: Any, kind: type | tuple[type, ...], path: str) -> Any:
    if not isinstance(value, kind):
        raise ConfigError(f"Invalid config: '{path}' has unexpected type")
    return value


def _req_str(d: Mapping[str, Any], key: str, path: str) -> str:
    if key not in d or d[key] is None:
        raise ConfigError(f"Invalid config: required field '{path}.{key}' missing")
    return _expect(d[key], str, f"{path}.{key}")


def _opt_list(d: Mapping[str, Any], key: str, path: str) -> list[Any]:
    value = d.get(key)
    if value is None:
        return []
    return _expect(value, list, f"{path}.{key}")


def _parse_label_rule(raw: Any, path: str) -> LabelRule:
    _expect(raw, Mapping, path)
    label = _req_str(raw, "label", path)
    value = _req_str(raw, "value", path)
    value_is_tag = _expect(raw.get("valueIsTag", False), bool, f"{path}.valueIsTag")
    source = TagRef(value) if value_is_tag else Literal(value)
    return LabelRule(output_label=label, source=source)


def _parse_tag_filter(raw: Any, path: str) -> TagFilter:
    _expect(raw, Mapping, path)
    tag = _req_str(raw, "tag", path)
    values = raw.get("values")
    if isinstance(values, str):
        allowed = values.split(",")
    elif isinstance(values, list):
        allowed = [_expect(v, str, f"{path}.values") for v in values]
    else:
        raise ConfigError(f"Invalid config: '{path}.values' must be a string or list")
    return TagFilter(tag=tag, allowed_values=frozenset(v.strip() for v in allowed))


def _parse_aggregation(raw: Any, path: str) -> Aggregation:
    if raw is None:
        return Aggregation.SUM
    try:
        return Aggregation(_expect(raw, str, path).upper())
    except ValueError as e:
        raise ConfigError(
            f"Invalid config: unknown aggregation '{raw}' at '{path}'"
        ) from e


def _parse_rule(name: str, raw: Any) -> MappingRule:
    path = f"mapping.{name}"
    _expect(raw, Mapping, path)
    return MappingRule(
        source_metric_name=name,
        output_metric_type=_req_str(raw, "metricType", path),
        output_resource_type=_req_str(raw, "resourceType", path),
        metric_label_rules=tuple(
            _parse_label_rule(r, f"{path}.metricLabels[{i}]")
            for i, r in enumerate(_opt_list(raw, "metricLabels", path))
        ),
        resource_label_rules=tuple(
            _parse_label_rule(r, f"{path}.resourceLabels[{i}]")
            for i, r in enumerate(_opt_list(raw, "resourceLabels", path))
        ),
        autofill_requests=tuple(
            _expect(r, str, f"{path}.autoFillLabels[{i}]")
            for i, r in enumerate(_opt_list(raw, "autoFillLabels", path))
        ),
        tag_filters=tuple(
            _parse_tag_filter(r, f"{path}.tagFilters[{i}]")
            for i, r in enumerate(_opt_list(raw, "tagFilters", path))
        ),
        aggregation=_parse_aggregation(raw.get("aggregation"), f"{path}.aggregation"),
    )


def parse_mapping_config(data: Any) -> MappingConfig:
    """Validate a parsed mapping document and build its rules.

    The whole document is validated before anything is returned, so a bad
    entry never yields a partially-built config.

    Args:
        data: Plain structure as produced by json.load or yaml.safe_load.

    Returns:
        MappingConfig with one rule per entry, in document order.

    Raises:
        ConfigError: If the document does not match the expected shape.
    """
    if data is None:
        return MappingConfig.EMPTY
    _expect(data, Mapping, "<root>")
    mapping = data.get("mapping")
    if mapping is None:
        return MappingConfig.EMPTY
    _expect(mapping, Mapping, "mapping")
    return MappingConfig(
        rules=tuple(_parse_rule(str(name), raw) for name, raw in mapping.items())
    )
