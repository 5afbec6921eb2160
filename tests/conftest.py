"""Shared test fixtures for all test modules."""

import shutil
from pathlib import Path

import pytest

from metricsbridge.core.models import (
    Aggregation,
    LabelRule,
    Literal,
    MappingRule,
    TagFilter,
    TagRef,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"

METRIC_TYPE = "datafusion.googleapis.com/pipeline/runs_completed_count"
RESOURCE_TYPE = "datafusion.googleapis.com/Pipeline"


@pytest.fixture
def config_json_path(tmp_path: Path) -> Path:
    """Copy of the JSON mapping fixture in a temporary directory."""
    target = tmp_path / "metrics_writer_config.json"
    shutil.copy(FIXTURES_DIR / "metrics_writer_config.json", target)
    return target


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Copy of the YAML mapping fixture in a temporary directory."""
    target = tmp_path / "metrics_writer_config.yaml"
    shutil.copy(FIXTURES_DIR / "metrics_writer_config.yaml", target)
    return target


@pytest.fixture
def completed_runs_rule() -> MappingRule:
    """Rule for program.completed.runs restricted to pipeline programs."""
    return MappingRule(
        source_metric_name="program.completed.runs",
        output_metric_type=METRIC_TYPE,
        output_resource_type=RESOURCE_TYPE,
        metric_label_rules=(LabelRule("complete_state", Literal("completed")),),
        resource_label_rules=(LabelRule("pipeline_id", TagRef("app")),),
        autofill_requests=("resource_container", "location"),
        tag_filters=(
            TagFilter(
                "prg", frozenset({"DataPipelineWorkflow", "DataStreamsSparkStreaming"})
            ),
        ),
    )


@pytest.fixture
def failed_runs_rule() -> MappingRule:
    """Rule for program.failed.runs with no tag filters."""
    return MappingRule(
        source_metric_name="program.failed.runs",
        output_metric_type=METRIC_TYPE,
        output_resource_type=RESOURCE_TYPE,
        metric_label_rules=(LabelRule("complete_state", Literal("failed")),),
        resource_label_rules=(LabelRule("pipeline_id", TagRef("app")),),
    )


@pytest.fixture
def memory_rule() -> MappingRule:
    """Gauge-style rule averaging memory readings per service."""
    return MappingRule(
        source_metric_name="system.services.memory.used",
        output_metric_type="datafusion.googleapis.com/instance/memory_used",
        output_resource_type="datafusion.googleapis.com/Instance",
        resource_label_rules=(LabelRule("service", TagRef("service")),),
        aggregation=Aggregation.MEAN,
    )


@pytest.fixture
def autofill_context() -> dict[str, str]:
    return {"resource_container": "test-project", "location": "us-west1"}


class FakeClock:
    """Settable clock returning epoch seconds."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
