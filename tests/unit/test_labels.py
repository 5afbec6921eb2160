"""Tests for label resolution."""

import logging
import uuid

import pytest

from metricsbridge.core.labels import (
    resolve_autofill,
    resolve_identity,
    resolve_labels,
)
from metricsbridge.core.models import LabelRule, Literal, MappingRule, TagRef

pytestmark = [
    pytest.mark.tier(1),
    pytest.mark.tra("Core.LabelResolver"),
]


class TestResolveLabels:
    """Tests for resolve_labels()."""

    @pytest.mark.core
    def test_tag_ref_reads_tag_value(self) -> None:
        test_value = str(uuid.uuid4())
        rules = [LabelRule("pipeline_id", TagRef("app"))]
        assert resolve_labels(rules, {"app": test_value}) == {
            "pipeline_id": test_value
        }

    @pytest.mark.core
    def test_tag_ref_with_absent_tag_is_omitted(self) -> None:
        """A missing tag produces no entry at all, not an empty one."""
        rules = [
            LabelRule("pipeline_id", TagRef("app")),
            LabelRule("namespace", TagRef("ns")),
        ]
        labels = resolve_labels(rules, {"ns": "default"})
        assert labels == {"namespace": "default"}
        assert len(labels) == 1

    @pytest.mark.core
    def test_literal_is_emitted_unconditionally(self) -> None:
        rules = [LabelRule("complete_state", Literal("completed"))]
        assert resolve_labels(rules, {}) == {"complete_state": "completed"}

    @pytest.mark.core
    def test_literal_overrides_tag_derived_label(self) -> None:
        """Literal labels win on collision regardless of rule order."""
        rules = [
            LabelRule("state", Literal("fixed")),
            LabelRule("state", TagRef("status")),
        ]
        assert resolve_labels(rules, {"status": "from-tag"}) == {"state": "fixed"}

    @pytest.mark.core
    def test_no_rules_gives_empty_labels(self) -> None:
        assert resolve_labels([], {"app": "x"}) == {}


class TestResolveAutofill:
    """Tests for resolve_autofill()."""

    @pytest.mark.core
    def test_returns_requested_keys_only(self) -> None:
        context = {"label1": "value1", "label2": "value2", "label3": "value3"}
        assert resolve_autofill(["label1", "label2"], context) == {
            "label1": "value1",
            "label2": "value2",
        }

    @pytest.mark.core
    def test_missing_context_key_is_omitted(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="metricsbridge.core.labels"):
            labels = resolve_autofill(["label1", "org_id"], {"label1": "value1"})
        assert labels == {"label1": "value1"}
        assert "org_id" in caplog.text


class TestResolveIdentity:
    """Tests for resolve_identity()."""

    @pytest.mark.core
    def test_builds_identity_from_rule(
        self, completed_runs_rule: MappingRule, autofill_context: dict[str, str]
    ) -> None:
        identity = resolve_identity(
            completed_runs_rule,
            {"app": "pipeline-1", "prg": "DataPipelineWorkflow"},
            autofill_context,
        )
        assert identity.metric_type == completed_runs_rule.output_metric_type
        assert identity.resource_type == completed_runs_rule.output_resource_type
        assert dict(identity.metric_labels) == {"complete_state": "completed"}
        assert dict(identity.resource_labels) == {
            "pipeline_id": "pipeline-1",
            "resource_container": "test-project",
            "location": "us-west1",
        }

    @pytest.mark.core
    def test_autofill_wins_over_resource_label(self) -> None:
        rule = MappingRule(
            source_metric_name="m",
            output_metric_type="t",
            output_resource_type="r",
            resource_label_rules=(LabelRule("location", Literal("nowhere")),),
            autofill_requests=("location",),
        )
        identity = resolve_identity(rule, {}, {"location": "us-west1"})
        assert dict(identity.resource_labels) == {"location": "us-west1"}
