"""Tests for orchestrator.py."""

from __future__ import annotations

from typing import Any

import pytest

from gdocgen.compiler import CompiledDocument, compile_document
from gdocgen.config import Settings
from gdocgen.errors import (
    MissingSegmentIdError,
    PartialDocumentError,
    UpstreamBatchError,
)
from gdocgen.orchestrator import (
    STYLE_ONLY_REQUESTS,
    Phase,
    execute_plan,
    plan_batches,
    request_kind,
)
from gdocgen.sections import DocumentSpec
from gdocgen.transport import RecordingTransport


def _compile(**kwargs: Any) -> CompiledDocument:
    spec = DocumentSpec.model_validate({"title": "Report", **kwargs})
    return compile_document(spec, settings=Settings(_env_file=None))


TABLE = {"type": "table", "headers": ["A", "B"], "rows": [["1", "2"]]}


class TestPlanBatches:
    def test_plain_document_is_one_batch(self):
        plan = plan_batches(_compile(sections=[{"type": "paragraph", "content": "x"}]))
        assert plan.phases == [Phase.STRUCTURAL]
        assert request_kind(plan.batches[0].requests[0]) == "updateDocumentStyle"

    def test_footer_only_is_two_batches(self):
        plan = plan_batches(_compile(titleHeading=False, footer={"text": "Bottom"}))
        assert plan.phases == [Phase.CREATION, Phase.DEFERRED]
        creation = plan.batches[0].requests
        assert [request_kind(r) for r in creation] == ["createFooter", "updateDocumentStyle"]

    def test_footer_with_body(self):
        plan = plan_batches(_compile(footer={"text": "Bottom"}))
        assert plan.phases == [Phase.CREATION, Phase.STRUCTURAL, Phase.DEFERRED]

    def test_tables_add_style_only_batch(self):
        plan = plan_batches(_compile(sections=[TABLE]))
        assert plan.phases == [Phase.STRUCTURAL, Phase.STYLE_ONLY]
        structural, style_only = plan.batches
        assert all(request_kind(r) in STYLE_ONLY_REQUESTS for r in style_only.requests)
        assert not any(request_kind(r) in STYLE_ONLY_REQUESTS for r in structural.requests)

    def test_callout_counts_as_table(self):
        plan = plan_batches(_compile(sections=[{"type": "callout", "content": "Note"}]))
        assert plan.phases == [Phase.STRUCTURAL, Phase.STYLE_ONLY]

    def test_all_phases(self):
        plan = plan_batches(
            _compile(header={"text": "Top"}, footer={"text": "Bottom"}, sections=[TABLE])
        )
        assert plan.phases == [
            Phase.CREATION,
            Phase.STRUCTURAL,
            Phase.STYLE_ONLY,
            Phase.DEFERRED,
        ]

    def test_empty_document(self):
        compiled = CompiledDocument(requests=[])
        assert plan_batches(compiled).batches == []

    def test_to_dict(self):
        plan = plan_batches(_compile(footer={"text": "Bottom"}))
        data = plan.to_dict()
        assert [b["phase"] for b in data["batches"]] == ["creation", "structural", "deferred"]
        assert data["deferred"] == [
            {
                "kind": "footer",
                "placeholder": "__deferred_footer_id__",
                "request_index": 0,
                "response_path": "createFooter.footerId",
            }
        ]


class _NoIdTransport(RecordingTransport):
    async def batch_update(self, document_id, requests):
        self.batches.append(requests)
        return {"replies": [{} for _ in requests]}


class TestExecutePlan:
    @pytest.mark.asyncio
    async def test_threads_segment_ids_into_last_batch(self):
        transport = RecordingTransport()
        plan = plan_batches(_compile(header={"text": "Top"}, footer={"text": "Bottom"}))

        result = await execute_plan(transport, "doc1", plan)

        assert result.batches_applied == 3
        assert result.changes_applied == sum(len(b) for b in transport.batches)
        deferred = transport.batches[-1]
        segment_ids = {
            r["insertText"]["location"]["segmentId"] for r in deferred if "insertText" in r
        }
        assert segment_ids == {"kix.header0", "kix.footer1"}
        assert "__deferred_" not in str(deferred)

    @pytest.mark.asyncio
    async def test_batches_submitted_in_plan_order(self):
        transport = RecordingTransport()
        plan = plan_batches(_compile(footer={"text": "Bottom"}, sections=[TABLE]))
        await execute_plan(transport, "doc1", plan)
        assert [b.requests[0] for b in plan.batches[:3]] == [b[0] for b in transport.batches[:3]]
        assert len(transport.batches) == 4

    @pytest.mark.asyncio
    async def test_first_batch_failure(self):
        transport = RecordingTransport(fail_on_batch=1)
        plan = plan_batches(_compile())

        with pytest.raises(UpstreamBatchError) as exc_info:
            await execute_plan(transport, "doc1", plan)

        assert not isinstance(exc_info.value, PartialDocumentError)
        assert exc_info.value.batches_applied == 0
        assert exc_info.value.phase == "structural"

    @pytest.mark.asyncio
    async def test_later_failure_is_partial(self):
        transport = RecordingTransport(fail_on_batch=2)
        plan = plan_batches(_compile(sections=[TABLE]))

        with pytest.raises(PartialDocumentError) as exc_info:
            await execute_plan(transport, "doc1", plan)

        assert isinstance(exc_info.value, UpstreamBatchError)
        assert exc_info.value.batches_applied == 1
        assert exc_info.value.phase == "style_only"
        assert len(transport.batches) == 1

    @pytest.mark.asyncio
    async def test_missing_segment_id(self):
        transport = _NoIdTransport()
        plan = plan_batches(_compile(footer={"text": "Bottom"}))

        with pytest.raises(MissingSegmentIdError):
            await execute_plan(transport, "doc1", plan)

        # Nothing after the creation batch was submitted
        assert len(transport.batches) == 1
