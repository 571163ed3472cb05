"""Phase orchestration for compiled documents.

Requests are split into dependency-ordered batches:

1. CREATION: createHeader/createFooter. Their replies carry segment ids.
2. STRUCTURAL: every body insertion and text/paragraph style.
3. STYLE_ONLY: table cell styles and column widths, which need the tables
   from the structural batch to exist.
4. DEFERRED: header/footer population, with placeholder segment ids
   replaced by the ids captured from the creation reply.

Empty batches are skipped. Batches are applied strictly one after another.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from gdocgen.errors import PartialDocumentError, UpstreamBatchError
from gdocgen.segments import (
    DeferredSegment,
    resolve_segment_ids,
    substitute_placeholder_ids,
)
from gdocgen.transport import TransportError

if TYPE_CHECKING:
    from gdocgen.compiler import CompiledDocument
    from gdocgen.transport import Transport

logger = logging.getLogger(__name__)

STYLE_ONLY_REQUESTS = frozenset({"updateTableCellStyle", "updateTableColumnProperties"})
DOCUMENT_SETUP_REQUESTS = frozenset({"updateDocumentStyle"})


class Phase(Enum):
    """Batch phases in submission order."""

    CREATION = "creation"
    STRUCTURAL = "structural"
    STYLE_ONLY = "style_only"
    DEFERRED = "deferred"


@dataclass
class Batch:
    phase: Phase
    requests: list[dict[str, Any]]


@dataclass
class BatchPlan:
    """Ordered batches plus the segments the deferred batch depends on."""

    batches: list[Batch]
    segments: list[DeferredSegment] = field(default_factory=list)

    @property
    def phases(self) -> list[Phase]:
        return [b.phase for b in self.batches]

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready view of the plan. Deferred batches show placeholders."""
        return {
            "batches": [
                {"phase": b.phase.value, "requests": b.requests} for b in self.batches
            ],
            "deferred": [
                {
                    "kind": s.kind,
                    "placeholder": s.deferred_id.placeholder,
                    "request_index": s.deferred_id.request_index,
                    "response_path": s.deferred_id.response_path,
                }
                for s in self.segments
            ],
        }


@dataclass
class ExecutionResult:
    batches_applied: int
    changes_applied: int
    responses: list[dict[str, Any]]


def request_kind(request: dict[str, Any]) -> str:
    """The request type, e.g. ``"insertText"``."""
    return next(iter(request))


def plan_batches(compiled: CompiledDocument) -> BatchPlan:
    """Split a compiled document into phase batches.

    Document-level setup (page margins) rides with the first batch so a
    document with nothing but a footer still needs only two round trips.
    """
    setup: list[dict[str, Any]] = []
    structural: list[dict[str, Any]] = []
    style_only: list[dict[str, Any]] = []
    for request in compiled.requests:
        kind = request_kind(request)
        if kind in DOCUMENT_SETUP_REQUESTS:
            setup.append(request)
        elif kind in STYLE_ONLY_REQUESTS:
            style_only.append(request)
        else:
            structural.append(request)

    # Creation requests keep their positions so DeferredId.request_index holds
    creation = list(compiled.creation_requests)
    if creation:
        creation.extend(setup)
    else:
        structural = setup + structural

    deferred = [r for s in compiled.segments for r in s.requests]

    batches = [
        Batch(phase, requests)
        for phase, requests in (
            (Phase.CREATION, creation),
            (Phase.STRUCTURAL, structural),
            (Phase.STYLE_ONLY, style_only),
            (Phase.DEFERRED, deferred),
        )
        if requests
    ]
    return BatchPlan(batches=batches, segments=list(compiled.segments))


async def execute_plan(
    transport: Transport,
    document_id: str,
    plan: BatchPlan,
) -> ExecutionResult:
    """Submit each batch in order, threading segment ids into the last one.

    Raises:
        UpstreamBatchError: If the first batch fails
        PartialDocumentError: If a later batch fails; earlier batches stay applied
        MissingSegmentIdError: If the creation reply lacks a segment id
    """
    responses: list[dict[str, Any]] = []
    segment_ids: dict[str, str] = {}
    changes = 0

    for number, batch in enumerate(plan.batches, start=1):
        requests = batch.requests
        if batch.phase is Phase.DEFERRED:
            requests = substitute_placeholder_ids(requests, segment_ids)

        logger.info(
            "Applying batch %d/%d (%s, %d requests)",
            number,
            len(plan.batches),
            batch.phase.value,
            len(requests),
        )
        try:
            response = await transport.batch_update(document_id, requests)
        except TransportError as e:
            applied = len(responses)
            logger.error(
                "Batch %d (%s) failed after %d applied: %s",
                number,
                batch.phase.value,
                applied,
                e,
            )
            if applied:
                raise PartialDocumentError(
                    f"{batch.phase.value} batch failed; document {document_id} "
                    f"is partially built ({applied} batches applied): {e}",
                    phase=batch.phase.value,
                    batches_applied=applied,
                ) from e
            raise UpstreamBatchError(
                f"{batch.phase.value} batch failed before any change was applied: {e}",
                phase=batch.phase.value,
            ) from e

        responses.append(response)
        changes += len(requests)
        if batch.phase is Phase.CREATION:
            segment_ids = resolve_segment_ids(response, plan.segments)

    return ExecutionResult(
        batches_applied=len(responses),
        changes_applied=changes,
        responses=responses,
    )
