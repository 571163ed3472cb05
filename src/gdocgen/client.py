"""DocGenClient - main interface for generating Google Docs.

Orchestrates create -> upload images -> compile -> batched push.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gdocgen.compiler import compile_document
from gdocgen.config import Settings, get_settings
from gdocgen.orchestrator import BatchPlan, execute_plan, plan_batches
from gdocgen.sections import DocumentSpec, ImageSection

if TYPE_CHECKING:
    from gdocgen.errors import Notice
    from gdocgen.transport import Transport

logger = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    """Result of a generate operation."""

    document_id: str
    batches_applied: int
    changes_applied: int
    notices: list[Notice] = field(default_factory=list)
    message: str = ""

    @property
    def url(self) -> str:
        return f"https://docs.google.com/document/d/{self.document_id}/edit"


class DocGenClient:
    """Main client for generating documents from a DocumentSpec."""

    def __init__(self, transport: Transport, settings: Settings | None = None) -> None:
        self._transport = transport
        self._settings = settings or get_settings()

    def plan(
        self,
        spec: DocumentSpec,
        image_urls: dict[str, str] | None = None,
    ) -> tuple[BatchPlan, list[Notice]]:
        """Compile ``spec`` and split it into batches without any network call."""
        compiled = compile_document(
            spec, settings=self._settings, image_urls=image_urls
        )
        return plan_batches(compiled), compiled.notices

    async def generate(
        self,
        spec: DocumentSpec,
        document_id: str | None = None,
    ) -> GenerateResult:
        """Build ``spec`` into a document.

        Args:
            spec: The document to generate
            document_id: An existing, empty document to fill. A new document
                titled ``spec.title`` is created when omitted.

        Returns:
            GenerateResult describing what was applied

        Raises:
            UpstreamBatchError: A batch failed before anything was applied
            PartialDocumentError: A batch failed after earlier batches applied
            TransportError: Document creation or an image upload failed
        """
        if document_id is None:
            created = await self._transport.create_document(spec.title)
            document_id = created.document_id
            logger.info("Created document %s", document_id)

        image_urls = await self._upload_images(spec)
        plan, notices = self.plan(spec, image_urls)
        execution = await execute_plan(self._transport, document_id, plan)

        message = (
            f"Applied {execution.changes_applied} document changes "
            f"in {execution.batches_applied} batches"
        )
        if notices:
            message += f" ({len(notices)} features downgraded)"

        return GenerateResult(
            document_id=document_id,
            batches_applied=execution.batches_applied,
            changes_applied=execution.changes_applied,
            notices=notices,
            message=message,
        )

    async def _upload_images(self, spec: DocumentSpec) -> dict[str, str]:
        """Upload every image given only by file path, once per path."""
        urls: dict[str, str] = {}
        for section in spec.sections:
            if not isinstance(section, ImageSection) or section.url:
                continue
            path = section.file_path or ""
            if path not in urls:
                urls[path] = await self._transport.upload_image(path)
                logger.info("Uploaded image %s", path)
        return urls
