"""Compile a DocumentSpec into batchUpdate requests.

The compiler walks the sections in order with a single ``DocumentBuilder``
for the body and plans the deferred header/footer segments separately. The
result is everything the orchestrator needs; nothing here talks to the
network.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from gdocgen.builder import DocumentBuilder
from gdocgen.config import Settings, get_settings
from gdocgen.errors import Notice
from gdocgen.sections import DocumentSpec, HeadingSection
from gdocgen.segments import DeferredSegment, plan_segments
from gdocgen.theme import FONT_SIZES
from gdocgen.translators import TranslationContext, translate_heading, translate_section

logger = logging.getLogger(__name__)


@dataclass
class CompiledDocument:
    """Output of ``compile_document``.

    Attributes:
        requests: Body requests in replay order, document style first
        creation_requests: createHeader/createFooter requests, possibly empty
        segments: Deferred header/footer population, one per creation request
        notices: Features that were downgraded during translation
        final_cursor: Body index after the last block
        cursor_adjustment: Net correction from list tab consumption
    """

    requests: list[dict[str, Any]]
    creation_requests: list[dict[str, Any]] = field(default_factory=list)
    segments: list[DeferredSegment] = field(default_factory=list)
    notices: list[Notice] = field(default_factory=list)
    final_cursor: int = 1
    cursor_adjustment: int = 0


def compile_document(
    spec: DocumentSpec,
    *,
    settings: Settings | None = None,
    image_urls: dict[str, str] | None = None,
) -> CompiledDocument:
    """Translate every section of ``spec`` into ordered requests.

    Args:
        spec: Validated document input
        settings: Layout settings; defaults to the environment settings
        image_urls: URLs already uploaded for image sections given by file path

    Returns:
        The compiled document

    Raises:
        DocGenError: On unresolved images, invalid colors or offset errors.
            Offset errors carry the index of the failing section.
    """
    settings = settings or get_settings()
    ctx = TranslationContext(
        content_width_pt=settings.content_width_pt,
        image_urls=dict(image_urls or {}),
    )
    builder = DocumentBuilder(
        font_family=settings.font_family, font_size=FONT_SIZES["body"]
    )
    builder.set_document_style(settings.page_margin_pt)

    if spec.title_heading:
        translate_heading(builder, HeadingSection(level=1, text=spec.title))

    for index, section in enumerate(spec.sections):
        builder.block_index = index
        translate_section(builder, section, ctx)
    builder.block_index = None

    creation_requests, segments = plan_segments(
        spec.header, spec.footer, font_family=settings.font_family
    )
    for segment in segments:
        if segment.options.include_page_number:
            ctx.notice(
                "page number",
                f"{segment.kind} shows a static placeholder instead of a page number",
                None,
            )

    logger.debug(
        "Compiled %d sections into %d requests (cursor=%d, adjustment=%d)",
        len(spec.sections),
        len(builder.requests),
        builder.cursor,
        builder.cursor_adjustment,
    )
    return CompiledDocument(
        requests=builder.requests,
        creation_requests=creation_requests,
        segments=segments,
        notices=ctx.notices,
        final_cursor=builder.cursor,
        cursor_adjustment=builder.cursor_adjustment,
    )
