"""Deferred header and footer segments.

A header or footer cannot be populated in the same batch that creates it:
the segment id only exists once the createHeader/createFooter reply comes
back. Population requests are therefore built against a placeholder segment
id and rewritten once the creation reply is known.

Usage:
    creation, segments = plan_segments(spec.header, spec.footer)
    reply = await transport.batch_update(doc_id, creation)
    ids = resolve_segment_ids(reply, segments)
    requests = substitute_placeholder_ids(
        [r for s in segments for r in s.requests], ids
    )
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from gdocgen.builder import DocumentBuilder
from gdocgen.errors import MissingSegmentIdError
from gdocgen.sections import HeaderFooterOptions
from gdocgen.style_resolver import ParagraphStyleIntent, TextStyleIntent
from gdocgen.theme import COLORS, FONT_FAMILY, FONT_SIZES

logger = logging.getLogger(__name__)

SegmentKind = Literal["header", "footer"]

# Stands in for a page number field, which batchUpdate cannot insert
PAGE_NUMBER_PLACEHOLDER = "Page #"
SEGMENT_FONT_SIZE = 9.0


@dataclass(frozen=True)
class DeferredId:
    """Reference to an id that a creation reply will supply.

    Attributes:
        placeholder: String used in place of the id until it is resolved
        request_index: Index of the creation request within its batch
        response_path: Dot path to the id inside that request's reply
    """

    placeholder: str
    request_index: int
    response_path: str


@dataclass
class DeferredSegment:
    """A header or footer whose population waits on its creation reply."""

    kind: SegmentKind
    options: HeaderFooterOptions
    deferred_id: DeferredId
    requests: list[dict[str, Any]] = field(default_factory=list)

    @property
    def creation_request(self) -> dict[str, Any]:
        return {_CREATE_KEYS[self.kind]: {"type": "DEFAULT"}}


_CREATE_KEYS: dict[str, str] = {"header": "createHeader", "footer": "createFooter"}
_ID_KEYS: dict[str, str] = {"header": "headerId", "footer": "footerId"}


def segment_text(options: HeaderFooterOptions) -> str:
    """Visible text of a header/footer, page number placeholder included."""
    parts = [options.text] if options.text else []
    if options.include_page_number:
        parts.append(PAGE_NUMBER_PLACEHOLDER)
    return " | ".join(parts)


def build_segment_requests(
    options: HeaderFooterOptions,
    segment_id: str,
    *,
    font_family: str = FONT_FAMILY,
) -> list[dict[str, Any]]:
    """Build population requests for a freshly created header/footer.

    A new segment holds a single empty paragraph, so text is inserted at
    the segment origin without a trailing newline.
    """
    builder = DocumentBuilder(
        segment_id, font_family=font_family, font_size=FONT_SIZES["body"]
    )
    text = segment_text(options)
    rng = builder.insert_text(text)
    builder.reset_range(rng)
    builder.style_text(
        rng, TextStyleIntent(color=COLORS["text_muted"], size=SEGMENT_FONT_SIZE)
    )
    if options.alignment:
        builder.style_paragraph(rng, ParagraphStyleIntent(alignment=options.alignment))
    return builder.requests


def plan_segments(
    header: HeaderFooterOptions | None,
    footer: HeaderFooterOptions | None,
    *,
    font_family: str = FONT_FAMILY,
) -> tuple[list[dict[str, Any]], list[DeferredSegment]]:
    """Plan creation requests and deferred population for header and footer.

    Returns:
        Tuple of (creation_requests, deferred_segments). Both are empty when
        neither a header nor a footer was requested.
    """
    segments: list[DeferredSegment] = []
    for kind, options in (("header", header), ("footer", footer)):
        if options is None:
            continue
        placeholder = f"__deferred_{kind}_id__"
        deferred_id = DeferredId(
            placeholder=placeholder,
            request_index=len(segments),
            response_path=f"{_CREATE_KEYS[kind]}.{_ID_KEYS[kind]}",
        )
        segments.append(
            DeferredSegment(
                kind=kind,  # type: ignore[arg-type]
                options=options,
                deferred_id=deferred_id,
                requests=build_segment_requests(
                    options, placeholder, font_family=font_family
                ),
            )
        )
    return [s.creation_request for s in segments], segments


def _extract_path(data: Any, path: str, placeholder: str) -> str:
    """Extract a string from a nested dict using dot notation."""
    current = data
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            raise MissingSegmentIdError(
                placeholder, f"key {key!r} of {path!r} not found in reply"
            )
        current = current[key]
    if not isinstance(current, str) or not current:
        raise MissingSegmentIdError(placeholder, f"{path!r} is not a non-empty string")
    return current


def resolve_segment_ids(
    response: dict[str, Any],
    segments: list[DeferredSegment],
) -> dict[str, str]:
    """Map each segment placeholder to the id found in the creation reply.

    Raises:
        MissingSegmentIdError: If a requested creation yielded no id
    """
    replies = response.get("replies") or []
    ids: dict[str, str] = {}
    for segment in segments:
        deferred = segment.deferred_id
        if deferred.request_index >= len(replies):
            raise MissingSegmentIdError(
                deferred.placeholder,
                f"reply {deferred.request_index} missing; "
                f"creation batch returned {len(replies)} replies",
            )
        ids[deferred.placeholder] = _extract_path(
            replies[deferred.request_index],
            deferred.response_path,
            deferred.placeholder,
        )
        logger.debug("Resolved %s -> %s", deferred.placeholder, ids[deferred.placeholder])
    return ids


def substitute_placeholder_ids(
    requests: list[dict[str, Any]],
    ids: dict[str, str],
) -> list[dict[str, Any]]:
    """Return a copy of ``requests`` with every placeholder segmentId replaced.

    Raises:
        MissingSegmentIdError: If a placeholder is left without an id
    """

    def _lookup(segment_id: Any) -> Any:
        if isinstance(segment_id, str) and segment_id.startswith("__deferred_"):
            if segment_id not in ids:
                raise MissingSegmentIdError(segment_id, "no id captured for placeholder")
            return ids[segment_id]
        return segment_id

    def _resolve(val: Any) -> Any:
        if isinstance(val, dict):
            return {
                k: _lookup(v) if k == "segmentId" else _resolve(v)
                for k, v in val.items()
            }
        if isinstance(val, list):
            return [_resolve(item) for item in val]
        return val

    return [_resolve(request) for request in requests]
