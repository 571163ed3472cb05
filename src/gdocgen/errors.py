"""Exception classes for gdocgen.

Every compiler error carries an ``ErrorKind`` so callers can branch on the
failure category without matching on exception types. Offset and geometry
errors indicate a compiler bug and abort the build; they are never recovered.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Categories of generation failures."""

    INVALID_COLOR = "invalid_color"
    INVALID_RANGE = "invalid_range"
    MISSING_SEGMENT_ID = "missing_segment_id"
    UPSTREAM_BATCH_FAILURE = "upstream_batch_failure"
    UNSUPPORTED_FEATURE = "unsupported_feature"
    INVALID_INPUT = "invalid_input"


class DocGenError(Exception):
    """Base class for gdocgen errors."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT


class InvalidColorError(DocGenError):
    """Raised when a color is not exactly six hex digits."""

    kind = ErrorKind.INVALID_COLOR

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid hex color {value!r}: expected RRGGBB")
        self.value = value


class InvalidRangeError(DocGenError):
    """Raised when a request targets content that has not been written."""

    kind = ErrorKind.INVALID_RANGE

    def __init__(
        self,
        message: str,
        *,
        start: int,
        end: int,
        cursor: int,
        block_index: int | None = None,
    ) -> None:
        context = f"range=[{start}, {end}) cursor={cursor}"
        if block_index is not None:
            context = f"block={block_index} {context}"
        super().__init__(f"{message} ({context})")
        self.start = start
        self.end = end
        self.cursor = cursor
        self.block_index = block_index


class MissingSegmentIdError(DocGenError):
    """Raised when a createHeader/createFooter reply yields no segment id."""

    kind = ErrorKind.MISSING_SEGMENT_ID

    def __init__(self, placeholder: str, detail: str) -> None:
        super().__init__(f"No segment id for {placeholder}: {detail}")
        self.placeholder = placeholder


class UpstreamBatchError(DocGenError):
    """Raised when the transport rejects a batch before anything was applied."""

    kind = ErrorKind.UPSTREAM_BATCH_FAILURE

    def __init__(self, message: str, *, phase: str, batches_applied: int = 0) -> None:
        super().__init__(message)
        self.phase = phase
        self.batches_applied = batches_applied


class PartialDocumentError(UpstreamBatchError):
    """Raised when a batch fails after earlier batches were already applied.

    The remote document is left partially built. No rollback is attempted.
    """


@dataclass(frozen=True)
class Notice:
    """A feature that was downgraded instead of failing the build."""

    feature: str
    detail: str
    block_index: int | None = None
    kind: ErrorKind = ErrorKind.UNSUPPORTED_FEATURE

    def __str__(self) -> str:
        where = f" (block {self.block_index})" if self.block_index is not None else ""
        return f"{self.feature}: {self.detail}{where}"
