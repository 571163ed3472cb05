"""Cursor-tracked request emitter for Google Docs batchUpdate.

``DocumentBuilder`` accumulates batchUpdate requests while tracking the
document index. Every insertion advances the cursor by the inserted length;
every style call targets a range that has already been written.

Usage:
    builder = DocumentBuilder()
    rng = builder.insert_text("Hello\\n")
    builder.reset_range(rng)
    builder.style_text(rng.shrink_end(), TextStyleIntent(bold=True))
    requests = builder.requests

A builder owns its cursor for exactly one document (or one header/footer
segment). Reusing it for a second document silently corrupts offsets.
"""

from __future__ import annotations

import logging
from typing import Any

from gdocgen.errors import DocGenError, InvalidRangeError
from gdocgen.indexer import BODY_START_INDEX, SEGMENT_START_INDEX, Range, utf16_len
from gdocgen.style_resolver import (
    CellStyleIntent,
    ParagraphStyleIntent,
    TextStyleIntent,
    neutral_text_style,
    resolve_cell_style,
    resolve_paragraph_style,
    resolve_text_style,
)
from gdocgen.table_geometry import (
    CellPlacement,
    cell_placements,
    reverse_insertion_plan,
    table_structure_size,
)
from gdocgen.theme import FONT_FAMILY, FONT_SIZES

logger = logging.getLogger(__name__)


class DocumentBuilder:
    """Accumulates batchUpdate requests while tracking the insertion index."""

    def __init__(
        self,
        segment_id: str | None = None,
        *,
        font_family: str = FONT_FAMILY,
        font_size: float = FONT_SIZES["body"],
    ) -> None:
        """Initialize an empty builder.

        Args:
            segment_id: Header/footer segment to write into, or None for the body
            font_family: Font family used when resetting text to neutral
            font_size: Font size (points) used when resetting text to neutral
        """
        self._segment_id = segment_id
        self._origin = SEGMENT_START_INDEX if segment_id else BODY_START_INDEX
        self._cursor = self._origin
        self._requests: list[dict[str, Any]] = []
        self._preamble: list[dict[str, Any]] = []
        self._neutral = neutral_text_style(font_family, font_size)
        self._inserted = 0
        self._adjustment = 0
        # Index of the block being translated, for error context
        self.block_index: int | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> int:
        """Next free index in the segment."""
        return self._cursor

    @property
    def segment_id(self) -> str | None:
        return self._segment_id

    @property
    def requests(self) -> list[dict[str, Any]]:
        """All accumulated requests, document-level preamble first."""
        return [*self._preamble, *self._requests]

    @property
    def inserted_length(self) -> int:
        """Total code units inserted so far, structural table slots included."""
        return self._inserted

    @property
    def cursor_adjustment(self) -> int:
        """Net cursor correction applied through ``adjust_cursor``."""
        return self._adjustment

    # ------------------------------------------------------------------
    # Location helpers
    # ------------------------------------------------------------------

    def _location(self, index: int) -> dict[str, Any]:
        loc: dict[str, Any] = {"index": index}
        if self._segment_id:
            loc["segmentId"] = self._segment_id
        return loc

    def _range(self, rng: Range) -> dict[str, Any]:
        spec: dict[str, Any] = {"startIndex": rng.start, "endIndex": rng.end}
        if self._segment_id:
            spec["segmentId"] = self._segment_id
        return spec

    def _table_location(self, table_start: int) -> dict[str, Any]:
        # The table itself starts one past the split newline
        return self._location(table_start + 1)

    def _check_range(self, rng: Range) -> None:
        if rng.start < self._origin or rng.end <= rng.start:
            raise InvalidRangeError(
                "Empty or out-of-segment range",
                start=rng.start,
                end=rng.end,
                cursor=self._cursor,
                block_index=self.block_index,
            )
        if rng.end > self._cursor:
            raise InvalidRangeError(
                "Cannot style content that has not been written",
                start=rng.start,
                end=rng.end,
                cursor=self._cursor,
                block_index=self.block_index,
            )

    def _advance(self, count: int) -> None:
        self._cursor += count
        self._inserted += count

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def insert_text(self, text: str) -> Range:
        """Insert text at the cursor and advance past it.

        Returns:
            The inserted range, trailing newline included
        """
        start = self._cursor
        self._requests.append(
            {"insertText": {"location": self._location(start), "text": text}}
        )
        self._advance(utf16_len(text))
        return Range(start, self._cursor)

    def style_text(self, rng: Range, intent: TextStyleIntent) -> None:
        """Apply only the fields set on ``intent`` to a written range."""
        style, fields = resolve_text_style(intent)
        if fields:
            self._append_text_style(rng, style, fields)

    def reset_range(self, rng: Range) -> None:
        """Force every stylable text property over ``rng`` to its neutral value.

        Inserted text inherits the style of the preceding character, so a
        block resets everything it wrote, terminator included, before layering
        explicit styles.
        """
        style, fields = self._neutral
        self._append_text_style(rng, style, fields)

    def _append_text_style(
        self, rng: Range, style: dict[str, Any], fields: list[str]
    ) -> None:
        self._check_range(rng)
        self._requests.append(
            {
                "updateTextStyle": {
                    "range": self._range(rng),
                    "textStyle": style,
                    "fields": ",".join(fields),
                }
            }
        )

    def style_paragraph(self, rng: Range, intent: ParagraphStyleIntent) -> None:
        """Apply only the fields set on ``intent`` to the paragraphs in ``rng``."""
        style, fields = resolve_paragraph_style(intent)
        if not fields:
            return
        self._check_range(rng)
        self._requests.append(
            {
                "updateParagraphStyle": {
                    "range": self._range(rng),
                    "paragraphStyle": style,
                    "fields": ",".join(fields),
                }
            }
        )

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def create_bullets(self, rng: Range, preset: str) -> None:
        """Turn every paragraph in ``rng`` into a list item.

        The server strips leading tabs (used to express nesting) when it
        applies bullets; callers correct the cursor with ``adjust_cursor``.
        """
        self._check_range(rng)
        self._requests.append(
            {
                "createParagraphBullets": {
                    "range": self._range(rng),
                    "bulletPreset": preset,
                }
            }
        )

    def adjust_cursor(self, delta: int) -> None:
        """Move the cursor back over characters the server consumed.

        This is the only cursor move not caused by an insertion. It exists
        for list nesting tabs, which are written to convey structure and then
        removed by createParagraphBullets.
        """
        if delta > 0 or self._cursor + delta < self._origin:
            raise InvalidRangeError(
                f"Invalid cursor adjustment {delta}",
                start=self._cursor + delta,
                end=self._cursor,
                cursor=self._cursor,
                block_index=self.block_index,
            )
        self._cursor += delta
        self._adjustment += delta

    # ------------------------------------------------------------------
    # Single-unit elements
    # ------------------------------------------------------------------

    def insert_page_break(self) -> Range:
        """Insert a page break marker (one index)."""
        if self._segment_id:
            raise DocGenError("Page breaks cannot be inserted into headers or footers")
        start = self._cursor
        self._requests.append({"insertPageBreak": {"location": self._location(start)}})
        self._advance(1)
        return Range(start, self._cursor)

    def insert_inline_image(
        self,
        uri: str,
        width: float | None = None,
        height: float | None = None,
    ) -> Range:
        """Insert an inline image (one index) at the cursor."""
        start = self._cursor
        body: dict[str, Any] = {"location": self._location(start), "uri": uri}
        size: dict[str, Any] = {}
        if width is not None:
            size["width"] = {"magnitude": float(width), "unit": "PT"}
        if height is not None:
            size["height"] = {"magnitude": float(height), "unit": "PT"}
        if size:
            body["objectSize"] = size
        self._requests.append({"insertInlineImage": body})
        self._advance(1)
        return Range(start, self._cursor)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def insert_table(self, rows: int, cols: int) -> int:
        """Insert an empty table at the cursor and advance past its structure.

        Returns:
            The table start index used by every later cell computation
        """
        table_start = self._cursor
        self._requests.append(
            {
                "insertTable": {
                    "rows": rows,
                    "columns": cols,
                    "location": self._location(table_start),
                }
            }
        )
        self._advance(table_structure_size(rows, cols))
        return table_start

    def fill_table(self, table_start: int, grid: list[list[str]]) -> list[CellPlacement]:
        """Write cell text in reverse order and advance past the content.

        Args:
            table_start: Value returned by ``insert_table``
            grid: Row-major cell texts matching the table geometry

        Returns:
            Placements in natural order with final (post-write) offsets
        """
        lengths = [[utf16_len(text) for text in row] for row in grid]
        placements = cell_placements(table_start, lengths)
        table_end = table_start + table_structure_size(len(grid), len(grid[0]))
        if table_end != self._cursor:
            raise InvalidRangeError(
                "Table content must be written right after the table structure",
                start=table_start,
                end=table_end,
                cursor=self._cursor,
                block_index=self.block_index,
            )

        for placement in reverse_insertion_plan(table_start, lengths):
            self._requests.append(
                {
                    "insertText": {
                        "location": self._location(placement.base_offset),
                        "text": grid[placement.row][placement.col],
                    }
                }
            )
            self._advance(placement.length)
        return placements

    def style_table_cells(
        self,
        table_start: int,
        intent: CellStyleIntent,
        *,
        row: int = 0,
        col: int = 0,
        row_span: int = 1,
        col_span: int = 1,
    ) -> None:
        """Apply a table cell style to a rectangular block of cells."""
        style, fields = resolve_cell_style(intent)
        if not fields:
            return
        self._requests.append(
            {
                "updateTableCellStyle": {
                    "tableRange": {
                        "tableCellLocation": {
                            "tableStartLocation": self._table_location(table_start),
                            "rowIndex": row,
                            "columnIndex": col,
                        },
                        "rowSpan": row_span,
                        "columnSpan": col_span,
                    },
                    "tableCellStyle": style,
                    "fields": ",".join(fields),
                }
            }
        )

    def set_column_widths(self, table_start: int, widths_pt: list[float]) -> None:
        """Fix each column to an explicit width in points."""
        for col, width in enumerate(widths_pt):
            self._requests.append(
                {
                    "updateTableColumnProperties": {
                        "tableStartLocation": self._table_location(table_start),
                        "columnIndices": [col],
                        "tableColumnProperties": {
                            "widthType": "FIXED_WIDTH",
                            "width": {"magnitude": float(width), "unit": "PT"},
                        },
                        "fields": "widthType,width",
                    }
                }
            )

    # ------------------------------------------------------------------
    # Document
    # ------------------------------------------------------------------

    def set_document_style(self, margin_pt: float) -> None:
        """Set uniform page margins. Emitted ahead of all content requests."""
        margin = {"magnitude": float(margin_pt), "unit": "PT"}
        self._preamble = [
            {
                "updateDocumentStyle": {
                    "documentStyle": {
                        "marginTop": margin,
                        "marginBottom": margin,
                        "marginLeft": margin,
                        "marginRight": margin,
                    },
                    "fields": "marginTop,marginBottom,marginLeft,marginRight",
                }
            }
        ]
