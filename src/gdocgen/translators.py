"""Block translators: one routine per section kind.

Each translator drives a ``DocumentBuilder`` in a fixed order:
insert content, reset the whole written range (terminator included) to
neutral, then layer the explicit styles the section asks for. Styling before
the reset would be overwritten by it.

Tables (and the single-cell tables used for callouts and code blocks) queue
their cell styles right after the structure and before any content, write
cell content last-cell-first, then reset and overlay using the final offsets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from gdocgen.builder import DocumentBuilder
from gdocgen.errors import DocGenError, Notice
from gdocgen.indexer import Range
from gdocgen.sections import (
    CalloutSection,
    CodeBlockSection,
    HeadingSection,
    HorizontalRuleSection,
    ImageSection,
    ListSection,
    PageBreakSection,
    ParagraphSection,
    Section,
    TableCell,
    TableSection,
)
from gdocgen.style_resolver import (
    Border,
    CellStyleIntent,
    ParagraphStyleIntent,
    TextStyleIntent,
)
from gdocgen.table_geometry import CellPlacement
from gdocgen.theme import (
    CALLOUT_COLORS,
    COLORS,
    CONTENT_WIDTH_PT,
    FONT_SIZES,
    MONOSPACE_FAMILY,
)

logger = logging.getLogger(__name__)

BULLET_PRESET = "BULLET_DISC_CIRCLE_SQUARE"

NUMBERED_PRESETS: dict[str, str] = {
    "decimal": "NUMBERED_DECIMAL_ALPHA_ROMAN",
    "decimal_nested": "NUMBERED_DECIMAL_NESTED",
    "upper_alpha": "NUMBERED_UPPERALPHA_ALPHA_ROMAN",
    "upper_roman": "NUMBERED_UPPERROMAN_UPPERALPHA_DECIMAL",
}

TABLE_BORDER = Border(width=0.5, color=COLORS["border"])
CALLOUT_BORDER_WIDTH = 3.0


@dataclass
class TranslationContext:
    """Per-build state shared by the translators.

    Attributes:
        content_width_pt: Usable page width, the base for column percentages
        image_urls: Resolved URLs for image sections given by file path
        notices: Downgrades recorded while translating
    """

    content_width_pt: float = CONTENT_WIDTH_PT
    image_urls: dict[str, str] = field(default_factory=dict)
    notices: list[Notice] = field(default_factory=list)

    def notice(self, feature: str, detail: str, block_index: int | None) -> None:
        note = Notice(feature=feature, detail=detail, block_index=block_index)
        logger.warning("Unsupported feature downgraded: %s", note)
        self.notices.append(note)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def translate_section(
    builder: DocumentBuilder,
    section: Section,
    ctx: TranslationContext,
) -> None:
    """Translate one section at the builder's cursor."""
    match section:
        case HeadingSection():
            translate_heading(builder, section)
        case ParagraphSection():
            translate_paragraph(builder, section)
        case ListSection():
            translate_list(builder, section, ctx)
        case TableSection():
            translate_table(builder, section, content_width_pt=ctx.content_width_pt)
        case CalloutSection():
            translate_callout(builder, section)
        case CodeBlockSection():
            translate_code_block(builder, section)
        case HorizontalRuleSection():
            translate_rule(builder)
        case PageBreakSection():
            translate_page_break(builder)
        case ImageSection():
            translate_image(builder, section, ctx)
        case _:
            raise DocGenError(f"Unknown section type: {type(section).__name__}")


# ---------------------------------------------------------------------------
# Text blocks
# ---------------------------------------------------------------------------


def translate_heading(builder: DocumentBuilder, section: HeadingSection) -> None:
    """Heading: named style over the paragraph, emphasis over the text only.

    Only the terminator is reset. A full reset would spell out the body font
    size over the text and override the HEADING_n sizes.
    """
    rng = builder.insert_text(section.text + "\n")
    builder.style_paragraph(
        rng, ParagraphStyleIntent(named_style=f"HEADING_{section.level}")
    )
    if section.text:
        builder.style_text(
            rng.shrink_end(),
            TextStyleIntent(bold=True, color=COLORS["primary_dark"]),
        )
    builder.reset_range(rng.tail())


def translate_paragraph(builder: DocumentBuilder, section: ParagraphSection) -> None:
    """Paragraph: runs back-to-back, reset, then each run's own styles."""
    start = builder.cursor
    run_ranges: list[tuple[Range, TextStyleIntent]] = []
    for run in section.content:
        if not run.text:
            continue
        run_ranges.append((builder.insert_text(run.text), run.to_intent()))
    terminator = builder.insert_text("\n")
    whole = Range(start, terminator.end)

    builder.reset_range(whole)
    for rng, intent in run_ranges:
        if not intent.is_empty():
            builder.style_text(rng, intent)

    builder.style_paragraph(
        whole,
        ParagraphStyleIntent(
            alignment=section.alignment,
            space_above=section.space_before,
            space_below=section.space_after,
            line_spacing=section.line_spacing,
        ),
    )


def translate_list(
    builder: DocumentBuilder,
    section: ListSection,
    ctx: TranslationContext,
) -> None:
    """List: tab-prefixed items, one bullets request, then undo the tabs.

    createParagraphBullets removes the leading tabs it converts to nesting
    levels, so the cursor moves back by the number of tabs written.
    """
    if not section.items:
        return
    start = builder.cursor
    total_tabs = 0
    for item in section.items:
        builder.insert_text("\t" * item.level + item.text + "\n")
        total_tabs += item.level
    whole = Range(start, builder.cursor)

    builder.reset_range(whole)
    builder.create_bullets(whole, list_preset(section, ctx, builder.block_index))
    if total_tabs:
        builder.adjust_cursor(-total_tabs)


def list_preset(
    section: ListSection,
    ctx: TranslationContext,
    block_index: int | None = None,
) -> str:
    """Pick the bullet preset for a list section."""
    if section.kind == "bullet":
        return BULLET_PRESET
    style = section.list_style or "decimal"
    if style == "legal":
        ctx.notice(
            "legal numbering",
            "no legal (1.1.1) preset exists; using decimal numbering",
            block_index,
        )
        style = "decimal"
    return NUMBERED_PRESETS[style]


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def _cell_paragraph(p: CellPlacement) -> Range:
    # Content plus the cell's own paragraph terminator
    return Range(p.final_offset, p.final_end + 1)


def _reset_cells(builder: DocumentBuilder, placements: list[CellPlacement]) -> None:
    for p in placements:
        if p.length:
            builder.reset_range(_cell_paragraph(p))


def translate_table(
    builder: DocumentBuilder,
    section: TableSection,
    *,
    content_width_pt: float = CONTENT_WIDTH_PT,
) -> None:
    """Table: header row plus data rows, then a trailing empty paragraph."""
    cols = len(section.headers)
    grid: list[list[TableCell]] = [[TableCell(text=h) for h in section.headers]]
    for row in section.rows:
        grid.append([*row, *(TableCell() for _ in range(cols - len(row)))])
    rows = len(grid)

    table_start = builder.insert_table(rows, cols)

    # Cell styles: borders, header background, per-cell backgrounds
    builder.style_table_cells(
        table_start,
        CellStyleIntent(
            padding_top=6,
            padding_bottom=6,
            padding_left=8,
            padding_right=8,
            border_top=TABLE_BORDER,
            border_bottom=TABLE_BORDER,
            border_left=TABLE_BORDER,
            border_right=TABLE_BORDER,
        ),
        row_span=rows,
        col_span=cols,
    )
    builder.style_table_cells(
        table_start,
        CellStyleIntent(background=COLORS["header_cell"]),
        col_span=cols,
    )
    for r, row in enumerate(grid):
        for c, cell in enumerate(row):
            if cell.background_color:
                builder.style_table_cells(
                    table_start,
                    CellStyleIntent(background=cell.background_color),
                    row=r,
                    col=c,
                )
    if section.column_widths:
        builder.set_column_widths(
            table_start,
            [pct / 100.0 * content_width_pt for pct in section.column_widths],
        )

    placements = builder.fill_table(
        table_start, [[cell.text for cell in row] for row in grid]
    )
    _reset_cells(builder, placements)

    for p in placements:
        cell = grid[p.row][p.col]
        bold = cell.bold if cell.bold is not None else p.row == 0
        if p.length and bold:
            builder.style_text(
                Range(p.final_offset, p.final_end), TextStyleIntent(bold=True)
            )
        if cell.alignment:
            builder.style_paragraph(
                _cell_paragraph(p), ParagraphStyleIntent(alignment=cell.alignment)
            )

    _trailing_paragraph(builder)


def _single_cell_box(
    builder: DocumentBuilder,
    text: str,
    cell_style: CellStyleIntent,
    text_style: TextStyleIntent,
) -> None:
    table_start = builder.insert_table(1, 1)
    builder.style_table_cells(table_start, cell_style)
    (placement,) = builder.fill_table(table_start, [[text]])
    _reset_cells(builder, [placement])
    if placement.length:
        builder.style_text(
            Range(placement.final_offset, placement.final_end), text_style
        )
    _trailing_paragraph(builder)


def translate_callout(builder: DocumentBuilder, section: CalloutSection) -> None:
    """Callout: a 1x1 table with palette background and a thick left border."""
    colors = CALLOUT_COLORS[section.style]
    edge = Border(width=CALLOUT_BORDER_WIDTH, color=colors.border)
    hidden = Border(width=0.5, color=colors.background)
    _single_cell_box(
        builder,
        section.content,
        CellStyleIntent(
            background=colors.background,
            padding_top=8,
            padding_bottom=8,
            padding_left=12,
            padding_right=12,
            border_left=edge,
            border_top=hidden,
            border_bottom=hidden,
            border_right=hidden,
        ),
        TextStyleIntent(color=colors.text),
    )


def translate_code_block(builder: DocumentBuilder, section: CodeBlockSection) -> None:
    """Code block: a 1x1 shaded table in a monospace font."""
    _single_cell_box(
        builder,
        section.content.rstrip("\n"),
        CellStyleIntent(
            background=COLORS["code_block"],
            padding_top=8,
            padding_bottom=8,
            padding_left=8,
            padding_right=8,
            border_top=TABLE_BORDER,
            border_bottom=TABLE_BORDER,
            border_left=TABLE_BORDER,
            border_right=TABLE_BORDER,
        ),
        TextStyleIntent(font=MONOSPACE_FAMILY, size=FONT_SIZES["code"]),
    )


def _trailing_paragraph(builder: DocumentBuilder) -> None:
    builder.reset_range(builder.insert_text("\n"))


# ---------------------------------------------------------------------------
# Single-unit elements
# ---------------------------------------------------------------------------


def translate_rule(builder: DocumentBuilder) -> None:
    """Horizontal rule: an empty paragraph with a bottom border."""
    rng = builder.insert_text("\n")
    builder.reset_range(rng)
    builder.style_paragraph(
        rng,
        ParagraphStyleIntent(
            border_bottom=Border(width=1, color=COLORS["border"], padding=8),
            space_below=12,
        ),
    )


def translate_page_break(builder: DocumentBuilder) -> None:
    builder.insert_page_break()


def translate_image(
    builder: DocumentBuilder,
    section: ImageSection,
    ctx: TranslationContext,
) -> None:
    """Image: one inline object then a terminator for its paragraph."""
    url = section.url or ctx.image_urls.get(section.file_path or "")
    if not url:
        raise DocGenError(
            f"Image {section.file_path!r} has no resolved URL "
            f"(block {builder.block_index})"
        )
    image = builder.insert_inline_image(url, section.width, section.height)
    terminator = builder.insert_text("\n")
    paragraph = Range(image.start, terminator.end)
    builder.reset_range(paragraph)
    if section.alignment:
        builder.style_paragraph(
            paragraph, ParagraphStyleIntent(alignment=section.alignment)
        )
