"""Table geometry for freshly inserted Google Docs tables.

An ``insertTable`` at index ``i`` lays out the following slots:

- ``i``: newline of the paragraph the table is split from
- ``i + 1``: table start marker
- per row: 1 row marker, then per cell 1 cell marker + 1 empty paragraph
- after the last row: table end marker

so an R x C table reserves ``3 + R * (2C + 1)`` slots and the empty paragraph
of cell ``(r, c)`` sits at ``i + 4 + r * (2C + 1) + 2c``.

Writing text into a cell shifts every later cell. Inserting cells in reverse
order (last cell first) means every insertion lands before nothing that is
still pending, so each cell can be written at its unshifted base offset.
Styles applied after all insertions use the final (shifted) offsets.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class CellPlacement:
    """Where one cell's content is written and where it ends up."""

    row: int
    col: int
    base_offset: int  # insertion index in an empty table
    final_offset: int  # start index once every cell has been written
    length: int

    @property
    def final_end(self) -> int:
        return self.final_offset + self.length


def _check_dims(rows: int, cols: int) -> None:
    if rows < 1 or cols < 1:
        raise ValueError(f"Table needs at least one row and column, got {rows}x{cols}")


def row_stride(cols: int) -> int:
    """Slots used by one empty row: row marker + (cell marker + newline) per cell."""
    return 2 * cols + 1


def table_structure_size(rows: int, cols: int) -> int:
    """Number of slots an empty R x C table reserves."""
    _check_dims(rows, cols)
    return 3 + rows * row_stride(cols)


def cell_base_offset(table_start: int, cols: int, row: int, col: int) -> int:
    """Index of the empty paragraph of cell ``(row, col)`` before any content."""
    if not 0 <= col < cols or row < 0:
        raise ValueError(f"Cell ({row}, {col}) outside a table with {cols} columns")
    return table_start + 4 + row * row_stride(cols) + 2 * col


def cell_placements(
    table_start: int,
    lengths: Sequence[Sequence[int]],
) -> list[CellPlacement]:
    """Compute base and final offsets for every cell in natural order.

    Args:
        table_start: Index the insertTable request targets
        lengths: Row-major grid of UTF-16 content lengths, one row per table row

    Returns:
        Placements ordered (0, 0), (0, 1), ..., (R-1, C-1)
    """
    rows = len(lengths)
    cols = len(lengths[0]) if rows else 0
    _check_dims(rows, cols)

    placements: list[CellPlacement] = []
    written = 0
    for r, row_lengths in enumerate(lengths):
        if len(row_lengths) != cols:
            raise ValueError(
                f"Row {r} has {len(row_lengths)} cells, expected {cols}"
            )
        for c, length in enumerate(row_lengths):
            base = cell_base_offset(table_start, cols, r, c)
            placements.append(
                CellPlacement(
                    row=r,
                    col=c,
                    base_offset=base,
                    final_offset=base + written,
                    length=length,
                )
            )
            written += length
    return placements


def reverse_insertion_plan(
    table_start: int,
    lengths: Sequence[Sequence[int]],
) -> list[CellPlacement]:
    """Placements in write order: (R-1, C-1) first, (0, 0) last.

    Empty cells are skipped since they need no insertion.
    """
    return [p for p in reversed(cell_placements(table_start, lengths)) if p.length]


def table_end_offset(table_start: int, lengths: Sequence[Sequence[int]]) -> int:
    """Index just past the table end marker once all content is written."""
    rows = len(lengths)
    cols = len(lengths[0]) if rows else 0
    total = sum(sum(row) for row in lengths)
    return table_start + table_structure_size(rows, cols) + total
