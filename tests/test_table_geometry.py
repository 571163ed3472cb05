"""Tests for table_geometry.py."""

import pytest

from gdocgen.table_geometry import (
    cell_base_offset,
    cell_placements,
    reverse_insertion_plan,
    row_stride,
    table_end_offset,
    table_structure_size,
)


def _empty_table_slots(rows: int, cols: int) -> list:
    """Slot layout an insertTable produces, one entry per index."""
    slots: list = ["split", "table"]
    for r in range(rows):
        slots.append("row")
        for c in range(cols):
            slots.extend(["cell", ("nl", r, c)])
    slots.append("end")
    return slots


class TestStructureSize:
    def test_two_by_three(self):
        assert table_structure_size(2, 3) == 17

    def test_one_by_one(self):
        # Callouts and code blocks
        assert table_structure_size(1, 1) == 6

    @pytest.mark.parametrize(("rows", "cols"), [(1, 2), (3, 1), (4, 5), (10, 10)])
    def test_matches_slot_layout(self, rows, cols):
        assert table_structure_size(rows, cols) == len(_empty_table_slots(rows, cols))
        assert table_structure_size(rows, cols) == 3 + rows * (2 * cols + 1)

    def test_rejects_empty_geometry(self):
        with pytest.raises(ValueError):
            table_structure_size(0, 2)
        with pytest.raises(ValueError):
            table_structure_size(2, 0)

    def test_row_stride(self):
        assert row_stride(3) == 7


class TestCellBaseOffset:
    def test_first_cell_of_single_cell_table(self):
        assert cell_base_offset(10, 1, 0, 0) == 14

    def test_matches_slot_layout(self):
        table_start = 7
        rows, cols = 3, 4
        slots = _empty_table_slots(rows, cols)
        for r in range(rows):
            for c in range(cols):
                index = table_start + slots.index(("nl", r, c))
                assert cell_base_offset(table_start, cols, r, c) == index

    def test_rejects_column_out_of_range(self):
        with pytest.raises(ValueError):
            cell_base_offset(1, 2, 0, 2)


class TestPlacements:
    def test_final_offsets_shift_by_prior_content(self):
        placements = cell_placements(1, [[1, 1], [1, 2]])
        assert [(p.row, p.col, p.base_offset, p.final_offset) for p in placements] == [
            (0, 0, 5, 5),
            (0, 1, 7, 8),
            (1, 0, 10, 12),
            (1, 1, 12, 15),
        ]
        assert placements[-1].final_end == 17

    def test_rejects_ragged_rows(self):
        with pytest.raises(ValueError):
            cell_placements(1, [[1, 1], [1]])

    def test_reverse_plan_order_skips_empty(self):
        plan = reverse_insertion_plan(1, [[1, 0], [2, 3]])
        assert [(p.row, p.col) for p in plan] == [(1, 1), (1, 0), (0, 0)]

    def test_table_end_offset(self):
        assert table_end_offset(1, [[1, 1], [1, 2]]) == 1 + 13 + 5

    @pytest.mark.parametrize(
        "lengths",
        [
            [[3]],
            [[1, 2, 3], [4, 0, 6]],
            [[0, 0], [5, 1], [2, 2]],
        ],
    )
    def test_reverse_insertion_lands_every_cell_at_final_offset(self, lengths):
        """Writing last-cell-first at base offsets never shifts a pending cell."""
        table_start = 5
        rows, cols = len(lengths), len(lengths[0])
        slots = _empty_table_slots(rows, cols)

        for p in reverse_insertion_plan(table_start, lengths):
            position = p.base_offset - table_start
            assert slots[position] == ("nl", p.row, p.col)
            slots[position:position] = [("text", p.row, p.col)] * p.length

        for p in cell_placements(table_start, lengths):
            nl_index = table_start + slots.index(("nl", p.row, p.col))
            assert nl_index - p.length == p.final_offset
            assert nl_index == p.final_end

        assert table_start + len(slots) == table_end_offset(table_start, lengths)
