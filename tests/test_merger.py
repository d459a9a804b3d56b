"""Tests for cross-page table merging."""

from fragment_table_extractor.merger import merge_page_tables
from fragment_table_extractor.structures import Rect, Table, grid_is_rectangular


def _table(grid_rows, page, grid):
    return Table(page_index=page, bbox=Rect(x=page, y=0, width=1, height=1), rows=grid_rows(grid))


def test_identical_headers_are_dropped(grid_rows):
    a = _table(grid_rows, 0, [["Name", "Age"], ["John", "5"], ["Mary", "7"]])
    b = _table(grid_rows, 1, [["Name", "Age"], ["Ann", "9"]])
    [merged] = merge_page_tables([a, b])
    assert merged.row_count == a.row_count + b.row_count - 1
    assert merged.rows[-1].texts() == ["Ann", "9"]
    assert merged.page_index == 0
    assert merged.bbox == a.bbox
    assert grid_is_rectangular(merged)


def test_different_headers_keep_all_rows(grid_rows):
    a = _table(grid_rows, 0, [["Name", "Age"], ["John", "5"]])
    b = _table(grid_rows, 1, [["Ann", "9"], ["Bob", "3"]])
    [merged] = merge_page_tables([a, b])
    assert merged.row_count == a.row_count + b.row_count
    assert [r.row_index for r in merged.rows] == [0, 1, 2, 3]


def test_empty_first_rows_are_not_treated_as_headers(grid_rows):
    a = _table(grid_rows, 0, [["", ""], ["x", "1"]])
    b = _table(grid_rows, 1, [["", ""], ["y", "2"]])
    [merged] = merge_page_tables([a, b])
    assert merged.row_count == 4


def test_different_column_counts_are_not_merged(grid_rows):
    a = _table(grid_rows, 0, [["A", "B"]])
    b = _table(grid_rows, 1, [["A", "B", "C"]])
    c = _table(grid_rows, 2, [["A", "B", "C"], ["1", "2", "3"]])
    merged = merge_page_tables([a, None, b, c])
    assert [t.page_index for t in merged] == [0, 1]
    assert merged[1].row_count == 2


def test_inputs_are_not_mutated(grid_rows):
    a = _table(grid_rows, 0, [["H"], ["1"]])
    b = _table(grid_rows, 1, [["H"], ["2"]])
    merge_page_tables([a, b])
    assert a.row_count == 2
