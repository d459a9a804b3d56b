"""Tests for header-guided extraction."""

from fragment_table_extractor.header_guided import (
    extract_table_with_headers,
    resolve_header_columns,
    split_label,
)
from fragment_table_extractor.options import ExtractionOptions
from fragment_table_extractor.structures import Rect, grid_is_rectangular


def _texts(table):
    return [row.texts() for row in table.rows]


def test_split_label():
    assert split_label("Endex\n\n 101 \n") == ["Endex", "101"]


def test_multi_part_label_resolves_to_joined_title(frag):
    fragments = [frag("Endex", 0, 20, 30, 40), frag("101", 0, 15, 20, 30)]
    columns = resolve_header_columns(fragments, ["Endex\n101"])
    assert [c.title for c in columns] == ["Endex 101"]
    assert columns[0].bbox == Rect(x=0, y=20, width=20, height=20)


def test_labels_are_ordered_left_to_right(frag):
    fragments = [frag("B", 50, 60, 0, 10), frag("A", 0, 10, 0, 10)]
    columns = resolve_header_columns(fragments, ["B", "A"])
    assert [c.title for c in columns] == ["A", "B"]


def test_each_fragment_matches_at_most_one_part(frag):
    fragments = [frag("Total", 0, 20, 0, 10)]
    assert resolve_header_columns(fragments, ["Total", "Total"]) is None


def test_missing_part_abandons_extraction(guided_page):
    opts = ExtractionOptions(column_headers=["Name", "Missing"])
    assert resolve_header_columns(guided_page, ["Name", "Missing"]) is None
    assert extract_table_with_headers(0, guided_page, opts) is None


def test_blank_labels_only_resolve_nothing(guided_page):
    assert resolve_header_columns(guided_page, ["", "\n"]) is None


def test_guided_table_keeps_header_row_and_empty_cells(guided_page):
    opts = ExtractionOptions(column_headers=["Amount", "Name"])
    table = extract_table_with_headers(2, guided_page, opts)
    assert table is not None
    assert _texts(table) == [["Name", "Amount"], ["Alice", "12,5"], ["Bob", ""], ["Carol", "7"]]
    assert table.rows[2].cells[1].bbox is None
    assert table.page_index == 2
    assert table.bbox == Rect(x=0, y=55, width=140, height=55)
    assert grid_is_rectangular(table)


def test_fragment_spanning_columns_ends_table(guided_page, frag):
    page = guided_page + [frag("Total for all rows", 0, 200, 40, 50), frag("Dave", 0, 20, 25, 35)]
    table = extract_table_with_headers(0, page, ExtractionOptions(column_headers=["Name", "Amount"]))
    assert [r.texts()[0] for r in table.rows] == ["Name", "Alice", "Bob", "Carol"]


def test_vertical_gap_ends_table(guided_page, frag):
    page = guided_page + [frag("Dave", 0, 20, 10, 20)]
    opts = ExtractionOptions(column_headers=["Name", "Amount"], end_of_table_whitespace=20)
    table = extract_table_with_headers(0, page, opts)
    assert [r.texts()[0] for r in table.rows] == ["Name", "Alice", "Bob", "Carol"]

    unbounded = extract_table_with_headers(0, page, ExtractionOptions(column_headers=["Name", "Amount"]))
    assert [r.texts()[0] for r in unbounded.rows][-1] == "Dave"


def test_fragments_between_columns_are_ignored(guided_page, frag):
    page = guided_page + [frag("note", 60, 80, 85, 95)]
    table = extract_table_with_headers(0, page, ExtractionOptions(column_headers=["Name", "Amount"]))
    assert _texts(table)[1] == ["Alice", "12,5"]


def test_column_bands_widen_with_body(frag):
    page = [
        frag("Name", 0, 30, 100, 110), frag("Amount", 100, 140, 100, 110),
        frag("Robert", 0, 45, 85, 95), frag("1", 120, 125, 85, 95),
        frag("Li", 35, 45, 70, 80), frag("2", 120, 125, 70, 80),
    ]
    table = extract_table_with_headers(0, page, ExtractionOptions(column_headers=["Name", "Amount"]))
    assert _texts(table) == [["Name", "Amount"], ["Robert", "1"], ["Li", "2"]]


def test_stacked_header_spans_two_rows(frag):
    page = [
        frag("Endex", 0, 20, 30, 40), frag("101", 0, 15, 20, 30), frag("Qty", 50, 60, 30, 40),
        frag("abc", 0, 15, 5, 15), frag("4", 50, 55, 5, 15),
    ]
    table = extract_table_with_headers(0, page, ExtractionOptions(column_headers=["Endex\n101", "Qty"]))
    assert _texts(table) == [["Endex", "Qty"], ["101", ""], ["abc", "4"]]


def test_jitter_within_tolerance_stays_in_row(frag):
    page = [
        frag("Name", 0, 30, 100, 110), frag("Amount", 100, 140, 100, 110),
        frag("Alice", 0, 25, 85, 95), frag("3", 110, 115, 83, 93),
    ]
    table = extract_table_with_headers(0, page, ExtractionOptions(column_headers=["Name", "Amount"]))
    assert _texts(table) == [["Name", "Amount"], ["Alice", "3"]]


def test_drop_beyond_tolerance_starts_new_row(frag):
    page = [
        frag("Name", 0, 30, 100, 110), frag("Amount", 100, 140, 100, 110),
        frag("Alice", 0, 25, 85, 95), frag("3", 110, 115, 76, 86),
    ]
    table = extract_table_with_headers(0, page, ExtractionOptions(column_headers=["Name", "Amount"]))
    assert _texts(table) == [["Name", "Amount"], ["Alice", ""], ["", "3"]]


def test_tall_cell_does_not_swallow_next_row(frag):
    page = [
        frag("Name", 0, 30, 100, 110), frag("Note", 100, 140, 100, 110),
        frag("Alice", 0, 25, 85, 95), frag("tall", 100, 140, 70, 95), frag("Bob", 0, 20, 70, 80),
    ]
    table = extract_table_with_headers(0, page, ExtractionOptions(column_headers=["Name", "Note"]))
    assert _texts(table) == [["Name", "Note"], ["Alice", "tall"], ["Bob", ""]]
    assert grid_is_rectangular(table)
