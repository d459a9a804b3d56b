"""Tests for 1-D position clustering and band lookup."""

import pytest

from fragment_table_extractor.clustering import (
    cluster_positions,
    infer_column_candidates,
    infer_row_bands,
    nearest_index,
)


def test_empty_positions():
    assert cluster_positions([], 3) == []


def test_well_separated_positions_get_one_band_each():
    assert cluster_positions([30, 0, 10, 20], 3) == [0, 10, 20, 30]


def test_band_center_is_mean_of_members():
    assert cluster_positions([1, 2, 3, 10], 2) == [pytest.approx(2.0), 10]


def test_membership_is_measured_against_anchor():
    """3.5 is within tolerance of the running mean (1.5) but not of the anchor (0)."""
    assert cluster_positions([0, 3, 3.5], 3) == [pytest.approx(1.5), pytest.approx(3.5)]


def test_zero_tolerance_merges_only_duplicates():
    assert cluster_positions([5, 5, 6], 0) == [5, 6]


def test_clustering_is_deterministic_regardless_of_input_order():
    values = [7.2, 0.5, 3.3, 0.9, 7.0, 3.1]
    assert cluster_positions(values, 1) == cluster_positions(list(reversed(values)), 1)


def test_nearest_index_first_band_wins_ties():
    assert nearest_index(5, [0, 10]) == 0
    assert nearest_index(6, [0, 10]) == 1
    assert nearest_index(-100, [0, 10]) == 0


def test_row_bands_are_top_to_bottom(name_age_city):
    assert infer_row_bands(name_age_city, 2) == [15, 5]


def test_column_candidates(name_age_city):
    assert infer_column_candidates(name_age_city, 2) == [2, pytest.approx(11.0), 22]
