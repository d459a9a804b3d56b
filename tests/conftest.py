"""
Shared fixtures: small factories for fragments and text grids.
"""
from typing import Callable, List, Optional

import pytest

from fragment_table_extractor.structures import Cell, Rect, Row, TextFragment


def _frag(text: str, x1: float, x2: float, y1: float, y2: float) -> TextFragment:
    return TextFragment(text=text, bbox=Rect(x=x1, y=y1, width=x2 - x1, height=y2 - y1))


def _rows(grid: List[List[str]]) -> List[Row]:
    rows = []
    for ri, texts in enumerate(grid):
        cells = []
        for ci, text in enumerate(texts):
            bbox: Optional[Rect] = Rect(x=ci * 10.0, y=-ri * 10.0, width=5.0, height=5.0) if text else None
            cells.append(Cell(row_index=ri, column_index=ci, text=text, bbox=bbox))
        rows.append(Row(row_index=ri, cells=cells))
    return rows


@pytest.fixture
def frag() -> Callable[..., TextFragment]:
    """frag(text, x1, x2, y1, y2) -> TextFragment."""
    return _frag


@pytest.fixture
def grid_rows() -> Callable[[List[List[str]]], List[Row]]:
    """Rows from a grid of cell texts; empty strings get no bbox."""
    return _rows


@pytest.fixture
def name_age_city() -> List[TextFragment]:
    return [
        _frag("Name", 0, 4, 10, 20),
        _frag("Age", 10, 13, 10, 20),
        _frag("City", 20, 24, 10, 20),
        _frag("John", 0, 4, 0, 10),
        _frag("5", 10, 11, 0, 10),
    ]


@pytest.fixture
def guided_page() -> List[TextFragment]:
    """A titled two-column table with a missing amount in the second body row."""
    return [
        _frag("Report", 0, 200, 130, 140),
        _frag("Name", 0, 30, 100, 110),
        _frag("Amount", 100, 140, 100, 110),
        _frag("Alice", 0, 25, 85, 95),
        _frag("12,5", 105, 125, 85, 95),
        _frag("Bob", 0, 20, 70, 80),
        _frag("Carol", 0, 28, 55, 65),
        _frag("7", 110, 115, 55, 65),
    ]
