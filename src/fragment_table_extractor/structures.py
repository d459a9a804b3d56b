from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Union

CellValue = Union[float, str, None]


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box in page coordinates (y grows upwards)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def cx(self) -> float:
        return self.x + self.width / 2.0

    @property
    def cy(self) -> float:
        return self.y + self.height / 2.0


@dataclass(frozen=True)
class TextFragment:
    text: str
    bbox: Rect

    @property
    def cx(self) -> float:
        return self.bbox.cx

    @property
    def cy(self) -> float:
        return self.bbox.cy


@dataclass(frozen=True)
class Cell:
    row_index: int
    column_index: int
    text: str
    bbox: Optional[Rect] = None


@dataclass(frozen=True)
class Row:
    row_index: int
    cells: List[Cell]

    def texts(self) -> List[str]:
        return [c.text for c in self.cells]


@dataclass(frozen=True)
class Table:
    page_index: int
    bbox: Rect
    rows: List[Row]

    @property
    def column_count(self) -> int:
        return len(self.rows[0].cells) if self.rows else 0

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass
class TabularObjectSet:
    page_index: int
    headers: List[str]
    rows: List[Dict[str, CellValue]] = field(default_factory=list)


def union_rects(a: Rect, b: Rect) -> Rect:
    x1 = min(a.x, b.x)
    y1 = min(a.y, b.y)
    x2 = max(a.right, b.right)
    y2 = max(a.top, b.top)
    return Rect(x=x1, y=y1, width=x2 - x1, height=y2 - y1)


def bbox_from_rects(rects: Iterable[Rect]) -> Optional[Rect]:
    out: Optional[Rect] = None
    for r in rects:
        out = r if out is None else union_rects(out, r)
    return out


def bbox_from_fragments(fragments: Sequence[TextFragment]) -> Optional[Rect]:
    return bbox_from_rects(f.bbox for f in fragments)


def horizontal_overlap(a1: float, a2: float, b1: float, b2: float) -> float:
    """Longitud del solape entre [a1, a2] y [b1, b2]; negativo si no se tocan."""
    return min(a2, b2) - max(a1, b1)


def build_cell(row_index: int, column_index: int, fragments: Sequence[TextFragment]) -> Cell:
    """Empty buckets become structural empty cells (text "" and no bbox)."""
    if not fragments:
        return Cell(row_index=row_index, column_index=column_index, text="", bbox=None)
    ordered = sorted(fragments, key=lambda f: f.bbox.x)
    text = "".join(f.text for f in ordered)
    if not text:
        return Cell(row_index=row_index, column_index=column_index, text="", bbox=None)
    return Cell(row_index=row_index, column_index=column_index, text=text,
                bbox=bbox_from_fragments(ordered))


def reindex_rows(rows: Sequence[Row], column_indices: Optional[Sequence[int]] = None) -> List[Row]:
    """Rebuild rows with contiguous row/column indices, optionally keeping only some columns."""
    out: List[Row] = []
    for ri, row in enumerate(rows):
        picked = row.cells if column_indices is None else [row.cells[c] for c in column_indices]
        cells = [Cell(row_index=ri, column_index=ci, text=c.text, bbox=c.bbox)
                 for ci, c in enumerate(picked)]
        out.append(Row(row_index=ri, cells=cells))
    return out


def grid_is_rectangular(table: Table) -> bool:
    width = table.column_count
    for ri, row in enumerate(table.rows):
        if row.row_index != ri or len(row.cells) != width:
            return False
        for ci, cell in enumerate(row.cells):
            if cell.row_index != ri or cell.column_index != ci:
                return False
            if (cell.bbox is None) != (cell.text == ""):
                return False
    return True
