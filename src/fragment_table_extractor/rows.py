# src/fragment_table_extractor/rows.py
from __future__ import annotations
import math
from typing import List, Sequence

from .cleaners import is_numeric, is_year_month
from .structures import Row


def non_empty_texts(row: Row) -> List[str]:
    return [c.text.strip() for c in row.cells if c.text.strip()]


def is_empty_row(row: Row) -> bool:
    return not non_empty_texts(row)


def is_likely_data_row(row: Row, decimal_separator: str = ".") -> bool:
    """Una fila es de datos si al menos max(2, ceil(50%)) de sus celdas no vacías
    son numéricas o fechas AAAA-MM."""
    values = non_empty_texts(row)
    if not values:
        return False
    hits = sum(1 for v in values if is_numeric(v, decimal_separator) or is_year_month(v))
    return hits >= max(2, math.ceil(len(values) * 0.5))


def count_header_rows(rows: Sequence[Row], decimal_separator: str = ".") -> int:
    """Filas de cabecera desde arriba hasta la primera fila de datos (mínimo 1)."""
    if not rows:
        return 0
    count = 0
    for row in rows:
        if is_likely_data_row(row, decimal_separator):
            break
        count += 1
    return max(1, min(count, len(rows)))


def trim_leading_empty_rows(rows: Sequence[Row]) -> List[Row]:
    """Descarta las filas vacías iniciales; lista vacía si todas lo están."""
    for i, row in enumerate(rows):
        if not is_empty_row(row):
            return list(rows[i:])
    return []
