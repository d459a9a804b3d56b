from __future__ import annotations
import logging
from typing import Dict, List, Sequence

from .cleaners import clean_cell_text, parse_number
from .rows import count_header_rows
from .structures import CellValue, Row, TabularObjectSet, Table

log = logging.getLogger(__name__)


def merge_header_rows(header_rows: Sequence[Row], n_cols: int) -> List[str]:
    merged = []
    for col in range(n_cols):
        parts = [r.cells[col].text.strip() for r in header_rows if r.cells[col].text.strip()]
        merged.append(clean_cell_text(" ".join(parts)))
    return merged


def make_header_keys(raw_headers: Sequence[str]) -> List[str]:
    """Blank headers become columnN (1-based); repeats get _2, _3, ... suffixes."""
    keys: List[str] = []
    seen: Dict[str, int] = {}
    for i, raw in enumerate(raw_headers):
        base = raw if raw else f"column{i + 1}"
        key = base
        while key in keys:
            seen[base] = seen.get(base, 1) + 1
            key = f"{base}_{seen[base]}"
        keys.append(key)
    return keys


def is_numeric_column(values: Sequence[str], decimal_separator: str = ".") -> bool:
    filled = [v for v in values if v.strip()]
    if not filled:
        return False
    return all(parse_number(v, decimal_separator) is not None for v in filled)


def table_to_objects(table: Table, decimal_separator: str = ".") -> TabularObjectSet:
    """Convierte la tabla en registros indexados por cabecera con inferencia numérica."""
    n_cols = table.column_count
    header_count = count_header_rows(table.rows, decimal_separator)
    headers = make_header_keys(merge_header_rows(table.rows[:header_count], n_cols))
    body = table.rows[header_count:]

    numeric = [is_numeric_column([r.cells[c].text for r in body], decimal_separator)
               for c in range(n_cols)]
    log.debug("Página %d: cabeceras %s, columnas numéricas %s", table.page_index, headers, numeric)

    records: List[Dict[str, CellValue]] = []
    for row in body:
        record: Dict[str, CellValue] = {}
        for c, key in enumerate(headers):
            text = row.cells[c].text.strip()
            if numeric[c]:
                record[key] = parse_number(text, decimal_separator) if text else None
            else:
                record[key] = text
        records.append(record)

    return TabularObjectSet(page_index=table.page_index, headers=headers, rows=records)


def tables_to_objects(tables: Sequence[Table], decimal_separator: str = ".") -> List[TabularObjectSet]:
    return [table_to_objects(t, decimal_separator) for t in tables]
