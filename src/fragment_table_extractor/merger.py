from __future__ import annotations
import logging
from typing import Iterable, List, Optional

from .structures import Row, Table, reindex_rows

log = logging.getLogger(__name__)


def _same_header(a: Table, b: Table) -> bool:
    if not a.rows or not b.rows:
        return False
    ha = [t.strip() for t in a.rows[0].texts()]
    hb = [t.strip() for t in b.rows[0].texts()]
    return any(ha) and any(hb) and ha == hb


def can_merge(running: Table, incoming: Table) -> bool:
    return running.column_count > 0 and running.column_count == incoming.column_count


def merge_two(running: Table, incoming: Table) -> Table:
    """Append incoming rows to running, dropping a repeated header row."""
    extra = incoming.rows[1:] if _same_header(running, incoming) else incoming.rows
    rows: List[Row] = reindex_rows(list(running.rows) + list(extra))
    return Table(page_index=running.page_index, bbox=running.bbox, rows=rows)


def merge_page_tables(tables: Iterable[Optional[Table]]) -> List[Table]:
    """Concatena tablas de páginas consecutivas con el mismo número de columnas."""
    merged: List[Table] = []
    for table in tables:
        if table is None:
            continue
        if merged and can_merge(merged[-1], table):
            log.debug("Uniendo tabla de la página %d con la de la página %d",
                      table.page_index, merged[-1].page_index)
            merged[-1] = merge_two(merged[-1], table)
        else:
            merged.append(table)
    return merged
