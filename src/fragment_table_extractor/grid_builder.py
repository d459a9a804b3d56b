# src/fragment_table_extractor/grid_builder.py
from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from .clustering import infer_row_bands, nearest_index
from .column_model import infer_columns
from .options import ExtractionOptions
from .rows import trim_leading_empty_rows
from .structures import Row, Table, TextFragment, bbox_from_fragments, build_cell, reindex_rows

log = logging.getLogger(__name__)

Buckets = List[List[List[TextFragment]]]


def assign_fragments(fragments: Sequence[TextFragment],
                     row_centers: Sequence[float],
                     column_centers: Sequence[float]) -> Buckets:
    """Reparte cada fragmento en la celda (fila, columna) de centros más cercanos."""
    buckets: Buckets = [[[] for _ in column_centers] for _ in row_centers]
    if not row_centers or not column_centers:
        return buckets
    for frag in fragments:
        ri = nearest_index(frag.cy, row_centers)
        ci = nearest_index(frag.cx, column_centers)
        buckets[ri][ci].append(frag)
    return buckets


def frequently_used_columns(buckets: Buckets) -> Optional[List[int]]:
    """Columnas usadas en al menos el 50% de las filas que usa la columna más usada.

    None si el filtro no reduce nada."""
    if not buckets or not buckets[0]:
        return None
    n_cols = len(buckets[0])
    usage = [sum(1 for row in buckets if row[c]) for c in range(n_cols)]
    max_usage = max(usage)
    if max_usage == 0:
        return None
    threshold = max_usage * 0.5
    kept = [c for c, n in enumerate(usage) if n >= threshold]
    if not kept or len(kept) == n_cols:
        return None
    return kept


def template_row_columns(buckets: Buckets) -> Optional[List[int]]:
    """Columnas pobladas en la fila con más celdas no vacías (la primera en empate)."""
    if not buckets:
        return None
    counts = [sum(1 for b in row if b) for row in buckets]
    max_count = max(counts)
    if max_count == 0:
        return None
    template = buckets[counts.index(max_count)]
    kept = [c for c, b in enumerate(template) if b]
    if not kept or len(kept) == len(template):
        return None
    return kept


def select_logical_columns(buckets: Buckets) -> List[int]:
    cols = frequently_used_columns(buckets)
    if cols is not None:
        log.debug("Filtro por uso: columnas %s", cols)
        return cols
    cols = template_row_columns(buckets)
    if cols is not None:
        log.debug("Filtro por fila plantilla: columnas %s", cols)
        return cols
    return list(range(len(buckets[0]))) if buckets else []


def buckets_to_rows(buckets: Buckets, column_indices: Sequence[int]) -> List[Row]:
    rows: List[Row] = []
    for ri, row in enumerate(buckets):
        cells = [build_cell(ri, logical, row[ci]) for logical, ci in enumerate(column_indices)]
        rows.append(Row(row_index=ri, cells=cells))
    return rows


def select_header_columns(rows: Sequence[Row]) -> List[int]:
    """Conserva columnas con cabecera (primera fila) o la columna índice implícita.

    Una columna vacía en todas las filas siempre se descarta. La primera columna
    sin cabecera sobrevive solo si todas sus celdas de cuerpo tienen texto.
    """
    if not rows:
        return []
    header, body = rows[0], rows[1:]
    kept: List[int] = []
    for col in range(len(header.cells)):
        if all(not r.cells[col].text.strip() for r in rows):
            continue
        has_header = bool(header.cells[col].text.strip())
        index_column = (
            col == 0
            and not has_header
            and len(body) > 0
            and all(r.cells[col].text.strip() for r in body)
        )
        if has_header or index_column:
            kept.append(col)
    return kept


def build_grid(page_index: int,
               fragments: Sequence[TextFragment],
               row_centers: Sequence[float],
               column_centers: Sequence[float]) -> Optional[Table]:
    """Construye la tabla a partir de bandas fijas de filas y columnas."""
    if not fragments or not row_centers or not column_centers:
        return None

    buckets = assign_fragments(fragments, row_centers, column_centers)
    columns = select_logical_columns(buckets)
    rows = trim_leading_empty_rows(buckets_to_rows(buckets, columns))
    if not rows:
        log.debug("Página %d: todas las filas vacías", page_index)
        return None

    header_columns = select_header_columns(rows)
    if not header_columns:
        log.debug("Página %d: ninguna columna sobrevive al filtro de cabecera", page_index)
        return None

    final_rows = reindex_rows(rows, header_columns)
    return Table(page_index=page_index, bbox=bbox_from_fragments(fragments), rows=final_rows)


def build_table_from_fragments(page_index: int,
                               fragments: Sequence[TextFragment],
                               options: ExtractionOptions) -> Optional[Table]:
    """Inferencia automática: filas por clustering, columnas por selección de modelo."""
    if not fragments:
        return None

    row_centers = infer_row_bands(fragments, options.y_tolerance)
    if not row_centers:
        return None

    column_centers = infer_columns(fragments, row_centers, options.x_tolerance,
                                   options.min_column_count, options.max_column_count)
    if not column_centers:
        return None

    log.debug("Página %d: %d bandas de fila, %d columnas", page_index,
              len(row_centers), len(column_centers))
    return build_grid(page_index, fragments, row_centers, column_centers)
