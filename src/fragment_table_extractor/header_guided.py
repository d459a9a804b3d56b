# src/fragment_table_extractor/header_guided.py
from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .cleaners import clean_cell_text
from .options import ExtractionOptions
from .structures import (Rect, Row, Table, TextFragment, bbox_from_rects, build_cell,
                         horizontal_overlap, union_rects)

log = logging.getLogger(__name__)

_PARTS_RE = re.compile(r"\n+")
# holgura para incluir fragmentos alineados con el borde superior de la cabecera
_HEADER_EPS = 0.1


@dataclass(frozen=True)
class HeaderColumn:
    title: str
    bbox: Rect


@dataclass
class ColumnBand:
    """Horizontal extent of a column; widens as body fragments are assigned."""
    title: str
    start: float
    end: float

    def overlap(self, frag: TextFragment) -> float:
        return horizontal_overlap(self.start, self.end, frag.bbox.x, frag.bbox.right)

    def extend(self, frag: TextFragment) -> None:
        self.start = min(self.start, frag.bbox.x)
        self.end = max(self.end, frag.bbox.right)


def split_label(label: str) -> List[str]:
    return [p.strip() for p in _PARTS_RE.split(label) if p.strip()]


def resolve_header_columns(fragments: Sequence[TextFragment],
                           labels: Sequence[str]) -> Optional[List[HeaderColumn]]:
    """Localiza cada etiqueta de cabecera entre los fragmentos, de izquierda a derecha.

    Cada parte de una etiqueta (separadas por saltos de línea) se empareja con el
    primer fragmento libre, en orden de carga, cuyo texto recortado coincide
    exactamente. Si alguna parte no aparece devuelve None.
    """
    candidates = [f for f in fragments if f.text.strip()]
    used: set = set()
    columns: List[HeaderColumn] = []

    for label in labels:
        parts = split_label(label)
        if not parts:
            continue
        rects: List[Rect] = []
        for part in parts:
            match = next((i for i, f in enumerate(candidates)
                          if i not in used and f.text.strip() == part), None)
            if match is None:
                log.debug("Parte de cabecera no encontrada: %r", part)
                return None
            used.add(match)
            rects.append(candidates[match].bbox)
        columns.append(HeaderColumn(title=clean_cell_text(label), bbox=bbox_from_rects(rects)))

    if not columns:
        return None
    return sorted(columns, key=lambda c: c.bbox.x)


def extract_table_with_headers(page_index: int,
                               fragments: Sequence[TextFragment],
                               options: ExtractionOptions) -> Optional[Table]:
    """Extracción guiada por cabeceras conocidas; None para volver a la inferencia automática.

    El recorrido va de arriba abajo desde el borde superior de las cabeceras, de modo
    que los propios fragmentos de cabecera forman la(s) primera(s) fila(s). Termina
    cuando un fragmento toca más de una columna o cuando el hueco vertical entre
    filas supera ``end_of_table_whitespace``.
    """
    labels = options.column_headers or []
    if not labels:
        return None
    non_space = [f for f in fragments if f.text.strip()]
    if not non_space:
        return None

    headers = resolve_header_columns(non_space, labels)
    if not headers:
        return None

    bands = [ColumnBand(title=h.title, start=h.bbox.x, end=h.bbox.right) for h in headers]
    header_top = max(h.bbox.top for h in headers)
    body = sorted((f for f in non_space if f.bbox.top <= header_top + _HEADER_EPS),
                  key=lambda f: (-f.cy, f.bbox.x))

    row_buckets: List[List[List[TextFragment]]] = []
    # caja del fragmento que abrió la fila actual; no crece con el resto de la fila
    row_ref: Optional[Rect] = None
    table_rect = bbox_from_rects(h.bbox for h in headers)

    for frag in body:
        hits = [i for i, band in enumerate(bands) if band.overlap(frag) > 0]
        if not hits:
            continue
        if len(hits) > 1:
            log.debug("Fragmento %r cruza varias columnas: fin de tabla", frag.text)
            break

        if row_ref is None or frag.cy < row_ref.y - options.y_tolerance:
            if row_ref is not None and row_ref.y - frag.bbox.top > options.end_of_table_whitespace:
                log.debug("Hueco vertical mayor que %s: fin de tabla", options.end_of_table_whitespace)
                break
            row_buckets.append([[] for _ in bands])
            row_ref = frag.bbox

        col = hits[0]
        row_buckets[-1][col].append(frag)
        bands[col].extend(frag)
        table_rect = union_rects(table_rect, frag.bbox)

    if not row_buckets:
        return None

    rows = [Row(row_index=ri, cells=[build_cell(ri, ci, bucket) for ci, bucket in enumerate(buckets)])
            for ri, buckets in enumerate(row_buckets)]
    log.debug("Página %d: tabla guiada con %d filas y %d columnas", page_index, len(rows), len(bands))
    return Table(page_index=page_index, bbox=table_rect, rows=rows)
