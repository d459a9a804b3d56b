from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from .grid_builder import build_table_from_fragments
from .header_guided import extract_table_with_headers
from .merger import merge_page_tables
from .objects import tables_to_objects
from .options import ExtractionOptions
from .structures import TabularObjectSet, Table, TextFragment

log = logging.getLogger(__name__)


def extract_table_from_fragments(page_index: int,
                                 fragments: Sequence[TextFragment],
                                 options: Optional[ExtractionOptions] = None) -> Optional[Table]:
    """Detecta como mucho una tabla por página.

    Con cabeceras configuradas intenta primero la extracción guiada; si falla
    (o no hay cabeceras) recurre a la inferencia automática.
    """
    options = options or ExtractionOptions()
    if not fragments:
        return None

    if options.has_headers:
        guided = extract_table_with_headers(page_index, fragments, options)
        if guided is not None:
            return guided
        log.debug("Página %d: extracción guiada sin resultado, se usa la automática", page_index)

    return build_table_from_fragments(page_index, fragments, options)


def extract_tables(pages: Sequence[Sequence[TextFragment]],
                   options: Optional[ExtractionOptions] = None) -> List[Table]:
    """Extrae una tabla por página (si la hay) y une las que continúan en la siguiente."""
    options = (options or ExtractionOptions()).validate()
    per_page = [extract_table_from_fragments(i, frags, options) for i, frags in enumerate(pages)]
    found = sum(1 for t in per_page if t is not None)
    log.debug("%d de %d páginas con tabla", found, len(per_page))
    return merge_page_tables(per_page)


def extract_tables_as_objects(pages: Sequence[Sequence[TextFragment]],
                              options: Optional[ExtractionOptions] = None) -> List[TabularObjectSet]:
    options = (options or ExtractionOptions()).validate()
    return tables_to_objects(extract_tables(pages, options), options.decimal_separator)
