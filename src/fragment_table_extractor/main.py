from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from .detector import extract_tables
from .exporters import objects_to_dict, table_to_dict, tables_to_csv, write_json
from .objects import tables_to_objects
from .options import ExtractionOptions
from .parser import load_pages
from .structures import TabularObjectSet, Table

log = logging.getLogger(__name__)

Result = Union[List[Table], List[TabularObjectSet]]


def extract_to_files(
    input_path: str,
    *,
    csv_path: Optional[str] = None,
    json_path: Optional[str] = None,
    as_objects: bool = False,
    input_format: str = "auto",
    options: Optional[ExtractionOptions] = None,
) -> Result:
    """
    Orquesta la extracción: carga páginas, detecta y une tablas, y escribe las salidas.
    Devuelve las tablas (o los objetos tabulares si ``as_objects``).
    """
    options = (options or ExtractionOptions()).validate()
    if not Path(input_path).exists():
        raise FileNotFoundError(input_path)

    log.info("Cargando fragmentos desde: %s", input_path)
    pages = load_pages(input_path, input_format)
    log.info("Se cargaron %d páginas (%d fragmentos).", len(pages), sum(len(p) for p in pages))

    tables = extract_tables(pages, options)
    if not tables:
        log.warning("No se detectaron tablas. Se generarán salidas vacías.")
    else:
        for t in tables:
            log.info("Tabla de la página %d: %d filas x %d columnas.", t.page_index, t.row_count, t.column_count)

    if csv_path:
        written = tables_to_csv(tables, csv_path)
        log.info("CSV escrito en: %s", ", ".join(str(p) for p in written))

    if as_objects:
        objects = tables_to_objects(tables, options.decimal_separator)
        if json_path:
            write_json([objects_to_dict(o) for o in objects], json_path)
            log.info("JSON escrito en: %s", json_path)
        return objects

    if json_path:
        write_json([table_to_dict(t) for t in tables], json_path)
        log.info("JSON escrito en: %s", json_path)
    return tables
