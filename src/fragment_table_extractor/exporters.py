from __future__ import annotations
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
import csv
import json

import numpy as np
import pandas as pd

from .structures import Rect, TabularObjectSet, Table


def rows_to_csv(rows: List[List[str]], header: List[str], csv_path: str) -> None:
    with open(csv_path, "w", encoding="utf-8-sig", newline="") as f:
        w = csv.writer(f)
        if header:
            w.writerow(header)
        w.writerows(rows)


def table_to_grid(table: Table) -> List[List[str]]:
    return [row.texts() for row in table.rows]


def _rect_to_dict(rect: Optional[Rect]) -> Optional[Dict[str, float]]:
    return asdict(rect) if rect is not None else None


def table_to_dict(table: Table) -> Dict[str, Any]:
    return {
        "pageIndex": table.page_index,
        "bbox": _rect_to_dict(table.bbox),
        "rows": [
            {
                "rowIndex": row.row_index,
                "cells": [
                    {
                        "rowIndex": c.row_index,
                        "columnIndex": c.column_index,
                        "text": c.text,
                        "bbox": _rect_to_dict(c.bbox),
                    }
                    for c in row.cells
                ],
            }
            for row in table.rows
        ],
    }


def objects_to_dict(objects: TabularObjectSet) -> Dict[str, Any]:
    return {"pageIndex": objects.page_index, "headers": list(objects.headers),
            "rows": [dict(r) for r in objects.rows]}


def write_json(payload: Any, json_path: str) -> None:
    Path(json_path).parent.mkdir(parents=True, exist_ok=True)
    with open(json_path, "w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, ensure_ascii=False)


def objects_to_dataframe(objects: TabularObjectSet) -> pd.DataFrame:
    """DataFrame con las columnas en orden de cabecera; valores ausentes como NaN."""
    df = pd.DataFrame(objects.rows, columns=objects.headers)
    return df.astype(object).where(df.notna(), np.nan).infer_objects()


def tables_to_csv(tables: Sequence[Table], csv_path: str) -> List[Path]:
    """Una tabla → csv_path; varias → <stem>_<n>.csv junto a csv_path."""
    target = Path(csv_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    if len(tables) <= 1:
        rows = table_to_grid(tables[0]) if tables else []
        rows_to_csv(rows, [], str(target))
        return [target]
    written: List[Path] = []
    for n, table in enumerate(tables, start=1):
        path = target.with_name(f"{target.stem}_{n}{target.suffix or '.csv'}")
        rows_to_csv(table_to_grid(table), [], str(path))
        written.append(path)
    return written
