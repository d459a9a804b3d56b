# src/fragment_table_extractor/column_model.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence
import numpy as np

from .clustering import infer_column_candidates, nearest_index
from .structures import TextFragment

log = logging.getLogger(__name__)

MAX_ITERATIONS = 30
CONVERGENCE_DELTA = 0.1

# pesos del coste (menor = mejor)
W_COMPACTNESS = 1.0
W_EMPTY_COLUMNS = 5.0
W_ROW_VARIANCE = 0.5
W_COMPLEXITY = 0.1


@dataclass
class ColumnModel:
    centers: List[float]
    cost: float


def recluster_centers_1d(values: Sequence[float], k: int) -> List[float]:
    """K-means 1-D (Lloyd) sobre valores ya pre-agrupados; devuelve k centros ordenados."""
    if len(values) == 0 or k <= 0:
        return []
    data = np.sort(np.asarray(values, dtype=float))
    if len(data) <= k:
        return [float(v) for v in data]

    n = len(data)
    seeds = [min(int(((i + 0.5) * n) // k), n - 1) for i in range(k)]
    means = data[seeds].copy()

    for _ in range(MAX_ITERATIONS):
        # argmin devuelve el primer índice en empates
        labels = np.argmin(np.abs(data[:, None] - means[None, :]), axis=1)
        new_means = means.copy()
        for j in range(k):
            members = data[labels == j]
            if members.size:
                new_means[j] = members.mean()
        delta = float(np.max(np.abs(new_means - means)))
        means = new_means
        if delta < CONVERGENCE_DELTA:
            break

    return sorted(float(m) for m in means)


def score_column_model(fragments: Sequence[TextFragment],
                       row_centers: Sequence[float],
                       column_centers: Sequence[float]) -> float:
    """Coste ponderado de un layout de columnas proyectando todos los fragmentos."""
    n_cols = len(column_centers)
    if n_cols == 0 or not fragments:
        return float("inf")

    total = len(fragments)
    col_counts = np.zeros(n_cols, dtype=int)
    sq_dist = 0.0
    row_used = [set() for _ in row_centers]

    for frag in fragments:
        ci = nearest_index(frag.cx, column_centers)
        col_counts[ci] += 1
        sq_dist += (frag.cx - column_centers[ci]) ** 2
        if row_used:
            row_used[nearest_index(frag.cy, row_centers)].add(ci)

    compactness = sq_dist / total
    min_per_col = max(2, int(total * 0.01))
    empty_cols = int(np.sum(col_counts < min_per_col))

    row_variance = 0.0
    if row_used:
        row_variance = float(np.var([len(s) for s in row_used]))

    return (W_COMPACTNESS * compactness
            + W_EMPTY_COLUMNS * empty_cols
            + W_ROW_VARIANCE * row_variance
            + W_COMPLEXITY * n_cols)


def select_column_model(fragments: Sequence[TextFragment],
                        row_centers: Sequence[float],
                        x_tolerance: float,
                        min_cols: int,
                        max_cols: int) -> Optional[ColumnModel]:
    """Elige K en [min_cols, max_cols] con el menor coste; None si no hay candidatos."""
    if not fragments:
        return None

    candidates = infer_column_candidates(fragments, x_tolerance)
    if not candidates:
        return None

    max_k = min(max_cols, len(candidates))
    min_k = min(min_cols, max_k)
    if max_k <= 0:
        return None
    if min_k == max_k:
        centers = recluster_centers_1d(candidates, max_k)
        return ColumnModel(centers=centers, cost=score_column_model(fragments, row_centers, centers))

    best: Optional[ColumnModel] = None
    for k in range(min_k, max_k + 1):
        centers = recluster_centers_1d(candidates, k)
        cost = score_column_model(fragments, row_centers, centers)
        log.debug("K=%d coste=%.4f", k, cost)
        if best is None or cost < best.cost:
            best = ColumnModel(centers=centers, cost=cost)

    if best is not None:
        log.debug("Modelo elegido: K=%d (coste %.4f) de %d candidatos",
                  len(best.centers), best.cost, len(candidates))
    return best


def infer_columns(fragments: Sequence[TextFragment],
                  row_centers: Sequence[float],
                  x_tolerance: float,
                  min_cols: int,
                  max_cols: int) -> List[float]:
    model = select_column_model(fragments, row_centers, x_tolerance, min_cols, max_cols)
    return model.centers if model else []
