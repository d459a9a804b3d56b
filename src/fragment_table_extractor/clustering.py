from __future__ import annotations
from typing import List, Sequence
import numpy as np

from .structures import TextFragment


def cluster_positions(positions: Sequence[float], tolerance: float) -> List[float]:
    """Agrupa posiciones 1-D en bandas y devuelve sus centros (media), de menor a mayor.

    La pertenencia se mide contra el ancla de la banda (su primer valor), no contra
    la media acumulada: una banda puede extenderse más de 2*tolerance si los
    valores siguientes siguen cerca del ancla.
    """
    if len(positions) == 0:
        return []

    ordered = sorted(float(p) for p in positions)
    bands: List[float] = []
    anchor = ordered[0]
    members = [ordered[0]]
    for v in ordered[1:]:
        if abs(v - anchor) <= tolerance:
            members.append(v)
        else:
            bands.append(float(np.mean(members)))
            anchor = v
            members = [v]
    bands.append(float(np.mean(members)))
    return bands


def nearest_index(value: float, centers: Sequence[float]) -> int:
    """Index of the closest center; the first one wins on ties."""
    best, best_dist = 0, float("inf")
    for i, c in enumerate(centers):
        d = abs(value - c)
        if d < best_dist:
            best, best_dist = i, d
    return best


def infer_row_bands(fragments: Sequence[TextFragment], y_tolerance: float) -> List[float]:
    """Row centers ordered top to bottom (descending y)."""
    bands = cluster_positions([f.cy for f in fragments], y_tolerance)
    return sorted(bands, reverse=True)


def infer_column_candidates(fragments: Sequence[TextFragment], x_tolerance: float) -> List[float]:
    return cluster_positions([f.cx for f in fragments], x_tolerance)
