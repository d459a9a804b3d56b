from __future__ import annotations
import math
import re
from typing import Optional

_WS_RE = re.compile(r"\s+")
_FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
# coma de miles: exactamente 3 dígitos antes de otro separador o del final
_THOUSANDS_COMMA_RE = re.compile(r",(?=\d{3}(?:[.,]|$))")
_YEAR_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


def clean_cell_text(text: Optional[str]) -> str:
    """Recorta y colapsa los espacios internos de una celda."""
    return _WS_RE.sub(" ", text or "").strip()


def parse_number(value: Optional[str], decimal_separator: str = ".") -> Optional[float]:
    """Convierte texto a número respetando el separador decimal; None si no es parseable."""
    if value is None:
        return None
    s = _WS_RE.sub("", value)
    if not s:
        return None

    if decimal_separator != ".":
        for mark in (".", ","):
            if mark != decimal_separator:
                s = s.replace(mark, "")
        s = s.replace(decimal_separator, ".")
    else:
        s = _THOUSANDS_COMMA_RE.sub("", s)

    if not _FLOAT_RE.match(s):
        return None
    try:
        num = float(s)
    except ValueError:
        return None
    if not math.isfinite(num):
        return None
    return num


def is_numeric(value: str, decimal_separator: str = ".") -> bool:
    return parse_number(value, decimal_separator) is not None


def is_year_month(value: str) -> bool:
    return bool(_YEAR_MONTH_RE.match(value.strip()))
