from __future__ import annotations
import math
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional

DEFAULT_X_TOLERANCE = 3.0
DEFAULT_Y_TOLERANCE = 3.0
DEFAULT_MIN_COLUMNS = 2
DEFAULT_MAX_COLUMNS = 15


@dataclass
class ExtractionOptions:
    """Parámetros de una llamada de extracción (unidades de página)."""
    x_tolerance: float = DEFAULT_X_TOLERANCE
    y_tolerance: float = DEFAULT_Y_TOLERANCE
    min_column_count: int = DEFAULT_MIN_COLUMNS
    max_column_count: int = DEFAULT_MAX_COLUMNS
    column_headers: Optional[List[str]] = None
    end_of_table_whitespace: float = math.inf
    decimal_separator: str = "."

    def validate(self) -> "ExtractionOptions":
        if self.x_tolerance < 0 or self.y_tolerance < 0:
            raise ValueError("Tolerances must be >= 0")
        if self.min_column_count < 1 or self.max_column_count < 1:
            raise ValueError("Column count bounds must be positive")
        if self.min_column_count > self.max_column_count:
            raise ValueError(
                f"min_column_count ({self.min_column_count}) > max_column_count ({self.max_column_count})"
            )
        if self.end_of_table_whitespace < 0:
            raise ValueError("end_of_table_whitespace must be >= 0")
        if not isinstance(self.decimal_separator, str) or len(self.decimal_separator) != 1:
            raise ValueError(f"decimal_separator must be a single character, got {self.decimal_separator!r}")
        return self

    @property
    def has_headers(self) -> bool:
        return bool(self.column_headers)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtractionOptions":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown extraction options: {', '.join(unknown)}")
        opts = cls(**data)
        if opts.column_headers is not None:
            opts.column_headers = [str(h) for h in opts.column_headers]
        return opts.validate()
