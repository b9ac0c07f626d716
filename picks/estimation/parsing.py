"""Parse-with-fallback helpers for numeric catalog fields.

The catalog stores some numbers as strings ("16 GB", "40000"). Every
conversion goes through one of these helpers so that failures are logged
and counted instead of silently coerced or raised.
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

import structlog

from picks.core.observability import UNPARSABLE_VALUES

log = structlog.get_logger(__name__)

_NOT_NUMERIC = re.compile(r"[^\d.-]")
_LEADING_NUMBER = re.compile(r"^-?(?:\d+(?:\.\d*)?|\.\d+)")


def _unparsable(field: str, value: Any, reason: str) -> None:
    UNPARSABLE_VALUES.labels(field=field).inc()
    log.warning("unparsable_catalog_value", field=field, value=repr(value), reason=reason)


def parse_memory(value: Any, *, field: str = "mem") -> float:
    """Parse a memory magnitude such as "16 GB" into a float.

    Everything except digits, '.' and '-' is stripped, then the leading
    number is read ("1.5.2" reads as 1.5). Missing or unparsable values
    give 0.0 with a warning.
    """
    if isinstance(value, bool):
        _unparsable(field, value, "boolean")
        return 0.0
    if isinstance(value, (int, float)):
        if math.isnan(value) or math.isinf(value):
            _unparsable(field, value, "not finite")
            return 0.0
        return float(value)
    if value is None or str(value).strip() == "":
        _unparsable(field, value, "missing")
        return 0.0

    cleaned = _NOT_NUMERIC.sub("", str(value))
    m = _LEADING_NUMBER.match(cleaned)
    if not m:
        _unparsable(field, value, "no number")
        return 0.0
    return float(m.group(0))


def parse_number(value: Any, *, field: str) -> float:
    """Per-unit RM or CPU. Absent means 0; garbage means 0 with a warning."""
    if value is None:
        return 0.0
    coerced = coerce_numeric(value, field=field)
    return coerced if coerced is not None else 0.0


def coerce_numeric(value: Any, *, field: str) -> Optional[float]:
    """Strict numeric coercion for capacities.

    Numbers pass through, strings must hold a plain number (surrounding
    whitespace allowed). Returns None for absent or non-numeric values.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        _unparsable(field, value, "boolean")
        return None
    if isinstance(value, (int, float)):
        out = float(value)
    else:
        raw = str(value).strip()
        if not raw:
            return None
        try:
            out = float(raw)
        except ValueError:
            _unparsable(field, value, "not a number")
            return None
    if math.isnan(out) or math.isinf(out):
        _unparsable(field, value, "not finite")
        return None
    return out


def format_fixed(value: float, places: int = 2) -> str:
    """Fixed-point rendering, ties rounded away from zero on the exact binary value."""
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
