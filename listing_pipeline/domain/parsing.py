# listing_pipeline/domain/parsing.py
from __future__ import annotations

import math
from typing import Any


def is_blank(x: Any) -> bool:
    if x is None:
        return True
    if isinstance(x, float) and math.isnan(x):
        return True
    if isinstance(x, str) and not x.strip():
        return True
    return False


def to_int(x: Any) -> int | None:
    if is_blank(x):
        return None
    try:
        return int(float(str(x).replace(",", "")))
    except Exception:
        return None


def to_float(x: Any) -> float | None:
    if is_blank(x):
        return None
    try:
        v = float(str(x).replace(",", ""))
    except Exception:
        return None
    # "inf" / "nan" parse as floats but are never real prices or areas
    return v if math.isfinite(v) else None


def to_str(x: Any) -> str:
    """Spreadsheet cells come back as floats for numeric-looking text ("9.0"); undo that."""
    if is_blank(x):
        return ""
    if isinstance(x, float) and x.is_integer():
        return str(int(x))
    return str(x).strip()


def get_first(payload: dict[str, Any], *keys: str) -> Any:
    """Return first non-empty key from payload."""
    for k in keys:
        v = payload.get(k)
        if is_blank(v):
            continue
        return v
    return None
