"""Lenient numeric coercion shared by the models and the cost engine."""

from __future__ import annotations

import math
from typing import Any, Optional


def safe_number(value: Any, default: float = 0.0) -> float:
    """Return ``value`` as a finite float, or ``default``.

    Form fields arrive blank or half-typed while a user edits a job, so
    ``None``, empty strings, unparseable text, NaN and infinities all map to
    ``default`` instead of raising or poisoning a sum.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def optional_number(value: Any) -> Optional[float]:
    """Like :func:`safe_number` but keeps "unset" distinguishable from zero."""
    number = safe_number(value, default=math.nan)
    return None if math.isnan(number) else number


def safe_int(value: Any, default: int = 0) -> int:
    """Coerce to int, truncating toward zero; blank/invalid gives ``default``."""
    number = safe_number(value, default=math.nan)
    if math.isnan(number):
        return default
    return int(number)
