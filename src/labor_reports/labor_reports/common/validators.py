from __future__ import annotations

import math
from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def parse_hours(value: Any, field_name: str = "Hours") -> Optional[float]:
    """Normalize an hour cell: blank -> None, otherwise a non-negative float."""

    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(hours):
        raise ValidationError(f"{field_name} must be a finite number")
    if hours < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return hours


def total_hours(hours: dict) -> float:
    return float(sum(h or 0 for h in hours.values()))
