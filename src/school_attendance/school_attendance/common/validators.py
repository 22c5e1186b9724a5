from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_str(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def require_positive_seconds(value, field_name: str) -> float:
    seconds = float(value)
    if seconds <= 0:
        raise ValueError(f"{field_name} must be a positive number of seconds, got {value!r}")
    return seconds
