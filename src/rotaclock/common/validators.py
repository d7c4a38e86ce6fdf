from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    v = (value or "").strip()
    return v or None


def require_non_negative(value: Any, field_name: str) -> float:
    """Accepts numbers or numeric strings."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number < 0:
        raise ValidationError(f"{field_name} must be a non-negative number")
    return number


def optional_non_negative(value: Any, field_name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    return require_non_negative(value, field_name)


def require_positive(value: Any, field_name: str) -> float:
    number = require_non_negative(value, field_name)
    if number <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return number


def require_hex_color(value: str, field_name: str = "color") -> str:
    if not _HEX_COLOR.match(value or ""):
        raise ValidationError(f"{field_name} must look like #RRGGBB")
    return value.upper()
