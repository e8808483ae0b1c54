from __future__ import annotations

import math
from typing import Any, Optional

from ..core.constants import MAX_NOTES_LENGTH
from ..core.exceptions import ValidationError


def optional_text(value: Any, field_name: str, *, max_len: Optional[int] = MAX_NOTES_LENGTH) -> Optional[str]:
    if value is None:
        return None
    v = str(value).strip()
    if not v:
        return None
    if max_len is not None and len(v) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return v


def parse_bool(value: Any, field_name: str) -> bool:
    """Strict boolean parsing for JSON payloads (true/false, 1/0, "true"/"false")."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in {"true", "1", "yes"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"false", "0", "no", ""}:
        return False
    raise ValidationError(f"{field_name} must be true or false")


def parse_amount(value: Any, field_name: str) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(amount):
        raise ValidationError(f"{field_name} must be a finite number")
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return amount


def normalize_string_list(value: Any) -> list[str]:
    """Turn a list (or a bare string) into a list of stripped, non-empty strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValidationError("Expected a list of strings")
    return [str(v).strip() for v in value if v is not None and str(v).strip()]
