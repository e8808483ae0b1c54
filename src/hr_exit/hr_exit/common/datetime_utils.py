from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from ..core.exceptions import ValidationError


def parse_optional_datetime(value: Any, field_name: str) -> Optional[datetime]:
    """Parse a client-supplied date/datetime.

    Accepts datetime/date objects, "YYYY-MM-DD" and ISO-8601 strings
    (a trailing "Z" is tolerated). Empty values give None.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())

    v = str(value).strip()
    if not v:
        return None
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(v)
    except ValueError:
        raise ValidationError(f"{field_name} is not a valid date")
    # Stored as naive local time, like every other timestamp in the database.
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_optional_date(value: Any, field_name: str) -> Optional[date]:
    parsed = parse_optional_datetime(value, field_name)
    return parsed.date() if parsed else None


def to_iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now().replace(microsecond=0)
