from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Read-only view of a user from the employee directory."""

    user_id: int
    full_name: str
    email: str
    role: Role
    emp_id: Optional[str] = None
    designation: Optional[str] = None
    is_active: bool = True
