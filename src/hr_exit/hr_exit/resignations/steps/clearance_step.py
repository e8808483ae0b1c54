from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from ...common.validators import optional_text
from ...core.enums import ClearanceStatus, Department, ExitStep
from ...core.exceptions import ValidationError
from ..model import Clearance, ClearanceUpdate, Resignation
from .base import ExitStepHandler


class ClearanceStep(ExitStepHandler):
    """Sign-off of a single department; other departments are left untouched."""

    step = ExitStep.CLEARANCES

    def parse(self, payload: Mapping[str, Any]) -> ClearanceUpdate:
        dept_raw = str(payload.get("department") or "").strip()
        if not dept_raw:
            raise ValidationError("Department is required")
        try:
            department = Department(dept_raw)
        except ValueError:
            raise ValidationError("Invalid department")

        try:
            status = ClearanceStatus(str(payload.get("status") or "").strip())
        except ValueError:
            status = None
        if status not in (ClearanceStatus.APPROVED, ClearanceStatus.REJECTED):
            raise ValidationError("Clearance status must be approved or rejected")

        return ClearanceUpdate(
            department=department,
            status=status,
            notes=optional_text(payload.get("notes"), "notes"),
        )

    def changes(self, update: ClearanceUpdate, *, current: Resignation, actor_id: int, now: datetime) -> dict[str, Any]:
        clearance = Clearance(
            status=update.status,
            approved_by=int(actor_id),
            approved_at=now,
            notes=update.notes,
        )
        return {"clearances": {update.department: clearance}}
