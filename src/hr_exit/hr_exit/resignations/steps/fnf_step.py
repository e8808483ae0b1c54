from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from ...common.datetime_utils import parse_optional_datetime
from ...common.validators import optional_text, parse_amount
from ...core.enums import ExitStep, FnfStatus
from ...core.exceptions import ValidationError
from ..model import FnfUpdate, Resignation
from .base import ExitStepHandler


class FnfStep(ExitStepHandler):
    """Full & final settlement.

    "completed" may be set directly, there is no requirement to pass
    through "processing" first.
    """

    step = ExitStep.FNF

    def parse(self, payload: Mapping[str, Any]) -> FnfUpdate:
        try:
            status = FnfStatus(str(payload.get("status") or "").strip())
        except ValueError:
            status = None
        if status not in (FnfStatus.PROCESSING, FnfStatus.COMPLETED):
            raise ValidationError("FnF status must be processing or completed")

        return FnfUpdate(
            status=status,
            date=parse_optional_datetime(payload.get("date"), "date"),
            amount=parse_amount(payload.get("amount"), "amount"),
            notes=optional_text(payload.get("notes"), "notes"),
        )

    def changes(self, update: FnfUpdate, *, current: Resignation, actor_id: int, now: datetime) -> dict[str, Any]:
        out: dict[str, Any] = {"fnf_status": update.status}
        if update.status != FnfStatus.COMPLETED:
            return out

        out["fnf_processed_date"] = update.date or now
        if update.amount is not None:
            out["fnf_amount"] = update.amount
        if update.notes:
            out["fnf_notes"] = update.notes
        return out
