from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from ...common.datetime_utils import parse_optional_datetime
from ...common.validators import optional_text, parse_bool
from ...core.enums import ExitStep
from ..model import (
    AssetReturnUpdate,
    ExitClosureUpdate,
    ExitInterviewUpdate,
    KnowledgeTransferUpdate,
    NoticePeriodUpdate,
    Resignation,
    SystemAccessUpdate,
)
from .base import ExitStepHandler


class CompletionStepHandler(ExitStepHandler):
    """Steps tracked by a completion flag plus an optional date and notes.

    The flag is always written. Date (defaulting to now) and notes are only
    written when the step is marked completed.
    """

    update_cls: type
    flag_field: str
    date_field: str
    notes_field: Optional[str] = None
    actor_field: Optional[str] = None

    def parse(self, payload: Mapping[str, Any]):
        raw = payload.get("completed", payload.get("value"))
        kwargs: dict[str, Any] = {
            "completed": parse_bool(raw, "completed"),
            "date": parse_optional_datetime(payload.get("date"), "date"),
        }
        if self.notes_field:
            kwargs["notes"] = optional_text(payload.get("notes"), "notes")
        return self.update_cls(**kwargs)

    def changes(self, update, *, current: Resignation, actor_id: int, now: datetime) -> dict[str, Any]:
        out: dict[str, Any] = {self.flag_field: update.completed}
        if not update.completed:
            return out

        out[self.date_field] = update.date or now
        notes = getattr(update, "notes", None)
        if self.notes_field and notes:
            out[self.notes_field] = notes
        if self.actor_field:
            out[self.actor_field] = int(actor_id)
        return out


class NoticePeriodStep(CompletionStepHandler):
    step = ExitStep.NOTICE_PERIOD
    update_cls = NoticePeriodUpdate
    flag_field = "notice_period_complied"
    date_field = "notice_period_complied_date"


class KnowledgeTransferStep(CompletionStepHandler):
    step = ExitStep.KNOWLEDGE_TRANSFER
    update_cls = KnowledgeTransferUpdate
    flag_field = "knowledge_transfer_completed"
    date_field = "handover_completed_date"
    notes_field = "handover_notes"


class AssetReturnStep(CompletionStepHandler):
    step = ExitStep.ASSET_RETURN
    update_cls = AssetReturnUpdate
    flag_field = "assets_returned"
    date_field = "assets_return_date"
    notes_field = "assets_return_notes"


class ExitInterviewStep(CompletionStepHandler):
    step = ExitStep.EXIT_INTERVIEW
    update_cls = ExitInterviewUpdate
    flag_field = "exit_interview_completed"
    date_field = "exit_interview_date"
    notes_field = "exit_interview_feedback"


class SystemAccessStep(CompletionStepHandler):
    step = ExitStep.SYSTEM_ACCESS
    update_cls = SystemAccessUpdate
    flag_field = "system_access_deactivated"
    date_field = "system_access_deactivated_date"


class ExitClosureStep(CompletionStepHandler):
    step = ExitStep.EXIT_CLOSURE
    update_cls = ExitClosureUpdate
    flag_field = "exit_closed"
    date_field = "exit_closed_date"
    actor_field = "exit_closed_by"
