from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Mapping

from ...core.enums import ExitStep
from ..model import Resignation, StepUpdate


# Columns each step is allowed to write. Service checks every change set against this.
STEP_FIELDS: dict[ExitStep, frozenset[str]] = {
    ExitStep.NOTICE_PERIOD: frozenset({"notice_period_complied", "notice_period_complied_date"}),
    ExitStep.KNOWLEDGE_TRANSFER: frozenset(
        {"knowledge_transfer_completed", "handover_completed_date", "handover_notes"}
    ),
    ExitStep.ASSET_RETURN: frozenset({"assets_returned", "assets_return_date", "assets_return_notes"}),
    ExitStep.CLEARANCES: frozenset({"clearances"}),
    ExitStep.EXIT_INTERVIEW: frozenset(
        {"exit_interview_completed", "exit_interview_date", "exit_interview_feedback"}
    ),
    ExitStep.FNF: frozenset({"fnf_status", "fnf_amount", "fnf_processed_date", "fnf_notes"}),
    ExitStep.DOCUMENTS: frozenset({"exit_documents"}),
    ExitStep.SYSTEM_ACCESS: frozenset({"system_access_deactivated", "system_access_deactivated_date"}),
    ExitStep.EXIT_CLOSURE: frozenset({"exit_closed", "exit_closed_date", "exit_closed_by"}),
}


class ExitStepHandler(ABC):
    """Strategy Pattern: how one exit step reads its payload and which fields it writes."""

    step: ExitStep

    @property
    def owned_fields(self) -> frozenset[str]:
        return STEP_FIELDS[self.step]

    @abstractmethod
    def parse(self, payload: Mapping[str, Any]) -> StepUpdate:
        """Validate a raw JSON payload into this step's typed update."""
        raise NotImplementedError

    @abstractmethod
    def changes(self, update: StepUpdate, *, current: Resignation, actor_id: int, now: datetime) -> dict[str, Any]:
        """Return {field: value} for the fields this step owns."""
        raise NotImplementedError
