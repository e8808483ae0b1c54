from __future__ import annotations

from dataclasses import dataclass, field

from ..core.enums import ExitStep
from .steps.base import ExitStepHandler
from .steps.clearance_step import ClearanceStep
from .steps.completion_steps import (
    AssetReturnStep,
    ExitClosureStep,
    ExitInterviewStep,
    KnowledgeTransferStep,
    NoticePeriodStep,
    SystemAccessStep,
)
from .steps.documents_step import DocumentsStep
from .steps.fnf_step import FnfStep


def _default_handlers() -> dict[ExitStep, ExitStepHandler]:
    handlers = [
        NoticePeriodStep(),
        KnowledgeTransferStep(),
        AssetReturnStep(),
        ClearanceStep(),
        ExitInterviewStep(),
        FnfStep(),
        DocumentsStep(),
        SystemAccessStep(),
        ExitClosureStep(),
    ]
    return {h.step: h for h in handlers}


@dataclass
class ExitStepFactory:
    """Factory Pattern: one handler per ExitStep."""

    handlers: dict[ExitStep, ExitStepHandler] = field(default_factory=_default_handlers)

    def __post_init__(self) -> None:
        missing = [s.value for s in ExitStep if s not in self.handlers]
        if missing:
            raise ValueError(f"No handler registered for steps: {', '.join(missing)}")

    def for_step(self, step: ExitStep) -> ExitStepHandler:
        return self.handlers[step]
