from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..core.enums import ClearanceStatus, Department, ExitStep, FnfStatus, ResignationStatus, StepProgress
from .model import Resignation

RESIGNATION_STEP = "resignation"


@dataclass(frozen=True)
class StepView:
    step: str
    progress: StepProgress


@dataclass(frozen=True)
class ExitProgress:
    """Read model for the exit tracker.

    `overall` is the derived lifecycle label: pending/rejected mirror the
    stored status; an approved resignation is "in-progress" until its exit
    is closed, then "completed".
    """

    resignation_id: int
    steps: Sequence[StepView]
    overall: str
    completed_steps: int
    total_steps: int


def clearance_overall(r: Resignation) -> StepProgress:
    statuses = [r.clearance_for(dept).status for dept in Department]
    if all(s == ClearanceStatus.APPROVED for s in statuses):
        return StepProgress.COMPLETED
    if any(s == ClearanceStatus.REJECTED for s in statuses):
        return StepProgress.REJECTED
    return StepProgress.IN_PROGRESS if r.is_approved else StepProgress.PENDING


def notice_period_label(r: Resignation) -> str:
    if r.notice_period_complied:
        return "Complied"
    if r.is_approved and r.notice_period_start_date and r.notice_period_end_date:
        return "In Progress"
    return "Pending"


def _flag(done: bool, in_progress: bool) -> StepProgress:
    if done:
        return StepProgress.COMPLETED
    return StepProgress.IN_PROGRESS if in_progress else StepProgress.PENDING


def resignation_step_progress(r: Resignation) -> StepProgress:
    if r.status == ResignationStatus.APPROVED:
        return StepProgress.COMPLETED
    if r.status == ResignationStatus.REJECTED:
        return StepProgress.REJECTED
    return StepProgress.PENDING


def step_progress(r: Resignation, step: ExitStep) -> StepProgress:
    approved = r.is_approved

    if step == ExitStep.NOTICE_PERIOD:
        return _flag(
            r.notice_period_complied,
            approved and bool(r.notice_period_start_date and r.notice_period_end_date),
        )
    if step == ExitStep.KNOWLEDGE_TRANSFER:
        return _flag(r.knowledge_transfer_completed, approved and bool((r.handover_notes or "").strip()))
    if step == ExitStep.ASSET_RETURN:
        return _flag(r.assets_returned, approved and len(r.assets) > 0)
    if step == ExitStep.CLEARANCES:
        return clearance_overall(r)
    if step == ExitStep.EXIT_INTERVIEW:
        return _flag(r.exit_interview_completed, approved)
    if step == ExitStep.FNF:
        if r.fnf_status == FnfStatus.COMPLETED:
            return StepProgress.COMPLETED
        return _flag(False, approved or r.fnf_status == FnfStatus.PROCESSING)
    if step == ExitStep.DOCUMENTS:
        return _flag(bool(r.exit_documents.experience_letter), approved)
    if step == ExitStep.SYSTEM_ACCESS:
        return _flag(r.system_access_deactivated, approved)
    if step == ExitStep.EXIT_CLOSURE:
        return _flag(r.exit_closed, False)
    raise ValueError(f"Unhandled exit step: {step!r}")


def overall_label(r: Resignation) -> str:
    if r.status != ResignationStatus.APPROVED:
        return r.status.value
    return "completed" if r.exit_closed else "in-progress"


def build_progress(r: Resignation) -> ExitProgress:
    steps = [StepView(step=RESIGNATION_STEP, progress=resignation_step_progress(r))]
    steps.extend(StepView(step=s.value, progress=step_progress(r, s)) for s in ExitStep)
    completed = sum(1 for s in steps if s.progress == StepProgress.COMPLETED)
    return ExitProgress(
        resignation_id=r.resignation_id,
        steps=steps,
        overall=overall_label(r),
        completed_steps=completed,
        total_steps=len(steps),
    )
