from dataclasses import replace
from datetime import date

from src.hr_exit.hr_exit.core.enums import (
    ClearanceStatus,
    Department,
    ExitStep,
    FnfStatus,
    ResignationStatus,
    StepProgress,
)
from src.hr_exit.hr_exit.resignations.model import Clearance, ExitDocuments, Resignation
from src.hr_exit.hr_exit.resignations.progress import (
    RESIGNATION_STEP,
    build_progress,
    clearance_overall,
    notice_period_label,
    step_progress,
)


def _resignation(**kwargs) -> Resignation:
    base = Resignation(
        resignation_id=7,
        user_id=3,
        resignation_date=date(2026, 3, 31),
        reason="relocation",
        status=ResignationStatus.PENDING,
    )
    return replace(base, **kwargs)


def test_pending_resignation_has_everything_pending():
    p = build_progress(_resignation())

    assert p.overall == "pending"
    assert p.total_steps == 10
    assert p.completed_steps == 0
    assert p.steps[0].step == RESIGNATION_STEP
    assert [s.step for s in p.steps[1:]] == [s.value for s in ExitStep]
    assert all(s.progress == StepProgress.PENDING for s in p.steps)


def test_rejected_resignation_is_labelled_rejected():
    p = build_progress(_resignation(status=ResignationStatus.REJECTED, rejection_reason="no"))

    assert p.overall == "rejected"
    assert p.steps[0].progress == StepProgress.REJECTED


def test_approved_resignation_is_in_progress_until_closed():
    r = _resignation(status=ResignationStatus.APPROVED)
    assert build_progress(r).overall == "in-progress"

    closed = build_progress(replace(r, exit_closed=True))
    assert closed.overall == "completed"
    # Closing does not complete the other steps.
    assert closed.completed_steps == 2


def test_approved_resignation_activates_steps():
    r = _resignation(
        status=ResignationStatus.APPROVED,
        assets=("LAPTOP-01",),
        handover_notes="wiki",
        notice_period_start_date=date(2026, 3, 1),
        notice_period_end_date=date(2026, 3, 31),
    )

    for step in ExitStep:
        expected = StepProgress.PENDING if step == ExitStep.EXIT_CLOSURE else StepProgress.IN_PROGRESS
        assert step_progress(r, step) == expected, step


def test_steps_without_inputs_stay_pending_after_approval():
    r = _resignation(status=ResignationStatus.APPROVED)

    assert step_progress(r, ExitStep.NOTICE_PERIOD) == StepProgress.PENDING
    assert step_progress(r, ExitStep.KNOWLEDGE_TRANSFER) == StepProgress.PENDING
    assert step_progress(r, ExitStep.ASSET_RETURN) == StepProgress.PENDING


def test_fnf_processing_is_in_progress_even_before_approval():
    r = _resignation(fnf_status=FnfStatus.PROCESSING)
    assert step_progress(r, ExitStep.FNF) == StepProgress.IN_PROGRESS
    assert step_progress(replace(r, fnf_status=FnfStatus.COMPLETED), ExitStep.FNF) == StepProgress.COMPLETED


def test_documents_complete_with_experience_letter():
    r = _resignation(exit_documents=ExitDocuments(relieving_letter="u2"))
    assert step_progress(r, ExitStep.DOCUMENTS) == StepProgress.PENDING

    r = replace(r, exit_documents=ExitDocuments(experience_letter="u1"))
    assert step_progress(r, ExitStep.DOCUMENTS) == StepProgress.COMPLETED


def test_clearance_overall_rules():
    approved = Clearance(status=ClearanceStatus.APPROVED)
    rejected = Clearance(status=ClearanceStatus.REJECTED)
    r = _resignation(status=ResignationStatus.APPROVED)

    assert clearance_overall(r) == StepProgress.IN_PROGRESS
    assert clearance_overall(replace(r, clearances={Department.DESIGN: approved})) == StepProgress.IN_PROGRESS
    assert (
        clearance_overall(replace(r, clearances={Department.DESIGN: approved, Department.OPERATION: rejected}))
        == StepProgress.REJECTED
    )
    assert clearance_overall(replace(r, clearances={d: approved for d in Department})) == StepProgress.COMPLETED


def test_notice_period_labels():
    r = _resignation()
    assert notice_period_label(r) == "Pending"

    r = replace(
        r,
        status=ResignationStatus.APPROVED,
        notice_period_start_date=date(2026, 3, 1),
        notice_period_end_date=date(2026, 3, 31),
    )
    assert notice_period_label(r) == "In Progress"
    assert notice_period_label(replace(r, notice_period_complied=True)) == "Complied"


def test_fully_processed_exit_counts_every_step():
    r = _resignation(
        status=ResignationStatus.APPROVED,
        notice_period_complied=True,
        knowledge_transfer_completed=True,
        assets_returned=True,
        clearances={d: Clearance(status=ClearanceStatus.APPROVED) for d in Department},
        exit_interview_completed=True,
        fnf_status=FnfStatus.COMPLETED,
        exit_documents=ExitDocuments(experience_letter="u1"),
        system_access_deactivated=True,
        exit_closed=True,
    )
    p = build_progress(r)

    assert p.completed_steps == p.total_steps == 10
    assert p.overall == "completed"
