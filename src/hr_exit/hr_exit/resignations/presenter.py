from __future__ import annotations

from typing import Any, Optional

from ..common.datetime_utils import to_iso
from ..users.model import Employee
from .model import Clearance, Resignation
from .progress import ExitProgress, clearance_overall, notice_period_label


def _clearance_json(c: Clearance) -> dict:
    return {
        "status": c.status.value,
        "approvedBy": c.approved_by,
        "approvedAt": to_iso(c.approved_at),
        "notes": c.notes,
    }


def employee_json(e: Employee) -> dict:
    return {
        "userId": e.user_id,
        "fullName": e.full_name,
        "email": e.email,
        "empId": e.emp_id,
        "designation": e.designation,
    }


def resignation_json(r: Resignation, employee: Optional[Employee] = None) -> dict[str, Any]:
    """JSON shape returned by the API (camelCase, ISO dates)."""

    docs = r.exit_documents
    out: dict[str, Any] = {
        "id": r.resignation_id,
        "userId": r.user_id,
        "resignationDate": to_iso(r.resignation_date),
        "reason": r.reason,
        "feedback": r.feedback,
        "assets": list(r.assets),
        "status": r.status.value,
        "noticePeriodStartDate": to_iso(r.notice_period_start_date),
        "noticePeriodEndDate": to_iso(r.notice_period_end_date),
        "noticePeriodComplied": r.notice_period_complied,
        "noticePeriodCompliedDate": to_iso(r.notice_period_complied_date),
        "knowledgeTransferCompleted": r.knowledge_transfer_completed,
        "handoverNotes": r.handover_notes,
        "handoverCompletedDate": to_iso(r.handover_completed_date),
        "assetsReturned": r.assets_returned,
        "assetsReturnDate": to_iso(r.assets_return_date),
        "assetsReturnNotes": r.assets_return_notes,
        "clearances": {dept.value: _clearance_json(c) for dept, c in r.clearances.items()},
        "exitInterviewCompleted": r.exit_interview_completed,
        "exitInterviewDate": to_iso(r.exit_interview_date),
        "exitInterviewFeedback": r.exit_interview_feedback,
        "fnfStatus": r.fnf_status.value,
        "fnfAmount": r.fnf_amount,
        "fnfProcessedDate": to_iso(r.fnf_processed_date),
        "fnfNotes": r.fnf_notes,
        "exitDocuments": {
            "experienceLetter": docs.experience_letter,
            "relievingLetter": docs.relieving_letter,
            "otherDocuments": list(docs.other_documents),
            "uploadedAt": to_iso(docs.uploaded_at),
        },
        "systemAccessDeactivated": r.system_access_deactivated,
        "systemAccessDeactivatedDate": to_iso(r.system_access_deactivated_date),
        "exitClosed": r.exit_closed,
        "exitClosedDate": to_iso(r.exit_closed_date),
        "exitClosedBy": r.exit_closed_by,
        "approvedBy": r.approved_by,
        "approvedAt": to_iso(r.approved_at),
        "rejectionReason": r.rejection_reason,
        "version": r.version,
        "createdAt": to_iso(r.created_at),
        "updatedAt": to_iso(r.updated_at),
        # Derived, for list badges.
        "clearanceStatus": clearance_overall(r).value,
        "noticePeriodStatus": notice_period_label(r),
    }
    if employee is not None:
        out["employee"] = employee_json(employee)
    return out


def progress_json(p: ExitProgress) -> dict[str, Any]:
    return {
        "id": p.resignation_id,
        "overall": p.overall,
        "completedSteps": p.completed_steps,
        "totalSteps": p.total_steps,
        "steps": [{"step": s.step, "status": s.progress.value} for s in p.steps],
    }
