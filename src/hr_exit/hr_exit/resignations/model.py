from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Mapping, Optional, Union

from ..core.constants import INITIAL_RECORD_VERSION
from ..core.enums import ClearanceStatus, Department, ExitStep, FnfStatus, ResignationStatus


@dataclass(frozen=True)
class Clearance:
    """Sign-off of one department."""

    status: ClearanceStatus = ClearanceStatus.PENDING
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    notes: Optional[str] = None


def pending_clearances() -> dict[Department, Clearance]:
    return {dept: Clearance() for dept in Department}


@dataclass(frozen=True)
class ExitDocuments:
    experience_letter: Optional[str] = None
    relieving_letter: Optional[str] = None
    other_documents: tuple[str, ...] = ()
    uploaded_at: Optional[datetime] = None


@dataclass(frozen=True)
class Resignation:
    """One employee's resignation and the whole exit-process state.

    Pure data object: no DB access here. Each group of fields below is owned by
    exactly one exit step (see resignations.steps).
    """

    resignation_id: int
    user_id: int
    resignation_date: date
    reason: str
    status: ResignationStatus
    feedback: Optional[str] = None
    assets: tuple[str, ...] = ()

    # noticePeriod
    notice_period_start_date: Optional[date] = None
    notice_period_end_date: Optional[date] = None
    notice_period_complied: bool = False
    notice_period_complied_date: Optional[datetime] = None

    # knowledgeTransfer
    knowledge_transfer_completed: bool = False
    handover_notes: Optional[str] = None
    handover_completed_date: Optional[datetime] = None

    # assetReturn
    assets_returned: bool = False
    assets_return_date: Optional[datetime] = None
    assets_return_notes: Optional[str] = None

    # clearances
    clearances: Mapping[Department, Clearance] = field(default_factory=pending_clearances)

    # exitInterview
    exit_interview_completed: bool = False
    exit_interview_date: Optional[datetime] = None
    exit_interview_feedback: Optional[str] = None

    # fnf
    fnf_status: FnfStatus = FnfStatus.PENDING
    fnf_amount: Optional[float] = None
    fnf_processed_date: Optional[datetime] = None
    fnf_notes: Optional[str] = None

    # documents
    exit_documents: ExitDocuments = field(default_factory=ExitDocuments)

    # systemAccess
    system_access_deactivated: bool = False
    system_access_deactivated_date: Optional[datetime] = None

    # exitClosure
    exit_closed: bool = False
    exit_closed_date: Optional[datetime] = None
    exit_closed_by: Optional[int] = None

    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    version: int = INITIAL_RECORD_VERSION
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_approved(self) -> bool:
        return self.status == ResignationStatus.APPROVED

    def clearance_for(self, department: Department) -> Clearance:
        return self.clearances.get(department) or Clearance()


@dataclass(frozen=True)
class NewResignation:
    user_id: int
    resignation_date: date
    reason: str
    feedback: Optional[str]
    assets: tuple[str, ...]
    notice_period_start_date: Optional[date]
    notice_period_end_date: Optional[date]
    handover_notes: Optional[str]


# ---- Exit step updates (one variant per ExitStep) ----


@dataclass(frozen=True)
class NoticePeriodUpdate:
    completed: bool
    date: Optional[datetime] = None
    step = ExitStep.NOTICE_PERIOD


@dataclass(frozen=True)
class KnowledgeTransferUpdate:
    completed: bool
    date: Optional[datetime] = None
    notes: Optional[str] = None
    step = ExitStep.KNOWLEDGE_TRANSFER


@dataclass(frozen=True)
class AssetReturnUpdate:
    completed: bool
    date: Optional[datetime] = None
    notes: Optional[str] = None
    step = ExitStep.ASSET_RETURN


@dataclass(frozen=True)
class ClearanceUpdate:
    department: Department
    status: ClearanceStatus
    notes: Optional[str] = None
    step = ExitStep.CLEARANCES


@dataclass(frozen=True)
class ExitInterviewUpdate:
    completed: bool
    date: Optional[datetime] = None
    notes: Optional[str] = None
    step = ExitStep.EXIT_INTERVIEW


@dataclass(frozen=True)
class FnfUpdate:
    status: FnfStatus
    date: Optional[datetime] = None
    amount: Optional[float] = None
    notes: Optional[str] = None
    step = ExitStep.FNF


@dataclass(frozen=True)
class DocumentsUpdate:
    experience_letter: Optional[str] = None
    relieving_letter: Optional[str] = None
    other_documents: tuple[str, ...] = ()
    step = ExitStep.DOCUMENTS


@dataclass(frozen=True)
class SystemAccessUpdate:
    completed: bool
    date: Optional[datetime] = None
    step = ExitStep.SYSTEM_ACCESS


@dataclass(frozen=True)
class ExitClosureUpdate:
    completed: bool
    date: Optional[datetime] = None
    step = ExitStep.EXIT_CLOSURE


StepUpdate = Union[
    NoticePeriodUpdate,
    KnowledgeTransferUpdate,
    AssetReturnUpdate,
    ClearanceUpdate,
    ExitInterviewUpdate,
    FnfUpdate,
    DocumentsUpdate,
    SystemAccessUpdate,
    ExitClosureUpdate,
]
