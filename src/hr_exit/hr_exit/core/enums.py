from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization."""

    ADMIN = "admin"
    HR = "hr"
    EMPLOYEE = "employee"

    @property
    def manages_resignations(self) -> bool:
        return self in (Role.ADMIN, Role.HR)


class ResignationStatus(str, Enum):
    """Persisted top-level status of a resignation.

    "in-progress" and "completed" are derived labels, see resignations.progress.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ClearanceStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class FnfStatus(str, Enum):
    """Full & final settlement status."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"


class Department(str, Enum):
    """Departments that must sign off an exit.

    Add a member here to require a new clearance; every clearance map is
    built by iterating this enum.
    """

    DESIGN = "design"
    OPERATION = "operation"


class ExitStep(str, Enum):
    """The nine independently tracked exit sub-processes."""

    NOTICE_PERIOD = "noticePeriod"
    KNOWLEDGE_TRANSFER = "knowledgeTransfer"
    ASSET_RETURN = "assetReturn"
    CLEARANCES = "clearances"
    EXIT_INTERVIEW = "exitInterview"
    FNF = "fnf"
    DOCUMENTS = "documents"
    SYSTEM_ACCESS = "systemAccess"
    EXIT_CLOSURE = "exitClosure"

    @classmethod
    def parse(cls, value: str) -> "ExitStep":
        """Accept both step ids and the field names older clients send."""
        v = (value or "").strip()
        try:
            return cls(v)
        except ValueError:
            step = _LEGACY_FIELD_NAMES.get(v)
            if step is None:
                raise
            return step


_LEGACY_FIELD_NAMES = {
    "noticePeriodComplied": ExitStep.NOTICE_PERIOD,
    "knowledgeTransferCompleted": ExitStep.KNOWLEDGE_TRANSFER,
    "assetsReturned": ExitStep.ASSET_RETURN,
    "clearance": ExitStep.CLEARANCES,
    "exitInterviewCompleted": ExitStep.EXIT_INTERVIEW,
    "fnfStatus": ExitStep.FNF,
    "exitDocuments": ExitStep.DOCUMENTS,
    "systemAccessDeactivated": ExitStep.SYSTEM_ACCESS,
    "exitClosed": ExitStep.EXIT_CLOSURE,
}


class StepProgress(str, Enum):
    """Derived per-step badge."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    REJECTED = "rejected"
