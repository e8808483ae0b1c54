from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import normalize_string_list, optional_text
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import ExitStep, ResignationStatus, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..users.repository import EmployeeRepository
from .factory import ExitStepFactory
from .model import NewResignation, Resignation
from .progress import ExitProgress, build_progress
from .repository import ResignationRepository

logger = logging.getLogger(__name__)


class ResignationService:
    """Resignation lifecycle: submit -> approve/reject -> exit steps.

    Top-level transitions are pending -> approved and pending -> rejected. After
    that each exit step is updated independently, in any order, as often as
    needed. "completed" is never stored, it is derived from exit closure.
    """

    def __init__(
        self,
        resignations: ResignationRepository,
        employees: EmployeeRepository | None = None,
        *,
        step_factory: ExitStepFactory | None = None,
        require_approval_for_steps: bool = False,
        clock: Callable[[], datetime] = now_local,
    ):
        self._resignations = resignations
        self._employees = employees
        self._steps = step_factory or ExitStepFactory()
        self._require_approval = bool(require_approval_for_steps)
        self._clock = clock

    # ---- queries ----

    def get(self, resignation_id: int) -> Resignation:
        r = self._resignations.get(int(resignation_id))
        if not r:
            raise NotFoundError("Resignation not found")
        return r

    def get_for(self, *, current_role: Role, user_id: int, resignation_id: int) -> Resignation:
        r = self.get(resignation_id)
        if not current_role.manages_resignations and r.user_id != int(user_id):
            raise AuthorizationError("You can only view your own resignations")
        return r

    def list_for(self, *, current_role: Role, user_id: int, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[Resignation]:
        if current_role.manages_resignations:
            return self._resignations.list(limit=limit)
        return self._resignations.list(user_id=int(user_id), limit=limit)

    def progress(self, *, current_role: Role, user_id: int, resignation_id: int) -> ExitProgress:
        return build_progress(self.get_for(current_role=current_role, user_id=user_id, resignation_id=resignation_id))

    # ---- submission ----

    def submit(
        self,
        *,
        current_role: Role,
        user_id: int,
        resignation_date: Optional[date],
        reason: str,
        feedback: str = "",
        assets: Iterable[str] | str | None = (),
        notice_period_start_date: Optional[date] = None,
        notice_period_end_date: Optional[date] = None,
        handover_notes: str = "",
    ) -> Resignation:
        if current_role != Role.EMPLOYEE:
            raise AuthorizationError("Only employees can submit resignations")

        reason = optional_text(reason, "Reason", max_len=None)
        if not resignation_date or not reason:
            raise ValidationError("Resignation date and reason are required")

        if notice_period_start_date and notice_period_end_date and notice_period_end_date < notice_period_start_date:
            raise ValidationError("Notice period end date cannot be before its start date")

        if self._employees is not None and not self._employees.get_by_id(int(user_id)):
            raise ValidationError("Employee not found")

        if self._resignations.find_pending_for_user(int(user_id)):
            raise ValidationError("You already have a pending resignation request")

        new = NewResignation(
            user_id=int(user_id),
            resignation_date=resignation_date,
            reason=reason,
            feedback=optional_text(feedback, "Feedback"),
            assets=tuple(normalize_string_list(assets)),
            notice_period_start_date=notice_period_start_date,
            notice_period_end_date=notice_period_end_date,
            handover_notes=optional_text(handover_notes, "Handover notes"),
        )
        resignation_id = self._resignations.create(new)
        logger.info("Resignation %s submitted by user %s", resignation_id, user_id)
        return self.get(resignation_id)

    # ---- approval ----

    def decide(
        self,
        *,
        current_role: Role,
        actor_id: int,
        resignation_id: int,
        status: str,
        rejection_reason: Optional[str] = None,
    ) -> Resignation:
        self._require_manager(current_role, "Only admin and HR can manage resignations")
        try:
            target = ResignationStatus(str(status or "").strip())
        except ValueError:
            target = None
        if target == ResignationStatus.APPROVED:
            return self.approve(current_role=current_role, actor_id=actor_id, resignation_id=resignation_id)
        if target == ResignationStatus.REJECTED:
            return self.reject(
                current_role=current_role,
                actor_id=actor_id,
                resignation_id=resignation_id,
                rejection_reason=rejection_reason,
            )
        raise ValidationError("Valid status (approved/rejected) is required")

    def approve(self, *, current_role: Role, actor_id: int, resignation_id: int) -> Resignation:
        self._require_manager(current_role, "Only admin and HR can manage resignations")
        return self._decide(
            actor_id=actor_id,
            resignation_id=resignation_id,
            status=ResignationStatus.APPROVED,
            rejection_reason=None,
        )

    def reject(
        self,
        *,
        current_role: Role,
        actor_id: int,
        resignation_id: int,
        rejection_reason: str,
    ) -> Resignation:
        self._require_manager(current_role, "Only admin and HR can manage resignations")
        rejection_reason = optional_text(rejection_reason, "Rejection reason", max_len=None)
        if not rejection_reason:
            raise ValidationError("Rejection reason is required when rejecting a resignation")
        return self._decide(
            actor_id=actor_id,
            resignation_id=resignation_id,
            status=ResignationStatus.REJECTED,
            rejection_reason=rejection_reason,
        )

    def _decide(
        self,
        *,
        actor_id: int,
        resignation_id: int,
        status: ResignationStatus,
        rejection_reason: Optional[str],
    ) -> Resignation:
        current = self.get(resignation_id)
        if current.status != ResignationStatus.PENDING:
            raise ValidationError("Resignation has already been processed")

        ok = self._resignations.decide(
            resignation_id=current.resignation_id,
            status=status,
            decided_by=int(actor_id),
            decided_at=self._clock(),
            rejection_reason=rejection_reason,
        )
        if not ok:
            # Someone else decided it between our read and write.
            raise ValidationError("Resignation has already been processed")

        logger.info("Resignation %s %s by user %s", current.resignation_id, status.value, actor_id)
        return self.get(current.resignation_id)

    # ---- exit process ----

    def update_exit_step(
        self,
        *,
        current_role: Role,
        actor_id: int,
        resignation_id: int,
        step: ExitStep | str,
        payload: Mapping[str, Any],
        expected_version: Optional[int] = None,
    ) -> Resignation:
        self._require_manager(current_role, "Only admin and HR can update exit process")

        if not isinstance(step, ExitStep):
            try:
                step = ExitStep.parse(step)
            except ValueError:
                raise ValidationError("Invalid field")

        handler = self._steps.for_step(step)
        update = handler.parse(payload or {})

        current = self.get(resignation_id)
        if self._require_approval and not current.is_approved:
            raise ValidationError("Exit process can only be updated for approved resignations")
        if expected_version is not None and int(expected_version) != current.version:
            raise ConflictError("Resignation was modified by someone else, reload and try again")

        changes = handler.changes(update, current=current, actor_id=int(actor_id), now=self._clock())
        foreign = set(changes) - handler.owned_fields
        if foreign:
            raise RuntimeError(f"{step.value} step tried to write {sorted(foreign)}")

        ok = self._resignations.apply_changes(
            resignation_id=current.resignation_id,
            changes=changes,
            expected_version=expected_version,
        )
        if not ok:
            if expected_version is not None:
                raise ConflictError("Resignation was modified by someone else, reload and try again")
            raise NotFoundError("Resignation not found")

        logger.info("Resignation %s: %s updated by user %s", current.resignation_id, step.value, actor_id)
        return self.get(current.resignation_id)

    # ---- deletion ----

    def delete(self, *, current_role: Role, actor_id: int, resignation_id: int) -> None:
        current = self.get(resignation_id)

        if current_role == Role.EMPLOYEE:
            if current.user_id != int(actor_id):
                raise AuthorizationError("You can only delete your own resignations")
            if current.status != ResignationStatus.PENDING:
                raise ValidationError("You can only delete pending resignations")
        elif not current_role.manages_resignations:
            raise AuthorizationError("Unauthorized to delete resignations")

        if not self._resignations.delete(current.resignation_id):
            raise NotFoundError("Resignation not found")
        logger.info("Resignation %s deleted by user %s", current.resignation_id, actor_id)

    @staticmethod
    def _require_manager(current_role: Role, message: str) -> None:
        if not current_role.manages_resignations:
            raise AuthorizationError(message)
