from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import ResignationStatus
from .model import NewResignation, Resignation


class ResignationRepository(Protocol):
    def create(self, new: NewResignation) -> int:
        raise NotImplementedError

    def get(self, resignation_id: int) -> Optional[Resignation]:
        raise NotImplementedError

    def list(self, *, user_id: Optional[int] = None, limit: int = 500) -> Sequence[Resignation]:
        """Newest first."""

        raise NotImplementedError

    def find_pending_for_user(self, user_id: int) -> Optional[Resignation]:
        raise NotImplementedError

    def decide(
        self,
        *,
        resignation_id: int,
        status: ResignationStatus,
        decided_by: int,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Move a *pending* resignation to approved/rejected. False if it was not pending."""

        raise NotImplementedError

    def apply_changes(
        self,
        *,
        resignation_id: int,
        changes: Mapping[str, Any],
        expected_version: Optional[int] = None,
    ) -> bool:
        """Write only the given fields.

        A "clearances" value is a partial {Department: Clearance} map merged per
        department. Returns False when the row is missing or its version differs
        from expected_version.
        """

        raise NotImplementedError

    def delete(self, resignation_id: int) -> bool:
        raise NotImplementedError
