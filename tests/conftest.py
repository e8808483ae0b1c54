from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.hr_exit.hr_exit.core.enums import ResignationStatus, Role
from src.hr_exit.hr_exit.resignations.model import NewResignation, Resignation
from src.hr_exit.hr_exit.resignations.service import ResignationService
from src.hr_exit.hr_exit.resignations.steps.base import STEP_FIELDS
from src.hr_exit.hr_exit.users.model import Employee

FIXED_NOW = datetime(2026, 3, 1, 9, 0, 0)

ADMIN_ID = 1
HR_ID = 2
EMPLOYEE_ID = 3
OTHER_EMPLOYEE_ID = 4

_WRITABLE = frozenset().union(*STEP_FIELDS.values())


class InMemoryResignations:
    def __init__(self):
        self._items: dict[int, Resignation] = {}
        self._next_id = 1
        self.writes: list[dict] = []

    def create(self, new: NewResignation) -> int:
        rid = self._next_id
        self._next_id += 1
        self._items[rid] = Resignation(
            resignation_id=rid,
            user_id=new.user_id,
            resignation_date=new.resignation_date,
            reason=new.reason,
            status=ResignationStatus.PENDING,
            feedback=new.feedback,
            assets=new.assets,
            notice_period_start_date=new.notice_period_start_date,
            notice_period_end_date=new.notice_period_end_date,
            handover_notes=new.handover_notes,
            created_at=datetime(2026, 2, 1, 10, 0, 0 + rid),
        )
        return rid

    def get(self, resignation_id: int) -> Optional[Resignation]:
        return self._items.get(int(resignation_id))

    def list(self, *, user_id=None, limit=500):
        items = [r for r in self._items.values() if user_id is None or r.user_id == user_id]
        items.sort(key=lambda r: r.created_at, reverse=True)
        return items[:limit]

    def find_pending_for_user(self, user_id: int):
        for r in self._items.values():
            if r.user_id == user_id and r.status == ResignationStatus.PENDING:
                return r
        return None

    def decide(self, *, resignation_id, status, decided_by, decided_at, rejection_reason=None):
        r = self._items.get(int(resignation_id))
        if not r or r.status != ResignationStatus.PENDING:
            return False
        self._items[r.resignation_id] = replace(
            r,
            status=status,
            approved_by=decided_by,
            approved_at=decided_at,
            rejection_reason=rejection_reason,
            version=r.version + 1,
        )
        return True

    def apply_changes(self, *, resignation_id, changes, expected_version=None):
        assert set(changes) <= _WRITABLE
        r = self._items.get(int(resignation_id))
        if not r:
            return False
        if expected_version is not None and r.version != expected_version:
            return False

        values = dict(changes)
        if "clearances" in values:
            merged = dict(r.clearances)
            merged.update(values["clearances"])
            values["clearances"] = merged
        self.writes.append(dict(changes))
        self._items[r.resignation_id] = replace(r, version=r.version + 1, **values)
        return True

    def delete(self, resignation_id: int) -> bool:
        return self._items.pop(int(resignation_id), None) is not None


class InMemoryEmployees:
    def __init__(self, employees):
        self._by_id = {e.user_id: e for e in employees}

    def get_by_id(self, user_id):
        return self._by_id.get(int(user_id))

    def get_many(self, user_ids):
        return {u: self._by_id[u] for u in user_ids if u in self._by_id}


def demo_employees():
    return [
        Employee(user_id=ADMIN_ID, full_name="Admin Demo", email="admin@example.com", role=Role.ADMIN),
        Employee(user_id=HR_ID, full_name="HR Demo", email="hr@example.com", role=Role.HR),
        Employee(
            user_id=EMPLOYEE_ID,
            full_name="Employee Demo",
            email="employee@example.com",
            role=Role.EMPLOYEE,
            emp_id="EMP0003",
            designation="Designer",
        ),
        Employee(user_id=OTHER_EMPLOYEE_ID, full_name="Other", email="other@example.com", role=Role.EMPLOYEE),
    ]


@pytest.fixture
def repo():
    return InMemoryResignations()


@pytest.fixture
def employees():
    return InMemoryEmployees(demo_employees())


@pytest.fixture
def service(repo, employees):
    return ResignationService(repo, employees, clock=lambda: FIXED_NOW)


@pytest.fixture
def pending(service):
    return service.submit(
        current_role=Role.EMPLOYEE,
        user_id=EMPLOYEE_ID,
        resignation_date=date(2026, 3, 31),
        reason="relocation",
        assets=["LAPTOP-01", " ", "BADGE-7"],
        notice_period_start_date=date(2026, 3, 1),
        notice_period_end_date=date(2026, 3, 31),
        handover_notes="Docs in wiki",
    )


@pytest.fixture
def approved(service, pending):
    return service.approve(current_role=Role.HR, actor_id=HR_ID, resignation_id=pending.resignation_id)
