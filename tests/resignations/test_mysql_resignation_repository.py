import json
from datetime import date, datetime

import pytest

from src.hr_exit.hr_exit.core.enums import ClearanceStatus, Department, FnfStatus, ResignationStatus
from src.hr_exit.hr_exit.resignations.model import Clearance, ExitDocuments, NewResignation
from src.hr_exit.hr_exit.resignations.mysql_resignation_repository import (
    MySQLResignationRepository,
    _row_to_resignation,
)


class FakeCursor:
    def __init__(self, rows=None, rowcount=1):
        self.rows = list(rows or [])
        self.rowcount = rowcount
        self.lastrowid = 11
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return self.rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, cursor):
        self.cursor = cursor
        self.connections = []

    def connect(self):
        conn = FakeConnection(self.cursor)
        self.connections.append(conn)
        return conn


def _row(**overrides):
    row = {
        "resignation_id": 5,
        "user_id": 3,
        "resignation_date": date(2026, 3, 31),
        "reason": "relocation",
        "status": "approved",
        "assets": '["LAPTOP-01"]',
        "clearances": json.dumps(
            {
                "design": {"status": "approved", "approvedBy": 2, "approvedAt": "2026-03-01T09:00:00", "notes": None},
                "finance": {"status": "approved"},
            }
        ),
        "fnf_status": "processing",
        "fnf_amount": None,
        "exit_documents": None,
        "version": 4,
    }
    row.update(overrides)
    return row


def test_row_mapping_reads_json_columns():
    r = _row_to_resignation(_row())

    assert r.status == ResignationStatus.APPROVED
    assert r.assets == ("LAPTOP-01",)
    assert r.fnf_status == FnfStatus.PROCESSING
    assert r.version == 4
    assert r.exit_documents == ExitDocuments()
    # Unknown departments in old rows are ignored, missing ones default to pending.
    assert set(r.clearances) == set(Department)
    assert r.clearance_for(Department.DESIGN).approved_at == datetime(2026, 3, 1, 9, 0, 0)
    assert r.clearance_for(Department.OPERATION).status == ClearanceStatus.PENDING


def test_get_returns_none_when_missing():
    repo = MySQLResignationRepository(FakeConnFactory(FakeCursor(rows=[])))
    assert repo.get(1) is None


def test_create_returns_new_id_and_commits():
    factory = FakeConnFactory(FakeCursor())
    repo = MySQLResignationRepository(factory)

    rid = repo.create(
        NewResignation(
            user_id=3,
            resignation_date=date(2026, 3, 31),
            reason="relocation",
            feedback=None,
            assets=("LAPTOP-01",),
            notice_period_start_date=None,
            notice_period_end_date=None,
            handover_notes=None,
        )
    )

    assert rid == 11
    assert factory.connections[0].committed
    _, params = factory.cursor.executed[0]
    assert json.loads(params[4]) == ["LAPTOP-01"]
    assert set(json.loads(params[8])) == {d.value for d in Department}


def test_apply_changes_sets_single_department_with_version_guard():
    cursor = FakeCursor()
    repo = MySQLResignationRepository(FakeConnFactory(cursor))

    ok = repo.apply_changes(
        resignation_id=5,
        changes={"clearances": {Department.DESIGN: Clearance(status=ClearanceStatus.APPROVED, approved_by=2)}},
        expected_version=4,
    )

    assert ok
    sql, params = cursor.executed[0]
    assert "JSON_SET(COALESCE(clearances, JSON_OBJECT()), %s, CAST(%s AS JSON))" in sql
    assert "version=version+1" in sql
    assert sql.endswith("WHERE resignation_id=%s AND version=%s")
    assert params[0] == "$.design"
    assert json.loads(params[1])["status"] == "approved"
    assert params[-2:] == (5, 4)


def test_apply_changes_serializes_enums_and_documents():
    cursor = FakeCursor()
    repo = MySQLResignationRepository(FakeConnFactory(cursor))

    repo.apply_changes(resignation_id=5, changes={"fnf_status": FnfStatus.COMPLETED})
    repo.apply_changes(resignation_id=5, changes={"exit_documents": ExitDocuments(experience_letter="u1")})

    assert cursor.executed[0][1] == ("completed", 5)
    assert json.loads(cursor.executed[1][1][0])["experienceLetter"] == "u1"


def test_apply_changes_refuses_non_step_columns():
    cursor = FakeCursor()
    repo = MySQLResignationRepository(FakeConnFactory(cursor))

    with pytest.raises(ValueError):
        repo.apply_changes(resignation_id=5, changes={"status": "approved"})
    assert cursor.executed == []


def test_no_matching_row_reports_false():
    repo = MySQLResignationRepository(FakeConnFactory(FakeCursor(rowcount=0)))

    assert repo.apply_changes(resignation_id=5, changes={"exit_closed": True}, expected_version=1) is False
    assert repo.delete(5) is False


def test_failed_statement_rolls_back():
    class BrokenCursor(FakeCursor):
        def execute(self, sql, params=None):
            raise RuntimeError("boom")

    factory = FakeConnFactory(BrokenCursor())
    repo = MySQLResignationRepository(factory)

    with pytest.raises(RuntimeError):
        repo.delete(5)
    assert factory.connections[0].rolled_back
    assert not factory.connections[0].committed
