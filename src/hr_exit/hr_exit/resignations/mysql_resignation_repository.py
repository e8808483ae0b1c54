from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import ClearanceStatus, Department, FnfStatus, ResignationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Clearance, ExitDocuments, NewResignation, Resignation, pending_clearances
from .repository import ResignationRepository
from .steps.base import STEP_FIELDS

_COLUMNS = """
    resignation_id, user_id, resignation_date, reason, feedback, assets, status,
    notice_period_start_date, notice_period_end_date, notice_period_complied, notice_period_complied_date,
    knowledge_transfer_completed, handover_notes, handover_completed_date,
    assets_returned, assets_return_date, assets_return_notes,
    clearances,
    exit_interview_completed, exit_interview_date, exit_interview_feedback,
    fnf_status, fnf_amount, fnf_processed_date, fnf_notes,
    exit_documents,
    system_access_deactivated, system_access_deactivated_date,
    exit_closed, exit_closed_date, exit_closed_by,
    approved_by, approved_at, rejection_reason,
    version, created_at, updated_at
"""

# Only step-owned columns may be written through apply_changes.
_WRITABLE_COLUMNS = frozenset().union(*STEP_FIELDS.values())


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_iso(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _load_json(value: Any, default: Any) -> Any:
    if value is None:
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value) if value else default
    return value


def clearance_to_doc(c: Clearance) -> dict:
    return {
        "status": c.status.value,
        "approvedBy": c.approved_by,
        "approvedAt": _iso(c.approved_at),
        "notes": c.notes,
    }


def clearance_from_doc(doc: Mapping[str, Any]) -> Clearance:
    return Clearance(
        status=ClearanceStatus(doc.get("status") or ClearanceStatus.PENDING.value),
        approved_by=doc.get("approvedBy"),
        approved_at=_parse_iso(doc.get("approvedAt")),
        notes=doc.get("notes"),
    )


def clearances_from_doc(doc: Mapping[str, Any]) -> dict[Department, Clearance]:
    out = pending_clearances()
    for key, value in (doc or {}).items():
        try:
            dept = Department(key)
        except ValueError:
            # Department removed from the enum; keep reading old rows.
            continue
        out[dept] = clearance_from_doc(value or {})
    return out


def documents_to_doc(d: ExitDocuments) -> dict:
    return {
        "experienceLetter": d.experience_letter,
        "relievingLetter": d.relieving_letter,
        "otherDocuments": list(d.other_documents),
        "uploadedAt": _iso(d.uploaded_at),
    }


def documents_from_doc(doc: Mapping[str, Any]) -> ExitDocuments:
    doc = doc or {}
    return ExitDocuments(
        experience_letter=doc.get("experienceLetter"),
        relieving_letter=doc.get("relievingLetter"),
        other_documents=tuple(doc.get("otherDocuments") or ()),
        uploaded_at=_parse_iso(doc.get("uploadedAt")),
    )


def _to_db_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, ExitDocuments):
        return json.dumps(documents_to_doc(value))
    return value


def _row_to_resignation(r: dict) -> Resignation:
    return Resignation(
        resignation_id=int(r["resignation_id"]),
        user_id=int(r["user_id"]),
        resignation_date=r["resignation_date"],
        reason=r["reason"],
        status=ResignationStatus(r["status"]),
        feedback=r.get("feedback"),
        assets=tuple(_load_json(r.get("assets"), [])),
        notice_period_start_date=r.get("notice_period_start_date"),
        notice_period_end_date=r.get("notice_period_end_date"),
        notice_period_complied=bool(r.get("notice_period_complied")),
        notice_period_complied_date=r.get("notice_period_complied_date"),
        knowledge_transfer_completed=bool(r.get("knowledge_transfer_completed")),
        handover_notes=r.get("handover_notes"),
        handover_completed_date=r.get("handover_completed_date"),
        assets_returned=bool(r.get("assets_returned")),
        assets_return_date=r.get("assets_return_date"),
        assets_return_notes=r.get("assets_return_notes"),
        clearances=clearances_from_doc(_load_json(r.get("clearances"), {})),
        exit_interview_completed=bool(r.get("exit_interview_completed")),
        exit_interview_date=r.get("exit_interview_date"),
        exit_interview_feedback=r.get("exit_interview_feedback"),
        fnf_status=FnfStatus(r.get("fnf_status") or FnfStatus.PENDING.value),
        fnf_amount=float(r["fnf_amount"]) if r.get("fnf_amount") is not None else None,
        fnf_processed_date=r.get("fnf_processed_date"),
        fnf_notes=r.get("fnf_notes"),
        exit_documents=documents_from_doc(_load_json(r.get("exit_documents"), {})),
        system_access_deactivated=bool(r.get("system_access_deactivated")),
        system_access_deactivated_date=r.get("system_access_deactivated_date"),
        exit_closed=bool(r.get("exit_closed")),
        exit_closed_date=r.get("exit_closed_date"),
        exit_closed_by=r.get("exit_closed_by"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        rejection_reason=r.get("rejection_reason"),
        version=int(r.get("version") or 1),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLResignationRepository(ResignationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, new: NewResignation) -> int:
        clearances = {d.value: clearance_to_doc(c) for d, c in pending_clearances().items()}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO resignations(
                    user_id, resignation_date, reason, feedback, assets,
                    notice_period_start_date, notice_period_end_date, handover_notes,
                    clearances, exit_documents, status, fnf_status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(new.user_id),
                    new.resignation_date,
                    new.reason,
                    new.feedback,
                    json.dumps(list(new.assets)),
                    new.notice_period_start_date,
                    new.notice_period_end_date,
                    new.handover_notes,
                    json.dumps(clearances),
                    json.dumps(documents_to_doc(ExitDocuments())),
                    ResignationStatus.PENDING.value,
                    FnfStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get(self, resignation_id: int) -> Optional[Resignation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM resignations WHERE resignation_id=%s", (int(resignation_id),))
            row = fetchone(cur)
            return _row_to_resignation(row) if row else None

    def list(self, *, user_id: Optional[int] = None, limit: int = 500) -> Sequence[Resignation]:
        clauses = ["1=1"]
        params: list[object] = []
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM resignations
                WHERE {where}
                ORDER BY created_at DESC, resignation_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_row_to_resignation(r) for r in fetchall(cur)]

    def find_pending_for_user(self, user_id: int) -> Optional[Resignation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM resignations WHERE user_id=%s AND status=%s LIMIT 1",
                (int(user_id), ResignationStatus.PENDING.value),
            )
            row = fetchone(cur)
            return _row_to_resignation(row) if row else None

    def decide(
        self,
        *,
        resignation_id: int,
        status: ResignationStatus,
        decided_by: int,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE resignations
                SET status=%s, approved_by=%s, approved_at=%s, rejection_reason=%s, version=version+1
                WHERE resignation_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    decided_at,
                    rejection_reason,
                    int(resignation_id),
                    ResignationStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def apply_changes(
        self,
        *,
        resignation_id: int,
        changes: Mapping[str, Any],
        expected_version: Optional[int] = None,
    ) -> bool:
        unknown = set(changes) - _WRITABLE_COLUMNS
        if unknown:
            raise ValueError(f"Columns not writable: {', '.join(sorted(unknown))}")

        sets: list[str] = []
        params: list[object] = []
        for column, value in changes.items():
            if column == "clearances":
                # JSON_SET per department path: concurrent sign-offs of other departments survive.
                paths: list[str] = []
                for dept, clearance in value.items():
                    paths.append("%s, CAST(%s AS JSON)")
                    params.extend([f"$.{Department(dept).value}", json.dumps(clearance_to_doc(clearance))])
                sets.append(f"clearances=JSON_SET(COALESCE(clearances, JSON_OBJECT()), {', '.join(paths)})")
                continue
            sets.append(f"{column}=%s")
            params.append(_to_db_value(value))
        sets.append("version=version+1")

        sql = f"UPDATE resignations SET {', '.join(sets)} WHERE resignation_id=%s"
        params.append(int(resignation_id))
        if expected_version is not None:
            sql += " AND version=%s"
            params.append(int(expected_version))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0

    def delete(self, resignation_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM resignations WHERE resignation_id=%s", (int(resignation_id),))
            return cur.rowcount > 0
