"""Attendance sessions, marking and per-student analytics."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from threading import Lock
from typing import Iterable

from greenpath_app.core.models import AttendanceRecord, AttendanceSession, RecordChange
from greenpath_app.core.services.record_changes import RecordChangeRegistry

logger = logging.getLogger(__name__)

SESSIONS_TABLE = "attendance_sessions"
RECORDS_TABLE = "attendance_records"
ATTENDANCE_STATUSES: tuple[str, ...] = ("present", "late", "absent")
GOOD_RATE = 80.0
WARNING_RATE = 60.0
AT_RISK_RATE = 70.0


@dataclass(frozen=True, slots=True)
class StudentAttendance:
    student_id: str
    present: int
    late: int
    absent: int
    total: int
    attendance_rate: float
    punctuality_rate: float
    status: str  # good | warning | critical


@dataclass(frozen=True, slots=True)
class AttendanceReport:
    students: list[StudentAttendance]
    at_risk: list[StudentAttendance]
    present: int
    late: int
    absent: int
    attendance_rate: float
    punctuality_rate: float


def _rates(present: int, late: int, total: int) -> tuple[float, float]:
    if total == 0:
        return 0.0, 0.0
    return (present + late) / total * 100, present / total * 100


def summarize_student(student_id: str, records: Iterable[AttendanceRecord]) -> StudentAttendance:
    statuses = [r.status for r in records if r.student_id == student_id]
    present = statuses.count("present")
    late = statuses.count("late")
    absent = statuses.count("absent")
    total = present + late + absent
    attendance_rate, punctuality_rate = _rates(present, late, total)
    if attendance_rate >= GOOD_RATE:
        status = "good"
    elif attendance_rate >= WARNING_RATE:
        status = "warning"
    else:
        status = "critical"
    return StudentAttendance(
        student_id=student_id,
        present=present,
        late=late,
        absent=absent,
        total=total,
        attendance_rate=attendance_rate,
        punctuality_rate=punctuality_rate,
        status=status,
    )


def build_report(student_ids: Iterable[str], records: list[AttendanceRecord]) -> AttendanceReport:
    students = sorted(
        (summarize_student(student_id, records) for student_id in student_ids),
        key=lambda s: -s.attendance_rate,
    )
    present = sum(1 for r in records if r.status == "present")
    late = sum(1 for r in records if r.status == "late")
    absent = sum(1 for r in records if r.status == "absent")
    attendance_rate, punctuality_rate = _rates(present, late, present + late + absent)
    return AttendanceReport(
        students=students,
        at_risk=[s for s in students if s.total > 0 and s.attendance_rate < AT_RISK_RATE],
        present=present,
        late=late,
        absent=absent,
        attendance_rate=attendance_rate,
        punctuality_rate=punctuality_rate,
    )


class AttendanceBook:
    """Keeps sessions and one record per student per session."""

    def __init__(self, changes: RecordChangeRegistry) -> None:
        self._lock = Lock()
        self._changes = changes
        self._sessions: dict[str, AttendanceSession] = {}
        self._records: dict[tuple[str, str], AttendanceRecord] = {}

    def create_session(self, name: str, session_date: date, created_by: str) -> AttendanceSession:
        if not name.strip():
            raise ValueError("Session name cannot be empty.")
        session = AttendanceSession(
            id=uuid.uuid4().hex,
            name=name.strip(),
            session_date=session_date,
            created_by=created_by,
        )
        with self._lock:
            self._sessions[session.id] = session
        logger.info("Attendance session %s (%s) opened by %s", session.id, session.name, created_by)
        self._changes.publish(RecordChange(table=SESSIONS_TABLE, event="INSERT", record=session))
        return session

    def set_active(self, session_id: str, is_active: bool) -> AttendanceSession:
        with self._lock:
            session = replace(self._require_session(session_id), is_active=is_active)
            self._sessions[session_id] = session
        self._changes.publish(RecordChange(table=SESSIONS_TABLE, event="UPDATE", record=session))
        return session

    def get_session(self, session_id: str) -> AttendanceSession:
        with self._lock:
            return self._require_session(session_id)

    def list_sessions(self) -> list[AttendanceSession]:
        with self._lock:
            return sorted(self._sessions.values(), key=lambda s: s.session_date, reverse=True)

    def mark(
        self, session_id: str, student_id: str, status: str, marked_by: str, marked_at: datetime
    ) -> AttendanceRecord:
        """Record a student's status; marking again updates the existing record."""
        if status not in ATTENDANCE_STATUSES:
            raise ValueError(f"Unknown attendance status {status!r}")
        with self._lock:
            self._require_session(session_id)
            key = (session_id, student_id)
            event = "UPDATE" if key in self._records else "INSERT"
            record = AttendanceRecord(
                session_id=session_id,
                student_id=student_id,
                status=status,
                marked_by=marked_by,
                marked_at=marked_at,
            )
            self._records[key] = record
        self._changes.publish(RecordChange(table=RECORDS_TABLE, event=event, record=record))
        return record

    def mark_all_present(
        self, session_id: str, student_ids: Iterable[str], marked_by: str, marked_at: datetime
    ) -> list[AttendanceRecord]:
        """Mark every not-yet-marked student present; existing marks are kept."""
        with self._lock:
            self._require_session(session_id)
            unmarked = [s for s in student_ids if (session_id, s) not in self._records]
        return [self.mark(session_id, s, "present", marked_by, marked_at) for s in unmarked]

    def records_for_session(self, session_id: str) -> list[AttendanceRecord]:
        with self._lock:
            return [r for (sid, _), r in self._records.items() if sid == session_id]

    def all_records(self) -> list[AttendanceRecord]:
        with self._lock:
            return list(self._records.values())

    def _require_session(self, session_id: str) -> AttendanceSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise KeyError(f"Unknown attendance session {session_id}") from None
