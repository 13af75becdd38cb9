from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from ..common.datetime_utils import require_iso_date
from ..common.validators import optional_text, require_non_empty
from ..core.constants import EMPTY_SUBJECT_NAME
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class StudentStatusEntry:
    """One (student, status) pair as submitted by the teacher."""

    student_id: str
    status: AttendanceStatus


@dataclass(frozen=True)
class RecordAttendanceRequest:
    teacher_id: str
    date_attendance: date
    feedback: str
    students: tuple[StudentStatusEntry, ...]

    @classmethod
    def from_payload(cls, payload: Any) -> "RecordAttendanceRequest":
        """Build a request from a decoded JSON body.

        Accepts ``date`` or ``date_attendance`` for the attendance day. Every
        student entry needs ``student_id`` and ``status``.
        """

        if not payload or not isinstance(payload, dict):
            raise ValidationError("Attendance data is required.")

        teacher_id = require_non_empty(payload.get("teacher_id"), "teacher_id")
        raw_date = payload.get("date", payload.get("date_attendance"))
        date_attendance = require_iso_date(raw_date, "date")
        feedback = optional_text(payload.get("feedback"), "feedback")

        raw_students = payload.get("students")
        if not isinstance(raw_students, list):
            raise ValidationError("students must be a list")

        entries: list[StudentStatusEntry] = []
        for i, item in enumerate(raw_students):
            if not isinstance(item, dict):
                raise ValidationError(f"students[{i}] must be an object")
            student_id = require_non_empty(item.get("student_id"), f"students[{i}].student_id")
            try:
                status = AttendanceStatus.parse(item.get("status"))
            except ValueError as e:
                raise ValidationError(f"students[{i}].status: {e}") from None
            entries.append(StudentStatusEntry(student_id=student_id, status=status))

        return cls(
            teacher_id=teacher_id,
            date_attendance=date_attendance,
            feedback=feedback,
            students=tuple(entries),
        )


@dataclass(frozen=True)
class NewAttendance:
    """Validated aggregate ready to be inserted with its children."""

    timetable_id: int
    teacher_id: str
    date_attendance: date
    feedback: str
    students: tuple[StudentStatusEntry, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class StudentStatusRow:
    student_id: str
    student_name: str
    status: AttendanceStatus


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model: one stored attendance with teacher/subject names joined in."""

    attendance_id: int
    class_id: int
    date_attendance: date
    feedback: str
    teacher_id: str
    teacher_name: str
    subject_name: Optional[str]
    students: tuple[StudentStatusRow, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class StudentAttendanceRow:
    """Read-model: one student's entry in a stored attendance."""

    attendance_id: int
    student_id: str
    date_attendance: date
    teacher_name: str
    subject_name: Optional[str]
    status: AttendanceStatus


@dataclass(frozen=True)
class StudentStatusView:
    student_id: str
    student_name: str
    status: AttendanceStatus

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class AttendanceView:
    attendance_id: int
    date_attendance: date
    feedback: str
    teacher_name: str
    subject_name: str
    students: tuple[StudentStatusView, ...]

    @classmethod
    def from_row(cls, row: AttendanceRow) -> "AttendanceView":
        return cls(
            attendance_id=row.attendance_id,
            date_attendance=row.date_attendance,
            feedback=row.feedback or "",
            teacher_name=row.teacher_name,
            subject_name=row.subject_name or EMPTY_SUBJECT_NAME,
            students=tuple(
                StudentStatusView(student_id=s.student_id, student_name=s.student_name, status=s.status)
                for s in row.students
            ),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "date_attendance": self.date_attendance.isoformat(),
            "feedback": self.feedback,
            "teacher_name": self.teacher_name,
            "subject_name": self.subject_name,
            "students_attendance": [s.to_dict() for s in self.students],
        }


@dataclass(frozen=True)
class StudentAttendanceView:
    attendance_id: int
    date_attendance: date
    teacher_name: str
    subject_name: str
    status: AttendanceStatus

    @classmethod
    def from_row(cls, row: StudentAttendanceRow) -> "StudentAttendanceView":
        return cls(
            attendance_id=row.attendance_id,
            date_attendance=row.date_attendance,
            teacher_name=row.teacher_name,
            subject_name=row.subject_name or EMPTY_SUBJECT_NAME,
            status=row.status,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "date_attendance": self.date_attendance.isoformat(),
            "teacher_name": self.teacher_name,
            "subject_name": self.subject_name,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class StudentSummaryRow:
    """Per-student status totals over a class report range."""

    student_id: str
    student_name: str
    counts: dict[AttendanceStatus, int]

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def to_dict(self) -> dict:
        out: dict = {"student_id": self.student_id, "student_name": self.student_name}
        for status in AttendanceStatus:
            out[status.value.lower()] = int(self.counts.get(status, 0))
        out["total"] = self.total
        return out
