from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Sequence

from ..common.datetime_utils import require_date_range
from ..common.validators import require_positive_id
from ..core.enums import AttendanceStatus, EntityKind
from ..core.exceptions import NoRecordsError, NotFoundError
from ..database.unit_of_work import UnitOfWork, UnitOfWorkFactory
from .model import AttendanceView, StudentAttendanceView, StudentSummaryRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class AttendanceQueryService:
    """Read paths over recorded attendance.

    Each query first checks that the class or student exists
    (``NotFoundError``), then raises ``NoRecordsError`` when nothing matches.
    Results are ordered by date, then attendance id.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    def by_class_and_day(self, class_id: int, day: date) -> list[AttendanceView]:
        with self._uow_factory() as uow:
            self._require_class(uow, class_id)
            rows = uow.attendance.list_for_class_on(class_id, day)

        logger.debug("class=%s day=%s -> %d attendance rows", class_id, day, len(rows))
        if not rows:
            raise NoRecordsError("No attendance records found for the specified day.")
        return [AttendanceView.from_row(r) for r in rows]

    def by_student(self, student_id: str) -> list[StudentAttendanceView]:
        with self._uow_factory() as uow:
            self._require_student(uow, student_id)
            rows = uow.attendance.list_for_student(student_id)

        logger.debug("student=%s -> %d attendance rows", student_id, len(rows))
        if not rows:
            raise NoRecordsError(f"No attendance records found for student ID {student_id}.")
        return [StudentAttendanceView.from_row(r) for r in rows]

    def by_class_range(self, class_id: int, start: date, end: date) -> list[AttendanceView]:
        require_date_range(start, end)
        with self._uow_factory() as uow:
            self._require_class(uow, class_id)
            rows = uow.attendance.list_for_class_between(class_id, start, end)

        logger.debug("class=%s range=%s..%s -> %d attendance rows", class_id, start, end, len(rows))
        if not rows:
            raise NoRecordsError("No attendance records found for the specified range.")
        return [AttendanceView.from_row(r) for r in rows]

    def by_student_range(self, student_id: str, start: date, end: date) -> list[StudentAttendanceView]:
        require_date_range(start, end)
        with self._uow_factory() as uow:
            self._require_student(uow, student_id)
            rows = uow.attendance.list_for_student_between(student_id, start, end)

        logger.debug("student=%s range=%s..%s -> %d attendance rows", student_id, start, end, len(rows))
        if not rows:
            raise NoRecordsError(f"No attendance records found for student ID {student_id}.")
        return [StudentAttendanceView.from_row(r) for r in rows]

    def class_range_summary(self, class_id: int, start: date, end: date) -> list[StudentSummaryRow]:
        """Status totals per student over a class range, sorted by student name."""

        return self._summarize(self.by_class_range(class_id, start, end))

    def class_range_report(self, class_id: int, start: date, end: date) -> ReportData:
        views = self.by_class_range(class_id, start, end)
        rows = [
            {
                "date_attendance": v.date_attendance.isoformat(),
                "attendance_id": v.attendance_id,
                "teacher_name": v.teacher_name,
                "subject_name": v.subject_name,
                "student_id": s.student_id,
                "student_name": s.student_name,
                "status": s.status.value,
                "feedback": v.feedback,
            }
            for v in views
            for s in v.students
        ]
        summary = [r.to_dict() for r in self._summarize(views)]
        return ReportData(rows=rows, summary=summary)

    def student_range_report(self, student_id: str, start: date, end: date) -> ReportData:
        views = self.by_student_range(student_id, start, end)
        rows = [
            {
                "date_attendance": v.date_attendance.isoformat(),
                "attendance_id": v.attendance_id,
                "teacher_name": v.teacher_name,
                "subject_name": v.subject_name,
                "student_id": student_id,
                "status": v.status.value,
            }
            for v in views
        ]
        counts: dict[str, int] = {s.value.lower(): 0 for s in AttendanceStatus}
        for v in views:
            counts[v.status.value.lower()] += 1
        summary = [{"student_id": student_id, **counts, "total": len(views)}]
        return ReportData(rows=rows, summary=summary)

    @staticmethod
    def _summarize(views: Sequence[AttendanceView]) -> list[StudentSummaryRow]:
        totals: dict[str, StudentSummaryRow] = {}
        for view in views:
            for s in view.students:
                row = totals.setdefault(
                    s.student_id,
                    StudentSummaryRow(student_id=s.student_id, student_name=s.student_name, counts={}),
                )
                row.counts[s.status] = row.counts.get(s.status, 0) + 1
        return sorted(totals.values(), key=lambda r: (r.student_name, r.student_id))

    @staticmethod
    def _require_class(uow: UnitOfWork, class_id: int) -> None:
        require_positive_id(class_id, "class_id")
        if not uow.classes.get_by_id(class_id):
            raise NotFoundError(EntityKind.CLASS, class_id)

    @staticmethod
    def _require_student(uow: UnitOfWork, student_id: str) -> None:
        if not uow.students.get_by_id(student_id):
            raise NotFoundError(EntityKind.STUDENT, student_id)
