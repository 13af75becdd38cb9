from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceRow, NewAttendance, StudentAttendanceRow


class AttendanceRepository(Protocol):
    """Attendance aggregate storage.

    Rows come back ordered by date ascending, then attendance id. Students
    inside an attendance keep insertion order.
    """

    def add(self, attendance: NewAttendance) -> int:
        """Stage the aggregate and its children on the current transaction.

        Returns the new attendance id. Nothing is visible until commit.
        """

        raise NotImplementedError

    def list_for_class_on(self, class_id: int, day: date) -> Sequence[AttendanceRow]:
        raise NotImplementedError

    def list_for_class_between(self, class_id: int, start: date, end: date) -> Sequence[AttendanceRow]:
        raise NotImplementedError

    def list_for_student(self, student_id: str) -> Sequence[StudentAttendanceRow]:
        raise NotImplementedError

    def list_for_student_between(self, student_id: str, start: date, end: date) -> Sequence[StudentAttendanceRow]:
        raise NotImplementedError
