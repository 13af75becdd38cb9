from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.mysql_base import fetchall
from .model import AttendanceRow, NewAttendance, StudentAttendanceRow, StudentStatusRow
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, cursor):
        self._cur = cursor

    def add(self, attendance: NewAttendance) -> int:
        self._cur.execute(
            """
            INSERT INTO attendances(timetable_id, teacher_id, date_attendance, feedback)
            VALUES(%s,%s,%s,%s)
            """,
            (int(attendance.timetable_id), attendance.teacher_id, attendance.date_attendance, attendance.feedback),
        )
        attendance_id = int(self._cur.lastrowid)

        if attendance.students:
            self._cur.executemany(
                """
                INSERT INTO student_attendances(attendance_id, student_id, status, position)
                VALUES(%s,%s,%s,%s)
                """,
                [
                    (attendance_id, entry.student_id, entry.status.value, position)
                    for position, entry in enumerate(attendance.students)
                ],
            )
        return attendance_id

    def list_for_class_on(self, class_id: int, day: date) -> Sequence[AttendanceRow]:
        return self._list_for_class(class_id, day, day)

    def list_for_class_between(self, class_id: int, start: date, end: date) -> Sequence[AttendanceRow]:
        return self._list_for_class(class_id, start, end)

    def list_for_student(self, student_id: str) -> Sequence[StudentAttendanceRow]:
        return self._list_for_student(student_id)

    def list_for_student_between(self, student_id: str, start: date, end: date) -> Sequence[StudentAttendanceRow]:
        return self._list_for_student(student_id, start=start, end=end)

    def _list_for_class(self, class_id: int, start: date, end: date) -> Sequence[AttendanceRow]:
        self._cur.execute(
            """
            SELECT
                a.attendance_id, tt.class_id, a.date_attendance, a.feedback,
                t.teacher_id, t.full_name AS teacher_name,
                s.subject_name
            FROM attendances a
            JOIN timetables tt ON tt.timetable_id = a.timetable_id
            JOIN teachers t ON t.teacher_id = a.teacher_id
            LEFT JOIN subjects s ON s.subject_id = t.subject_id
            WHERE tt.class_id=%s AND a.date_attendance BETWEEN %s AND %s
            ORDER BY a.date_attendance ASC, a.attendance_id ASC
            """,
            (int(class_id), start, end),
        )
        headers = fetchall(self._cur)
        if not headers:
            return []

        students_by_attendance = self._students_for([int(h["attendance_id"]) for h in headers])
        return [
            AttendanceRow(
                attendance_id=int(h["attendance_id"]),
                class_id=int(h["class_id"]),
                date_attendance=h["date_attendance"],
                feedback=h.get("feedback") or "",
                teacher_id=str(h["teacher_id"]),
                teacher_name=h["teacher_name"],
                subject_name=h.get("subject_name"),
                students=tuple(students_by_attendance.get(int(h["attendance_id"]), [])),
            )
            for h in headers
        ]

    def _students_for(self, attendance_ids: list[int]) -> dict[int, list[StudentStatusRow]]:
        placeholders = ",".join(["%s"] * len(attendance_ids))
        self._cur.execute(
            f"""
            SELECT sa.attendance_id, sa.student_id, st.full_name, sa.status
            FROM student_attendances sa
            JOIN students st ON st.student_id = sa.student_id
            WHERE sa.attendance_id IN ({placeholders})
            ORDER BY sa.attendance_id ASC, sa.position ASC
            """,
            tuple(attendance_ids),
        )
        out: dict[int, list[StudentStatusRow]] = {}
        for r in fetchall(self._cur):
            out.setdefault(int(r["attendance_id"]), []).append(
                StudentStatusRow(
                    student_id=str(r["student_id"]),
                    student_name=r["full_name"],
                    status=AttendanceStatus.parse(r["status"]),
                )
            )
        return out

    def _list_for_student(
        self,
        student_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[StudentAttendanceRow]:
        clauses = ["sa.student_id=%s"]
        params: list[object] = [str(student_id)]
        if start is not None and end is not None:
            clauses.append("a.date_attendance BETWEEN %s AND %s")
            params.extend([start, end])

        where = " AND ".join(clauses)

        self._cur.execute(
            f"""
            SELECT
                sa.attendance_id, sa.student_id, sa.status,
                a.date_attendance,
                t.full_name AS teacher_name,
                s.subject_name
            FROM student_attendances sa
            JOIN attendances a ON a.attendance_id = sa.attendance_id
            JOIN teachers t ON t.teacher_id = a.teacher_id
            LEFT JOIN subjects s ON s.subject_id = t.subject_id
            WHERE {where}
            ORDER BY a.date_attendance ASC, sa.attendance_id ASC
            """,
            tuple(params),
        )
        return [
            StudentAttendanceRow(
                attendance_id=int(r["attendance_id"]),
                student_id=str(r["student_id"]),
                date_attendance=r["date_attendance"],
                teacher_name=r["teacher_name"],
                subject_name=r.get("subject_name"),
                status=AttendanceStatus.parse(r["status"]),
            )
            for r in fetchall(self._cur)
        ]
