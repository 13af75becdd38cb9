from __future__ import annotations

from datetime import date
from typing import Optional

import pytest

from src.school_attendance.school_attendance.attendance.model import (
    AttendanceRow,
    NewAttendance,
    StudentAttendanceRow,
    StudentStatusRow,
)
from src.school_attendance.school_attendance.attendance.query_service import AttendanceQueryService
from src.school_attendance.school_attendance.attendance.service import AttendanceRecordingService
from src.school_attendance.school_attendance.classes.model import SchoolClass
from src.school_attendance.school_attendance.container import build_services
from src.school_attendance.school_attendance.students.model import Student
from src.school_attendance.school_attendance.teachers.model import Teacher


class InMemoryStore:
    """Committed state shared by every unit of work opened against it."""

    def __init__(self):
        self.classes: dict[int, SchoolClass] = {}
        self.teachers: dict[str, Teacher] = {}
        self.students: dict[str, Student] = {}
        self.attendances: list[tuple[int, NewAttendance]] = []
        self.commits = 0
        self._next_id = 0

    def next_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def class_for_timetable(self, timetable_id: int) -> Optional[SchoolClass]:
        for c in self.classes.values():
            if c.timetable_id == timetable_id:
                return c
        return None

    @property
    def student_rows(self) -> int:
        return sum(len(a.students) for _, a in self.attendances)


class InMemoryClasses:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        return self._store.classes.get(class_id)


class InMemoryTeachers:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        return self._store.teachers.get(teacher_id)


class InMemoryStudents:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return self._store.students.get(student_id)


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._store = store
        self.pending: list[tuple[int, NewAttendance]] = []

    def add(self, attendance: NewAttendance) -> int:
        attendance_id = self._store.next_id()
        self.pending.append((attendance_id, attendance))
        return attendance_id

    def _sorted(self):
        return sorted(self._store.attendances, key=lambda item: (item[1].date_attendance, item[0]))

    def _to_row(self, attendance_id: int, a: NewAttendance) -> AttendanceRow:
        teacher = self._store.teachers[a.teacher_id]
        return AttendanceRow(
            attendance_id=attendance_id,
            class_id=self._store.class_for_timetable(a.timetable_id).class_id,
            date_attendance=a.date_attendance,
            feedback=a.feedback,
            teacher_id=teacher.teacher_id,
            teacher_name=teacher.full_name,
            subject_name=teacher.subject_name,
            students=tuple(
                StudentStatusRow(
                    student_id=s.student_id,
                    student_name=self._store.students[s.student_id].full_name,
                    status=s.status,
                )
                for s in a.students
            ),
        )

    def list_for_class_between(self, class_id: int, start: date, end: date):
        out = []
        for attendance_id, a in self._sorted():
            school_class = self._store.class_for_timetable(a.timetable_id)
            if school_class and school_class.class_id == class_id and start <= a.date_attendance <= end:
                out.append(self._to_row(attendance_id, a))
        return out

    def list_for_class_on(self, class_id: int, day: date):
        return self.list_for_class_between(class_id, day, day)

    def list_for_student_between(self, student_id: str, start: Optional[date], end: Optional[date]):
        out = []
        for attendance_id, a in self._sorted():
            if start is not None and not (start <= a.date_attendance <= end):
                continue
            teacher = self._store.teachers[a.teacher_id]
            for s in a.students:
                if s.student_id == student_id:
                    out.append(
                        StudentAttendanceRow(
                            attendance_id=attendance_id,
                            student_id=student_id,
                            date_attendance=a.date_attendance,
                            teacher_name=teacher.full_name,
                            subject_name=teacher.subject_name,
                            status=s.status,
                        )
                    )
        return out

    def list_for_student(self, student_id: str):
        return self.list_for_student_between(student_id, None, None)


class InMemoryUnitOfWork:
    """Staged inserts only reach the store on commit."""

    def __init__(self, store: InMemoryStore):
        self._store = store

    def __enter__(self):
        self.classes = InMemoryClasses(self._store)
        self.teachers = InMemoryTeachers(self._store)
        self.students = InMemoryStudents(self._store)
        self.attendance = InMemoryAttendance(self._store)
        return self

    def __exit__(self, exc_type, exc, tb):
        self.rollback()

    def commit(self):
        self._store.attendances.extend(self.attendance.pending)
        self.attendance.pending = []
        self._store.commits += 1

    def rollback(self):
        self.attendance.pending = []


@pytest.fixture
def store() -> InMemoryStore:
    s = InMemoryStore()
    s.classes[5] = SchoolClass(class_id=5, class_name="Grade 5A", timetable_id=1)
    s.classes[6] = SchoolClass(class_id=6, class_name="Grade 6B", timetable_id=None)
    s.classes[7] = SchoolClass(class_id=7, class_name="Grade 7C", timetable_id=2)
    s.teachers["T100"] = Teacher(teacher_id="T100", full_name="Jane Teacher", subject_id=1, subject_name="Math")
    s.teachers["T200"] = Teacher(teacher_id="T200", full_name="Sam Substitute")
    s.students["S1"] = Student(student_id="S1", full_name="Alice Student")
    s.students["S2"] = Student(student_id="S2", full_name="Bob Student")
    s.students["S3"] = Student(student_id="S3", full_name="Carol Student")
    return s


@pytest.fixture
def uow_factory(store):
    return lambda: InMemoryUnitOfWork(store)


@pytest.fixture
def recording_service(uow_factory) -> AttendanceRecordingService:
    return AttendanceRecordingService(uow_factory)


@pytest.fixture
def query_service(uow_factory) -> AttendanceQueryService:
    return AttendanceQueryService(uow_factory)


@pytest.fixture
def app(monkeypatch, uow_factory):
    from src.school_attendance.school_attendance.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=build_services(uow_factory=uow_factory))


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def payload():
    return {
        "teacher_id": "T100",
        "date": "2024-03-01",
        "feedback": "ok",
        "students": [
            {"student_id": "S1", "status": "Present"},
            {"student_id": "S2", "status": "Absent"},
        ],
    }
