from __future__ import annotations

import logging
from typing import Callable, Protocol

from ..attendance.mysql_attendance_repository import MySQLAttendanceRepository
from ..attendance.repository import AttendanceRepository
from ..classes.mysql_class_repository import MySQLClassRepository
from ..classes.repository import ClassRepository
from ..students.mysql_student_repository import MySQLStudentRepository
from ..students.repository import StudentRepository
from ..teachers.mysql_teacher_repository import MySQLTeacherRepository
from ..teachers.repository import TeacherRepository
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


class UnitOfWork(Protocol):
    """Transaction boundary for one logical operation.

    Repositories are only usable inside the ``with`` block. Anything staged
    and not committed is discarded when the block exits.
    """

    classes: ClassRepository
    teachers: TeacherRepository
    students: StudentRepository
    attendance: AttendanceRepository

    def __enter__(self) -> "UnitOfWork":
        raise NotImplementedError

    def __exit__(self, exc_type, exc, tb) -> None:
        raise NotImplementedError

    def commit(self) -> None:
        raise NotImplementedError

    def rollback(self) -> None:
        raise NotImplementedError


UnitOfWorkFactory = Callable[[], UnitOfWork]


class MySQLUnitOfWork:
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory
        self._conn = None
        self._cur = None
        self._committed = False

    def __enter__(self) -> "MySQLUnitOfWork":
        self._conn = self._conn_factory.connect()
        try:
            self._cur = self._conn.cursor(dictionary=True)
        except Exception:
            self._conn.close()
            self._conn = None
            raise
        self._committed = False

        self.classes = MySQLClassRepository(self._cur)
        self.teachers = MySQLTeacherRepository(self._cur)
        self.students = MySQLStudentRepository(self._cur)
        self.attendance = MySQLAttendanceRepository(self._cur)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if not self._committed:
                self.rollback()
        finally:
            self._cur.close()
            self._conn.close()
            self._cur = None
            self._conn = None

    def commit(self) -> None:
        self._conn.commit()
        self._committed = True

    def rollback(self) -> None:
        if self._conn is not None:
            self._conn.rollback()


def mysql_uow_factory(conn_factory: DatabaseConnection) -> UnitOfWorkFactory:
    def _factory() -> MySQLUnitOfWork:
        return MySQLUnitOfWork(conn_factory)

    return _factory
