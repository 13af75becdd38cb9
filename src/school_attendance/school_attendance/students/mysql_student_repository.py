from __future__ import annotations

from typing import Optional

from ..database.mysql_base import fetchone
from .model import Student
from .repository import StudentRepository


class MySQLStudentRepository(StudentRepository):
    def __init__(self, cursor):
        self._cur = cursor

    def get_by_id(self, student_id: str) -> Optional[Student]:
        self._cur.execute(
            "SELECT student_id, full_name FROM students WHERE student_id=%s",
            (str(student_id),),
        )
        r = fetchone(self._cur)
        if not r:
            return None
        return Student(student_id=str(r["student_id"]), full_name=r["full_name"])
