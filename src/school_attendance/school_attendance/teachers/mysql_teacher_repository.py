from __future__ import annotations

from typing import Optional

from ..database.mysql_base import fetchone
from .model import Teacher
from .repository import TeacherRepository


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, cursor):
        self._cur = cursor

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        self._cur.execute(
            """
            SELECT t.teacher_id, t.full_name, s.subject_id, s.subject_name
            FROM teachers t
            LEFT JOIN subjects s ON s.subject_id = t.subject_id
            WHERE t.teacher_id=%s
            """,
            (str(teacher_id),),
        )
        r = fetchone(self._cur)
        if not r:
            return None
        return Teacher(
            teacher_id=str(r["teacher_id"]),
            full_name=r["full_name"],
            subject_id=r.get("subject_id"),
            subject_name=r.get("subject_name"),
        )
