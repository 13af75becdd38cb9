from __future__ import annotations

from typing import Optional

from ..database.mysql_base import fetchone
from .model import SchoolClass
from .repository import ClassRepository


class MySQLClassRepository(ClassRepository):
    def __init__(self, cursor):
        self._cur = cursor

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        self._cur.execute(
            """
            SELECT c.class_id, c.class_name, t.timetable_id
            FROM classes c
            LEFT JOIN timetables t ON t.class_id = c.class_id
            WHERE c.class_id=%s
            """,
            (int(class_id),),
        )
        r = fetchone(self._cur)
        if not r:
            return None
        return SchoolClass(
            class_id=int(r["class_id"]),
            class_name=r["class_name"],
            timetable_id=int(r["timetable_id"]) if r.get("timetable_id") is not None else None,
        )
