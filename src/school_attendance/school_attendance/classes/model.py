from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SchoolClass:
    """A scheduled class. Attendance can only be recorded once it has a timetable."""

    class_id: int
    class_name: str
    timetable_id: Optional[int] = None

    @property
    def has_timetable(self) -> bool:
        return self.timetable_id is not None
