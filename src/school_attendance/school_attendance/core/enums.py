from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Per-student status stored with each attendance entry."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    EXCUSED = "Excused"

    @classmethod
    def parse(cls, value: object) -> "AttendanceStatus":
        """Accept either the stored value or the member name, any case."""

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid attendance status: {value!r}")
        key = value.strip().lower()
        for member in cls:
            if key in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"Invalid attendance status: {value!r}")


class ErrorKind(str, Enum):
    """Client-facing error categories."""

    INVALID_REQUEST = "InvalidRequest"
    NOT_FOUND = "NotFound"
    INVALID_STATE = "InvalidState"
    NO_RECORDS = "NoRecords"


class EntityKind(str, Enum):
    CLASS = "Class"
    TEACHER = "Teacher"
    STUDENT = "Student"
