from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Student:
    student_id: str
    full_name: str
