from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Teacher:
    """Teacher identity with the subject they teach resolved up front."""

    teacher_id: str
    full_name: str
    subject_id: Optional[int] = None
    subject_name: Optional[str] = None
