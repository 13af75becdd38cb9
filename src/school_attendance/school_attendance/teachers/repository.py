from __future__ import annotations

from typing import Optional, Protocol

from .model import Teacher


class TeacherRepository(Protocol):
    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        raise NotImplementedError
