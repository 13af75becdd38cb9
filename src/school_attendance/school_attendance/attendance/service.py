from __future__ import annotations

import logging

from ..common.validators import require_positive_id
from ..core.constants import EMPTY_SUBJECT_NAME
from ..core.enums import EntityKind
from ..core.exceptions import DomainError, InvalidStateError, NotFoundError, ValidationError
from ..database.unit_of_work import UnitOfWorkFactory
from .model import AttendanceView, NewAttendance, RecordAttendanceRequest, StudentStatusView

logger = logging.getLogger(__name__)


class AttendanceRecordingService:
    """Use case: a teacher records attendance for one class session.

    Validation runs to completion before anything is built or staged, so a
    rejected request never leaves a partial attendance behind.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    def record(self, class_id: int, request: RecordAttendanceRequest | None) -> AttendanceView:
        try:
            return self._record(class_id, request)
        except DomainError as e:
            logger.warning("Attendance for class %s rejected (%s): %s", class_id, e.kind.value, e)
            raise

    def _record(self, class_id: int, request: RecordAttendanceRequest | None) -> AttendanceView:
        if request is None:
            raise ValidationError("Attendance data is required.")
        require_positive_id(class_id, "class_id")

        with self._uow_factory() as uow:
            school_class = uow.classes.get_by_id(class_id)
            if not school_class:
                raise NotFoundError(EntityKind.CLASS, class_id)

            if not school_class.has_timetable:
                raise InvalidStateError(
                    InvalidStateError.NO_TIMETABLE,
                    "Class is not associated with any timetable.",
                )

            teacher = uow.teachers.get_by_id(request.teacher_id)
            if not teacher:
                raise NotFoundError(EntityKind.TEACHER, request.teacher_id)

            names: list[str] = []
            for entry in request.students:
                student = uow.students.get_by_id(entry.student_id)
                if not student:
                    raise NotFoundError(EntityKind.STUDENT, entry.student_id)
                names.append(student.full_name)

            attendance = NewAttendance(
                timetable_id=int(school_class.timetable_id),
                teacher_id=teacher.teacher_id,
                date_attendance=request.date_attendance,
                feedback=request.feedback,
                students=request.students,
            )
            attendance_id = uow.attendance.add(attendance)
            uow.commit()

        logger.info(
            "Recorded attendance %s for class %s on %s (%d students)",
            attendance_id,
            class_id,
            request.date_attendance.isoformat(),
            len(request.students),
        )

        return AttendanceView(
            attendance_id=attendance_id,
            date_attendance=attendance.date_attendance,
            feedback=attendance.feedback,
            teacher_name=teacher.full_name,
            subject_name=teacher.subject_name or EMPTY_SUBJECT_NAME,
            students=tuple(
                StudentStatusView(student_id=entry.student_id, student_name=name, status=entry.status)
                for entry, name in zip(request.students, names)
            ),
        )
