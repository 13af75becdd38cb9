"""Example: drive the service layer directly (no Flask).

Records one attendance for the seeded class 5, then reads it back.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.school_attendance.school_attendance.attendance.model import RecordAttendanceRequest
from src.school_attendance.school_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    request = RecordAttendanceRequest.from_payload(
        {
            "teacher_id": "T100",
            "date": "2024-03-01",
            "feedback": "ok",
            "students": [
                {"student_id": "S1", "status": "Present"},
                {"student_id": "S2", "status": "Absent"},
            ],
        }
    )
    view = container.recording_service.record(5, request)
    print(view.to_dict())

    for record in container.query_service.by_class_and_day(5, date(2024, 3, 1)):
        print(record.to_dict())


if __name__ == "__main__":
    main()
