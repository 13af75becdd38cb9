from __future__ import annotations

import csv
import io
import logging
from typing import Callable

from flask import Flask, jsonify, request

from ..common.datetime_utils import require_iso_date
from ..container import Container
from ..core.constants import CSV_ENCODING
from ..core.enums import AttendanceStatus
from ..core.exceptions import DomainError, NoRecordsError
from .model import RecordAttendanceRequest
from .query_service import ReportData

logger = logging.getLogger(__name__)

CLASS_REPORT_FIELDS = [
    "date_attendance",
    "attendance_id",
    "teacher_name",
    "subject_name",
    "student_id",
    "student_name",
    "status",
    "feedback",
]
STUDENT_REPORT_FIELDS = [
    "date_attendance",
    "attendance_id",
    "teacher_name",
    "subject_name",
    "student_id",
    "status",
]
STATUS_COUNT_FIELDS = [s.value.lower() for s in AttendanceStatus] + ["total"]
CLASS_SUMMARY_FIELDS = ["student_id", "student_name"] + STATUS_COUNT_FIELDS
STUDENT_SUMMARY_FIELDS = ["student_id"] + STATUS_COUNT_FIELDS


def register(app: Flask, container: Container) -> None:
    recording = container.recording_service
    queries = container.query_service

    def _error(e: DomainError, status: int):
        return jsonify({"success": False, "error": e.kind.value, "message": str(e)}), status

    def _server_error():
        return jsonify({"success": False, "error": "ServerError", "message": "Internal server error"}), 500

    def _query(run: Callable[[], object]):
        """Run a read path and map its outcome onto HTTP status codes.

        Missing class/student and bad input are 400, an empty match is 404.
        """

        try:
            return run()
        except NoRecordsError as e:
            return _error(e, 404)
        except DomainError as e:
            return _error(e, 400)
        except Exception:
            logger.exception("Unexpected failure on %s %s", request.method, request.path)
            return _server_error()

    def _write_report_csv(*, data: ReportData, fieldnames: list[str], summary_fields: list[str], filename: str):
        """Detail rows, one blank line, then the per-student status totals."""

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(data.rows)

        csv.writer(out).writerow([])
        summary_writer = csv.DictWriter(out, fieldnames=summary_fields)
        summary_writer.writeheader()
        summary_writer.writerows(data.summary)

        return app.response_class(
            out.getvalue().encode(CSV_ENCODING),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/attendance/class/<int(signed=True):class_id>", methods=["POST"], endpoint="record_attendance")
    def record_attendance(class_id: int):
        try:
            payload = request.get_json(silent=True)
            attendance_request = RecordAttendanceRequest.from_payload(payload)
            view = recording.record(class_id, attendance_request)
            return jsonify(view.to_dict()), 200
        except DomainError as e:
            return _error(e, 400)
        except Exception:
            logger.exception("Unexpected failure recording attendance for class %s", class_id)
            return _server_error()

    @app.route("/api/attendance/class/<int(signed=True):class_id>/date/<day>", methods=["GET"], endpoint="attendance_day")
    def attendance_day(class_id: int, day: str):
        def run():
            views = queries.by_class_and_day(class_id, require_iso_date(day, "date"))
            return jsonify([v.to_dict() for v in views]), 200

        return _query(run)

    @app.route("/student/<student_id>", methods=["GET"], endpoint="attendance_student")
    def attendance_student(student_id: str):
        def run():
            views = queries.by_student(student_id)
            return jsonify([v.to_dict() for v in views]), 200

        return _query(run)

    @app.route(
        "/api/attendance/report/class/<int(signed=True):class_id>/range/<start_date>/<end_date>",
        methods=["GET"],
        endpoint="class_report",
    )
    def class_report(class_id: int, start_date: str, end_date: str):
        def run():
            start = require_iso_date(start_date, "start_date")
            end = require_iso_date(end_date, "end_date")
            views = queries.by_class_range(class_id, start, end)
            return jsonify([v.to_dict() for v in views]), 200

        return _query(run)

    @app.route(
        "/api/attendance/report/student/<student_id>/range/<start_date>/<end_date>",
        methods=["GET"],
        endpoint="student_report",
    )
    def student_report(student_id: str, start_date: str, end_date: str):
        def run():
            start = require_iso_date(start_date, "start_date")
            end = require_iso_date(end_date, "end_date")
            views = queries.by_student_range(student_id, start, end)
            return jsonify([v.to_dict() for v in views]), 200

        return _query(run)

    @app.route(
        "/api/attendance/report/class/<int(signed=True):class_id>/range/<start_date>/<end_date>/summary",
        methods=["GET"],
        endpoint="class_report_summary",
    )
    def class_report_summary(class_id: int, start_date: str, end_date: str):
        def run():
            start = require_iso_date(start_date, "start_date")
            end = require_iso_date(end_date, "end_date")
            rows = queries.class_range_summary(class_id, start, end)
            return jsonify([r.to_dict() for r in rows]), 200

        return _query(run)

    @app.route(
        "/api/attendance/report/class/<int(signed=True):class_id>/range/<start_date>/<end_date>/csv",
        methods=["GET"],
        endpoint="class_report_csv",
    )
    def class_report_csv(class_id: int, start_date: str, end_date: str):
        def run():
            start = require_iso_date(start_date, "start_date")
            end = require_iso_date(end_date, "end_date")
            data = queries.class_range_report(class_id, start, end)
            filename = f"class_{class_id}_attendance_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
            return _write_report_csv(
                data=data, fieldnames=CLASS_REPORT_FIELDS, summary_fields=CLASS_SUMMARY_FIELDS, filename=filename
            )

        return _query(run)

    @app.route(
        "/api/attendance/report/student/<student_id>/range/<start_date>/<end_date>/csv",
        methods=["GET"],
        endpoint="student_report_csv",
    )
    def student_report_csv(student_id: str, start_date: str, end_date: str):
        def run():
            start = require_iso_date(start_date, "start_date")
            end = require_iso_date(end_date, "end_date")
            data = queries.student_range_report(student_id, start, end)
            filename = f"student_{student_id}_attendance_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
            return _write_report_csv(
                data=data, fieldnames=STUDENT_REPORT_FIELDS, summary_fields=STUDENT_SUMMARY_FIELDS, filename=filename
            )

        return _query(run)
