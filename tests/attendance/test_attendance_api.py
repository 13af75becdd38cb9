from __future__ import annotations

import pytest


def test_post_records_attendance(client, payload):
    resp = client.post("/api/attendance/class/5", json=payload)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["date_attendance"] == "2024-03-01"
    assert body["feedback"] == "ok"
    assert body["teacher_name"] == "Jane Teacher"
    assert body["subject_name"] == "Math"
    assert [(s["student_id"], s["status"]) for s in body["students_attendance"]] == [
        ("S1", "Present"),
        ("S2", "Absent"),
    ]


def test_post_without_timetable_is_400(client, payload, store):
    resp = client.post("/api/attendance/class/6", json=payload)

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["success"] is False
    assert body["error"] == "InvalidState"
    assert "timetable" in body["message"]
    assert store.attendances == []


def test_post_unknown_class_is_400(client, payload):
    resp = client.post("/api/attendance/class/99", json=payload)

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "NotFound"
    assert "Class with ID 99" in resp.get_json()["message"]


def test_post_unknown_student_is_400_and_nothing_saved(client, payload, store):
    payload["students"][1]["student_id"] = "S404"

    resp = client.post("/api/attendance/class/5", json=payload)

    assert resp.status_code == 400
    assert "Student with ID S404" in resp.get_json()["message"]
    assert store.attendances == []


def test_post_without_body_is_400(client):
    resp = client.post("/api/attendance/class/5", data="not json", content_type="text/plain")

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidRequest"


def test_day_query_after_insert(client, payload):
    client.post("/api/attendance/class/5", json=payload)

    resp = client.get("/api/attendance/class/5/date/2024-03-01")
    assert resp.status_code == 200
    records = resp.get_json()
    assert len(records) == 1
    assert [s["student_name"] for s in records[0]["students_attendance"]] == ["Alice Student", "Bob Student"]

    assert client.get("/api/attendance/class/5/date/2024-03-02").status_code == 404


def test_day_query_unknown_class_is_400(client):
    assert client.get("/api/attendance/class/99/date/2024-03-01").status_code == 400


def test_day_query_bad_date_is_400(client):
    resp = client.get("/api/attendance/class/5/date/March-1")

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidRequest"


def test_student_query(client, payload):
    client.post("/api/attendance/class/5", json=payload)

    resp = client.get("/student/S2")
    assert resp.status_code == 200
    assert resp.get_json() == [
        {
            "id": 1,
            "date_attendance": "2024-03-01",
            "teacher_name": "Jane Teacher",
            "subject_name": "Math",
            "status": "Absent",
        }
    ]

    assert client.get("/student/S3").status_code == 404
    assert client.get("/student/S999").status_code == 400


def test_class_range_report(client, payload):
    client.post("/api/attendance/class/5", json=payload)
    payload["date"] = "2024-03-05"
    client.post("/api/attendance/class/5", json=payload)

    resp = client.get("/api/attendance/report/class/5/range/2024-03-01/2024-03-05")
    assert resp.status_code == 200
    assert [r["date_attendance"] for r in resp.get_json()] == ["2024-03-01", "2024-03-05"]

    assert client.get("/api/attendance/report/class/5/range/2024-03-02/2024-03-04").status_code == 404
    assert client.get("/api/attendance/report/class/99/range/2024-03-01/2024-03-05").status_code == 400
    assert client.get("/api/attendance/report/class/5/range/2024-03-05/2024-03-01").status_code == 400


def test_student_range_report(client, payload):
    client.post("/api/attendance/class/5", json=payload)

    resp = client.get("/api/attendance/report/student/S1/range/2024-03-01/2024-03-01")
    assert resp.status_code == 200
    assert resp.get_json()[0]["status"] == "Present"

    assert client.get("/api/attendance/report/student/S1/range/2024-02-01/2024-02-28").status_code == 404
    assert client.get("/api/attendance/report/student/NOPE/range/2024-03-01/2024-03-01").status_code == 400


def test_class_summary_endpoint(client, payload):
    client.post("/api/attendance/class/5", json=payload)

    resp = client.get("/api/attendance/report/class/5/range/2024-03-01/2024-03-31/summary")

    assert resp.status_code == 200
    assert [(r["student_id"], r["present"], r["absent"]) for r in resp.get_json()] == [("S1", 1, 0), ("S2", 0, 1)]


def test_class_report_csv(client, payload):
    client.post("/api/attendance/class/5", json=payload)

    resp = client.get("/api/attendance/report/class/5/range/2024-03-01/2024-03-31/csv")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "class_5_attendance_20240301_20240331.csv" in resp.headers["Content-Disposition"]
    lines = resp.data.decode("utf-8-sig").splitlines()
    assert lines[0].startswith("date_attendance,attendance_id")
    assert len(lines) == 7
    assert lines[3] == ""
    assert lines[4] == "student_id,student_name,present,absent,late,excused,total"
    assert lines[5:] == ["S1,Alice Student,1,0,0,0,1", "S2,Bob Student,0,1,0,0,1"]


def test_student_report_csv_without_rows_is_404(client):
    resp = client.get("/api/attendance/report/student/S1/range/2024-03-01/2024-03-31/csv")

    assert resp.status_code == 404


def test_unexpected_failure_is_500(client, app, monkeypatch):
    from src.school_attendance.school_attendance.attendance.query_service import AttendanceQueryService

    def boom(self, student_id):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(AttendanceQueryService, "by_student", boom)

    resp = client.get("/student/S1")

    assert resp.status_code == 500
    assert resp.get_json()["error"] == "ServerError"


def test_student_report_csv_ends_with_totals(client, payload):
    client.post("/api/attendance/class/5", json=payload)

    resp = client.get("/api/attendance/report/student/S2/range/2024-03-01/2024-03-31/csv")

    assert resp.status_code == 200
    lines = resp.data.decode("utf-8-sig").splitlines()
    assert lines[-2:] == ["student_id,present,absent,late,excused,total", "S2,0,1,0,0,1"]


def test_post_negative_class_id_is_400(client, payload, store):
    resp = client.post("/api/attendance/class/-3", json=payload)

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidRequest"
    assert store.attendances == []


@pytest.mark.parametrize(
    "url",
    [
        "/api/attendance/class/0/date/2024-03-01",
        "/api/attendance/class/-1/date/2024-03-01",
        "/api/attendance/report/class/-1/range/2024-03-01/2024-03-05",
    ],
)
def test_class_queries_reject_non_positive_id(client, url):
    resp = client.get(url)

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidRequest"
