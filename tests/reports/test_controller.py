from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pytest
from flask import Flask

from src.school_attendance.school_attendance.attendance.model import AttendanceRecord, StudentRef
from src.school_attendance.school_attendance.attendance.service import AttendanceService
from src.school_attendance.school_attendance.core.exceptions import FetchError
from src.school_attendance.school_attendance.reports.aggregator import AttendanceAggregator
from src.school_attendance.school_attendance.reports.controller import register


class FakeApi:
    def __init__(self, records, fail=False):
        self._records = records
        self._fail = fail
        self.written = []

    def fetch_attendance_records(self, day, *, class_id=None, timeslot_id=None):
        if self._fail:
            raise FetchError("backend down")
        return [r for r in self._records if r.day == day and (class_id is None or r.class_id == class_id)]

    def fetch_students_by_class(self, class_id):
        return [StudentRef("s1", "Ana", "R-1"), StudentRef("s2", "Ben", "R-2")]

    def write_attendance_record(self, record):
        self.written.append(record)


@dataclass(frozen=True)
class FakeContainer:
    attendance_service: AttendanceService
    aggregator: AttendanceAggregator


def _client(api):
    svc = AttendanceService(api, writer=api, directory=api)
    app = Flask(__name__)
    app.config["TESTING"] = True
    register(app, FakeContainer(attendance_service=svc, aggregator=AttendanceAggregator(svc, max_workers=4)))
    return app.test_client()


RECORDS = [
    AttendanceRecord(
        day=date(2024, 4, 2),
        class_id="c1",
        timeslot_id="t1",
        total_students=2,
        present_students=(StudentRef("s1", "Ana", "R-1"),),
        late_students=(StudentRef("s2", "Ben"),),
    )
]


def test_daily_report_returns_records_and_stats():
    resp = _client(FakeApi(RECORDS)).get("/api/reports/daily?date=2024-04-02&classId=c1&timeslotId=")

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["records"][0]["presentStudents"][0]["name"] == "Ana"
    assert data["records"][0]["lateStudents"][0]["regNo"] == "—"
    assert data["stats"]["averagePercentage"] == 50
    assert data["stats"]["maxClassSize"] == 2


def test_daily_report_bad_date_is_400():
    resp = _client(FakeApi([])).get("/api/reports/daily?date=02-04-2024")
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_daily_report_fetch_failure_is_502():
    resp = _client(FakeApi([], fail=True)).get("/api/reports/daily?date=2024-04-02")
    assert resp.status_code == 502


def test_monthly_report_json():
    resp = _client(FakeApi(RECORDS)).get("/api/reports/monthly?month=2024-04-01")

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["label"] == "April 2024"
    assert [s["student"] for s in data["students"]] == ["Ana", "Ben"]
    assert data["students"][0]["percentage"] == 100
    assert data["students"][1]["band"] == "poor"


@pytest.mark.parametrize("path", ["/api/reports/monthly", "/api/reports/monthly.csv"])
def test_monthly_report_failure_returns_no_rows(path):
    resp = _client(FakeApi(RECORDS, fail=True)).get(f"{path}?month=2024-04-01")

    assert resp.status_code == 502
    body = resp.get_json()
    assert body["success"] is False
    assert "data" not in body


def test_monthly_report_rejects_mid_month():
    resp = _client(FakeApi(RECORDS)).get("/api/reports/monthly?month=2024-04-15")
    assert resp.status_code == 400


def test_monthly_report_csv_download():
    resp = _client(FakeApi(RECORDS)).get("/api/reports/monthly.csv?month=2024-04-01")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attendance_2024-04.csv" in resp.headers["Content-Disposition"]
    assert resp.data.decode("utf-8-sig").splitlines()[1].startswith("s1,Ana,R-1,1,0,0,1,100")


def test_mark_attendance_writes_record():
    api = FakeApi([])
    resp = _client(api).post(
        "/api/attendance/mark",
        json={"date": "2024-04-02", "class": "c1", "timeslot": "t1", "marks": {"s1": "present", "s2": "late"}},
    )

    assert resp.status_code == 201
    assert resp.get_json()["data"]["lateStudents"] == ["s2"]
    assert api.written[0].total_students == 2


def test_mark_attendance_unknown_student_is_rejected():
    api = FakeApi([])
    resp = _client(api).post(
        "/api/attendance/mark",
        json={"date": "2024-04-02", "class": "c1", "timeslot": "t1", "marks": {"s7": "present"}},
    )

    assert resp.status_code == 400
    assert api.written == []


def test_monthly_report_unexpected_fetch_error_is_502():
    class BrokenApi(FakeApi):
        def fetch_attendance_records(self, day, *, class_id=None, timeslot_id=None):
            raise RuntimeError("unexpected payload")

    resp = _client(BrokenApi([])).get("/api/reports/monthly?month=2024-04-01")

    assert resp.status_code == 502
    assert resp.get_json()["success"] is False


def test_mark_attendance_non_text_notes_is_400():
    api = FakeApi([])
    resp = _client(api).post(
        "/api/attendance/mark",
        json={"date": "2024-04-02", "class": "c1", "timeslot": "t1", "marks": {"s1": "present"}, "notes": 5},
    )

    assert resp.status_code == 400
    assert api.written == []
