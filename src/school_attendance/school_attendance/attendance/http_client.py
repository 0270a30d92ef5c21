from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import requests

from ..common.datetime_utils import format_iso_date
from ..core.constants import DEFAULT_API_TIMEOUT, DEFAULT_ROSTER_LIMIT
from ..core.exceptions import FetchError, WriteError
from .decoder import RosterResolver, decode_records, decode_student
from .model import AttendanceRecord, NewAttendanceRecord, StudentRef

logger = logging.getLogger(__name__)


class HttpAttendanceApi:
    """Client for the school REST backend.

    Every response is wrapped as ``{"success": bool, "data": ..., "message": str}``.
    Implements the record source, record writer and student directory
    protocols. ``requests.Session`` is shared across threads for reads.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_API_TIMEOUT,
        session: Optional[requests.Session] = None,
        resolve_students: bool = True,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._resolve_students = resolve_students

    def _unwrap(self, response, what: str) -> Any:
        if not response.ok:
            raise FetchError(f"{what} failed: {response.status_code} {response.reason}")
        try:
            body = response.json()
        except ValueError:
            raise FetchError(f"{what} failed: response is not JSON")
        if not isinstance(body, dict) or not body.get("success"):
            message = body.get("message") if isinstance(body, dict) else None
            raise FetchError(message or f"{what} failed")
        return body.get("data")

    def _get(self, path: str, params: Dict[str, Any], what: str) -> Any:
        try:
            response = self._session.get(f"{self._base_url}{path}", params=params, timeout=self._timeout)
        except requests.exceptions.RequestException as e:
            logger.warning("%s failed: %s", what, e)
            raise FetchError(f"{what} failed: {e}") from e
        return self._unwrap(response, what)

    def fetch_attendance_records(
        self,
        day: date,
        *,
        class_id: Optional[str] = None,
        timeslot_id: Optional[str] = None,
    ) -> List[AttendanceRecord]:
        params = {"date": format_iso_date(day)}
        if class_id:
            params["classId"] = class_id
        if timeslot_id:
            params["timeslotId"] = timeslot_id

        what = f"Attendance fetch for {params['date']}"
        data = self._get("/api/attendance", params, what)
        if not isinstance(data, list):
            raise FetchError(f"{what} failed: data must be a list")

        resolver = RosterResolver(self if self._resolve_students else None)
        records = decode_records(data, resolver=resolver)
        logger.debug("Fetched %d attendance records for %s", len(records), params["date"])
        return records

    def fetch_students_by_class(self, class_id: str) -> List[StudentRef]:
        params = {"limit": DEFAULT_ROSTER_LIMIT, "sortBy": "name", "sortOrder": "asc"}
        what = f"Student fetch for class {class_id}"
        data = self._get(f"/api/students/class/{class_id}", params, what)
        if not isinstance(data, list) or not all(isinstance(s, dict) for s in data):
            raise FetchError(f"{what} failed: data must be a list of students")
        return [decode_student(s) for s in data]

    def write_attendance_record(self, record: NewAttendanceRecord) -> None:
        payload = {
            "date": format_iso_date(record.day),
            "class": record.class_id,
            "timeslot": record.timeslot_id,
            "totalStudents": record.total_students,
            "presentStudents": list(record.present_ids),
            "absentStudents": list(record.absent_ids),
            "lateStudents": list(record.late_ids),
        }
        if record.notes:
            payload["notes"] = record.notes

        what = f"Attendance save for {payload['date']}"
        try:
            response = self._session.post(f"{self._base_url}/api/attendance", json=payload, timeout=self._timeout)
        except requests.exceptions.RequestException as e:
            logger.warning("%s failed: %s", what, e)
            raise WriteError(f"{what} failed: {e}") from e

        try:
            self._unwrap(response, what)
        except FetchError as e:
            raise WriteError(str(e)) from e
        logger.info("Saved attendance for class=%s timeslot=%s on %s", record.class_id, record.timeslot_id, payload["date"])
