from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, NewAttendanceRecord, StudentRef


class AttendanceRecordSource(Protocol):
    """Read side of the backend. Must be safe to call concurrently for distinct dates."""

    def fetch_attendance_records(
        self,
        day: date,
        *,
        class_id: Optional[str] = None,
        timeslot_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError


class AttendanceRecordWriter(Protocol):
    def write_attendance_record(self, record: NewAttendanceRecord) -> None:
        raise NotImplementedError


class StudentDirectory(Protocol):
    def fetch_students_by_class(self, class_id: str) -> Sequence[StudentRef]:
        raise NotImplementedError
