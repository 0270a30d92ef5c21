"""Decode backend JSON into typed attendance records.

Backend documents come in two shapes: populated (``class``/``timeslot``
and students as objects with ``_id``) or bare (plain id strings). Bare
student ids are resolved through the class roster when a directory is
available. Anything that does not fit raises ``FetchError``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..common.datetime_utils import parse_api_date
from ..core.exceptions import FetchError, ValidationError
from .model import AttendanceRecord, StudentRef
from .repository import StudentDirectory


class RosterResolver:
    """Look up names for bare student ids, one roster fetch per class."""

    def __init__(self, directory: Optional[StudentDirectory]):
        self._directory = directory
        self._rosters: Dict[str, Dict[str, StudentRef]] = {}

    def resolve(self, class_id: str, student_id: str) -> StudentRef:
        if self._directory is None:
            return StudentRef(student_id=student_id)
        roster = self._rosters.get(class_id)
        if roster is None:
            roster = {s.student_id: s for s in self._directory.fetch_students_by_class(class_id)}
            self._rosters[class_id] = roster
        return roster.get(student_id) or StudentRef(student_id=student_id)


def _ref_id(value: Any, field_name: str) -> str:
    if isinstance(value, dict):
        value = value.get("_id")
    if not isinstance(value, str) or not value.strip():
        raise FetchError(f"Malformed attendance data: missing {field_name} id")
    return value.strip()


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def decode_student(payload: Dict[str, Any]) -> StudentRef:
    return StudentRef(
        student_id=_ref_id(payload, "student"),
        name=_optional_text(payload.get("name")),
        reg_no=_optional_text(payload.get("regNo")),
    )


def _decode_bucket(
    items: Any,
    field_name: str,
    *,
    class_id: str,
    resolver: RosterResolver,
) -> Tuple[StudentRef, ...]:
    if items is None:
        return ()
    if not isinstance(items, list):
        raise FetchError(f"Malformed attendance data: {field_name} must be a list")

    refs: List[StudentRef] = []
    for item in items:
        if isinstance(item, dict):
            refs.append(decode_student(item))
        else:
            refs.append(resolver.resolve(class_id, _ref_id(item, "student")))
    return tuple(refs)


def decode_record(payload: Any, *, resolver: Optional[RosterResolver] = None) -> AttendanceRecord:
    if not isinstance(payload, dict):
        raise FetchError("Malformed attendance data: record must be an object")

    resolver = resolver or RosterResolver(None)
    class_id = _ref_id(payload.get("class"), "class")
    timeslot_id = _ref_id(payload.get("timeslot"), "timeslot")

    raw_date = payload.get("date")
    if not isinstance(raw_date, str):
        raise FetchError("Malformed attendance data: missing date")
    try:
        day = parse_api_date(raw_date)
    except ValueError:
        raise FetchError(f"Malformed attendance data: invalid date {raw_date!r}")

    total = payload.get("totalStudents", 0)
    if isinstance(total, bool) or not isinstance(total, int):
        raise FetchError("Malformed attendance data: totalStudents must be an integer")

    buckets = {
        name: _decode_bucket(payload.get(name), name, class_id=class_id, resolver=resolver)
        for name in ("presentStudents", "absentStudents", "lateStudents")
    }

    try:
        return AttendanceRecord(
            day=day,
            class_id=class_id,
            timeslot_id=timeslot_id,
            total_students=total,
            present_students=buckets["presentStudents"],
            absent_students=buckets["absentStudents"],
            late_students=buckets["lateStudents"],
            notes=_optional_text(payload.get("notes")),
            record_id=_optional_text(payload.get("_id")),
        )
    except ValidationError as e:
        raise FetchError(f"Malformed attendance data: {e}") from e


def decode_records(items: Iterable[Any], *, resolver: Optional[RosterResolver] = None) -> List[AttendanceRecord]:
    resolver = resolver or RosterResolver(None)
    return [decode_record(item, resolver=resolver) for item in items]
