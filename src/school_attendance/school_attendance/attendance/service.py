from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from ..common.validators import optional_identifier, require_date, require_non_empty
from ..core.enums import Mark
from ..core.exceptions import ValidationError, WriteError
from ..reports.daily import DailyStats, summarize_day
from .cache import CachedRecordSource
from .model import AttendanceRecord, NewAttendanceRecord, StudentRef
from .repository import AttendanceRecordSource, AttendanceRecordWriter, StudentDirectory

logger = logging.getLogger(__name__)

Marks = Union[Mapping[str, Union[Mark, str]], Iterable[Tuple[str, Union[Mark, str]]]]


class AttendanceService:
    def __init__(
        self,
        source: AttendanceRecordSource,
        *,
        writer: Optional[AttendanceRecordWriter] = None,
        directory: Optional[StudentDirectory] = None,
    ):
        self._source = source
        self._writer = writer
        self._directory = directory

    def compute_daily_summary(
        self,
        day: date,
        class_id: Optional[str] = None,
        timeslot_id: Optional[str] = None,
    ) -> List[AttendanceRecord]:
        """All records for ``day`` matching the filters; ``[]`` when none match."""
        day = require_date(day)
        class_id = optional_identifier(class_id, "class_id")
        timeslot_id = optional_identifier(timeslot_id, "timeslot_id")
        return list(self._source.fetch_attendance_records(day, class_id=class_id, timeslot_id=timeslot_id))

    def daily_stats(
        self,
        day: date,
        class_id: Optional[str] = None,
        timeslot_id: Optional[str] = None,
    ) -> DailyStats:
        return summarize_day(self.compute_daily_summary(day, class_id, timeslot_id))

    def list_roster(self, class_id: str) -> List[StudentRef]:
        if self._directory is None:
            raise ValidationError("No student directory configured")
        return list(self._directory.fetch_students_by_class(require_non_empty(class_id, "class_id")))

    @staticmethod
    def _parse_mark(value: Union[Mark, str], student_id: str) -> Mark:
        try:
            return Mark(value)
        except ValueError:
            raise ValidationError(f"Invalid mark {value!r} for student {student_id}")

    def validate_marking_payload(
        self,
        students: Sequence[StudentRef],
        marks: Marks,
        class_id: str,
        timeslot_id: str,
        day: date,
    ) -> Tuple[List[str], List[str], List[str]]:
        """Split a marking session into present/absent/late id lists.

        Fails closed: any unknown student, unknown mark, or a student landing
        in more than one bucket rejects the whole payload.
        """
        require_non_empty(class_id, "class_id")
        require_non_empty(timeslot_id, "timeslot_id")
        require_date(day)

        pairs = list(marks.items()) if isinstance(marks, Mapping) else list(marks)
        roster_ids = [s.student_id for s in students]
        known = set(roster_ids)

        marked: dict[str, List[Mark]] = {}
        for student_id, value in pairs:
            if student_id not in known:
                raise ValidationError(f"Unknown student {student_id}")
            marked.setdefault(student_id, []).append(self._parse_mark(value, student_id))

        buckets: dict[Mark, List[str]] = {Mark.PRESENT: [], Mark.ABSENT: [], Mark.LATE: []}
        for student_id in roster_ids:
            for mark in marked.get(student_id, ()):
                if mark != Mark.UNMARKED:
                    buckets[mark].append(student_id)

        all_ids = buckets[Mark.PRESENT] + buckets[Mark.ABSENT] + buckets[Mark.LATE]
        if len(set(all_ids)) != len(all_ids):
            raise ValidationError("A student cannot be in multiple buckets")

        return buckets[Mark.PRESENT], buckets[Mark.ABSENT], buckets[Mark.LATE]

    def mark_attendance(
        self,
        students: Sequence[StudentRef],
        marks: Marks,
        class_id: str,
        timeslot_id: str,
        day: date,
        *,
        notes: Optional[str] = None,
    ) -> NewAttendanceRecord:
        present, absent, late = self.validate_marking_payload(students, marks, class_id, timeslot_id, day)
        if notes is not None and not isinstance(notes, str):
            raise ValidationError("notes must be text")
        if self._writer is None:
            raise WriteError("No attendance writer configured")

        record = NewAttendanceRecord(
            day=require_date(day),
            class_id=class_id.strip(),
            timeslot_id=timeslot_id.strip(),
            total_students=len(students),
            present_ids=tuple(present),
            absent_ids=tuple(absent),
            late_ids=tuple(late),
            notes=(notes or "").strip() or None,
        )
        self._writer.write_attendance_record(record)

        if isinstance(self._source, CachedRecordSource):
            self._source.invalidate(record.day, record.class_id, record.timeslot_id)

        logger.info(
            "Marked %d present, %d absent, %d late for class=%s timeslot=%s",
            len(present), len(absent), len(late), record.class_id, record.timeslot_id,
        )
        return record
