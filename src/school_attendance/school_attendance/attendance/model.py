from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from ..core.constants import MISSING_LABEL
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class StudentRef:
    """A student as carried on an attendance record or a class roster."""

    student_id: str
    name: Optional[str] = None
    reg_no: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or MISSING_LABEL

    @property
    def display_reg_no(self) -> str:
        return self.reg_no or MISSING_LABEL


@dataclass(frozen=True)
class AttendanceRecord:
    """One marked session for a class+timeslot on a given date.

    The three buckets are pairwise disjoint by ``student_id``.
    """

    day: date
    class_id: str
    timeslot_id: str
    total_students: int
    present_students: Tuple[StudentRef, ...] = ()
    absent_students: Tuple[StudentRef, ...] = ()
    late_students: Tuple[StudentRef, ...] = ()
    notes: Optional[str] = None
    record_id: Optional[str] = None

    def __post_init__(self):
        if self.total_students < 0:
            raise ValidationError("totalStudents cannot be negative")
        ensure_disjoint(
            [s.student_id for s in self.present_students],
            [s.student_id for s in self.absent_students],
            [s.student_id for s in self.late_students],
        )


@dataclass(frozen=True)
class NewAttendanceRecord:
    """Validated payload for a new attendance record (write side)."""

    day: date
    class_id: str
    timeslot_id: str
    total_students: int
    present_ids: Tuple[str, ...]
    absent_ids: Tuple[str, ...]
    late_ids: Tuple[str, ...]
    notes: Optional[str] = None


def ensure_disjoint(present, absent, late) -> None:
    """Reject a student that sits in more than one bucket.

    Repeats inside a single bucket are tolerated; they count once.
    """
    seen: dict[str, str] = {}
    for bucket, ids in (("present", present), ("absent", absent), ("late", late)):
        for student_id in set(ids):
            other = seen.get(student_id)
            if other is not None:
                raise ValidationError(f"Student {student_id} cannot be both {other} and {bucket}")
            seen[student_id] = bucket
