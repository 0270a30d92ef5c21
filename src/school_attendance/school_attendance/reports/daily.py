from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..attendance.model import AttendanceRecord
from ..common.percentages import attendance_percentage


@dataclass(frozen=True)
class DailyStats:
    """Quick stats for one day's records (bucket sizes summed over records)."""

    record_count: int
    present: int
    absent: int
    late: int
    average_percentage: int
    max_class_size: int

    @property
    def total_marks(self) -> int:
        return self.present + self.absent + self.late

    def as_dict(self) -> dict:
        return {
            "records": self.record_count,
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "totalMarks": self.total_marks,
            "averagePercentage": self.average_percentage,
            "maxClassSize": self.max_class_size,
        }


def summarize_day(records: Sequence[AttendanceRecord]) -> DailyStats:
    present = sum(len(r.present_students) for r in records)
    absent = sum(len(r.absent_students) for r in records)
    late = sum(len(r.late_students) for r in records)
    return DailyStats(
        record_count=len(records),
        present=present,
        absent=absent,
        late=late,
        average_percentage=attendance_percentage(present, present + absent + late),
        max_class_size=max((r.total_students for r in records), default=0),
    )
