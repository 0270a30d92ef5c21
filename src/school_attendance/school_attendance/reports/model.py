from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AttendanceBand
from ..common.percentages import band_for


@dataclass(frozen=True)
class StudentTally:
    """Per-student counters over a date range. Rebuilt on every report."""

    student_id: str
    name: str
    reg_no: str
    present: int
    absent: int
    late: int
    percentage: int

    @property
    def total_marks(self) -> int:
        return self.present + self.absent + self.late

    @property
    def band(self) -> AttendanceBand:
        return band_for(self.percentage)

    def as_dict(self) -> dict:
        return {
            "studentId": self.student_id,
            "student": self.name,
            "regNo": self.reg_no,
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "totalMarks": self.total_marks,
            "percentage": self.percentage,
            "band": self.band.value,
        }
