from __future__ import annotations

from ..core.constants import GOOD_ATTENDANCE_THRESHOLD, WARNING_ATTENDANCE_THRESHOLD
from ..core.enums import AttendanceBand


def attendance_percentage(present: int, total_marks: int) -> int:
    """Integer percentage of ``present`` over ``total_marks``, 0 when nothing was marked.

    Rounds half away from zero using integer arithmetic only, so 2/3 gives 67
    and 1/8 (12.5%) gives 13.
    """
    if total_marks <= 0:
        return 0
    return (200 * present + total_marks) // (2 * total_marks)


def band_for(percentage: int) -> AttendanceBand:
    if percentage >= GOOD_ATTENDANCE_THRESHOLD:
        return AttendanceBand.GOOD
    if percentage >= WARNING_ATTENDANCE_THRESHOLD:
        return AttendanceBand.WARNING
    return AttendanceBand.POOR
