from __future__ import annotations

from enum import Enum


class Mark(str, Enum):
    """Mark chosen for one student in a marking session."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    UNMARKED = "unmarked"


class AttendanceBand(str, Enum):
    """Colour band used when showing a monthly percentage."""

    GOOD = "good"
    WARNING = "warning"
    POOR = "poor"
