from __future__ import annotations

import csv
import io
from typing import Sequence

from .model import StudentTally

CSV_FIELDS = [
    "student_id",
    "name",
    "reg_no",
    "present",
    "absent",
    "late",
    "total_marks",
    "percentage",
    "band",
]


def export_monthly_csv(tallies: Sequence[StudentTally]) -> bytes:
    """Render a monthly report as CSV bytes (UTF-8 with BOM, opens cleanly in Excel)."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
    writer.writeheader()
    for t in tallies:
        writer.writerow(
            {
                "student_id": t.student_id,
                "name": t.name,
                "reg_no": t.reg_no,
                "present": t.present,
                "absent": t.absent,
                "late": t.late,
                "total_marks": t.total_marks,
                "percentage": t.percentage,
                "band": t.band.value,
            }
        )
    return out.getvalue().encode("utf-8-sig")
