from __future__ import annotations

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from ..attendance.model import AttendanceRecord, StudentRef
from ..attendance.service import AttendanceService
from ..common.datetime_utils import format_iso_date, month_days
from ..common.percentages import attendance_percentage
from ..common.validators import optional_identifier, require_first_of_month
from ..core.constants import DEFAULT_FETCH_MAX_WORKERS, MISSING_LABEL
from ..core.exceptions import AggregationError
from .model import StudentTally

logger = logging.getLogger(__name__)


def _latest(current: Optional[Tuple[date, str]], day: date, value: Optional[str]) -> Optional[Tuple[date, str]]:
    # Most recent non-empty value wins; same-day conflicts keep the larger value.
    if not value:
        return current
    candidate = (day, value)
    if current is None or candidate > current:
        return candidate
    return current


@dataclass
class _Counter:
    student_id: str
    present: int = 0
    absent: int = 0
    late: int = 0
    name: Optional[Tuple[date, str]] = None
    reg_no: Optional[Tuple[date, str]] = None

    def see(self, student: StudentRef, day: date) -> None:
        self.name = _latest(self.name, day, student.name)
        self.reg_no = _latest(self.reg_no, day, student.reg_no)

    def to_tally(self) -> StudentTally:
        return StudentTally(
            student_id=self.student_id,
            name=self.name[1] if self.name else MISSING_LABEL,
            reg_no=self.reg_no[1] if self.reg_no else MISSING_LABEL,
            present=self.present,
            absent=self.absent,
            late=self.late,
            percentage=attendance_percentage(self.present, self.present + self.absent + self.late),
        )


def fold_records(records: Iterable[AttendanceRecord]) -> List[StudentTally]:
    """Fold records into per-student tallies, sorted by name.

    Each record adds at most one mark per student per bucket. Only students
    with at least one mark appear. Counts do not depend on record order.

    Names compare by code point (case-sensitive, "Zed" before "amy", the
    "—" placeholder last) so the order is the same on every host whatever
    its locale; ties keep insertion order.
    """
    counters: Dict[str, _Counter] = {}

    for record in records:
        for bucket, students in (
            ("present", record.present_students),
            ("absent", record.absent_students),
            ("late", record.late_students),
        ):
            seen = set()
            for student in students:
                counter = counters.get(student.student_id)
                if counter is None:
                    counter = _Counter(student_id=student.student_id)
                    counters[student.student_id] = counter
                counter.see(student, record.day)
                if student.student_id in seen:
                    continue
                seen.add(student.student_id)
                setattr(counter, bucket, getattr(counter, bucket) + 1)

    tallies = [c.to_tally() for c in counters.values()]
    tallies.sort(key=lambda t: t.name)
    return tallies


class AttendanceAggregator:
    """Builds monthly per-student attendance reports.

    Per-day fetches fan out on a thread pool; ``max_workers=1`` runs them one
    by one with identical results. The report is all-or-nothing: a failing
    day or an expired ``timeout`` raises ``AggregationError``.
    """

    def __init__(
        self,
        attendance: AttendanceService,
        *,
        max_workers: int = DEFAULT_FETCH_MAX_WORKERS,
        timeout: Optional[float] = None,
    ):
        self._attendance = attendance
        self._max_workers = max(int(max_workers), 1)
        self._timeout = timeout

    def _fetch_days(
        self,
        days: List[date],
        class_id: Optional[str],
        timeslot_id: Optional[str],
        timeout: Optional[float],
    ) -> List[List[AttendanceRecord]]:
        executor = ThreadPoolExecutor(max_workers=min(self._max_workers, len(days)))
        try:
            futures = [
                executor.submit(self._attendance.compute_daily_summary, d, class_id, timeslot_id)
                for d in days
            ]
            done, pending = wait(futures, timeout=timeout, return_when=FIRST_EXCEPTION)

            failures = []
            for day, future in zip(days, futures):
                if future not in done:
                    continue
                error = future.exception()
                if error is None:
                    continue
                logger.warning("Attendance fetch failed for %s: %s", format_iso_date(day), error)
                failures.append(error)

            if failures:
                raise AggregationError("Failed to build monthly report", failures)
            if pending:
                raise AggregationError(f"Monthly report timed out with {len(pending)} days still pending")

            return [f.result() for f in futures]
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def compute_monthly_report(
        self,
        month_start: date,
        class_id: Optional[str] = None,
        timeslot_id: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
    ) -> List[StudentTally]:
        month_start = require_first_of_month(month_start)
        class_id = optional_identifier(class_id, "class_id")
        timeslot_id = optional_identifier(timeslot_id, "timeslot_id")

        days = month_days(month_start)
        per_day = self._fetch_days(days, class_id, timeslot_id, timeout if timeout is not None else self._timeout)
        records = [record for day_records in per_day for record in day_records]

        tallies = fold_records(records)
        logger.info(
            "Monthly report %s class=%s timeslot=%s: %d records, %d students",
            month_start.strftime("%Y-%m"), class_id or "*", timeslot_id or "*", len(records), len(tallies),
        )
        return tallies
