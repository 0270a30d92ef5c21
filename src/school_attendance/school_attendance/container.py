from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.cache import CachedRecordSource
from .attendance.http_client import HttpAttendanceApi
from .attendance.repository import AttendanceRecordSource
from .attendance.service import AttendanceService
from .reports.aggregator import AttendanceAggregator


@dataclass(frozen=True)
class Container:
    api: HttpAttendanceApi
    record_source: AttendanceRecordSource

    attendance_service: AttendanceService
    aggregator: AttendanceAggregator


def build_container(
    *,
    api_base: str,
    api_timeout: float = 10,
    max_workers: int = 8,
    report_timeout: Optional[float] = None,
    cache_enabled: bool = False,
    cache_ttl: float = 60,
    cache_max_entries: int = 1024,
) -> Container:
    api = HttpAttendanceApi(api_base, timeout=api_timeout)
    record_source: AttendanceRecordSource = api
    if cache_enabled:
        record_source = CachedRecordSource(api, ttl=cache_ttl, max_entries=cache_max_entries)

    attendance_service = AttendanceService(record_source, writer=api, directory=api)
    aggregator = AttendanceAggregator(attendance_service, max_workers=max_workers, timeout=report_timeout)

    return Container(
        api=api,
        record_source=record_source,
        attendance_service=attendance_service,
        aggregator=aggregator,
    )
