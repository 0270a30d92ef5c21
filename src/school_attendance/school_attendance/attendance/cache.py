from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from datetime import date
from typing import Callable, Dict, Optional, Sequence, Tuple

from ..core.constants import DEFAULT_CACHE_MAX_ENTRIES, DEFAULT_CACHE_TTL
from .model import AttendanceRecord
from .repository import AttendanceRecordSource

logger = logging.getLogger(__name__)

CacheKey = Tuple[date, Optional[str], Optional[str]]


class CachedRecordSource:
    """Read-through cache in front of an attendance record source.

    Keys are ``(date, class_id, timeslot_id)``. The cache lives in one
    process: writes made elsewhere (another worker, the admin console
    posting to the backend directly) are only picked up once an entry
    expires after ``ttl`` seconds. At most ``max_entries`` keys are kept,
    least recently used first out.

    ``invalidate`` bumps a per-date generation; a fetch that started before
    the bump does not store its result. Failed fetches are not cached.
    """

    def __init__(
        self,
        source: AttendanceRecordSource,
        *,
        ttl: float = DEFAULT_CACHE_TTL,
        max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._source = source
        self._ttl = float(ttl)
        self._max_entries = max(int(max_entries), 1)
        self._clock = clock
        self._entries: "OrderedDict[CacheKey, Tuple[float, Tuple[AttendanceRecord, ...]]]" = OrderedDict()
        self._generations: Dict[date, int] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def fetch_attendance_records(
        self,
        day: date,
        *,
        class_id: Optional[str] = None,
        timeslot_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        key = (day, class_id, timeslot_id)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                stored_at, records = entry
                if self._clock() - stored_at < self._ttl:
                    self._entries.move_to_end(key)
                    return list(records)
                del self._entries[key]
            generation = self._generations.get(day, 0)

        records = tuple(self._source.fetch_attendance_records(day, class_id=class_id, timeslot_id=timeslot_id))

        with self._lock:
            if self._generations.get(day, 0) == generation:
                self._entries[key] = (self._clock(), records)
                self._entries.move_to_end(key)
                while len(self._entries) > self._max_entries:
                    self._entries.popitem(last=False)
            else:
                logger.debug("Discarded attendance fetch for %s started before a write", day)
        return list(records)

    def invalidate(self, day: date, class_id: str, timeslot_id: str) -> int:
        """Drop every cached key whose filters would include this bucket."""
        with self._lock:
            self._generations[day] = self._generations.get(day, 0) + 1
            stale = [
                key
                for key in self._entries
                if key[0] == day
                and key[1] in (None, class_id)
                and key[2] in (None, timeslot_id)
            ]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("Invalidated %d cached attendance entries for %s", len(stale), day)
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generations.clear()
