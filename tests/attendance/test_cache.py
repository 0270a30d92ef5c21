from __future__ import annotations

import threading
from datetime import date

import pytest

from src.school_attendance.school_attendance.attendance.cache import CachedRecordSource
from src.school_attendance.school_attendance.core.exceptions import FetchError


class CountingSource:
    def __init__(self, fail=False):
        self.calls = 0
        self.fail = fail

    def fetch_attendance_records(self, day, *, class_id=None, timeslot_id=None):
        self.calls += 1
        if self.fail:
            raise FetchError("down")
        return []


def test_cache_hits_on_same_key_only():
    source = CountingSource()
    cache = CachedRecordSource(source)
    day = date(2024, 4, 2)

    cache.fetch_attendance_records(day, class_id="c1")
    cache.fetch_attendance_records(day, class_id="c1")
    cache.fetch_attendance_records(day, class_id="c2")

    assert source.calls == 2


def test_invalidate_drops_every_matching_filter_combination():
    cache = CachedRecordSource(CountingSource())
    day = date(2024, 4, 2)
    for class_id, timeslot_id in [(None, None), ("c1", None), ("c1", "t1"), (None, "t1"), ("c2", None), ("c1", "t2")]:
        cache.fetch_attendance_records(day, class_id=class_id, timeslot_id=timeslot_id)
    cache.fetch_attendance_records(date(2024, 4, 3))

    assert cache.invalidate(day, "c1", "t1") == 4


def test_failed_fetch_is_not_cached():
    source = CountingSource(fail=True)
    cache = CachedRecordSource(source)

    for _ in range(2):
        with pytest.raises(FetchError):
            cache.fetch_attendance_records(date(2024, 4, 2))

    assert source.calls == 2


class BlockingSource:
    def __init__(self):
        self.records = []
        self.started = threading.Event()
        self.release = threading.Event()
        self.block = True

    def fetch_attendance_records(self, day, *, class_id=None, timeslot_id=None):
        snapshot = list(self.records)
        if self.block:
            self.block = False
            self.started.set()
            self.release.wait(5)
        return snapshot


def test_fetch_in_flight_during_write_is_not_cached():
    source = BlockingSource()
    cache = CachedRecordSource(source)
    day = date(2024, 4, 2)

    worker = threading.Thread(target=cache.fetch_attendance_records, args=(day,))
    worker.start()
    assert source.started.wait(5)

    source.records.append("new record")
    cache.invalidate(day, "c1", "t1")
    source.release.set()
    worker.join(5)

    assert cache.fetch_attendance_records(day) == ["new record"]


def test_least_recently_used_entries_are_evicted():
    source = CountingSource()
    cache = CachedRecordSource(source, max_entries=2)
    d1, d2, d3 = date(2024, 4, 1), date(2024, 4, 2), date(2024, 4, 3)

    cache.fetch_attendance_records(d1)
    cache.fetch_attendance_records(d2)
    cache.fetch_attendance_records(d1)
    cache.fetch_attendance_records(d3)
    assert len(cache) == 2
    assert source.calls == 3

    cache.fetch_attendance_records(d1)
    assert source.calls == 3
    cache.fetch_attendance_records(d2)
    assert source.calls == 4


def test_entries_expire_after_ttl():
    now = [100.0]
    source = CountingSource()
    cache = CachedRecordSource(source, ttl=30, clock=lambda: now[0])
    day = date(2024, 4, 2)

    cache.fetch_attendance_records(day)
    now[0] += 29
    cache.fetch_attendance_records(day)
    assert source.calls == 1

    now[0] += 2
    cache.fetch_attendance_records(day)
    assert source.calls == 2
