"""
Tests for half-open window overlap detection.
"""

from dataclasses import dataclass
from datetime import datetime

import pytest

from slotkeeper.core.exceptions import InvalidTimeFormat
from slotkeeper.services.intervals import TimeWindow, find_conflict
from slotkeeper.services.time_normalizer import normalize_time


@dataclass
class StoredWindow:
    id: int
    start_time: datetime
    end_time: datetime


def window(start: str, end: str) -> TimeWindow:
    return TimeWindow(start=normalize_time(start), end=normalize_time(end))


def stored(id: int, start: str, end: str) -> StoredWindow:
    return StoredWindow(id=id, start_time=normalize_time(start), end_time=normalize_time(end))


class TestTimeWindow:
    """Tests for TimeWindow construction and overlap."""

    def test_inverted_range_rejected(self):
        with pytest.raises(InvalidTimeFormat):
            window("10:00", "09:00")

    def test_empty_range_rejected(self):
        with pytest.raises(InvalidTimeFormat):
            window("10:00", "10:00")

    def test_adjacent_windows_do_not_overlap(self):
        w = window("09:00", "10:00")
        assert not w.overlaps(normalize_time("10:00"), normalize_time("11:00"))
        assert not w.overlaps(normalize_time("08:00"), normalize_time("09:00"))

    def test_identical_windows_overlap(self):
        w = window("09:00", "10:00")
        assert w.overlaps(w.start, w.end)

    def test_partial_overlap(self):
        w = window("10:00", "12:00")
        assert w.overlaps(normalize_time("09:00"), normalize_time("11:00"))

    def test_containment_overlaps(self):
        w = window("09:00", "17:00")
        assert w.overlaps(normalize_time("12:00"), normalize_time("12:30"))
        inner = window("12:00", "12:30")
        assert inner.overlaps(w.start, w.end)


class TestFindConflict:
    """Tests for find_conflict."""

    def test_no_existing_windows(self):
        assert find_conflict(window("09:00", "10:00"), []) is None

    def test_back_to_back_admitted(self):
        existing = [stored(1, "08:00", "09:00"), stored(2, "10:00", "11:00")]
        assert find_conflict(window("09:00", "10:00"), existing) is None

    def test_reports_conflicting_window(self):
        existing = [stored(1, "07:00", "08:00"), stored(2, "09:00", "11:00")]
        conflict = find_conflict(window("10:00", "12:00"), existing)
        assert conflict is not None
        assert conflict.id == 2

    def test_order_does_not_matter(self):
        existing = [stored(3, "13:00", "14:00"), stored(1, "07:00", "08:00"), stored(2, "09:00", "11:00")]
        candidate = window("10:30", "13:30")
        assert find_conflict(candidate, existing) is not None
        assert find_conflict(candidate, list(reversed(existing))) is not None
