"""
Half-open interval arithmetic for availability windows.

Pure domain logic: no database, no I/O. Windows are compared as
``[start, end)`` so back-to-back windows may coexist.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, TypeVar

from slotkeeper.core.exceptions import InvalidTimeFormat


class HasInterval(Protocol):
    start_time: datetime
    end_time: datetime


W = TypeVar("W", bound=HasInterval)


@dataclass(frozen=True)
class TimeWindow:
    """
    Immutable candidate window.

    Invariant: start must be before end.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidTimeFormat(
                f"Start time {self.start:%H:%M} must be before end time {self.end:%H:%M}",
                value={"start": self.start.strftime("%H:%M"), "end": self.end.strftime("%H:%M")},
            )

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Check if this window shares at least one instant with ``[start, end)``."""
        return self.start < end and start < self.end


def find_conflict(candidate: TimeWindow, existing: Iterable[W]) -> W | None:
    """
    Return the first existing window that overlaps the candidate, or None.

    Order of ``existing`` is irrelevant to the admit/reject decision.
    """
    for window in existing:
        if candidate.overlaps(window.start_time, window.end_time):
            return window
    return None
