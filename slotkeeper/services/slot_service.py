from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time

from slotkeeper.models.availability import AvailabilityWindow
from slotkeeper.services.time_normalizer import reanchor


@dataclass(frozen=True)
class Slot:
    """Consumer-facing view of a window on a specific date."""

    slot_id: int
    start_time: datetime
    end_time: datetime


def lower_bound(on: date | datetime) -> datetime:
    """A bare date means the whole day; a datetime means "from this instant on".

    Windows carry no timezone, so an aware datetime is read on its own wall
    clock: the offset is dropped, not converted.
    """
    if isinstance(on, datetime):
        return on.replace(tzinfo=None)
    return datetime.combine(on, time.min)


def slots_for(windows: Iterable[AvailabilityWindow], on: date | datetime) -> list[Slot]:
    """Project windows onto ``on``'s calendar date, sorted by start time.

    A window is kept when both re-anchored ends are at or after the lower bound.
    """
    bound = lower_bound(on)
    day = on.date() if isinstance(on, datetime) else on
    slots: list[Slot] = []
    for w in windows:
        start = reanchor(w.start_time, day)
        end = reanchor(w.end_time, day)
        if start >= bound and end >= bound:
            slots.append(Slot(slot_id=w.id, start_time=start, end_time=end))
    slots.sort(key=lambda s: (s.start_time, s.slot_id))
    return slots
