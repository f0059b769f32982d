from datetime import date, datetime, time

from slotkeeper.core.exceptions import InvalidTimeFormat

# All window instants live on this date so they compare by time-of-day only
REFERENCE_DATE = date(1970, 1, 1)


def _parse_field(raw: str, upper: int, name: str, value: str) -> int:
    if not (1 <= len(raw) <= 2) or not raw.isascii() or not raw.isdigit():
        raise InvalidTimeFormat(f"{name} must be numeric in {value!r}", value=value)
    n = int(raw)
    if n > upper:
        raise InvalidTimeFormat(f"{name} out of range in {value!r}", value=value)
    return n


def normalize_time(value: str, reference: date = REFERENCE_DATE) -> datetime:
    """Convert an ``"HH:MM"`` time-of-day into an instant on ``reference``."""
    if not isinstance(value, str):
        raise InvalidTimeFormat("Time must be a string in HH:MM format", value=value)
    parts = value.strip().split(":")
    if len(parts) != 2:
        raise InvalidTimeFormat(f"Expected HH:MM, got {value!r}", value=value)
    hour = _parse_field(parts[0], 23, "hour", value)
    minute = _parse_field(parts[1], 59, "minute", value)
    return datetime.combine(reference, time(hour, minute))


def reanchor(instant: datetime, day: date) -> datetime:
    """Same time-of-day as ``instant``, moved onto ``day``."""
    return datetime.combine(day, instant.time())
