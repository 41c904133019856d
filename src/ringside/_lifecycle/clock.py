# Area: Lifecycle
"""
ringside._lifecycle.clock — Clock Collaborators
===============================================

"Now" is never read directly inside lifecycle logic. Components receive
a clock so tests can pin the current instant.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Protocol, Union

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

DateLike = Union[datetime, date, str]


class Clock(Protocol):
    """Protocol for anything that can report the current instant."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Clock backed by the wall clock (naive local time, second precision)."""

    def now(self) -> datetime:
        return datetime.now().replace(microsecond=0)


class FixedClock:
    """
    Clock frozen at a given instant.

    Usage:
        clock = FixedClock("2024-09-01")
        clock.advance(days=3)
    """

    def __init__(self, instant: DateLike):
        self._instant = coerce_datetime(instant)

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: DateLike) -> None:
        self._instant = coerce_datetime(instant)

    def advance(self, **delta) -> datetime:
        self._instant = self._instant + timedelta(**delta)
        return self._instant


def coerce_datetime(value: DateLike) -> datetime:
    """
    Normalise a date, datetime or ISO string to a naive datetime.

    Plain dates become midnight. Timezone-aware values are converted to
    naive UTC so every stored timestamp compares consistently.

    Raises:
        ValueError: If a string cannot be parsed
        TypeError: If the value is not date-like
    """
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        result = datetime.fromisoformat(value.strip())
    else:
        raise TypeError(f"Expected a date, datetime or ISO string, got {type(value).__name__}")

    if result.tzinfo is not None:
        result = result.astimezone(timezone.utc).replace(tzinfo=None)
    return result.replace(microsecond=0)


def resolve(value: Optional[DateLike], clock: Clock) -> datetime:
    """Return ``value`` as a datetime, or the clock's current instant if None."""
    if value is None:
        return clock.now()
    return coerce_datetime(value)


def to_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.strptime(value, TIMESTAMP_FORMAT)
