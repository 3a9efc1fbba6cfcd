"""Calendar-date utilities and the analysis window type.

Every date used as a bucketing key is a plain ``datetime.date``: a
(year, month, day) value with no timezone attached.  Timestamps coming
from the data layer are reduced to their own calendar date before they
get here, so an entry logged at 23:30 never slides into the next day.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

logger = logging.getLogger(__name__)

# Start of the "all" window when there are no records at all.
EPOCH = date(2020, 1, 1)

# Symbolic window keys -> inclusive length in days, ending today.
WINDOW_DAYS = {
    "week": 7,
    "month": 30,
    "3months": 90,
    "6months": 180,
    "year": 365,
}
ALL_WINDOW = "all"
WINDOW_KEYS = tuple(WINDOW_DAYS) + (ALL_WINDOW,)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class AnalyticsError(ValueError):
    """Base class for errors raised by the analytics core."""


class InvalidWindow(AnalyticsError):
    """Window ends before it starts, or names an unknown symbolic range."""


class UnparseableRecordDate(AnalyticsError):
    """A record's date could not be read as a calendar date."""


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------

def day_key(d: date) -> str:
    return d.isoformat()


def month_key(d: date) -> str:
    return f"{d.year}-{d.month:02d}"


def week_start(d: date) -> date:
    """Return the Monday on or before *d*."""
    return d - timedelta(days=d.weekday())


def month_start(d: date) -> date:
    return d.replace(day=1)


def month_end(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def days_between(a: date, b: date) -> int:
    """Return ``b - a`` in whole calendar days (negative if *b* is earlier)."""
    return (b - a).days


def is_same_day(a: date, b: date) -> bool:
    return a == b


def add_days(d: date, n: int) -> date:
    return d + timedelta(days=n)


def add_months(d: date, n: int) -> date:
    """Shift *d* by *n* calendar months, clamping the day to the month length.

    Args:
        d: Starting date.
        n: Number of months to move; may be negative.

    Returns:
        The shifted date.  Jan 31 + 1 month is Feb 28 (or 29).
    """
    index = d.year * 12 + (d.month - 1) + n
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def today() -> date:
    return date.today()


def parse_calendar_date(value: object) -> date:
    """Read a calendar date from a record field.

    Accepts ``date`` objects, ``datetime`` objects (their own calendar
    date is used as-is, no timezone conversion) and ISO strings.  For a
    string only the leading ``YYYY-MM-DD`` is read, so
    ``"2024-01-05T23:30:00-08:00"`` is Jan 5 regardless of offset.

    Args:
        value: The raw date value.

    Returns:
        The parsed calendar date.

    Raises:
        UnparseableRecordDate: If *value* is not a recognisable date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            pass
    raise UnparseableRecordDate(f"Unparseable record date: {value!r}")


# ---------------------------------------------------------------------------
# Window
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Window:
    """Inclusive date range under analysis.

    ``key`` carries the symbolic range the window was resolved from
    ("month", "all", ...) or None for an explicit range.
    """

    start: date
    end: date
    key: str | None = None

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise InvalidWindow(
                f"Window ends before it starts: {self.start} > {self.end}"
            )

    @property
    def length_days(self) -> int:
        return days_between(self.start, self.end) + 1

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    def to_dict(self) -> dict:
        return {
            "start": day_key(self.start),
            "end": day_key(self.end),
            "key": self.key,
            "length_days": self.length_days,
        }


def resolve_window(
    window: Window | str,
    record_dates: Iterable[date] = (),
    reference_date: date | None = None,
) -> Window:
    """Turn a symbolic window key into a concrete :class:`Window`.

    Fixed ranges end on *reference_date* and span the number of days in
    ``WINDOW_DAYS`` (inclusive).  ``"all"`` starts at the earliest of
    *record_dates*, or ``EPOCH`` when there are none.

    Args:
        window: A ``Window`` (returned unchanged) or one of ``WINDOW_KEYS``.
        record_dates: Calendar dates of the records; only used for "all".
        reference_date: The day treated as "today".  Defaults to the
            actual current date.

    Returns:
        The resolved window.

    Raises:
        InvalidWindow: If *window* is not a known key.
    """
    if isinstance(window, Window):
        return window

    ref = reference_date or today()
    if window == ALL_WINDOW:
        earliest = min(record_dates, default=EPOCH)
        return Window(start=min(earliest, ref), end=ref, key=ALL_WINDOW)

    days = WINDOW_DAYS.get(window)
    if days is None:
        raise InvalidWindow(
            f"Unknown window {window!r}; expected one of {', '.join(WINDOW_KEYS)}"
        )
    return Window(start=add_days(ref, -(days - 1)), end=ref, key=window)


def explicit_window(start: object, end: object) -> Window:
    """Build a window from two raw date values (ISO strings or dates).

    Raises:
        InvalidWindow: If either bound is unparseable or ``end < start``.
    """
    try:
        start_date = parse_calendar_date(start)
        end_date = parse_calendar_date(end)
    except UnparseableRecordDate as exc:
        raise InvalidWindow(str(exc)) from exc
    return Window(start=start_date, end=end_date)
