"""Live open/closed status derived from a weekly opening schedule.

The resolver is a pure function of ``(schedule, now, permanently_closed)``.
It holds no timers; callers re-invoke it on their own cadence (the web UI
polls once a minute) to keep the displayed status current.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, time

MINUTES_PER_DAY = 24 * 60

STATE_OPEN = "open"
STATE_CLOSING_SOON = "closing_soon"
STATE_CLOSED = "closed"
STATE_UNKNOWN = "unknown"

DayHours = tuple[time | None, time | None]


@dataclass(frozen=True)
class OpeningStatus:
    """Resolved status for one instant."""

    state: str
    detail: str | None = None
    # Minutes until opening (closed) or closing (open/closing_soon), when known.
    minutes: int | None = None
    today_hours: str | None = None

    @property
    def is_open(self) -> bool:
        """Return True while the pub is serving, including the closing-soon hour."""
        return self.state in (STATE_OPEN, STATE_CLOSING_SOON)


def minutes_since_midnight(value: time | datetime) -> int:
    """Return whole minutes elapsed since midnight."""
    return value.hour * 60 + value.minute


def format_clock(value: time) -> str:
    """Format a time as ``9pm`` or ``11:30am``."""
    suffix = "pm" if value.hour >= 12 else "am"
    hour = value.hour % 12 or 12
    if value.minute == 0:
        return f"{hour}{suffix}"
    return f"{hour}:{value.minute:02d}{suffix}"


def format_day_hours(open_time: time | None, close_time: time | None) -> str:
    """Return a display string for one day's hours."""
    if open_time is None or close_time is None:
        return "Closed"
    return f"{format_clock(open_time)} - {format_clock(close_time)}"


def has_opening_hours(schedule: Sequence[DayHours]) -> bool:
    """Return True if any day has both an opening and closing time."""
    return any(open_time is not None and close_time is not None for open_time, close_time in schedule)


def resolve_status(
    schedule: Sequence[DayHours],
    now: datetime,
    permanently_closed: bool = False,
    *,
    closing_soon_minutes: int = 60,
) -> OpeningStatus:
    """Resolve the open/closed state of a pub at ``now``.

    Args:
        schedule: Seven ``(open, close)`` pairs indexed by ``datetime.weekday()``
            (Monday first). Either value may be None.
        now: Local wall-clock time at the pub.
        permanently_closed: Short-circuits everything else to ``closed``.
        closing_soon_minutes: Width of the closing-soon band and of the
            "opens in N min" hint.

    Returns:
        The resolved OpeningStatus.
    """
    if permanently_closed:
        return OpeningStatus(state=STATE_CLOSED)

    if len(schedule) != 7:
        raise ValueError("schedule must contain exactly seven days")

    open_time, close_time = schedule[now.weekday()]
    if open_time is None or close_time is None:
        return OpeningStatus(state=STATE_UNKNOWN, detail="Hours unknown")

    today_hours = format_day_hours(open_time, close_time)
    open_minutes = minutes_since_midnight(open_time)
    close_minutes = minutes_since_midnight(close_time)
    current = minutes_since_midnight(now)

    # Window crosses midnight; the early-morning tail belongs to the same window.
    if close_minutes < open_minutes:
        close_minutes += MINUTES_PER_DAY
        if current < open_minutes:
            current += MINUTES_PER_DAY

    if current < open_minutes:
        opens_in = open_minutes - current
        if opens_in <= closing_soon_minutes:
            detail = f"Opens in {opens_in}min"
        else:
            detail = f"Opens at {format_clock(open_time)}"
        return OpeningStatus(
            state=STATE_CLOSED, detail=detail, minutes=opens_in, today_hours=today_hours
        )

    if current < close_minutes:
        closes_in = close_minutes - current
        if closes_in <= closing_soon_minutes:
            return OpeningStatus(
                state=STATE_CLOSING_SOON,
                detail=f"Closes in {closes_in}min",
                minutes=closes_in,
                today_hours=today_hours,
            )
        return OpeningStatus(
            state=STATE_OPEN,
            detail=f"Open until {format_clock(close_time)}",
            minutes=closes_in,
            today_hours=today_hours,
        )

    return OpeningStatus(state=STATE_CLOSED, detail="Closed", today_hours=today_hours)
