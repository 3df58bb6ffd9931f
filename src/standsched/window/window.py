from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum

from standsched._exceptions import UnknownViewMode
from standsched.model import add_elapsed
from standsched.settings import SchedulerSettings, get_settings

WINDOW_LENGTH = timedelta(hours=24)
WINDOW_MINUTES: int = 24 * 60


class ViewMode(str, Enum):
    SHIFT = "shift"
    CALENDAR = "calendar"

    @classmethod
    def coerce(cls, mode: ViewMode | str) -> ViewMode:
        try:
            return cls(mode)
        except ValueError:
            raise UnknownViewMode(
                f"View mode must be 'shift' or 'calendar'; got {mode!r}."
            ) from None


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """A fixed-length [start, end) interval the board is drawn against."""

    start: datetime
    end: datetime
    mode: ViewMode
    start_hour: int = 0

    @property
    def minutes(self) -> float:
        # Same-zone subtraction ignores the UTC offset; compare instants.
        return (_utc(self.end) - _utc(self.start)).total_seconds() / 60.0

    @property
    def hours(self) -> list[int]:
        return [(self.start_hour + i) % 24 for i in range(24)]

    def contains(self, instant: datetime) -> bool:
        return _utc(self.start) <= _utc(instant) < _utc(self.end)


def _utc(instant: datetime) -> datetime:
    return instant.astimezone(timezone.utc)


def _start_hour(mode: ViewMode, settings: SchedulerSettings) -> int:
    return settings.shift_start_hour if mode is ViewMode.SHIFT else 0


def compute_window(
    anchor: datetime | date,
    mode: ViewMode | str = ViewMode.SHIFT,
    settings: SchedulerSettings | None = None,
) -> TimeWindow:
    """
    Canonical window for the calendar day containing ``anchor``.

    The time of day of ``anchor`` never moves the window: an anchor at 03:00
    still yields that same day's 06:00 shift start.
    A naive ``anchor`` is read in the configured timezone, like a ``date``.
    """
    settings = settings or get_settings()
    mode = ViewMode.coerce(mode)

    if isinstance(anchor, datetime):
        base = anchor if anchor.tzinfo else anchor.replace(tzinfo=settings.tzinfo)
    else:
        base = datetime.combine(anchor, time(0), tzinfo=settings.tzinfo)

    start = base.replace(
        hour=_start_hour(mode, settings), minute=0, second=0, microsecond=0
    )
    # 1440 elapsed minutes, so a DST day ends an hour off the usual wall time.
    return TimeWindow(
        start=start,
        end=add_elapsed(start, WINDOW_LENGTH),
        mode=mode,
        start_hour=start.hour,
    )


def hours_for_mode(
    mode: ViewMode | str, settings: SchedulerSettings | None = None
) -> list[int]:
    mode = ViewMode.coerce(mode)
    first = _start_hour(mode, settings or get_settings())
    return [(first + i) % 24 for i in range(24)]


def format_hour(hour: int) -> str:
    """Hour label for the board header: 0 → '12AM', 13 → '1PM'."""
    suffix = "PM" if hour % 24 >= 12 else "AM"
    return f"{hour % 12 or 12}{suffix}"


def fetch_range(
    window: TimeWindow, margin: timedelta | None = None
) -> tuple[datetime, datetime]:
    """Range of job start times a caller should load to draw ``window``."""
    if margin is None:
        margin = timedelta(hours=get_settings().fetch_margin_hours)
    return add_elapsed(window.start, -margin), add_elapsed(window.end, margin)
