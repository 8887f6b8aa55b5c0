"""Weekly lookback window used by weekly queries and reports."""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Union


LOOKBACK_DAYS = 7


@dataclass(frozen=True)
class WeeklyWindow:
    """Inclusive range from the start of (reference - 7 days) to the end of reference."""

    start: datetime
    end: datetime

    @property
    def start_date(self) -> str:
        return self.start.date().isoformat()

    @property
    def end_date(self) -> str:
        return self.end.date().isoformat()

    def contains(self, value: str) -> bool:
        """
        Check whether a stored date falls inside the window.

        Comparison is by calendar day. Text that is not an ISO date or
        datetime is never inside the window.

        Examples:
            >>> window = weekly_window(date(2026, 10, 19))
            >>> window.contains("2026-10-12"), window.contains("2026-10-11")
            (True, False)
            >>> window.contains("someday")
            False
        """
        day = parse_day(value)
        if day is None:
            return False
        return self.start.date() <= day <= self.end.date()


def parse_day(value: str) -> Optional[date]:
    """Parse an ISO date or datetime string to its calendar day."""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def weekly_window(reference: Optional[Union[date, datetime]] = None) -> WeeklyWindow:
    """
    Compute the weekly window around a reference day.

    Args:
        reference: Day the window ends on; defaults to today

    Returns:
        WeeklyWindow from (reference - 7 days) 00:00:00 to reference 23:59:59.999999
    """
    if reference is None:
        reference = date.today()
    if isinstance(reference, datetime):
        reference = reference.date()

    start = datetime.combine(reference - timedelta(days=LOOKBACK_DAYS), time.min)
    end = datetime.combine(reference, time.max)
    return WeeklyWindow(start=start, end=end)
