from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def make_clock(tz_name: str = "local") -> Clock:
    """Build a clock returning naive wall-clock time in ``tz_name``.

    ``"local"`` keeps the server's local time; any IANA name (``"UTC"``,
    ``"Asia/Ho_Chi_Minh"``) pins the day boundary to that zone.
    """
    if not tz_name or tz_name.lower() == "local":
        return now_local
    zone = ZoneInfo(tz_name)
    return lambda: datetime.now(zone).replace(tzinfo=None)


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def day_range(day: date) -> tuple[datetime, datetime]:
    """[midnight, next midnight) for a calendar day."""
    start = datetime.combine(day, datetime.min.time())
    return start, start + timedelta(days=1)


def isoformat_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
