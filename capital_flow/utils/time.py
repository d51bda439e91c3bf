"""Time utilities (configured timezone)."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from capital_flow.config import settings


def local_tz() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def now_local() -> datetime:
    """Current time in the configured timezone (aware)."""
    return datetime.now(local_tz())


def today_local() -> date:
    """
    Calendar day a classification belongs to.

    One history record is kept per value of this date.
    """
    return now_local().date()


def to_utc_naive(dt: datetime) -> datetime:
    """Convert to naive UTC for DB storage (naive input is assumed UTC)."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)
