# services/timeutil.py
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

# Mongo hands back naive datetimes; everything stored is naive UTC.


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_local(dt: datetime, tz: ZoneInfo) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz)


def to_utc(dt: datetime) -> datetime:
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def day_bounds(date_str: str, tz: ZoneInfo):
    """UTC start and end of the local calendar day named by YYYY-MM-DD. Raises ValueError."""
    day = datetime.strptime(date_str, "%Y-%m-%d").replace(tzinfo=tz)
    end = day + timedelta(days=1) - timedelta(milliseconds=1)
    return to_utc(day), to_utc(end)


def local_today(now: datetime, tz: ZoneInfo) -> str:
    return to_local(now, tz).strftime("%Y-%m-%d")
