"""
Timezone-aware datetime helpers.
- Store and compute timestamps in UTC.
- Attendance is partitioned by the server's local calendar date (the day key),
  never by the UTC date, so a request shortly after local midnight is not
  attributed to the previous day.
"""
from datetime import datetime, timezone, tzinfo
from typing import Optional

UTC = timezone.utc
DAY_KEY_FORMAT = "%Y-%m-%d"


def now_utc() -> datetime:
    """Current time in UTC (timezone-aware). Use for check_in_time, check_out_time, completed_at, etc."""
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """If dt is naive, treat as UTC and return timezone-aware UTC. If already aware, convert to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    else:
        dt = dt.astimezone(UTC)
    return dt


def to_local(dt: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Convert to the given zone, or to the server's local zone when tz is None. Naive input is UTC."""
    dt = ensure_utc(dt)
    return dt.astimezone(tz) if tz is not None else dt.astimezone()


def local_date_key(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> str:
    """Day key (YYYY-MM-DD) of the local calendar date at `now` (default: current time)."""
    return to_local(now or now_utc(), tz).strftime(DAY_KEY_FORMAT)


def iso_8601_utc(dt: Optional[datetime]) -> Optional[str]:
    """ISO-8601 with Z for UTC. Used for every datetime field in API responses."""
    if dt is None:
        return None
    utc = ensure_utc(dt)
    s = utc.isoformat()
    if s.endswith("+00:00"):
        s = s[:-6] + "Z"
    return s
