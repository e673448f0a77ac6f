"""Date parsing and clock helpers for booking input."""
from datetime import datetime, date, timezone

import pytz

from .constants import DATE_FMT


def utcnow() -> datetime:
    """Timezone-aware current time in UTC. Wrapped for easier testing/mocking."""
    return datetime.now(pytz.utc)


def to_utc(dt: datetime, tz_name: str = "UTC") -> datetime:
    """
    Normalize a datetime to aware UTC.
    Naive values are assumed to be wall-clock time in `tz_name`.
    """
    if dt.tzinfo is None:
        dt = pytz.timezone(tz_name).localize(dt)
    return dt.astimezone(pytz.utc)


def parse_datetime(value, tz_name: str = "UTC") -> datetime:
    """
    Parse booking date input into an aware UTC datetime.
    Supports:
      - date / datetime objects
      - 'YYYY-MM-DD' (midnight in `tz_name`)
      - 'YYYY-MM-DDTHH:MM[:SS]' and 'YYYY-MM-DD HH:MM[:SS]'
      - Above with 'Z' or offsets like '+00:00'
    Raises ValueError on anything else.
    """
    if isinstance(value, datetime):
        return to_utc(value, tz_name)
    if isinstance(value, date):
        return to_utc(datetime(value.year, value.month, value.day), tz_name)
    if not isinstance(value, str):
        raise ValueError(f"Unsupported date: {value!r}")

    s = value.strip()
    if not s:
        raise ValueError("Empty date")

    # Normalize trailing 'Z', which older fromisoformat() rejects
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    if len(s) == 10:
        d = datetime.strptime(s, DATE_FMT)
        return to_utc(d, tz_name)

    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        raise ValueError(f"Unsupported date: {value!r}") from None
    return to_utc(dt, tz_name)


def fmt_iso(dt: datetime | None) -> str | None:
    """Serialize an aware datetime as ISO-8601 in UTC with a 'Z' suffix."""
    if dt is None:
        return None
    return dt.astimezone(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
