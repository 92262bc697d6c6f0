from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any, Optional

from dateutil import parser as date_parser


_YMD_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# dateutil fills missing fields from `default`; two defaults that differ in
# year, month and day expose input that does not name a full date
_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today() -> date:
    """Local calendar date; all schedule and sales dates are timezone-naive."""
    return date.today()


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc)
    return dt_utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_ymd(value: Any) -> Optional[str]:
    """
    Canonicalize a date-like value to a 'YYYY-MM-DD' string.

    - None / "" -> None
    - date / datetime -> its calendar date
    - "YYYY-MM-DD" -> itself, if it names a real calendar day
    - anything else dateutil can parse ("2024/01/05", "Jan 5 2024",
      "2024-01-05T10:00:00Z") -> its calendar date as written
    Returns None when the value cannot be parsed or does not name a full
    date ("10", "monday", "May", "12:30"), so the result never depends on
    the current date.

    The canonical form is fixed-width and zero-padded, so plain string
    comparison orders canonical dates chronologically.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        return None

    s = value.strip()
    if not s:
        return None

    if _YMD_RE.match(s):
        try:
            return date.fromisoformat(s).isoformat()
        except ValueError:
            return None

    try:
        first, second = (date_parser.parse(s, default=d).date() for d in _PARSE_DEFAULTS)
    except (ValueError, OverflowError):
        return None
    if first != second:
        return None
    return first.isoformat()


def is_between_inclusive(day: Optional[str], start: Optional[str], end: Optional[str]) -> bool:
    """True when canonical `day` lies in [start, end]; any missing bound fails."""
    if not day or not start or not end:
        return False
    return start <= day <= end

