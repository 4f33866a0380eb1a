"""
Datetime parsing and display helpers.

Rootly timestamps arrive as ISO 8601 strings with a trailing Z or an
explicit offset. Display uses the operator's configured timezone.
"""

import logging
from datetime import datetime, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

TIME_ONLY_FORMAT = "%H:%M"


def utc_now() -> datetime:
    """Current UTC time with timezone awareness."""
    return datetime.now(timezone.utc)


def parse_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse an API timestamp into an aware datetime.

    Handles ISO strings with a 'Z' suffix or offset, and naive strings
    (treated as UTC). Returns None for empty or unparseable values.

    Examples:
        >>> parse_datetime("2024-01-15T10:30:00Z")
        datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc)
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        normalized = value.strip()
        if not normalized:
            return None
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(normalized)
        except ValueError:
            logger.debug(f"Unparseable timestamp: {value!r}")
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def is_valid_timezone(name: str) -> bool:
    """True when name is "UTC" or a zone in the IANA database."""
    if not name:
        return False
    if name.upper() == "UTC":
        return True
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """Look up an IANA zone name, falling back to UTC."""
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {name!r}, using UTC")
        return timezone.utc


def _display(dt: datetime) -> str:
    return f"{dt.strftime('%b')} {dt.day}, {dt.year} {dt.strftime(TIME_ONLY_FORMAT)}"


def format_time(dt: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    """
    Format a timestamp for the detail pane.

    "Jan 2, 2024 15:04 UTC" in UTC. Any other zone shows local time with its
    abbreviation and the UTC time in parentheses:
    "Jan 2, 2024 10:04 EST (15:04 UTC)".
    """
    if dt is None:
        return ""

    tz = tz or timezone.utc
    local = dt.astimezone(tz)
    text = f"{_display(local)} {local.tzname() or 'UTC'}"

    if tz is not timezone.utc:
        utc = dt.astimezone(timezone.utc)
        text += f" ({utc.strftime(TIME_ONLY_FORMAT)} UTC)"
    return text


def format_relative_time(dt: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Format a datetime as a short relative time ("5m ago", "3h ago", "2d ago")."""
    if dt is None:
        return ""

    now = now or utc_now()
    seconds = int((now - dt).total_seconds())

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    if seconds < 86400 * 30:
        return f"{seconds // 86400}d ago"
    return _display(dt).rsplit(" ", 1)[0]


def format_duration(start: Optional[datetime], end: Optional[datetime]) -> str:
    """Format the span between two timestamps as "2h 15m"."""
    if start is None or end is None or end < start:
        return ""

    minutes = int((end - start).total_seconds()) // 60
    days, minutes = divmod(minutes, 1440)
    hours, minutes = divmod(minutes, 60)
    if days:
        return f"{days}d {hours}h"
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
