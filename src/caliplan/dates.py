"""
Calendar-day keys.

A day key is a ``YYYY-MM-DD`` string for a day in the user's local timezone.
Logged sessions carry full timestamps, schedule entries carry day keys, and
every comparison between the two goes through normalize_date so that both
sides are read with the local fields of the same zone (never UTC fields).
"""
import logging
import re
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from . import config

logger = logging.getLogger(__name__)

INVALID_DAY = ""  # sentinel for unreadable input, never equal to a real key
DAY_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = Union[str, date, datetime, None]


def local_timezone() -> Optional[tzinfo]:
    """
    Zone configured with CALIPLAN_TIMEZONE.

    Returns None when nothing (or an unknown zone) is configured, which the
    datetime API treats as the zone of the running process.
    """
    name = config.get_timezone_name()
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, falling back to the system zone", name)
        return None


def to_instant(value: DateLike, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Parse a date-like value into an aware datetime.

    Naive values are wall time in ``tz`` (default: local_timezone(), then the
    system zone). Returns None for anything that cannot be read.
    """
    if tz is None:
        tz = local_timezone()

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time())
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        return parsed
    if tz is not None:
        return parsed.replace(tzinfo=tz)
    try:
        return parsed.astimezone()
    except (OverflowError, OSError):
        return None


def normalize_date(value: DateLike, tz: Optional[tzinfo] = None) -> str:
    """
    Convert any date-like value into a day key in the local timezone.

    Day keys are returned unchanged. Timestamps are resolved to an instant and
    the year/month/day are read in ``tz`` (default: local_timezone()).
    Returns INVALID_DAY for empty or unparseable input.
    """
    if not value:
        return INVALID_DAY
    if isinstance(value, str) and DAY_KEY_PATTERN.match(value.strip()):
        return value.strip()
    if isinstance(value, date) and not isinstance(value, datetime):
        return value.isoformat()

    if tz is None:
        tz = local_timezone()
    instant = to_instant(value, tz)
    if instant is None:
        logger.debug("Could not read a date from %r", value)
        return INVALID_DAY

    try:
        local = instant.astimezone(tz)
    except (OverflowError, OSError):
        return INVALID_DAY
    return f"{local.year:04d}-{local.month:02d}-{local.day:02d}"


def today_key(tz: Optional[tzinfo] = None) -> str:
    if tz is None:
        tz = local_timezone()
    return normalize_date(datetime.now(tz), tz)


def parse_day_key(day_key: str) -> Optional[date]:
    if not isinstance(day_key, str) or not DAY_KEY_PATTERN.match(day_key):
        return None
    try:
        return date.fromisoformat(day_key)
    except ValueError:
        return None


def add_days(day_key: str, days: int) -> str:
    """Calendar-day arithmetic, unaffected by DST transitions"""
    day = parse_day_key(day_key)
    if day is None:
        return INVALID_DAY
    return (day + timedelta(days=days)).isoformat()


def same_day(first: DateLike, second: DateLike, tz: Optional[tzinfo] = None) -> bool:
    first_key = normalize_date(first, tz)
    second_key = normalize_date(second, tz)
    return first_key != INVALID_DAY and first_key == second_key


def local_noon(day_key: str, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Midday of a day key as an aware instant.

    Back-logged sessions are stamped at noon so that no offset between -12h
    and +12h moves them to a neighbouring day.
    """
    day = parse_day_key(day_key)
    if day is None:
        return None
    if tz is None:
        tz = local_timezone()
    return to_instant(datetime.combine(day, time(12, 0)), tz)
