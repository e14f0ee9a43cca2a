"""
Projection of a rotation pattern onto consecutive calendar days.
"""
import logging
from datetime import timedelta
from typing import List, Optional, Sequence

from .dates import parse_day_key, today_key
from .model import EntryType, Routine, ScheduleEntry
from .pattern import REST, pattern_for

logger = logging.getLogger(__name__)


def build_forward(start_day: str, routines: Sequence[Routine], day_count: int = 60,
                  pattern_start_offset: int = 0) -> List[ScheduleEntry]:
    """
    Lay the rotation for ``routines`` over ``day_count`` days from ``start_day``.

    Day ``i`` takes slot ``(pattern_start_offset + i) % len(pattern)``. Returns
    an empty list when there are no routines or the start day is not a day key.
    """
    if not routines:
        return []

    start = parse_day_key(start_day)
    if start is None:
        logger.warning("Cannot build a schedule from start day %r", start_day)
        return []

    pattern = pattern_for(len(routines))
    entries = []

    for i in range(day_count):
        day = (start + timedelta(days=i)).isoformat()
        slot = pattern[(pattern_start_offset + i) % len(pattern)]

        if slot is REST:
            entries.append(ScheduleEntry(date=day, type=EntryType.rest))
        else:
            routine = routines[slot % len(routines)]
            entries.append(ScheduleEntry(date=day, type=EntryType.workout, routine_id=routine.id))

    return entries


def generate_calendar_days_window(day_count: int = 35, today: Optional[str] = None) -> List[str]:
    """
    Day keys for the calendar grid.

    The grid starts on the Sunday of the week before the current one, so the
    previous week is always visible.
    """
    current = parse_day_key(today or today_key())
    if current is None:
        logger.warning("Cannot build a calendar window around %r", today)
        return []

    days_since_sunday = (current.weekday() + 1) % 7
    start = current - timedelta(days=days_since_sunday + 7)
    return [(start + timedelta(days=i)).isoformat() for i in range(day_count)]
