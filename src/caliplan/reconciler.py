"""
Schedule reconciliation.

The schedule is a derived view: it is rebuilt from the session history and the
current routine list after every change to either. Days with a logged session
are always completed workouts; the days after the most recent session continue
the rotation one slot past the routine that session used.
"""
import logging
from datetime import tzinfo
from typing import Dict, List, Optional, Sequence

from .dates import INVALID_DAY, add_days, local_timezone, normalize_date, to_instant, today_key
from .model import EntryType, Routine, ScheduleEntry, WorkoutSession
from .pattern import first_slot_for, pattern_for
from .schedule_builder import build_forward

logger = logging.getLogger(__name__)

DAYS_AHEAD = 60


def resume_offset(routine_id: str, routines: Sequence[Routine]) -> int:
    """
    Pattern position that follows the slot of ``routine_id``.

    Falls back to 0 when the routine is gone or has no slot in the current
    pattern (e.g. a fifth routine under the four-routine split).
    """
    pattern = pattern_for(len(routines))
    if not pattern:
        return 0

    index = next((i for i, routine in enumerate(routines) if routine.id == routine_id), -1)
    if index == -1:
        logger.info("Last session references unknown routine %r, restarting rotation", routine_id)
        return 0

    position = first_slot_for(pattern, index)
    if position == -1:
        return 0
    return (position + 1) % len(pattern)


def _sorted_by_instant(history: Sequence[WorkoutSession],
                       tz: Optional[tzinfo]) -> List[tuple[str, WorkoutSession]]:
    """(day key, session) pairs in chronological order, unreadable dates dropped"""
    dated = []
    for session in history:
        day = normalize_date(session.date, tz)
        instant = to_instant(session.date, tz)
        if day == INVALID_DAY or instant is None:
            logger.warning("Skipping session %s with unreadable date %r", session.id, session.date)
            continue
        dated.append((instant, day, session))

    dated.sort(key=lambda item: item[0])
    return [(day, session) for _, day, session in dated]


def reconcile(history: Sequence[WorkoutSession], routines: Sequence[Routine],
              days_ahead: int = DAYS_AHEAD, today: Optional[str] = None,
              tz: Optional[tzinfo] = None) -> List[ScheduleEntry]:
    """
    Recompute the full schedule from history and routines.

    Pure function: the previous schedule is not an input, so manual toggles
    are discarded. Returns entries sorted by day, one per day.
    """
    if not routines:
        return []
    if tz is None:
        tz = local_timezone()

    sessions = _sorted_by_instant(history, tz)

    if sessions:
        last_day, last_session = sessions[-1]
        resume_day = add_days(last_day, 1)
        offset = resume_offset(last_session.routine_id, routines)
    else:
        resume_day = today or today_key(tz)
        offset = 0

    by_day: Dict[str, ScheduleEntry] = {}

    # History first, later sessions overwrite earlier ones on the same day
    for day, session in sessions:
        by_day[day] = ScheduleEntry(
            date=day,
            type=EntryType.workout,
            routine_id=session.routine_id,
            completed=True,
        )

    for entry in build_forward(resume_day, routines, days_ahead, offset):
        by_day.setdefault(entry.date, entry)

    logger.debug("Reconciled %d sessions into %d schedule days", len(sessions), len(by_day))
    return [by_day[day] for day in sorted(by_day)]


def toggle_day(schedule: Sequence[ScheduleEntry], day: str, routines: Sequence[Routine],
               today: Optional[str] = None, previous_routine_id: Optional[str] = None,
               tz: Optional[tzinfo] = None) -> List[ScheduleEntry]:
    """
    Flip a future day between workout and rest.

    A day becoming a workout gets ``previous_routine_id`` when that routine
    still exists, otherwise the first routine. Days at or before today are
    left alone; they only change through the session history.
    """
    today = today or today_key(tz)
    day = normalize_date(day, tz)

    if day == INVALID_DAY or day <= today:
        logger.info("Ignoring toggle of %r, only future days can be toggled", day)
        return list(schedule)

    current = next((entry for entry in schedule if entry.date == day), None)
    toggled = [entry for entry in schedule if entry.date != day]

    if current is not None and current.type == EntryType.workout:
        toggled.append(ScheduleEntry(date=day, type=EntryType.rest))
    else:
        known_ids = {routine.id for routine in routines}
        if previous_routine_id in known_ids:
            routine_id = previous_routine_id
        elif routines:
            routine_id = routines[0].id
        else:
            logger.info("No routines to schedule on %s", day)
            return list(schedule)
        toggled.append(ScheduleEntry(date=day, type=EntryType.workout, routine_id=routine_id))

    toggled.sort(key=lambda entry: entry.date)
    return toggled
