"""
Dashboard summaries over routines, history and schedule.
"""
import math
from typing import Optional, Sequence

from .model import EntryType, Routine, ScheduleEntry, WorkoutSession

UNKNOWN_ROUTINE = "Unknown routine"

# Rough time under tension for one set, added to each set's rest
SECONDS_PER_SET = 45


def session_volume(session: WorkoutSession) -> int:
    """Total reps logged in a session"""
    return sum(set_log.reps for set_logs in session.logs.values() for set_log in set_logs)


def estimated_minutes(routine: Routine) -> int:
    seconds = sum(e.target_sets * (e.rest_seconds + SECONDS_PER_SET) for e in routine.exercises)
    return math.floor(seconds / 60 + 0.5)


def routine_name(routines: Sequence[Routine], routine_id: Optional[str]) -> str:
    """Display name, with a placeholder for deleted routines"""
    for routine in routines:
        if routine.id == routine_id:
            return routine.name
    return UNKNOWN_ROUTINE


def next_workout(schedule: Sequence[ScheduleEntry], today: str) -> Optional[ScheduleEntry]:
    """First workout on or after today that has not been done yet"""
    for entry in schedule:
        if entry.date >= today and entry.type == EntryType.workout and not entry.completed:
            return entry
    return None


def entry_for(schedule: Sequence[ScheduleEntry], day: str) -> Optional[ScheduleEntry]:
    return next((entry for entry in schedule if entry.date == day), None)
