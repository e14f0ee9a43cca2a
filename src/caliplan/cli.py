#!/usr/bin/env python3
"""
Command line front end for the workout store.

Usage:
  caliplan schedule [DAYS]               # Upcoming plan from today
  caliplan calendar                      # Calendar grid, previous week first
  caliplan history                       # Logged sessions, newest first
  caliplan log <routine name> [DAY]      # Log a session (default: today)
  caliplan move <session-id> <DAY>       # Move a session to another day
  caliplan delete <session-id>           # Delete a session
  caliplan toggle <DAY>                  # Flip a future day workout/rest
  caliplan finish <routine name>         # Log saved progress of a routine as a draft
  caliplan import-routines <file.json>   # Replace routines from a JSON list
  caliplan recompute                     # Rebuild the schedule
"""
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from fuzzywuzzy import fuzz, process
from pydantic import ValidationError

from . import config
from .dates import INVALID_DAY, normalize_date, today_key
from .model import EntryType, Routine
from .schedule_builder import generate_calendar_days_window
from .stats import entry_for, estimated_minutes, next_workout, routine_name, session_volume
from .store import WorkoutStore

logger = logging.getLogger(__name__)

MIN_MATCH_SCORE = 70


class CaliplanError(Exception):
    """User input the CLI cannot act on"""


def match_routine(name: str, routines: Sequence[Routine]) -> Tuple[Routine, int]:
    """
    Find the routine whose name best matches ``name``.
    Returns: (routine, confidence_score)
    """
    if not routines:
        raise CaliplanError("No routines defined, import some first")

    name = " ".join(name.split())
    for routine in routines:
        if routine.name.lower() == name.lower():
            return routine, 100

    names = {routine.id: routine.name for routine in routines}
    match = process.extractOne(name, names, scorer=fuzz.token_sort_ratio)
    if match is None or match[1] < MIN_MATCH_SCORE:
        raise CaliplanError(f"No routine matches '{name}'")

    _, score, routine_id = match
    routine = next(r for r in routines if r.id == routine_id)
    return routine, score


def _day_arg(value: str) -> str:
    day = normalize_date(value)
    if day == INVALID_DAY:
        raise CaliplanError(f"Not a date: '{value}'")
    return day


def show_schedule(store: WorkoutStore, days: int = 14) -> None:
    today = today_key(store.tz)
    upcoming = [e for e in store.schedule if e.date >= today][:days]
    if not upcoming:
        print("Nothing scheduled. Add a routine to get a plan.")
        return

    for entry in upcoming:
        if entry.type == EntryType.rest:
            label = "rest"
        else:
            label = routine_name(store.routines, entry.routine_id)
        mark = "✓" if entry.completed else " "
        print(f"  {mark} {entry.date}  {label}")

    following = next_workout(store.schedule, today)
    if following is not None:
        routine = store.find_routine(following.routine_id)
        minutes = estimated_minutes(routine) if routine else 0
        print(f"\nNext workout: {routine_name(store.routines, following.routine_id)} "
              f"on {following.date} (~{minutes} min)")


def show_calendar(store: WorkoutStore) -> None:
    today = today_key(store.tz)
    days = generate_calendar_days_window(config.get_calendar_days(), today)
    print("  ".join(f"{name:>5}" for name in ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")))

    for week_start in range(0, len(days), 7):
        cells = []
        for day in days[week_start:week_start + 7]:
            entry = entry_for(store.schedule, day)
            if entry is None:
                code = "."
            elif entry.completed:
                code = "✓"
            elif entry.type == EntryType.workout:
                code = "W"
            else:
                code = "-"
            marker = "*" if day == today else " "
            cells.append(f"{day[8:]}{code}{marker}".rjust(5))
        print("  ".join(cells))


def show_history(store: WorkoutStore) -> None:
    if not store.history:
        print("No sessions logged yet.")
        return

    for session in sorted(store.history, key=lambda s: normalize_date(s.date, store.tz), reverse=True):
        draft = " (draft)" if session.draft else ""
        print(f"  {normalize_date(session.date, store.tz)}  "
              f"{routine_name(store.routines, session.routine_id):<24} "
              f"{session_volume(session):>4} reps  {session.id}{draft}")


def import_routines(store: WorkoutStore, path: Path) -> List[Routine]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CaliplanError(f"Cannot read {path}: {e}")
    try:
        routines = [Routine.model_validate(item) for item in raw]
    except (ValidationError, TypeError) as e:
        raise CaliplanError(f"Invalid routines file {path}: {e}")
    store.save_routines(routines)
    return routines


def run(store: WorkoutStore, args: List[str]) -> None:
    command, rest = args[0], args[1:]
    logger.debug("Running %s with %s", command, rest)

    if command == "schedule":
        if rest and not rest[0].isdigit():
            raise CaliplanError(f"Not a number of days: '{rest[0]}'")
        show_schedule(store, int(rest[0]) if rest else 14)
    elif command == "calendar":
        show_calendar(store)
    elif command == "history":
        show_history(store)
    elif command == "log" and rest:
        day = today_key(store.tz)
        name_parts = rest
        if len(rest) > 1 and normalize_date(rest[-1]) != INVALID_DAY:
            day, name_parts = _day_arg(rest[-1]), rest[:-1]
        routine, score = match_routine(" ".join(name_parts), store.routines)
        if score < 100:
            print(f"Matched '{' '.join(name_parts)}' to '{routine.name}' ({score}%)")
        session = store.log_manual(day, routine.id)
        print(f"  ✓ Logged {routine.name} on {day} ({session.id})")
    elif command in ("move", "delete") and rest and store.find_session(rest[0]) is None:
        raise CaliplanError(f"No session with id {rest[0]}")
    elif command == "move" and len(rest) == 2:
        store.move_session(rest[0], _day_arg(rest[1]))
        print(f"  ✓ Moved {rest[0]} to {rest[1]}")
    elif command == "delete" and len(rest) == 1:
        store.delete_session(rest[0])
        print(f"  ✓ Deleted {rest[0]}")
    elif command == "toggle" and len(rest) == 1:
        day = _day_arg(rest[0])
        if day <= today_key(store.tz):
            raise CaliplanError("Only future days can be toggled, log a session instead")
        store.toggle_day(day)
        entry = entry_for(store.schedule, day)
        print(f"  ✓ {day} is now a {entry.type if entry else 'free'} day")
    elif command == "finish" and rest:
        routine, _ = match_routine(" ".join(rest), store.routines)
        session = store.commit_partial_to_history(routine.id)
        if session is None:
            raise CaliplanError(f"No saved progress for {routine.name}")
        print(f"  ✓ Logged draft of {routine.name} ({session.id})")
    elif command == "import-routines" and len(rest) == 1:
        routines = import_routines(store, Path(rest[0]))
        print(f"  ✓ Imported {len(routines)} routines")
    elif command == "recompute":
        store.recompute()
        print(f"  ✓ Schedule rebuilt ({len(store.schedule)} days)")
    else:
        raise CaliplanError(f"Unknown command: {' '.join(args)}")


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=config.get_log_level(), format="%(levelname)s %(name)s: %(message)s")

    if not args:
        print(__doc__)
        return 0

    store = WorkoutStore.open()
    try:
        run(store, args)
    except CaliplanError as e:
        print(f"  ✗ {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
