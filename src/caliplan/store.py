"""
Application state: profile, routines, session history and the derived schedule.

WorkoutStore owns one AppData document. Changes to history or routines rebuild
the schedule with reconcile(); when a LocalCache is attached every change is
written to disk.
"""
import json
import logging
import uuid
from datetime import datetime, timedelta, timezone, tzinfo
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from . import config
from .dates import INVALID_DAY, local_noon, normalize_date
from .model import (AppData, Exercise, PartialSession, Routine, ScheduleEntry, SetLog, UserProfile,
                    WorkoutSession)
from .reconciler import reconcile, toggle_day

logger = logging.getLogger(__name__)

# progress older than this is dropped whenever the store is opened
STALE_PARTIAL_DAYS = 30


class LocalCache:
    """JSON file holding the AppData document for one user"""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> AppData:
        if not self.path.exists():
            return AppData()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return AppData.model_validate(json.load(f))
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            backup = self._set_aside()
            logger.error("Corrupt data in %s, moved to %s, starting from defaults: %s", self.path, backup, e)
            return AppData()

    def _set_aside(self) -> Path:
        """Move an unreadable file out of the way so the next save cannot overwrite it"""
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
        backup = self.path.with_name(f"{self.path.stem}.corrupt-{stamp}{self.path.suffix}")
        self.path.replace(backup)
        return backup

    def save(self, data: AppData) -> AppData:
        stamped = data.model_copy(update={"last_updated": datetime.now(timezone.utc)})
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(stamped.model_dump(mode="json", by_alias=True), f, indent=2, ensure_ascii=False)
        return stamped


class WorkoutStore:
    """Explicit state container; callers serialize access to it"""

    def __init__(self, data: Optional[AppData] = None, cache: Optional[LocalCache] = None,
                 tz: Optional[tzinfo] = None, days_ahead: Optional[int] = None):
        self.data = data or AppData()
        self.cache = cache
        self.tz = tz
        self.days_ahead = config.get_days_ahead() if days_ahead is None else days_ahead

    @classmethod
    def open(cls, path: Optional[str | Path] = None, tz: Optional[tzinfo] = None) -> "WorkoutStore":
        cache = LocalCache(path or config.get_data_file())
        store = cls(cache.load(), cache=cache, tz=tz)
        store.clear_old_partial_sessions(STALE_PARTIAL_DAYS)
        return store

    @property
    def routines(self) -> List[Routine]:
        return self.data.routines

    @property
    def history(self) -> List[WorkoutSession]:
        return self.data.history

    @property
    def schedule(self) -> List[ScheduleEntry]:
        return self.data.schedule

    def _commit(self, **changes) -> None:
        # a rebuilt schedule carries no toggles, so nothing is left to restore
        if "schedule" in changes:
            changes.setdefault("toggled_from", {})
        self.data = self.data.model_copy(update=changes)
        if self.cache is not None:
            self.data = self.cache.save(self.data)

    def _rebuilt(self, history: List[WorkoutSession], routines: List[Routine]) -> List[ScheduleEntry]:
        return reconcile(history, routines, days_ahead=self.days_ahead, tz=self.tz)

    def recompute(self) -> List[ScheduleEntry]:
        self._commit(schedule=self._rebuilt(self.history, self.routines))
        return self.schedule

    # Profile

    def set_profile(self, profile: UserProfile) -> None:
        self._commit(profile=profile)

    # Routines

    def save_routines(self, routines: List[Routine]) -> None:
        routines = list(routines)
        self._commit(routines=routines, schedule=self._rebuilt(self.history, routines))

    def update_routine(self, updated: Routine) -> None:
        """Edit a routine in place; its id and slot in the rotation stay the same"""
        if not any(r.id == updated.id for r in self.routines):
            logger.warning("Cannot update unknown routine %s", updated.id)
            return
        self._commit(routines=[updated if r.id == updated.id else r for r in self.routines])

    def delete_routine(self, routine_id: str) -> None:
        """Sessions logged against the routine are kept"""
        routines = [r for r in self.routines if r.id != routine_id]
        if len(routines) == len(self.routines):
            logger.warning("Cannot delete unknown routine %s", routine_id)
            return
        self._commit(routines=routines, schedule=self._rebuilt(self.history, routines))

    def replace_exercise(self, old_exercise_id: str, new_exercise: Exercise) -> None:
        routines = []
        for routine in self.routines:
            if any(e.id == old_exercise_id for e in routine.exercises):
                exercises = [new_exercise if e.id == old_exercise_id else e for e in routine.exercises]
                routine = routine.model_copy(update={"exercises": exercises})
            routines.append(routine)
        self._commit(routines=routines)

    def find_routine(self, routine_id: str) -> Optional[Routine]:
        return next((r for r in self.routines if r.id == routine_id), None)

    # History

    def add_session(self, session: WorkoutSession) -> None:
        history = [*self.history, session]
        self._commit(history=history, schedule=self._rebuilt(history, self.routines))

    def update_session(self, updated: WorkoutSession) -> None:
        if self.find_session(updated.id) is None:
            logger.warning("Cannot update unknown session %s", updated.id)
            return
        history = [updated if s.id == updated.id else s for s in self.history]
        self._commit(history=history, schedule=self._rebuilt(history, self.routines))

    def delete_session(self, session_id: str) -> None:
        history = [s for s in self.history if s.id != session_id]
        if len(history) == len(self.history):
            logger.warning("Cannot delete unknown session %s", session_id)
            return
        self._commit(history=history, schedule=self._rebuilt(history, self.routines))

    def log_manual(self, day: str, routine_id: str, notes: Optional[str] = None,
                   duration_seconds: int = 0) -> Optional[WorkoutSession]:
        """Back-log a session for a past or present day, stamped at local noon"""
        stamp = local_noon(normalize_date(day, self.tz), self.tz)
        if stamp is None:
            logger.warning("Cannot log a session on %r", day)
            return None

        session = WorkoutSession(
            id=str(uuid.uuid4()),
            routine_id=routine_id,
            date=stamp,
            duration_seconds=duration_seconds,
            notes=notes or "Manual",
        )
        self.add_session(session)
        return session

    def move_session(self, session_id: str, day: str, routine_id: Optional[str] = None) -> None:
        """Reassign a session to another day (and optionally another routine)"""
        session = self.find_session(session_id)
        stamp = local_noon(normalize_date(day, self.tz), self.tz)
        if session is None or stamp is None:
            logger.warning("Cannot move session %s to %r", session_id, day)
            return

        changes = {"date": stamp.isoformat()}
        if routine_id is not None:
            changes["routine_id"] = routine_id
        self.update_session(session.model_copy(update=changes))

    def find_session(self, session_id: str) -> Optional[WorkoutSession]:
        return next((s for s in self.history if s.id == session_id), None)

    def find_session_on(self, day: str) -> Optional[WorkoutSession]:
        day = normalize_date(day, self.tz)
        if day == INVALID_DAY:
            return None
        return next((s for s in self.history if normalize_date(s.date, self.tz) == day), None)

    # Sessions in progress

    def save_partial_session(self, routine_id: str, logs: Dict[str, List[SetLog]],
                             active_index: int = 0, elapsed: int = 0) -> PartialSession:
        partial = PartialSession(logs=logs, active_index=active_index, elapsed=elapsed,
                                 updated_at=datetime.now(timezone.utc))
        self._commit(partial_sessions={**self.data.partial_sessions, routine_id: partial})
        return partial

    def load_partial_session(self, routine_id: str) -> Optional[PartialSession]:
        return self.data.partial_sessions.get(routine_id)

    def clear_partial_session(self, routine_id: str) -> None:
        if routine_id not in self.data.partial_sessions:
            return
        partials = {k: v for k, v in self.data.partial_sessions.items() if k != routine_id}
        self._commit(partial_sessions=partials)

    def clear_old_partial_sessions(self, days: int = 14) -> int:
        """Drop progress not touched for ``days``; returns how many were dropped"""
        threshold = datetime.now(timezone.utc) - timedelta(days=days)
        kept = {routine_id: partial for routine_id, partial in self.data.partial_sessions.items()
                if partial.updated_at is not None and partial.updated_at >= threshold}
        dropped = len(self.data.partial_sessions) - len(kept)
        if dropped:
            logger.info("Dropping %d stale sessions in progress", dropped)
            self._commit(partial_sessions=kept)
        return dropped

    def commit_partial_to_history(self, routine_id: str) -> Optional[WorkoutSession]:
        """Log the saved progress of a routine as a draft session"""
        partial = self.load_partial_session(routine_id)
        if partial is None:
            logger.warning("No session in progress for routine %s", routine_id)
            return None

        session = WorkoutSession(
            id=str(uuid.uuid4()),
            routine_id=routine_id,
            date=datetime.now(timezone.utc),
            duration_seconds=partial.elapsed,
            logs=partial.logs,
            draft=True,
        )
        self.add_session(session)
        self.clear_partial_session(routine_id)
        return session

    # Schedule

    def toggle_day(self, day: str) -> None:
        """Transient edit; the next recompute drops it"""
        day = normalize_date(day, self.tz)
        current = next((e for e in self.schedule if e.date == day), None)
        schedule = toggle_day(self.schedule, day, self.routines,
                              previous_routine_id=self.data.toggled_from.get(day), tz=self.tz)
        if schedule == self.schedule:
            return

        toggled_from = dict(self.data.toggled_from)
        if current is not None and current.routine_id is not None:
            toggled_from[day] = current.routine_id
        self._commit(schedule=schedule, toggled_from=toggled_from)
