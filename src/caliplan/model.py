"""
Data models for routines, logged sessions and the derived schedule.

Field names are snake_case in Python and camelCase on the wire, so documents
written by the web client (``routineId``, ``durationSeconds``...) validate as is.
"""
from datetime import date, datetime
from enum import StrEnum, auto
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SetLog(CamelModel):
    reps: int = Field(ge=0)
    weight_added: Optional[float] = None  # kg


class Exercise(CamelModel):
    """A single exercise inside a routine"""
    id: str
    name: str
    muscle_group: str = ""
    description: Optional[str] = None
    video_url: Optional[str] = None
    target_sets: int = Field(gt=0)
    target_reps: str  # e.g. "8-12" or "Max"
    rest_seconds: int = Field(default=60, ge=0)


class Routine(CamelModel):
    id: str
    name: str
    description: str = ""
    exercises: List[Exercise] = Field(default_factory=list)


class WorkoutSession(CamelModel):
    """One completed (or manually back-logged) workout"""
    id: str
    routine_id: str
    date: str  # ISO timestamp as logged
    duration_seconds: int = Field(default=0, ge=0)
    logs: Dict[str, List[SetLog]] = Field(default_factory=dict)  # keyed by exercise id
    notes: Optional[str] = None
    draft: bool = False

    @field_validator("date", mode="before")
    @classmethod
    def _date_to_text(cls, value):
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        return value

    @field_validator("logs", mode="before")
    @classmethod
    def _empty_logs(cls, value):
        # drafts committed by the web client carry `logs: []`
        if isinstance(value, list) and not value:
            return {}
        return value


class EntryType(StrEnum):
    workout = auto()
    rest = auto()


class ScheduleEntry(CamelModel):
    date: str  # YYYY-MM-DD
    type: EntryType
    routine_id: Optional[str] = None
    completed: Optional[bool] = None

    @model_validator(mode="after")
    def _routine_only_on_workouts(self):
        if self.type == EntryType.workout and self.routine_id is None:
            raise ValueError("workout entries need a routine_id")
        if self.type == EntryType.rest and self.routine_id is not None:
            raise ValueError("rest entries cannot carry a routine_id")
        return self


class ProfileEnum(StrEnum):
    """Values are the labels the web client stores; member names are accepted too"""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.name == value.lower():
                    return member
        return None


class Difficulty(ProfileEnum):
    beginner = "Iniciante"
    intermediate = "Intermediário"
    advanced = "Avançado"


class Goal(ProfileEnum):
    strength = "Força"
    hypertrophy = "Hipertrofia"
    endurance = "Resistência"
    skill = "Skills (Planche, Front Lever, etc)"


class UserProfile(CamelModel):
    name: str = "Athlete"
    level: Difficulty = Difficulty.beginner
    goal: Goal = Goal.hypertrophy
    available_equipment: List[str] = Field(default_factory=lambda: ["Pull-up Bar", "Floor"])
    training_days_per_week: Optional[int] = Field(default=None, ge=1, le=7)


class PartialSession(CamelModel):
    """Progress of a session still running, saved per routine"""
    logs: Dict[str, List[SetLog]] = Field(default_factory=dict)
    active_index: int = Field(default=0, ge=0)
    elapsed: int = Field(default=0, ge=0)  # seconds
    updated_at: Optional[datetime] = Field(default=None, alias="_updatedAt")


class AppData(CamelModel):
    """Everything persisted for one user"""
    profile: UserProfile = Field(default_factory=UserProfile)
    routines: List[Routine] = Field(default_factory=list)
    history: List[WorkoutSession] = Field(default_factory=list)
    schedule: List[ScheduleEntry] = Field(default_factory=list)
    partial_sessions: Dict[str, PartialSession] = Field(default_factory=dict)  # keyed by routine id
    # routine a future day had before it was toggled to rest
    toggled_from: Dict[str, str] = Field(default_factory=dict)
    last_updated: Optional[datetime] = None
