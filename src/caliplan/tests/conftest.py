"""
Pytest fixtures for scheduling tests.
"""
from typing import Callable, List
from zoneinfo import ZoneInfo

import pytest

from ..model import Exercise, Routine, WorkoutSession


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep a developer's .env settings out of the tests"""
    for name in ("CALIPLAN_TIMEZONE", "CALIPLAN_DATA_FILE", "CALIPLAN_DAYS_AHEAD",
                 "CALIPLAN_CALENDAR_DAYS", "CALIPLAN_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sao_paulo() -> ZoneInfo:
    """UTC-3 all year round"""
    return ZoneInfo("America/Sao_Paulo")


@pytest.fixture
def tokyo() -> ZoneInfo:
    """UTC+9 all year round"""
    return ZoneInfo("Asia/Tokyo")


@pytest.fixture
def sample_exercises() -> List[Exercise]:
    return [
        Exercise(id="ex-pullup", name="Pull-up", muscle_group="Back",
                 target_sets=4, target_reps="6-8", rest_seconds=90),
        Exercise(id="ex-dip", name="Dip", muscle_group="Chest",
                 target_sets=3, target_reps="8-12", rest_seconds=60),
        Exercise(id="ex-squat", name="Pistol Squat", muscle_group="Legs",
                 target_sets=3, target_reps="5", rest_seconds=120),
    ]


@pytest.fixture
def make_routines(sample_exercises) -> Callable[[int], List[Routine]]:
    """Factory for routines named A, B, C... with ids r-a, r-b, r-c..."""
    def _make(count: int) -> List[Routine]:
        letters = "ABCDEFGH"[:count]
        return [
            Routine(id=f"r-{letter.lower()}", name=f"Workout {letter}", exercises=sample_exercises)
            for letter in letters
        ]
    return _make


@pytest.fixture
def make_session() -> Callable[..., WorkoutSession]:
    counter = iter(range(1, 10_000))

    def _make(date: str, routine_id: str = "r-a", **kwargs) -> WorkoutSession:
        return WorkoutSession(id=kwargs.pop("id", f"s-{next(counter)}"),
                              routine_id=routine_id, date=date, **kwargs)
    return _make
