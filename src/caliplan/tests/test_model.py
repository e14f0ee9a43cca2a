"""
Unit tests for Pydantic model classes.
"""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from ..model import (AppData, Difficulty, EntryType, Exercise, Goal, PartialSession, Routine,
                     ScheduleEntry, SetLog, UserProfile, WorkoutSession)


class TestSetLog:
    """Test SetLog model"""

    def test_set_log_defaults(self):
        """Test added weight is optional"""
        set_log = SetLog(reps=10)

        assert set_log.reps == 10
        assert set_log.weight_added is None

    def test_set_log_negative_reps(self):
        """Test that negative reps are rejected"""
        with pytest.raises(ValidationError):
            SetLog(reps=-1)

    def test_set_log_zero_reps_allowed(self):
        """Test a failed set can be logged with zero reps"""
        assert SetLog(reps=0).reps == 0


class TestExercise:
    """Test Exercise model"""

    def test_exercise_creation(self):
        """Test creating valid exercise"""
        exercise = Exercise(id="ex1", name="Pull-up", target_sets=4, target_reps="8-12", rest_seconds=90)

        assert exercise.target_reps == "8-12"
        assert exercise.muscle_group == ""
        assert exercise.video_url is None

    def test_exercise_zero_sets_rejected(self):
        """Test target set count must be positive"""
        with pytest.raises(ValidationError):
            Exercise(id="ex1", name="Pull-up", target_sets=0, target_reps="5")

    def test_exercise_negative_rest_rejected(self):
        """Test rest duration cannot be negative"""
        with pytest.raises(ValidationError):
            Exercise(id="ex1", name="Pull-up", target_sets=3, target_reps="5", rest_seconds=-10)


class TestWorkoutSession:
    """Test WorkoutSession model"""

    def test_session_from_camel_case(self):
        """Test documents written by the web client validate"""
        session = WorkoutSession.model_validate({
            "id": "s1",
            "routineId": "r1",
            "date": "2024-03-10T15:00:00.000Z",
            "durationSeconds": 1800,
            "logs": {"ex1": [{"reps": 8, "weightAdded": 10}, {"reps": 6}]},
        })

        assert session.routine_id == "r1"
        assert session.duration_seconds == 1800
        assert session.logs["ex1"][0].weight_added == 10
        assert session.logs["ex1"][1].weight_added is None

    def test_session_datetime_stored_as_text(self):
        """Test a datetime date is kept as an ISO timestamp"""
        stamp = datetime(2024, 3, 10, 15, 0, tzinfo=timezone.utc)
        session = WorkoutSession(id="s1", routine_id="r1", date=stamp)

        assert session.date == "2024-03-10T15:00:00+00:00"

    def test_session_dump_by_alias(self):
        """Test serialization uses camelCase keys"""
        session = WorkoutSession(id="s1", routine_id="r1", date="2024-03-10")
        data = session.model_dump(by_alias=True)

        assert data["routineId"] == "r1"
        assert data["durationSeconds"] == 0
        assert data["draft"] is False

    def test_draft_with_empty_log_list(self):
        """Test drafts the web client commits with `logs: []` validate"""
        session = WorkoutSession.model_validate({
            "id": "s1", "routineId": "r1", "date": "2024-03-10T15:00:00.000Z",
            "durationSeconds": 0, "logs": [], "draft": True,
        })

        assert session.logs == {}
        assert session.draft is True

    def test_non_empty_log_list_rejected(self):
        with pytest.raises(ValidationError):
            WorkoutSession(id="s1", routine_id="r1", date="2024-03-10", logs=[{"reps": 5}])


class TestScheduleEntry:
    """Test ScheduleEntry model"""

    def test_workout_entry(self):
        entry = ScheduleEntry(date="2024-03-10", type="workout", routine_id="r1", completed=True)

        assert entry.type == EntryType.workout
        assert entry.completed is True

    def test_rest_entry(self):
        entry = ScheduleEntry(date="2024-03-10", type="rest")

        assert entry.routine_id is None
        assert entry.completed is None

    def test_workout_entry_requires_routine(self):
        """Test routine reference is present iff the entry is a workout"""
        with pytest.raises(ValidationError):
            ScheduleEntry(date="2024-03-10", type="workout")

    def test_rest_entry_rejects_routine(self):
        with pytest.raises(ValidationError):
            ScheduleEntry(date="2024-03-10", type="rest", routine_id="r1")

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            ScheduleEntry(date="2024-03-10", type="holiday")


class TestAppData:
    """Test the persisted document"""

    def test_defaults(self):
        data = AppData()

        assert data.profile == UserProfile()
        assert data.routines == []
        assert data.history == []
        assert data.schedule == []
        assert data.last_updated is None

    def test_partial_document(self):
        """Test a document missing sections falls back to defaults"""
        data = AppData.model_validate({
            "routines": [{"id": "r1", "name": "Push", "exercises": []}],
            "lastUpdated": "2024-03-10T12:00:00Z",
        })

        assert data.routines == [Routine(id="r1", name="Push")]
        assert data.history == []
        assert data.last_updated.tzinfo is not None

    def test_partial_session_keys(self):
        """Test progress saved by the web client keeps its keys"""
        partial = PartialSession.model_validate({
            "logs": {"ex1": [{"reps": 5}]},
            "activeIndex": 2,
            "elapsed": 300,
            "_updatedAt": "2024-03-10T15:00:00.000Z",
        })
        data = partial.model_dump(mode="json", by_alias=True)

        assert partial.active_index == 2
        assert partial.updated_at.tzinfo is not None
        assert data["_updatedAt"].startswith("2024-03-10T15:00:00")
        assert data["activeIndex"] == 2


class TestUserProfile:
    """Test profile enums against the labels the web client stores"""

    def test_web_client_labels(self):
        profile = UserProfile.model_validate({"level": "Intermediário", "goal": "Skills (Planche, Front Lever, etc)"})

        assert profile.level == Difficulty.intermediate
        assert profile.goal == Goal.skill

    def test_member_names_accepted(self):
        profile = UserProfile.model_validate({"level": "advanced", "goal": "Strength"})

        assert profile.level == Difficulty.advanced
        assert profile.goal == Goal.strength

    def test_dump_uses_labels(self):
        data = UserProfile().model_dump(mode="json", by_alias=True)

        assert data["level"] == "Iniciante"
        assert data["goal"] == "Hipertrofia"

    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            UserProfile(level="expert")
