"""
Unit tests for the forward schedule builder and calendar window.
"""
from datetime import date

from ..model import EntryType
from ..schedule_builder import build_forward, generate_calendar_days_window


def _shape(entries):
    return [entry.routine_id if entry.type == EntryType.workout else "rest" for entry in entries]


class TestBuildForward:
    """Test build_forward"""

    def test_one_routine_alternates(self, make_routines):
        entries = build_forward("2024-03-10", make_routines(1), 4, 0)

        assert [e.type for e in entries] == ["workout", "rest", "workout", "rest"]
        assert [e.date for e in entries] == ["2024-03-10", "2024-03-11", "2024-03-12", "2024-03-13"]

    def test_no_routines(self):
        assert build_forward("2024-03-10", [], 10, 0) == []

    def test_invalid_start_day(self, make_routines):
        assert build_forward("", make_routines(2), 10, 0) == []

    def test_offset_shifts_phase(self, make_routines):
        entries = build_forward("2024-03-10", make_routines(2), 5, 1)

        assert _shape(entries) == ["r-b", "rest", "r-a", "r-b", "rest"]

    def test_offset_larger_than_pattern(self, make_routines):
        assert _shape(build_forward("2024-03-10", make_routines(3), 4, 9)) == \
            _shape(build_forward("2024-03-10", make_routines(3), 4, 1))

    def test_four_routine_split(self, make_routines):
        entries = build_forward("2024-03-10", make_routines(5), 8, 0)

        assert _shape(entries) == ["r-a", "r-b", "rest", "r-c", "r-d", "rest", "rest", "r-a"]

    def test_consecutive_days_without_gaps(self, make_routines):
        entries = build_forward("2024-02-20", make_routines(3), 60, 0)
        days = [date.fromisoformat(e.date) for e in entries]

        assert len(entries) == 60
        assert len(set(days)) == 60
        assert all((b - a).days == 1 for a, b in zip(days, days[1:]))

    def test_zero_days(self, make_routines):
        assert build_forward("2024-03-10", make_routines(1), 0, 0) == []

    def test_never_completed(self, make_routines):
        assert all(e.completed is None for e in build_forward("2024-03-10", make_routines(2), 9, 0))


class TestCalendarWindow:
    """Test generate_calendar_days_window"""

    def test_starts_on_previous_sunday(self):
        # 2024-03-13 is a Wednesday; its week starts Sunday 2024-03-10
        days = generate_calendar_days_window(35, today="2024-03-13")

        assert days[0] == "2024-03-03"
        assert date.fromisoformat(days[0]).weekday() == 6
        assert len(days) == 35
        assert days[-1] == "2024-04-06"

    def test_today_is_sunday(self):
        days = generate_calendar_days_window(14, today="2024-03-10")

        assert days[0] == "2024-03-03"
        assert "2024-03-10" in days

    def test_today_is_saturday(self):
        days = generate_calendar_days_window(21, today="2024-03-16")

        assert days[0] == "2024-03-03"
        assert days[-1] == "2024-03-23"

    def test_invalid_today(self):
        assert generate_calendar_days_window(35, today="someday") == []
