"""
Tests for GetWorkoutHistoryUseCase and GetCompletionCalendarUseCase.
"""
from datetime import date, datetime, timezone
from unittest.mock import MagicMock

import pytest

from application.use_cases import (
    GetCompletionCalendarUseCase,
    GetWorkoutHistoryUseCase,
)
from application.use_cases.get_completion_calendar import CALENDAR_SESSION_LIMIT
from tests.fakes import FakeUserProgressRepository, FakeWorkoutSessionRepository

pytestmark = pytest.mark.unit

USER = "user-1"


def _at(day, hour=18):
    return datetime(2024, 5, day, hour, 0, tzinfo=timezone.utc)


@pytest.fixture
def repo():
    return FakeWorkoutSessionRepository()


@pytest.fixture
def progress_repo():
    return FakeUserProgressRepository()


def seed_finished(repo, day, *, user_id=USER, sets=None, **kwargs):
    return repo.seed_session(
        user_id,
        [{"exercise_id": "squat", "status": "COMPLETED", "sets": sets or [
            {"weight_kg": 100, "reps": 5, "is_completed": True},
        ]}],
        status="COMPLETED",
        started_at=_at(day),
        completed_at=_at(day, 19),
        **kwargs,
    )


class TestGetWorkoutHistoryUseCase:
    """Tests for GetWorkoutHistoryUseCase."""

    def test_lists_completed_sessions_newest_first(self, repo):
        older = seed_finished(repo, 1, duration_seconds=1800, total_volume_kg=500)
        newer = seed_finished(repo, 3, duration_seconds=2400, total_volume_kg=750.5)
        repo.seed_session(USER, [{"exercise_id": "row"}])
        seed_finished(repo, 2, user_id="someone-else")

        result = GetWorkoutHistoryUseCase(repo).execute(USER)

        assert [w.session_id for w in result.workouts] == [newer, older]
        assert result.count == 2
        assert result.total_volume_kg == 1250.5
        assert result.total_duration_seconds == 4200

    def test_missing_totals_are_derived(self, repo):
        seed_finished(
            repo,
            1,
            sets=[
                {"weight_kg": 100, "reps": 5, "is_completed": True},
                {"weight_kg": 100, "reps": 5, "is_completed": False},
            ],
        )

        (summary,) = GetWorkoutHistoryUseCase(repo).execute(USER).workouts

        assert summary.total_volume_kg == 500
        assert summary.duration_seconds == 3600
        assert summary.exercise_count == 1
        assert summary.completed_exercise_count == 1

    def test_limit_is_passed_through(self, repo):
        for day in range(1, 6):
            seed_finished(repo, day)

        result = GetWorkoutHistoryUseCase(repo).execute(USER, limit=2)

        assert result.count == 2
        assert repo.calls_to("get_workout_history") == [(USER, 2)]

    def test_unreadable_rows_are_skipped(self):
        mock_repo = MagicMock()
        mock_repo.get_workout_history.return_value = [
            {"id": "bad", "started_at": None},
            {"id": "good", "user_id": USER, "status": "COMPLETED",
             "started_at": "2024-05-01T18:00:00Z", "completed_at": "2024-05-01T18:30:00Z",
             "exercises": []},
        ]

        result = GetWorkoutHistoryUseCase(mock_repo).execute(USER)

        assert [w.session_id for w in result.workouts] == ["good"]

    def test_repository_failure_is_empty_history(self, repo):
        seed_finished(repo, 1)
        repo.fail("get_workout_history")

        result = GetWorkoutHistoryUseCase(repo).execute(USER)

        assert result.count == 0
        assert result.workouts == []


class TestGetCompletionCalendarUseCase:
    """Tests for GetCompletionCalendarUseCase."""

    def test_merges_sessions_and_legacy_progress(self, repo, progress_repo):
        seed_finished(repo, 18)
        seed_finished(repo, 20)
        progress_repo.seed(
            USER,
            [
                "workout-2024-05-19",
                "workout-2024-05-20",
                "push-a-week-1",
                {"date": "2024-04-30T07:00:00Z", "name": "Legs"},
                {"nonsense": True},
            ],
        )

        result = GetCompletionCalendarUseCase(repo, progress_repo).execute(
            USER, today=date(2024, 5, 20)
        )

        assert result.days == [date(2024, 4, 30), date(2024, 5, 18), date(2024, 5, 19), date(2024, 5, 20)]
        assert result.stats.this_month_count == 3
        assert result.stats.current_streak == 3
        assert result.stats.weekly_average == 1.0
        assert len(result.legacy_entries) == 4

    def test_no_progress_row(self, repo, progress_repo):
        seed_finished(repo, 10)

        result = GetCompletionCalendarUseCase(repo, progress_repo).execute(
            USER, today=date(2024, 5, 20)
        )

        assert result.days == [date(2024, 5, 10)]
        assert result.stats.current_streak == 0
        assert result.legacy_entries == []

    def test_decoded_progress_blob(self, repo, progress_repo):
        progress_repo.seed(USER, ["workout-2024-05-20"], as_json=False)

        result = GetCompletionCalendarUseCase(repo, progress_repo).execute(
            USER, today=date(2024, 5, 20)
        )

        assert result.days == [date(2024, 5, 20)]
        assert result.stats.current_streak == 1

    def test_corrupt_progress_blob_is_ignored(self, repo, progress_repo):
        progress_repo.seed(USER, "{not json")

        result = GetCompletionCalendarUseCase(repo, progress_repo).execute(
            USER, today=date(2024, 5, 20)
        )

        assert result.days == []
        assert result.stats.this_month_count == 0

    def test_reads_enough_history(self, repo, progress_repo):
        GetCompletionCalendarUseCase(repo, progress_repo).execute(USER, today=date(2024, 5, 20))

        assert repo.calls_to("get_workout_history") == [(USER, CALENDAR_SESSION_LIMIT)]
