"""
Tests for GetWorkoutTemplatesUseCase.
"""
from unittest.mock import MagicMock

import pytest

from application.use_cases import GetWorkoutTemplatesUseCase
from tests.fakes import PUSH_TEMPLATE_EXERCISES, PUSH_TEMPLATE_ID, create_session_repo

pytestmark = pytest.mark.unit

USER = "user-1"


@pytest.fixture
def repo():
    repo = create_session_repo()
    repo.seed_template("legs-mine", "My Legs", [{"exercise_id": "squat"}], user_id=USER)
    repo.seed_template("legs-theirs", "Their Legs", [{"exercise_id": "lunge"}], user_id="someone-else")
    return repo


@pytest.fixture
def use_case(repo):
    return GetWorkoutTemplatesUseCase(session_repo=repo)


class TestListTemplates:
    """Tests for GetWorkoutTemplatesUseCase.list"""

    def test_system_and_own_templates(self, use_case):
        result = use_case.list(USER)

        assert result.count == 2
        assert {t.id for t in result.templates} == {PUSH_TEMPLATE_ID, "legs-mine"}

    def test_exercises_are_not_loaded(self, use_case):
        result = use_case.list(USER)
        assert all(t.exercises == [] for t in result.templates)

    def test_repository_failure_yields_empty_list(self, use_case, repo):
        repo.fail("get_templates")

        result = use_case.list(USER)

        assert result.templates == []
        assert result.count == 0

    def test_unreadable_rows_are_skipped(self):
        session_repo = MagicMock()
        session_repo.get_templates.return_value = [{"name": "no id"}, {"id": "t1", "name": "Ok"}]

        result = GetWorkoutTemplatesUseCase(session_repo=session_repo).list(USER)

        assert [t.id for t in result.templates] == ["t1"]


class TestGetTemplate:
    """Tests for GetWorkoutTemplatesUseCase.get"""

    def test_system_template_with_ordered_exercises(self, use_case):
        template = use_case.get(USER, PUSH_TEMPLATE_ID)

        assert template.is_system
        assert [e.exercise_id for e in template.exercises] == [
            e["exercise_id"] for e in PUSH_TEMPLATE_EXERCISES
        ]
        assert template.exercises[0].target_reps == "8-12"

    def test_own_template(self, use_case):
        template = use_case.get(USER, "legs-mine")
        assert template.user_id == USER

    def test_other_users_template_is_hidden(self, use_case):
        assert use_case.get(USER, "legs-theirs") is None

    def test_unknown_template(self, use_case):
        assert use_case.get(USER, "missing") is None
