"""
Integration tests for the active workout router.

Tests all endpoints in api/routers/active_workout.py against a fake session
repository:
- GET /active-workout
- POST /active-workout/refresh
- POST /active-workout/start
- POST /active-workout/manual
- POST /active-workout/cancel
- POST /active-workout/complete
- PATCH /active-workout/exercises/{exercise_id}
- PATCH /active-workout/sets/{set_id}
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from tests.fakes import PUSH_TEMPLATE_ID
from tests.fakes.conftest import auth_headers, build_test_app

pytestmark = pytest.mark.integration

# =============================================================================
# Test Constants
# =============================================================================

TEST_USER_ID = "test-user-active-workout"
HEADERS = auth_headers(TEST_USER_ID)

MANUAL_BODY = {
    "name": "Garage Session",
    "exercises": [
        {"id": "deadlift", "name": "Deadlift", "target_sets": 2, "target_reps": "5"},
        {"id": "pull-up", "name": "Pull Up", "target_sets": 3, "target_reps": "8-10"},
    ],
}


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def app_and_repo():
    app, repo, _ = build_test_app()
    yield app, repo
    repo.release_all()


@pytest.fixture
def client(app_and_repo):
    app, _ = app_and_repo
    with TestClient(app) as client:
        yield client


@pytest.fixture
def repo(app_and_repo):
    return app_and_repo[1]


def tracker_for(client, user_id=TEST_USER_ID):
    return client.app.state.tracker_registry.get(user_id)


def wait_for_sync(client, user_id=TEST_USER_ID):
    client.portal.call(tracker_for(client, user_id).wait_for_pending_sync)


def start_push(client):
    response = client.post(
        "/active-workout/start", json={"template_id": PUSH_TEMPLATE_ID}, headers=HEADERS
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


# =============================================================================
# Authentication
# =============================================================================


class TestAuthentication:
    """Every endpoint needs a user."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/active-workout"),
            ("post", "/active-workout/refresh"),
            ("post", "/active-workout/cancel"),
            ("post", "/active-workout/complete"),
        ],
    )
    def test_missing_credentials(self, client, method, path):
        response = getattr(client, method)(path)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_invalid_api_key(self, client):
        response = client.get("/active-workout", headers={"X-API-Key": "wrong:user"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# State
# =============================================================================


class TestGetActiveWorkout:
    """GET /active-workout and POST /active-workout/refresh."""

    def test_idle_when_nothing_open(self, client):
        response = client.get("/active-workout", headers=HEADERS)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["phase"] == "idle"
        assert body["session_id"] is None
        assert body["exercises"] == []
        assert body["elapsed_display"] == ""

    def test_picks_up_open_session(self, client, repo):
        session_id = repo.seed_session(TEST_USER_ID, [{"exercise_id": "squat", "target_sets": 2}])

        body = client.get("/active-workout", headers=HEADERS).json()

        assert body["phase"] == "active"
        assert body["session_id"] == session_id
        assert [len(e["sets"]) for e in body["exercises"]] == [2]

    def test_first_request_loads_once(self, client, repo):
        client.get("/active-workout", headers=HEADERS)
        client.get("/active-workout", headers=HEADERS)

        assert len(repo.calls_to("get_active_session")) == 1

    def test_refresh_sees_backend_changes(self, client, repo):
        client.get("/active-workout", headers=HEADERS)
        session_id = repo.seed_session(TEST_USER_ID, [{"exercise_id": "squat"}])

        body = client.post("/active-workout/refresh", headers=HEADERS).json()

        assert body["session_id"] == session_id

    def test_users_are_isolated(self, client, repo):
        repo.seed_session("someone-else", [{"exercise_id": "squat"}])

        body = client.get("/active-workout", headers=HEADERS).json()

        assert body["phase"] == "idle"


# =============================================================================
# Start
# =============================================================================


class TestStartWorkout:
    """POST /active-workout/start and /manual."""

    def test_start_from_template(self, client, repo):
        body = start_push(client)

        state = body["state"]
        assert state["session_id"] == body["session_id"]
        assert state["phase"] == "active"
        assert [e["exercise_id"] for e in state["exercises"]] == [
            "bench-press", "overhead-press", "tricep-dips"
        ]
        # "8-12" targets the lower bound
        assert {s["reps"] for s in state["exercises"][0]["sets"]} == {8}
        assert repo.get_session_row(body["session_id"])["status"] == "IN_PROGRESS"

    def test_unknown_template_is_unavailable(self, client):
        response = client.post(
            "/active-workout/start", json={"template_id": "missing"}, headers=HEADERS
        )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert client.get("/active-workout", headers=HEADERS).json()["phase"] == "idle"

    def test_empty_template_id_rejected(self, client):
        response = client.post("/active-workout/start", json={"template_id": ""}, headers=HEADERS)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_manual_workout(self, client, repo):
        response = client.post("/active-workout/manual", json=MANUAL_BODY, headers=HEADERS)

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        row = repo.get_session_row(body["session_id"])
        assert row["workout_name"] == "Garage Session"
        assert row["workout_type"] == "manual"
        assert [len(e["sets"]) for e in body["state"]["exercises"]] == [2, 3]

    @pytest.mark.parametrize(
        "body",
        [
            {"name": "   ", "exercises": MANUAL_BODY["exercises"]},
            {"name": "Empty", "exercises": []},
        ],
    )
    def test_manual_workout_needs_name_and_exercises(self, client, repo, body):
        response = client.post("/active-workout/manual", json=body, headers=HEADERS)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert repo.calls_to("start_manual_session") == []

    def test_manual_workout_backend_failure(self, client, repo):
        repo.fail("start_manual_session")

        response = client.post("/active-workout/manual", json=MANUAL_BODY, headers=HEADERS)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    def test_starting_again_replaces_the_session(self, client):
        first = start_push(client)["session_id"]
        second = start_push(client)

        assert second["session_id"] != first
        assert second["state"]["session_id"] == second["session_id"]


# =============================================================================
# Updates
# =============================================================================


class TestUpdates:
    """PATCH endpoints."""

    def test_log_set(self, client, repo):
        state = start_push(client)["state"]
        set_id = state["exercises"][0]["sets"][0]["id"]

        response = client.patch(
            f"/active-workout/sets/{set_id}",
            json={"is_completed": True, "weight": 60, "reps": 10},
            headers=HEADERS,
        )

        assert response.status_code == status.HTTP_202_ACCEPTED
        body = response.json()
        assert body["found"] is True
        bench = body["state"]["exercises"][0]
        assert bench["status"] == "IN_PROGRESS"
        assert bench["sets"][0]["is_completed"] is True
        assert body["state"]["total_volume_kg"] == 600

        wait_for_sync(client)
        row = repo.get_set_row(set_id)
        assert (row["is_completed"], row["weight_kg"], row["reps"]) == (True, 60, 10)

    def test_completing_every_set_completes_exercise(self, client):
        state = start_push(client)["state"]
        dips = state["exercises"][2]

        for s in dips["sets"]:
            body = client.patch(
                f"/active-workout/sets/{s['id']}", json={"is_completed": True}, headers=HEADERS
            ).json()

        assert body["state"]["exercises"][2]["status"] == "COMPLETED"

    def test_unknown_set(self, client):
        start_push(client)

        response = client.patch(
            "/active-workout/sets/no-such-set", json={"is_completed": True}, headers=HEADERS
        )

        assert response.status_code == status.HTTP_202_ACCEPTED
        assert response.json()["found"] is False

    def test_negative_weight_rejected(self, client):
        state = start_push(client)["state"]
        set_id = state["exercises"][0]["sets"][0]["id"]

        response = client.patch(
            f"/active-workout/sets/{set_id}",
            json={"is_completed": True, "weight": -5},
            headers=HEADERS,
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_failed_sync_is_reported_as_pending(self, client, repo):
        state = start_push(client)["state"]
        set_id = state["exercises"][0]["sets"][0]["id"]
        repo.fail("update_set")

        client.patch(f"/active-workout/sets/{set_id}", json={"is_completed": True}, headers=HEADERS)
        wait_for_sync(client)

        body = client.get("/active-workout", headers=HEADERS).json()
        assert body["pending_set_updates"] == 1
        assert body["exercises"][0]["sets"][0]["is_completed"] is True

    def test_exercise_status_is_local(self, client, repo):
        start_push(client)

        response = client.patch(
            "/active-workout/exercises/overhead-press",
            json={"status": "IN_PROGRESS"},
            headers=HEADERS,
        )

        assert response.status_code == status.HTTP_200_OK
        statuses = [e["status"] for e in response.json()["exercises"]]
        assert statuses == ["NOT_STARTED", "IN_PROGRESS", "NOT_STARTED"]
        assert repo.calls_to("update_set") == []

    def test_invalid_exercise_status(self, client):
        start_push(client)

        response = client.patch(
            "/active-workout/exercises/bench-press", json={"status": "DONE"}, headers=HEADERS
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# =============================================================================
# Close
# =============================================================================


class TestCloseWorkout:
    """POST /active-workout/cancel and /complete."""

    def test_cancel(self, client, repo):
        session_id = start_push(client)["session_id"]

        response = client.post("/active-workout/cancel", headers=HEADERS)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["cancelled"] is True
        assert body["state"]["phase"] == "idle"
        assert repo.get_session_row(session_id)["status"] == "CANCELLED"

    def test_cancel_without_session(self, client):
        body = client.post("/active-workout/cancel", headers=HEADERS).json()
        assert body["cancelled"] is False

    def test_cancel_refused_reloads_session(self, client, repo):
        session_id = start_push(client)["session_id"]
        repo.fail("cancel_session")

        body = client.post("/active-workout/cancel", headers=HEADERS).json()

        assert body["cancelled"] is False
        assert body["state"]["session_id"] == session_id

    def test_complete(self, client, repo):
        state = start_push(client)["state"]
        set_id = state["exercises"][0]["sets"][0]["id"]
        client.patch(
            f"/active-workout/sets/{set_id}",
            json={"is_completed": True, "weight": 1000, "reps": 2},
            headers=HEADERS,
        )
        wait_for_sync(client)

        response = client.post("/active-workout/complete", headers=HEADERS)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["session_id"] == state["session_id"]
        assert body["persisted"] is True
        assert body["total_volume_kg"] == 2000
        assert body["volume_display"] == "2.0t"
        row = repo.get_session_row(state["session_id"])
        assert row["status"] == "COMPLETED"
        assert row["total_volume_kg"] == 2000
        assert client.get("/active-workout", headers=HEADERS).json()["phase"] == "idle"

    def test_complete_without_session(self, client):
        response = client.post("/active-workout/complete", headers=HEADERS)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_complete_not_persisted(self, client, repo):
        start_push(client)
        repo.fail("complete_session", RuntimeError("connection reset"))

        body = client.post("/active-workout/complete", headers=HEADERS).json()

        assert body["persisted"] is False
        assert client.get("/active-workout", headers=HEADERS).json()["phase"] == "active"
