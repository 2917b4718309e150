"""
Test Fixtures and Helpers for Fake Repositories.

This module provides helper functions for overriding FastAPI dependencies
with fake implementations, and for building an app whose trackers use a fake
session repository.

Usage:
    from tests.fakes.conftest import build_test_app

    app, repo, progress_repo = build_test_app()
    client = TestClient(app)
    response = client.get("/active-workout", headers=auth_headers("user-1"))
"""

from typing import Any, Callable, Optional, Tuple

from fastapi import FastAPI

from api import deps
from application.services import ActiveWorkoutRegistry, SetSyncPolicy
from backend.main import create_app
from backend.settings import Settings
from tests.fakes import (
    FakeUserProgressRepository,
    FakeWorkoutSessionRepository,
    create_session_repo,
)

# Type for dependency getters
RepoGetter = Callable[..., Any]

TEST_API_KEY = "test-key"

# No real sleeping in tests
FAST_SYNC_POLICY = SetSyncPolicy(max_attempts=3, min_wait_seconds=0.001, max_wait_seconds=0.002)


def make_test_settings(**overrides: Any) -> Settings:
    """Settings isolated from the environment and any .env file."""
    values = {"environment": "test", "api_keys": TEST_API_KEY}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def auth_headers(user_id: str) -> dict:
    """API key headers authenticating as user_id."""
    return {"X-API-Key": f"{TEST_API_KEY}:{user_id}"}


def override_dependency(app: FastAPI, getter: RepoGetter, implementation: Any) -> None:
    """
    Override a FastAPI dependency with a fake implementation.

    Example:
        repo = FakeUserProgressRepository()
        override_dependency(app, deps.get_progress_repo, repo)
    """
    app.dependency_overrides[getter] = lambda: implementation


def build_test_app(
    repo: Optional[FakeWorkoutSessionRepository] = None,
    progress_repo: Optional[FakeUserProgressRepository] = None,
    settings: Optional[Settings] = None,
) -> Tuple[FastAPI, FakeWorkoutSessionRepository, FakeUserProgressRepository]:
    """
    Create an app wired to fakes.

    The tracker registry, session repo and progress repo are all replaced;
    authentication stays real and accepts auth_headers().
    """
    settings = settings or make_test_settings()
    repo = repo or create_session_repo()
    progress_repo = progress_repo or FakeUserProgressRepository()

    app = create_app(settings=settings)
    registry = ActiveWorkoutRegistry(lambda: repo, set_sync_policy=FAST_SYNC_POLICY)
    app.state.tracker_registry = registry

    app.dependency_overrides[deps.get_settings] = lambda: settings
    override_dependency(app, deps.get_session_repo, repo)
    override_dependency(app, deps.get_progress_repo, progress_repo)
    return app, repo, progress_repo
