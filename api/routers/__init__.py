"""
Router package for the workout session API.

This package contains all API routers organized by domain:
- health: Liveness and readiness
- active_workout: The signed-in user's active workout tracker
- history: Workout history and completion calendar
- templates: Workout templates
"""

from api.routers.health import router as health_router
from api.routers.active_workout import router as active_workout_router
from api.routers.history import router as history_router
from api.routers.templates import router as templates_router

__all__ = [
    "health_router",
    "active_workout_router",
    "history_router",
    "templates_router",
]
