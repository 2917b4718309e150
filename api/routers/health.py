"""
Health check router.

This router provides health check endpoints for monitoring and load balancers.
"""

import logging

from fastapi import APIRouter, Depends

from api.deps import get_supabase_client, get_tracker_registry
from application.services import ActiveWorkoutRegistry

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Health"],
)


@router.get("/health")
def health():
    """
    Simple liveness endpoint.

    Returns:
        dict: Status indicator for health checks
    """
    return {"status": "ok"}


@router.get("/health/ready")
def readiness(registry: ActiveWorkoutRegistry = Depends(get_tracker_registry)):
    """
    Readiness endpoint.

    Reports whether the database is configured and how many trackers are live.
    """
    database = get_supabase_client() is not None
    if not database:
        logger.warning("Readiness check: Supabase not configured")
    return {
        "status": "ok" if database else "degraded",
        "database": database,
        "active_trackers": len(registry),
    }
