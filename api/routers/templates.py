"""
Workout templates router.

- /templates - Templates the user can start a workout from
- /templates/{template_id} - One template with its exercises
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.deps import get_current_user, get_workout_templates_use_case
from api.schemas.templates import WorkoutTemplateListResponse
from application.use_cases import GetWorkoutTemplatesUseCase
from domain.models import WorkoutTemplate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/templates",
    tags=["Templates"],
)


@router.get("", response_model=WorkoutTemplateListResponse)
def list_templates(
    user_id: str = Depends(get_current_user),
    use_case: GetWorkoutTemplatesUseCase = Depends(get_workout_templates_use_case),
):
    """System templates plus the user's own."""
    result = use_case.list(user_id)
    return WorkoutTemplateListResponse(templates=result.templates, count=result.count)


@router.get("/{template_id}", response_model=WorkoutTemplate)
def get_template(
    template_id: str,
    user_id: str = Depends(get_current_user),
    use_case: GetWorkoutTemplatesUseCase = Depends(get_workout_templates_use_case),
):
    """A template with its exercises, in order."""
    template = use_case.get(user_id, template_id)
    if template is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Template {template_id} not found",
        )
    return template
