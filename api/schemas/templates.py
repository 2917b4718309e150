"""
Template Schemas.

Response shapes for the /templates endpoints.
"""

from typing import List

from pydantic import BaseModel, Field

from domain.models import WorkoutTemplate


class WorkoutTemplateListResponse(BaseModel):
    """Templates without their exercises."""
    templates: List[WorkoutTemplate] = Field(default_factory=list)
    count: int = 0
