"""
Teacher/parent dashboard schemas.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class StudentLinkCreate(BaseModel):
    student_username: str = Field(..., min_length=1, max_length=100)


class StudentLinkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    guardian_id: uuid.UUID
    student_id: uuid.UUID
    relationship_type: str
    created_at: datetime


class StudentSummary(BaseModel):
    """At-a-glance progress for one linked student."""

    id: uuid.UUID
    username: str
    display_name: str
    grade: int
    redi_mastery: float
    owl_mastery: float
    redi_level: int
    owl_level: int
    completed_exercises: int
    completed_quests: int
    current_streak: int
