"""
Daily challenge schemas.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from scribexx.engines.progress.mastery import SkillType


class DailyChallengeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    prompt: str = Field(..., min_length=1)
    word_minimum: int = Field(100, ge=1)
    skill_focus: SkillType
    difficulty: int = Field(1, ge=1, le=5)
    expires_in_hours: int = Field(24, ge=1, le=24 * 7)


class DailyChallengeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    challenge_date: datetime
    title: str
    description: str
    prompt: str
    word_minimum: int
    skill_focus: str
    difficulty: int
    expires_at: Optional[datetime] = None
