"""
Progress schemas.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from scribexx.engines.progress.mastery import SkillDelta, SkillMastery, SkillType
from scribexx.engines.progress.state import ProgressHistoryEntry


class ProgressResponse(BaseModel):
    """A learner's stored progress."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    redi_skill_mastery: SkillMastery
    owl_skill_mastery: SkillMastery
    redi_level: int
    owl_level: int
    completed_exercises: List[str]
    completed_quests: List[str]
    unlocked_locations: List[str]
    achievements: List[str]
    currency: int
    current_streak: int
    longest_streak: int
    last_writing_date: Optional[datetime] = None
    daily_challenge_id: Optional[str] = None
    daily_challenge_completed: bool = False
    progress_history: List[ProgressHistoryEntry] = Field(default_factory=list)
    updated_at: Optional[datetime] = None


class TransitionResponse(BaseModel):
    """Progress after a server-side transition, plus what it unlocked."""

    progress: ProgressResponse
    unlocked_locations: List[str] = Field(default_factory=list)
    unlocked_achievements: List[str] = Field(default_factory=list)


class ExerciseCompletionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    is_correct: bool
    skill_type: Optional[SkillType] = None
    node_completion: Optional[bool] = None


class QuestCompletionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    skills_gained: Optional[SkillDelta] = None


class ExerciseAttemptCreate(BaseModel):
    exercise_id: str = Field(..., min_length=1, max_length=100)
    is_correct: bool
    answers: Optional[Dict[str, Any]] = None


class ExerciseAttemptResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    exercise_id: str
    is_correct: bool
    answers: Optional[Dict[str, Any]] = None
    created_at: datetime
