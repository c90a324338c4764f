"""
Writing submission schemas.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from scribexx.ai.feedback import WritingFeedback
from scribexx.engines.progress.mastery import SkillMastery


class SubmissionCreate(BaseModel):
    quest_id: str = Field(..., min_length=1, max_length=100)
    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    quest_id: str
    title: str
    content: str
    status: str
    feedback: Optional[str] = None
    ai_feedback: Optional[Dict[str, Any]] = None
    skills_assessed: Optional[SkillMastery] = None
    suggested_exercises: Optional[List[str]] = None
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None


class AnalyzeRequest(BaseModel):
    submission_id: uuid.UUID
    grade: Optional[int] = Field(None, ge=1, le=12)


class AnalysisResult(BaseModel):
    feedback: WritingFeedback
    skills_assessed: SkillMastery
    suggested_exercises: List[str]


class AnalyzeResponse(BaseModel):
    submission: SubmissionResponse
    analysis: AnalysisResult
