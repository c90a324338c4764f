"""
Catalog schemas: exercises, locations, quests and achievements
annotated with the caller's own status.
"""

from typing import List, Optional

from pydantic import BaseModel

from scribexx.engines.progress.mastery import SkillMastery
from scribexx.pedagogy.exercises import ExerciseStatus, ExerciseType


class ExerciseResponse(BaseModel):
    id: str
    title: str
    level: int
    skill_type: str
    exercise_type: ExerciseType
    instructions: str
    content: str
    options: Optional[List[str]] = None
    prompt: Optional[str] = None
    min_word_count: Optional[int] = None


class ExerciseMapNode(ExerciseResponse):
    status: ExerciseStatus
    mastery_requirement: int


class QuestResponse(BaseModel):
    id: str
    location_id: str
    title: str
    description: str
    tags: List[str]
    min_word_count: int
    skill_focus: str
    level: int
    required_mastery: SkillMastery
    prerequisite_quests: List[str]
    available: bool = False
    completed: bool = False


class LocationResponse(BaseModel):
    id: str
    name: str
    description: str
    icon: str
    style: str
    quest_ids: List[str]
    unlocked: bool = False


class AchievementResponse(BaseModel):
    id: str
    title: str
    description: str
    icon: str
    category: str
    unlocked: bool = False
