"""
Achievement catalog and unlock checks.

Requirement fields left unset (or set to 0) are not checked. The legacy
`skill_mastery` requirement predates per-mode mastery and is evaluated
against OWL mastery.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from scribexx.engines.progress.mastery import SkillMastery, SkillType
from scribexx.engines.progress.state import ProgressState


class AchievementCategory(str, Enum):
    REDI = "redi"
    OWL = "owl"
    GENERAL = "general"


class MasteryRequirement(BaseModel):
    mechanics: Optional[int] = None
    sequencing: Optional[int] = None
    voice: Optional[int] = None
    total: Optional[int] = None  # average of the three axes

    def is_met_by(self, mastery: SkillMastery) -> bool:
        for skill in SkillType:
            required = getattr(self, skill.value)
            if required and mastery.get(skill) < required:
                return False
        if self.total and mastery.average() < self.total:
            return False
        return True


class AchievementRequirements(BaseModel):
    completed_exercises: Optional[int] = None
    completed_quests: Optional[int] = None
    redi_level: Optional[int] = None
    owl_level: Optional[int] = None
    redi_skill_mastery: Optional[MasteryRequirement] = None
    owl_skill_mastery: Optional[MasteryRequirement] = None
    skill_mastery: Optional[MasteryRequirement] = None
    specific_exercises: List[str] = Field(default_factory=list)
    specific_quests: List[str] = Field(default_factory=list)


class Achievement(BaseModel):
    id: str
    title: str
    description: str
    icon: str
    category: AchievementCategory = AchievementCategory.GENERAL
    requirements: AchievementRequirements


ACHIEVEMENTS: List[Achievement] = [
    # Beginner
    Achievement(
        id="first-steps",
        title="First Steps",
        description="Complete your first exercise in REDI",
        icon="🏆",
        category=AchievementCategory.REDI,
        requirements=AchievementRequirements(completed_exercises=1),
    ),
    Achievement(
        id="quest-beginner",
        title="Novice Writer",
        description="Complete your first writing quest in OWL",
        icon="✍️",
        category=AchievementCategory.OWL,
        requirements=AchievementRequirements(completed_quests=1),
    ),
    Achievement(
        id="mechanics-apprentice",
        title="Mechanics Apprentice",
        description="Reach 25% mastery in Mechanics skills",
        icon="🔧",
        requirements=AchievementRequirements(skill_mastery=MasteryRequirement(mechanics=25)),
    ),
    Achievement(
        id="sequencing-apprentice",
        title="Sequencing Apprentice",
        description="Reach 25% mastery in Sequencing skills",
        icon="📋",
        requirements=AchievementRequirements(skill_mastery=MasteryRequirement(sequencing=25)),
    ),
    Achievement(
        id="voice-apprentice",
        title="Voice Apprentice",
        description="Reach 25% mastery in Voice skills",
        icon="🔊",
        requirements=AchievementRequirements(skill_mastery=MasteryRequirement(voice=25)),
    ),
    # Intermediate
    Achievement(
        id="exercise-enthusiast",
        title="Exercise Enthusiast",
        description="Complete 10 REDI exercises",
        icon="🎯",
        category=AchievementCategory.REDI,
        requirements=AchievementRequirements(completed_exercises=10),
    ),
    Achievement(
        id="quest-adept",
        title="Adept Writer",
        description="Complete 5 writing quests in OWL",
        icon="📝",
        category=AchievementCategory.OWL,
        requirements=AchievementRequirements(completed_quests=5),
    ),
    Achievement(
        id="mechanics-master",
        title="Mechanics Master",
        description="Reach 75% mastery in Mechanics skills",
        icon="⚙️",
        requirements=AchievementRequirements(skill_mastery=MasteryRequirement(mechanics=75)),
    ),
    Achievement(
        id="sequencing-master",
        title="Sequencing Master",
        description="Reach 75% mastery in Sequencing skills",
        icon="🔗",
        requirements=AchievementRequirements(skill_mastery=MasteryRequirement(sequencing=75)),
    ),
    Achievement(
        id="voice-master",
        title="Voice Master",
        description="Reach 75% mastery in Voice skills",
        icon="🎭",
        requirements=AchievementRequirements(skill_mastery=MasteryRequirement(voice=75)),
    ),
    # Advanced
    Achievement(
        id="all-around-writer",
        title="All-Around Writer",
        description="Reach at least 50% mastery in all three skill areas",
        icon="🌟",
        requirements=AchievementRequirements(
            skill_mastery=MasteryRequirement(mechanics=50, sequencing=50, voice=50),
        ),
    ),
    Achievement(
        id="exercise-master",
        title="Exercise Master",
        description="Complete all REDI exercises in at least one skill path",
        icon="🔥",
        category=AchievementCategory.REDI,
        requirements=AchievementRequirements(
            specific_exercises=["mechanics-1", "mechanics-2", "mechanics-3", "mechanics-4", "mechanics-5"],
        ),
    ),
    Achievement(
        id="town-explorer",
        title="Town Explorer",
        description="Complete at least one quest from each unlocked location",
        icon="🧭",
        category=AchievementCategory.OWL,
        requirements=AchievementRequirements(
            specific_quests=["town-hall-1", "library-1", "music-hall-1"],
        ),
    ),
    Achievement(
        id="writing-virtuoso",
        title="Writing Virtuoso",
        description="Reach 90% mastery in all three skill areas",
        icon="👑",
        requirements=AchievementRequirements(
            skill_mastery=MasteryRequirement(mechanics=90, sequencing=90, voice=90),
        ),
    ),
    Achievement(
        id="master-wordsmith",
        title="Master Wordsmith",
        description="Complete at least 20 exercises and 10 quests with high mastery",
        icon="📚",
        requirements=AchievementRequirements(
            completed_exercises=20,
            completed_quests=10,
            skill_mastery=MasteryRequirement(total=80),
        ),
    ),
]

_ACHIEVEMENTS_BY_ID = {achievement.id: achievement for achievement in ACHIEVEMENTS}


def get_achievement_by_id(achievement_id: str) -> Optional[Achievement]:
    return _ACHIEVEMENTS_BY_ID.get(achievement_id)


def check_achievement_unlocked(achievement_id: str, state: ProgressState) -> bool:
    """True when the learner satisfies every requirement of the achievement."""
    achievement = get_achievement_by_id(achievement_id)
    if achievement is None:
        return False
    req = achievement.requirements

    if req.completed_exercises and len(state.completed_exercises) < req.completed_exercises:
        return False
    if req.completed_quests and len(state.completed_quests) < req.completed_quests:
        return False
    if req.redi_level and state.redi_level < req.redi_level:
        return False
    if req.owl_level and state.owl_level < req.owl_level:
        return False

    if req.redi_skill_mastery and not req.redi_skill_mastery.is_met_by(state.redi_skill_mastery):
        return False
    if req.owl_skill_mastery and not req.owl_skill_mastery.is_met_by(state.owl_skill_mastery):
        return False
    if req.skill_mastery and not req.skill_mastery.is_met_by(state.owl_skill_mastery):
        return False

    completed_exercises = set(state.completed_exercises)
    if any(exercise_id not in completed_exercises for exercise_id in req.specific_exercises):
        return False
    completed_quests = set(state.completed_quests)
    if any(quest_id not in completed_quests for quest_id in req.specific_quests):
        return False

    return True
