"""
Level calculator shared by both learning modes.

    level = clamp(1 + floor(completed / K) + floor(avg_mastery / D), 1, 10)

REDI (exercises) uses K=3, D=10; OWL (quests) uses K=2, D=15.
"""

import math
from dataclasses import dataclass

from scribexx.engines.progress.mastery import SkillMastery

MIN_LEVEL = 1
MAX_LEVEL = 10


@dataclass(frozen=True)
class LevelRule:
    activity_divisor: int
    mastery_divisor: int


EXERCISE_LEVEL_RULE = LevelRule(activity_divisor=3, mastery_divisor=10)
QUEST_LEVEL_RULE = LevelRule(activity_divisor=2, mastery_divisor=15)


def calculate_level(mastery: SkillMastery, completed_count: int, rule: LevelRule) -> int:
    activity_factor = max(0, completed_count) // rule.activity_divisor
    mastery_factor = math.floor(mastery.average() / rule.mastery_divisor)
    return max(MIN_LEVEL, min(MAX_LEVEL, 1 + activity_factor + mastery_factor))


def calculate_redi_level(mastery: SkillMastery, completed_exercises: int) -> int:
    return calculate_level(mastery, completed_exercises, EXERCISE_LEVEL_RULE)


def calculate_owl_level(mastery: SkillMastery, completed_quests: int) -> int:
    return calculate_level(mastery, completed_quests, QUEST_LEVEL_RULE)
