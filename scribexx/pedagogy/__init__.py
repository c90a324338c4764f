"""
Static learning content: REDI exercises, the OWL town and achievements.
"""

from scribexx.pedagogy.exercises import (
    EXERCISES,
    Exercise,
    ExerciseStatus,
    ExerciseType,
    exercise_map,
    exercise_status,
    get_exercise_by_id,
)
from scribexx.pedagogy.town import (
    TOWN_LOCATIONS,
    WRITING_QUESTS,
    TownLocation,
    WritingQuest,
    entry_quest,
    get_location_by_id,
    get_quest_by_id,
    get_quests_for_location,
    is_quest_available,
)
from scribexx.pedagogy.achievements import (
    ACHIEVEMENTS,
    Achievement,
    check_achievement_unlocked,
    get_achievement_by_id,
)

__all__ = [
    "EXERCISES",
    "Exercise",
    "ExerciseStatus",
    "ExerciseType",
    "exercise_map",
    "exercise_status",
    "get_exercise_by_id",
    "TOWN_LOCATIONS",
    "WRITING_QUESTS",
    "TownLocation",
    "WritingQuest",
    "entry_quest",
    "get_location_by_id",
    "get_quest_by_id",
    "get_quests_for_location",
    "is_quest_available",
    "ACHIEVEMENTS",
    "Achievement",
    "check_achievement_unlocked",
    "get_achievement_by_id",
]
