"""
Pure progress transitions: (ProgressState, event) -> ProgressState.

Nothing here touches the database or mutates its input. Callers load a
state, run one or more transitions, and persist the result in the same
session (see ProgressService).

Rewards:
- exercise answered incorrectly: +1 currency
- exercise answered correctly: +5 currency, +10 REDI mastery on the
  exercise's axis when the attempt completes a map node
- quest completed: +15 currency, default OWL gains voice +15,
  sequencing +5, mechanics +5
- achievement unlocked: +10 currency
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field

from scribexx.engines.progress.errors import ProgressNotInitializedError
from scribexx.engines.progress.level_calculator import calculate_owl_level, calculate_redi_level
from scribexx.engines.progress.mastery import SkillDelta, SkillType
from scribexx.engines.progress.state import (
    ProgressHistoryEntry,
    ProgressPatch,
    ProgressState,
    unique_ids,
)
from scribexx.logging_config import get_logger
from scribexx.pedagogy.achievements import ACHIEVEMENTS, check_achievement_unlocked
from scribexx.pedagogy.exercises import get_exercise_by_id
from scribexx.pedagogy.town import TOWN_LOCATIONS, entry_quest

logger = get_logger(__name__)

INCORRECT_ANSWER_REWARD = 1
EXERCISE_REWARD = 5
QUEST_REWARD = 15
ACHIEVEMENT_REWARD = 10
NODE_MASTERY_GAIN = 10
DEFAULT_QUEST_GAINS: Dict[SkillType, int] = {
    SkillType.MECHANICS: 5,
    SkillType.SEQUENCING: 5,
    SkillType.VOICE: 15,
}
HISTORY_LIMIT = 90


def _require(state: Optional[ProgressState]) -> ProgressState:
    if state is None:
        raise ProgressNotInitializedError()
    return state


# ---------------------------------------------------------------------------
# Exercises (REDI)
# ---------------------------------------------------------------------------

def is_node_completion(exercise_id: str) -> bool:
    """Map-node IDs look like "mechanics-3"; sub-question IDs carry "-q"."""
    return "-" in exercise_id and "-q" not in exercise_id


def resolve_skill_type(exercise_id: str, skill_type: Optional[SkillType] = None) -> Optional[SkillType]:
    """
    Skill axis trained by an exercise.

    Explicit tag first, then the catalog. Parsing the ID is a last resort
    for IDs outside the catalog and is logged.
    """
    if skill_type is not None:
        return SkillType(skill_type)

    exercise = get_exercise_by_id(exercise_id)
    if exercise is not None:
        return exercise.skill_type

    for skill in SkillType:
        if skill.value in exercise_id:
            logger.warning(
                "Skill type inferred from exercise id",
                extra={"exercise_id": exercise_id, "skill_type": skill.value},
            )
            return skill

    logger.warning("No skill type for exercise", extra={"exercise_id": exercise_id})
    return None


def complete_exercise(
    state: Optional[ProgressState],
    exercise_id: str,
    is_correct: bool,
    skill_type: Optional[SkillType] = None,
    node_completion: Optional[bool] = None,
) -> ProgressState:
    state = _require(state)

    if not is_correct:
        return state.model_copy(update={"currency": state.currency + INCORRECT_ANSWER_REWARD})

    completed = unique_ids((*state.completed_exercises, exercise_id))
    mastery = state.redi_skill_mastery

    if node_completion is None:
        node_completion = is_node_completion(exercise_id)
    if node_completion:
        skill = resolve_skill_type(exercise_id, skill_type)
        if skill is not None:
            mastery = mastery.with_delta({skill: NODE_MASTERY_GAIN})

    return state.model_copy(update={
        "completed_exercises": completed,
        "redi_skill_mastery": mastery,
        "redi_level": calculate_redi_level(mastery, len(completed)),
        "currency": state.currency + EXERCISE_REWARD,
    })


# ---------------------------------------------------------------------------
# Quests (OWL)
# ---------------------------------------------------------------------------

def complete_quest(
    state: Optional[ProgressState],
    quest_id: str,
    skills_gained: Optional[Union[SkillDelta, Dict[SkillType, int]]] = None,
) -> ProgressState:
    """Gains are clamped per axis; their sum is not limited."""
    state = _require(state)

    if skills_gained is None:
        deltas = DEFAULT_QUEST_GAINS
    elif isinstance(skills_gained, SkillDelta):
        deltas = skills_gained.as_deltas()
    else:
        deltas = skills_gained

    completed = unique_ids((*state.completed_quests, quest_id))
    mastery = state.owl_skill_mastery.with_delta(deltas)

    return state.model_copy(update={
        "completed_quests": completed,
        "owl_skill_mastery": mastery,
        "owl_level": calculate_owl_level(mastery, len(completed)),
        "currency": state.currency + QUEST_REWARD,
    })


# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------

def determine_locations_to_unlock(state: Optional[ProgressState]) -> List[str]:
    """
    Locked locations whose entry quest thresholds are all met by OWL mastery.

    Locations with no quests are never unlocked here.
    """
    state = _require(state)
    unlocked = set(state.unlocked_locations)
    eligible = []
    for location in TOWN_LOCATIONS:
        if location.id in unlocked:
            continue
        quest = entry_quest(location.id)
        if quest is None:
            continue
        if state.owl_skill_mastery.meets(quest.requirements.skill_mastery):
            eligible.append(location.id)
    return eligible


def unlock_locations(state: Optional[ProgressState], location_ids: Iterable[str]) -> ProgressState:
    """Set union; never removes a location."""
    state = _require(state)
    return state.model_copy(update={
        "unlocked_locations": unique_ids((*state.unlocked_locations, *location_ids)),
    })


def evaluate_location_unlocks(state: Optional[ProgressState]) -> tuple[ProgressState, List[str]]:
    """Decide against one mastery snapshot, then merge."""
    newly_unlocked = determine_locations_to_unlock(state)
    if not newly_unlocked:
        return _require(state), []
    return unlock_locations(state, newly_unlocked), newly_unlocked


# ---------------------------------------------------------------------------
# Achievements
# ---------------------------------------------------------------------------

def determine_achievements_to_unlock(state: Optional[ProgressState]) -> List[str]:
    state = _require(state)
    held = set(state.achievements)
    return [
        achievement.id for achievement in ACHIEVEMENTS
        if achievement.id not in held and check_achievement_unlocked(achievement.id, state)
    ]


def unlock_achievement(state: Optional[ProgressState], achievement_id: str) -> ProgressState:
    state = _require(state)
    if achievement_id in state.achievements:
        return state
    return state.model_copy(update={
        "achievements": (*state.achievements, achievement_id),
        "currency": state.currency + ACHIEVEMENT_REWARD,
    })


def evaluate_achievements(state: Optional[ProgressState]) -> tuple[ProgressState, List[str]]:
    earned = determine_achievements_to_unlock(state)
    state = _require(state)
    for achievement_id in earned:
        state = unlock_achievement(state, achievement_id)
    return state, earned


# ---------------------------------------------------------------------------
# Streaks and history
# ---------------------------------------------------------------------------

def _as_utc_midnight(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _snapshot(state: ProgressState, day: date) -> ProgressHistoryEntry:
    return ProgressHistoryEntry(
        date=day.isoformat(),
        redi_skill_mastery=state.redi_skill_mastery,
        owl_skill_mastery=state.owl_skill_mastery,
        redi_level=state.redi_level,
        owl_level=state.owl_level,
        completed_items=len(state.completed_exercises) + len(state.completed_quests),
    )


def record_progress_snapshot(
    state: Optional[ProgressState],
    day: date,
    history_limit: int = HISTORY_LIMIT,
) -> ProgressState:
    """Upsert today's snapshot; keep the newest `history_limit` entries."""
    state = _require(state)
    key = day.isoformat()
    history = [entry for entry in state.progress_history if entry.date != key]
    history.append(_snapshot(state, day))
    history.sort(key=lambda entry: entry.date)
    return state.model_copy(update={"progress_history": tuple(history[-history_limit:])})


def record_writing_day(
    state: Optional[ProgressState],
    today: date,
    history_limit: int = HISTORY_LIMIT,
) -> ProgressState:
    """
    Count a day of writing toward the streak.

    Same day: unchanged. Day after the last writing day: +1.
    Any other gap (or first time): reset to 1.
    """
    state = _require(state)
    last_day = state.last_writing_date.date() if state.last_writing_date else None

    if last_day == today:
        streak = state.current_streak
    elif last_day is not None and last_day == today - timedelta(days=1):
        streak = state.current_streak + 1
    else:
        streak = 1

    state = state.model_copy(update={
        "current_streak": streak,
        "longest_streak": max(state.longest_streak, streak),
        "last_writing_date": _as_utc_midnight(today),
    })
    return record_progress_snapshot(state, today, history_limit)


def complete_daily_challenge(
    state: Optional[ProgressState],
    challenge_id: str,
    today: date,
    history_limit: int = HISTORY_LIMIT,
) -> ProgressState:
    state = _require(state)
    state = state.model_copy(update={
        "daily_challenge_id": challenge_id,
        "daily_challenge_completed": True,
    })
    return record_writing_day(state, today, history_limit)


# ---------------------------------------------------------------------------
# Patches
# ---------------------------------------------------------------------------

def merge_patch(state: Optional[ProgressState], patch: ProgressPatch) -> ProgressState:
    """Apply only the fields present in the patch; re-validate the result."""
    state = _require(state)
    fields = patch.model_fields_set
    merged = state.model_dump()
    redi, owl = state.redi_skill_mastery, state.owl_skill_mastery

    # Legacy first so per-mode axes in the same patch override it
    if "skill_mastery" in fields:
        redi = patch.skill_mastery.apply_to(redi)
        owl = patch.skill_mastery.apply_to(owl)
    if "redi_skill_mastery" in fields:
        redi = patch.redi_skill_mastery.apply_to(redi)
    if "owl_skill_mastery" in fields:
        owl = patch.owl_skill_mastery.apply_to(owl)
    merged["redi_skill_mastery"] = redi.model_dump()
    merged["owl_skill_mastery"] = owl.model_dump()

    for name in fields - {"skill_mastery", "redi_skill_mastery", "owl_skill_mastery"}:
        merged[name] = getattr(patch, name)

    return ProgressState.model_validate(merged)


# ---------------------------------------------------------------------------
# Event dispatch
# ---------------------------------------------------------------------------

class ExerciseCompleted(BaseModel):
    exercise_id: str
    is_correct: bool
    skill_type: Optional[SkillType] = None
    node_completion: Optional[bool] = None


class QuestCompleted(BaseModel):
    quest_id: str
    skills_gained: Optional[SkillDelta] = None


class LocationsUnlocked(BaseModel):
    location_ids: List[str] = Field(default_factory=list)


class AchievementUnlocked(BaseModel):
    achievement_id: str


class WritingDayRecorded(BaseModel):
    day: date


class DailyChallengeCompleted(BaseModel):
    challenge_id: str
    day: date


class ProgressPatched(BaseModel):
    patch: ProgressPatch


ProgressEvent = Union[
    ExerciseCompleted,
    QuestCompleted,
    LocationsUnlocked,
    AchievementUnlocked,
    WritingDayRecorded,
    DailyChallengeCompleted,
    ProgressPatched,
]


def apply_event(state: Optional[ProgressState], event: ProgressEvent) -> ProgressState:
    """Single entry point for folding an event into a state."""
    if isinstance(event, ExerciseCompleted):
        return complete_exercise(
            state, event.exercise_id, event.is_correct, event.skill_type, event.node_completion
        )
    if isinstance(event, QuestCompleted):
        return complete_quest(state, event.quest_id, event.skills_gained)
    if isinstance(event, LocationsUnlocked):
        return unlock_locations(state, event.location_ids)
    if isinstance(event, AchievementUnlocked):
        return unlock_achievement(state, event.achievement_id)
    if isinstance(event, WritingDayRecorded):
        return record_writing_day(state, event.day)
    if isinstance(event, DailyChallengeCompleted):
        return complete_daily_challenge(state, event.challenge_id, event.day)
    if isinstance(event, ProgressPatched):
        return merge_patch(state, event.patch)
    raise TypeError(f"Unsupported progress event: {type(event).__name__}")
