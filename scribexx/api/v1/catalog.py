"""
Catalog endpoints, annotated with the caller's progress.
"""

from fastapi import APIRouter, HTTPException, status

from scribexx.api.deps import CurrentUser, DbSession
from scribexx.engines.progress.progress_service import ProgressService
from scribexx.engines.progress.progress_store import row_to_state
from scribexx.pedagogy.achievements import ACHIEVEMENTS
from scribexx.pedagogy.exercises import EXERCISES, get_exercise_by_id
from scribexx.pedagogy.town import (
    TOWN_LOCATIONS,
    WRITING_QUESTS,
    WritingQuest,
    get_location_by_id,
    get_quests_for_location,
    is_quest_available,
)
from scribexx.schemas.catalog import (
    AchievementResponse,
    ExerciseResponse,
    LocationResponse,
    QuestResponse,
)

router = APIRouter()


def _exercise_response(exercise) -> ExerciseResponse:
    return ExerciseResponse(**exercise.model_dump(include=set(ExerciseResponse.model_fields)))


def _quest_response(quest: WritingQuest, state) -> QuestResponse:
    return QuestResponse(
        **quest.model_dump(exclude={"requirements"}),
        required_mastery=quest.requirements.skill_mastery,
        prerequisite_quests=quest.requirements.completed_quests,
        available=is_quest_available(quest, state.owl_skill_mastery, state.completed_quests),
        completed=quest.id in state.completed_quests,
    )


@router.get("/exercises", response_model=list[ExerciseResponse])
async def list_exercises(_: CurrentUser):
    return [_exercise_response(exercise) for exercise in EXERCISES]


@router.get("/exercises/{exercise_id}", response_model=ExerciseResponse)
async def get_exercise(exercise_id: str, _: CurrentUser):
    exercise = get_exercise_by_id(exercise_id)
    if exercise is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exercise not found")
    return _exercise_response(exercise)


@router.get("/locations", response_model=list[LocationResponse])
async def list_locations(user: CurrentUser, db: DbSession):
    """Town locations with the caller's unlock state."""
    row = await ProgressService(db).get_progress(user.id)
    unlocked = set(row.unlocked_locations or ())
    return [
        LocationResponse(**location.model_dump(), unlocked=location.id in unlocked)
        for location in TOWN_LOCATIONS
    ]


@router.get("/locations/{location_id}/quests", response_model=list[QuestResponse])
async def list_location_quests(location_id: str, user: CurrentUser, db: DbSession):
    if get_location_by_id(location_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    state = row_to_state(await ProgressService(db).get_progress(user.id))
    return [_quest_response(quest, state) for quest in get_quests_for_location(location_id)]


@router.get("/quests", response_model=list[QuestResponse])
async def list_quests(user: CurrentUser, db: DbSession):
    """All quests with availability against the caller's OWL mastery."""
    state = row_to_state(await ProgressService(db).get_progress(user.id))
    return [_quest_response(quest, state) for quest in WRITING_QUESTS]


@router.get("/achievements", response_model=list[AchievementResponse])
async def list_achievements(user: CurrentUser, db: DbSession):
    row = await ProgressService(db).get_progress(user.id)
    earned = set(row.achievements or ())
    return [
        AchievementResponse(
            **achievement.model_dump(exclude={"requirements"}),
            unlocked=achievement.id in earned,
        )
        for achievement in ACHIEVEMENTS
    ]
