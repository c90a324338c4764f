"""
Progress endpoints: read, merge-patch, and server-side transitions.

Transitions other than GET require the progress row to exist; a learner's
row is created on their first GET.
"""

from fastapi import APIRouter

from scribexx.api.deps import CurrentUser, DbSession
from scribexx.engines.progress.progress_service import ProgressService, TransitionResult
from scribexx.engines.progress.progress_store import row_to_state
from scribexx.engines.progress.state import ProgressPatch
from scribexx.pedagogy.exercises import exercise_map
from scribexx.schemas.catalog import ExerciseMapNode
from scribexx.schemas.progress import (
    ExerciseCompletionRequest,
    ProgressResponse,
    QuestCompletionRequest,
    TransitionResponse,
)

router = APIRouter()


def _transition_response(result: TransitionResult) -> TransitionResponse:
    return TransitionResponse(
        progress=ProgressResponse.model_validate(result.row),
        unlocked_locations=result.unlocked_locations,
        unlocked_achievements=result.unlocked_achievements,
    )


@router.get("", response_model=ProgressResponse)
async def get_progress(user: CurrentUser, db: DbSession):
    """Current progress, seeded with defaults on first access."""
    return await ProgressService(db).get_progress(user.id)


@router.patch("", response_model=ProgressResponse)
async def update_progress(data: ProgressPatch, user: CurrentUser, db: DbSession):
    """
    Merge-patch progress and return the merged row. Omitted fields are
    unchanged; mastery objects are merged per axis. Locations opened by the
    new OWL mastery are already in `unlocked_locations`.
    """
    result = await ProgressService(db).update_progress(user.id, data)
    return result.row


@router.post("/exercises/{exercise_id}/complete", response_model=TransitionResponse)
async def complete_exercise(
    exercise_id: str,
    data: ExerciseCompletionRequest,
    user: CurrentUser,
    db: DbSession,
):
    result = await ProgressService(db).complete_exercise(
        user.id,
        exercise_id,
        is_correct=data.is_correct,
        skill_type=data.skill_type,
        node_completion=data.node_completion,
    )
    return _transition_response(result)


@router.post("/quests/{quest_id}/complete", response_model=TransitionResponse)
async def complete_quest(
    quest_id: str,
    data: QuestCompletionRequest,
    user: CurrentUser,
    db: DbSession,
):
    """Complete a writing quest; newly opened locations are unlocked and reported."""
    result = await ProgressService(db).complete_quest(user.id, quest_id, data.skills_gained)
    return _transition_response(result)


@router.post("/locations/evaluate", response_model=TransitionResponse)
async def evaluate_locations(user: CurrentUser, db: DbSession):
    result = await ProgressService(db).evaluate_locations(user.id)
    return _transition_response(result)


@router.post("/achievements/evaluate", response_model=TransitionResponse)
async def evaluate_achievements(user: CurrentUser, db: DbSession):
    result = await ProgressService(db).evaluate_achievements(user.id)
    return _transition_response(result)


@router.post("/streak", response_model=TransitionResponse)
async def record_writing_day(user: CurrentUser, db: DbSession):
    """Record that the learner wrote today (UTC)."""
    result = await ProgressService(db).record_writing_day(user.id)
    return _transition_response(result)


@router.get("/exercise-map", response_model=list[ExerciseMapNode])
async def get_exercise_map(user: CurrentUser, db: DbSession):
    """Every exercise with its completed/current/available/locked status."""
    row = await ProgressService(db).get_progress(user.id)
    state = row_to_state(row)
    return [
        ExerciseMapNode(
            **exercise.model_dump(include=set(ExerciseMapNode.model_fields)),
            status=status,
            mastery_requirement=exercise.mastery_requirement,
        )
        for exercise, status in exercise_map(state.redi_skill_mastery, state.completed_exercises)
    ]
