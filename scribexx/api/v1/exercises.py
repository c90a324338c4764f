"""
Exercise attempt history (REDI).
"""

from typing import Optional

from fastapi import APIRouter, Query, status
from sqlalchemy import select

from scribexx.api.deps import CurrentUser, DbSession
from scribexx.kernel.events.event_store import EventStore
from scribexx.kernel.models.event_log import EventType
from scribexx.kernel.models.exercise_attempt import ExerciseAttempt
from scribexx.schemas.progress import ExerciseAttemptCreate, ExerciseAttemptResponse

router = APIRouter()


@router.post("/attempts", response_model=ExerciseAttemptResponse, status_code=status.HTTP_201_CREATED)
async def record_attempt(data: ExerciseAttemptCreate, user: CurrentUser, db: DbSession):
    """
    Store a raw attempt. Progress is not touched here; completion goes
    through the progress endpoints.
    """
    attempt = ExerciseAttempt(
        user_id=user.id,
        exercise_id=data.exercise_id,
        is_correct=data.is_correct,
        answers=data.answers,
    )
    db.add(attempt)
    await db.flush()
    await db.refresh(attempt)

    await EventStore(db).log(
        event_type=EventType.EXERCISE_ATTEMPTED,
        entity_type="exercise_attempt",
        entity_id=attempt.id,
        user_id=user.id,
        payload={"exercise_id": data.exercise_id, "is_correct": data.is_correct},
    )
    return attempt


@router.get("/attempts", response_model=list[ExerciseAttemptResponse])
async def list_attempts(
    user: CurrentUser,
    db: DbSession,
    exercise_id: Optional[str] = None,
    limit: int = Query(50, ge=1, le=200),
):
    query = select(ExerciseAttempt).where(ExerciseAttempt.user_id == user.id)
    if exercise_id:
        query = query.where(ExerciseAttempt.exercise_id == exercise_id)
    query = query.order_by(ExerciseAttempt.created_at.desc()).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())
