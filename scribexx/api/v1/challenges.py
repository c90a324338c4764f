"""
Daily challenge endpoints.
"""

import uuid
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import or_, select

from scribexx.api.deps import CurrentUser, DbSession, TeacherOrAdmin
from scribexx.engines.progress.progress_service import ProgressService
from scribexx.kernel.events.event_store import EventStore
from scribexx.kernel.models.daily_challenge import DailyChallenge
from scribexx.kernel.models.event_log import EventType
from scribexx.schemas.challenge import DailyChallengeCreate, DailyChallengeResponse
from scribexx.schemas.progress import ProgressResponse, TransitionResponse

router = APIRouter()


@router.get("/daily", response_model=DailyChallengeResponse)
async def get_daily_challenge(_: CurrentUser, db: DbSession):
    """The newest challenge that has not expired."""
    now = datetime.now(timezone.utc)
    result = await db.execute(
        select(DailyChallenge)
        .where(or_(DailyChallenge.expires_at.is_(None), DailyChallenge.expires_at > now))
        .order_by(DailyChallenge.challenge_date.desc())
        .limit(1)
    )
    challenge = result.scalar_one_or_none()
    if challenge is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active daily challenge")
    return challenge


@router.post("", response_model=DailyChallengeResponse, status_code=status.HTTP_201_CREATED)
async def create_challenge(data: DailyChallengeCreate, user: TeacherOrAdmin, db: DbSession):
    now = datetime.now(timezone.utc)
    challenge = DailyChallenge(
        challenge_date=now,
        title=data.title,
        description=data.description,
        prompt=data.prompt,
        word_minimum=data.word_minimum,
        skill_focus=data.skill_focus.value,
        difficulty=data.difficulty,
        expires_at=now + timedelta(hours=data.expires_in_hours),
    )
    db.add(challenge)
    await db.flush()
    await db.refresh(challenge)

    await EventStore(db).log(
        event_type=EventType.CHALLENGE_CREATED,
        entity_type="daily_challenge",
        entity_id=challenge.id,
        user_id=user.id,
        payload={"title": data.title, "skill_focus": data.skill_focus},
    )
    return challenge


@router.post("/daily/{challenge_id}/complete", response_model=TransitionResponse)
async def complete_daily_challenge(challenge_id: uuid.UUID, user: CurrentUser, db: DbSession):
    """Mark the challenge done on the caller's progress and count today as a writing day."""
    challenge = await db.get(DailyChallenge, challenge_id)
    if challenge is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Challenge not found")

    result = await ProgressService(db).complete_daily_challenge(user.id, str(challenge.id))
    return TransitionResponse(progress=ProgressResponse.model_validate(result.row))
