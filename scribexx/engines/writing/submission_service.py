"""
Submission Service - stores writing submissions and runs their AI review.

A review scores the writing, picks follow-up exercises, marks the
submission reviewed, and (for catalog quests) re-evaluates location
unlocks on the writer's progress.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scribexx.ai.feedback import WritingAnalysis, analyze_writing, generate_suggested_exercises
from scribexx.database import async_session_maker
from scribexx.engines.progress.progress_service import ProgressService
from scribexx.engines.progress.progress_store import row_to_state
from scribexx.kernel.events.event_store import EventStore
from scribexx.kernel.models.event_log import EventType
from scribexx.kernel.models.writing_submission import SubmissionStatus, WritingSubmission
from scribexx.logging_config import get_logger
from scribexx.pedagogy.town import get_quest_by_id

logger = get_logger(__name__)


class SubmissionNotFoundError(Exception):
    pass


class SubmissionAccessError(Exception):
    """The submission belongs to someone else."""


@dataclass
class ReviewResult:
    submission: WritingSubmission
    analysis: WritingAnalysis
    suggested_exercises: List[str]


class SubmissionService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.event_store = EventStore(session)

    async def create(
        self,
        user_id: uuid.UUID,
        quest_id: str,
        title: str,
        content: str,
    ) -> WritingSubmission:
        submission = WritingSubmission(
            user_id=user_id,
            quest_id=quest_id,
            title=title,
            content=content,
            status=SubmissionStatus.SUBMITTED,
        )
        self.session.add(submission)
        await self.session.flush()
        await self.session.refresh(submission)

        await self.event_store.log(
            event_type=EventType.SUBMISSION_CREATED,
            entity_type="writing_submission",
            entity_id=submission.id,
            user_id=user_id,
            payload={"quest_id": quest_id, "word_count": len(content.split())},
        )
        logger.info("Submission created", extra={"submission_id": str(submission.id), "quest_id": quest_id})
        return submission

    async def list_for_user(self, user_id: uuid.UUID) -> List[WritingSubmission]:
        result = await self.session.execute(
            select(WritingSubmission)
            .where(WritingSubmission.user_id == user_id)
            .order_by(WritingSubmission.submitted_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, submission_id: uuid.UUID) -> Optional[WritingSubmission]:
        result = await self.session.execute(
            select(WritingSubmission).where(WritingSubmission.id == submission_id)
        )
        return result.scalar_one_or_none()

    async def get_owned(self, submission_id: uuid.UUID, user_id: uuid.UUID) -> WritingSubmission:
        """
        Fetch a submission that must belong to `user_id`.

        Raises:
            SubmissionNotFoundError: no such submission
            SubmissionAccessError: it belongs to another user
        """
        submission = await self.get(submission_id)
        if submission is None:
            raise SubmissionNotFoundError(str(submission_id))
        if submission.user_id != user_id:
            raise SubmissionAccessError(str(submission_id))
        return submission

    async def review(self, submission: WritingSubmission, grade: Optional[int] = None) -> ReviewResult:
        """
        Analyze the submission and store the results on it.

        Raises:
            WritingAnalysisError: the analysis call failed
        """
        progress_service = ProgressService(self.session)
        progress = await progress_service.get_progress(submission.user_id)
        redi_mastery = row_to_state(progress).redi_skill_mastery

        analysis = await analyze_writing(
            submission.title, submission.content, submission.quest_id, grade=grade
        )
        suggested = await generate_suggested_exercises(analysis.feedback, redi_mastery)

        submission.status = SubmissionStatus.REVIEWED
        submission.feedback = analysis.feedback.overall_feedback
        submission.ai_feedback = analysis.feedback.model_dump()
        submission.skills_assessed = analysis.skills_assessed.model_dump()
        submission.suggested_exercises = suggested
        submission.reviewed_at = datetime.now(timezone.utc)
        await self.session.flush()
        await self.session.refresh(submission)

        await self.event_store.log(
            event_type=EventType.SUBMISSION_REVIEWED,
            entity_type="writing_submission",
            entity_id=submission.id,
            user_id=submission.user_id,
            payload={
                "quest_id": submission.quest_id,
                "skills_assessed": submission.skills_assessed,
                "suggested_exercises": suggested,
            },
        )

        if get_quest_by_id(submission.quest_id) is not None:
            await progress_service.evaluate_locations(submission.user_id)

        logger.info(
            "Submission reviewed",
            extra={"submission_id": str(submission.id), "suggested_exercises": suggested},
        )
        return ReviewResult(submission=submission, analysis=analysis, suggested_exercises=suggested)


async def review_submission_in_background(submission_id: uuid.UUID, grade: Optional[int] = None) -> None:
    """
    Review a submission in its own session. Runs after the response is sent,
    so failures are logged and dropped.
    """
    async with async_session_maker() as session:
        try:
            service = SubmissionService(session)
            submission = await service.get(submission_id)
            if submission is None:
                logger.warning("Submission vanished before review", extra={"submission_id": str(submission_id)})
                return
            await service.review(submission, grade=grade)
            await session.commit()
        except Exception:
            await session.rollback()
            logger.exception("Background review failed", extra={"submission_id": str(submission_id)})
