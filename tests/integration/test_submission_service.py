"""Integration tests for writing submissions and their review."""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from scribexx.engines.progress.progress_store import ProgressStore
from scribexx.engines.writing.submission_service import (
    SubmissionAccessError,
    SubmissionNotFoundError,
    SubmissionService,
    review_submission_in_background,
)
from scribexx.kernel.models.user import User
from scribexx.kernel.models.writing_submission import SubmissionStatus
from scribexx.pedagogy.exercises import get_exercise_by_id

ESSAY = "Our town needs a new library because the old one is too small. " * 5


class TestSubmissionService:

    async def test_create(self, db_session: AsyncSession, test_user: User):
        submission = await SubmissionService(db_session).create(
            test_user.id, "town-hall-1", "Letter to the Editor", ESSAY
        )
        assert submission.status == SubmissionStatus.SUBMITTED
        assert submission.reviewed_at is None

    async def test_review_without_key_uses_fallbacks(self, db_session: AsyncSession, test_user: User):
        service = SubmissionService(db_session)
        submission = await service.create(test_user.id, "town-hall-1", "Letter", ESSAY)

        result = await service.review(submission)

        assert result.submission.status == SubmissionStatus.REVIEWED
        assert result.submission.reviewed_at is not None
        assert set(result.submission.skills_assessed) == {"mechanics", "sequencing", "voice"}
        assert result.submission.suggested_exercises
        assert all(get_exercise_by_id(exercise_id) for exercise_id in result.suggested_exercises)

    async def test_review_of_catalog_quest_evaluates_unlocks(
        self, db_session: AsyncSession, test_user: User
    ):
        service = SubmissionService(db_session)
        submission = await service.create(test_user.id, "town-hall-1", "Letter", ESSAY)

        await service.review(submission)

        row = await ProgressStore(db_session).get(test_user.id)
        assert row.unlocked_locations == ["townHall", "library", "amphitheater"]

    async def test_get_owned(self, db_session: AsyncSession, test_user: User, test_teacher: User):
        service = SubmissionService(db_session)
        submission = await service.create(test_user.id, "library-1", "Review", ESSAY)

        assert (await service.get_owned(submission.id, test_user.id)).id == submission.id
        with pytest.raises(SubmissionAccessError):
            await service.get_owned(submission.id, test_teacher.id)
        with pytest.raises(SubmissionNotFoundError):
            await service.get_owned(uuid.uuid4(), test_user.id)

    async def test_background_review(self, db_session: AsyncSession, test_user: User):
        service = SubmissionService(db_session)
        submission = await service.create(test_user.id, "park-1", "Spring", ESSAY)
        await db_session.commit()

        await review_submission_in_background(submission.id)

        await db_session.refresh(submission)
        assert submission.status == SubmissionStatus.REVIEWED
        assert submission.ai_feedback["overall_feedback"]

    async def test_background_review_of_missing_submission_is_quiet(self, database):
        await review_submission_in_background(uuid.uuid4())
