"""
Writing submission endpoints (OWL quests).
"""

import uuid

from fastapi import APIRouter, BackgroundTasks, HTTPException, status

from scribexx.api.deps import CurrentUser, DbSession
from scribexx.engines.writing.submission_service import (
    SubmissionAccessError,
    SubmissionNotFoundError,
    SubmissionService,
    review_submission_in_background,
)
from scribexx.kernel.models.writing_submission import WritingSubmission
from scribexx.schemas.writing import (
    AnalysisResult,
    AnalyzeRequest,
    AnalyzeResponse,
    SubmissionCreate,
    SubmissionResponse,
)

router = APIRouter()


async def get_owned_submission(
    service: SubmissionService, submission_id: uuid.UUID, user_id: uuid.UUID
) -> WritingSubmission:
    try:
        return await service.get_owned(submission_id, user_id)
    except SubmissionNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")
    except SubmissionAccessError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your submission")


@router.post("/submissions", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def create_submission(
    data: SubmissionCreate,
    background_tasks: BackgroundTasks,
    user: CurrentUser,
    db: DbSession,
):
    """
    Store a submission and queue its AI review.

    The response carries status `submitted`; poll the submission to see the
    review once it lands.
    """
    submission = await SubmissionService(db).create(user.id, data.quest_id, data.title, data.content)
    # Commit now: the review task opens its own session and must see the row.
    await db.commit()
    background_tasks.add_task(review_submission_in_background, submission.id, user.grade or None)
    return submission


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_submission(data: AnalyzeRequest, user: CurrentUser, db: DbSession):
    """Re-run the AI review of one of the caller's submissions and wait for it."""
    service = SubmissionService(db)
    submission = await get_owned_submission(service, data.submission_id, user.id)
    result = await service.review(submission, grade=data.grade or user.grade or None)
    return AnalyzeResponse(
        submission=SubmissionResponse.model_validate(result.submission),
        analysis=AnalysisResult(
            feedback=result.analysis.feedback,
            skills_assessed=result.analysis.skills_assessed,
            suggested_exercises=result.suggested_exercises,
        ),
    )


@router.get("/submissions", response_model=list[SubmissionResponse])
async def list_submissions(user: CurrentUser, db: DbSession):
    return await SubmissionService(db).list_for_user(user.id)


@router.get("/submissions/{submission_id}", response_model=SubmissionResponse)
async def get_submission(submission_id: uuid.UUID, user: CurrentUser, db: DbSession):
    return await get_owned_submission(SubmissionService(db), submission_id, user.id)
