"""
Teacher and parent dashboards over linked students.
"""

import uuid

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select

from scribexx.api.deps import DbSession, Guardian
from scribexx.engines.progress.progress_service import ProgressService
from scribexx.engines.progress.progress_store import row_to_state
from scribexx.engines.writing.submission_service import SubmissionService
from scribexx.kernel.events.event_store import EventStore
from scribexx.kernel.identity.identity_service import IdentityService
from scribexx.kernel.models.event_log import EventType
from scribexx.kernel.models.student_link import StudentLink
from scribexx.kernel.models.user import User, UserRole
from scribexx.schemas.progress import ProgressResponse
from scribexx.schemas.students import StudentLinkCreate, StudentLinkResponse, StudentSummary
from scribexx.schemas.writing import SubmissionResponse

router = APIRouter()


async def _get_link(db, guardian_id: uuid.UUID, student_id: uuid.UUID):
    result = await db.execute(
        select(StudentLink).where(
            StudentLink.guardian_id == guardian_id,
            StudentLink.student_id == student_id,
        )
    )
    return result.scalar_one_or_none()


async def require_student_access(db, viewer: User, student_id: uuid.UUID) -> User:
    """Linked guardians and admins may view a student; everyone else gets 403."""
    student = await IdentityService(db).get_user_by_id(student_id)
    if student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    if viewer.role_value != UserRole.ADMIN.value and await _get_link(db, viewer.id, student_id) is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Student is not linked to you")
    return student


@router.post("/links", response_model=StudentLinkResponse, status_code=status.HTTP_201_CREATED)
async def link_student(data: StudentLinkCreate, user: Guardian, db: DbSession):
    student = await IdentityService(db).get_user_by_username(data.student_username.strip())
    if student is None or student.role_value != UserRole.STUDENT.value:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    if await _get_link(db, user.id, student.id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Student already linked")

    link = StudentLink(guardian_id=user.id, student_id=student.id, relationship_type=user.role_value)
    db.add(link)
    await db.flush()
    await db.refresh(link)

    await EventStore(db).log(
        event_type=EventType.STUDENT_LINKED,
        entity_type="student_link",
        entity_id=link.id,
        user_id=user.id,
        payload={"student_id": student.id, "relationship_type": link.relationship_type},
    )
    return link


@router.get("", response_model=list[StudentSummary])
async def list_students(user: Guardian, db: DbSession):
    """Linked students with a progress summary each."""
    result = await db.execute(
        select(User)
        .join(StudentLink, StudentLink.student_id == User.id)
        .where(StudentLink.guardian_id == user.id)
        .order_by(User.display_name)
    )
    progress_service = ProgressService(db)
    summaries = []
    for student in result.scalars().all():
        state = row_to_state(await progress_service.get_progress(student.id))
        summaries.append(StudentSummary(
            id=student.id,
            username=student.username,
            display_name=student.display_name,
            grade=student.grade,
            redi_mastery=round(state.redi_skill_mastery.average(), 1),
            owl_mastery=round(state.owl_skill_mastery.average(), 1),
            redi_level=state.redi_level,
            owl_level=state.owl_level,
            completed_exercises=len(state.completed_exercises),
            completed_quests=len(state.completed_quests),
            current_streak=state.current_streak,
        ))
    return summaries


@router.get("/{student_id}/progress", response_model=ProgressResponse)
async def get_student_progress(student_id: uuid.UUID, user: Guardian, db: DbSession):
    student = await require_student_access(db, user, student_id)
    return await ProgressService(db).get_progress(student.id)


@router.get("/{student_id}/submissions", response_model=list[SubmissionResponse])
async def list_student_submissions(student_id: uuid.UUID, user: Guardian, db: DbSession):
    student = await require_student_access(db, user, student_id)
    return await SubmissionService(db).list_for_user(student.id)


@router.get("/{student_id}/submissions/{submission_id}", response_model=SubmissionResponse)
async def get_student_submission(
    student_id: uuid.UUID,
    submission_id: uuid.UUID,
    user: Guardian,
    db: DbSession,
):
    student = await require_student_access(db, user, student_id)
    submission = await SubmissionService(db).get(submission_id)
    if submission is None or submission.user_id != student.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")
    return submission
