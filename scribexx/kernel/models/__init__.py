"""
Kernel Data Models

SQLAlchemy models for users, learner progress, writing work and the audit log.
"""

from scribexx.kernel.models.base import Base, TimestampMixin, generate_uuid
from scribexx.kernel.models.user import User, UserRole
from scribexx.kernel.models.progress import Progress
from scribexx.kernel.models.exercise_attempt import ExerciseAttempt
from scribexx.kernel.models.writing_submission import WritingSubmission, SubmissionStatus
from scribexx.kernel.models.daily_challenge import DailyChallenge
from scribexx.kernel.models.student_link import StudentLink
from scribexx.kernel.models.event_log import EventLog, EventType

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "generate_uuid",
    # User
    "User",
    "UserRole",
    # Progress
    "Progress",
    "ExerciseAttempt",
    # Writing
    "WritingSubmission",
    "SubmissionStatus",
    "DailyChallenge",
    # Roster
    "StudentLink",
    # Audit
    "EventLog",
    "EventType",
]
