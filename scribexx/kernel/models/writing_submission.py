"""
Writing submissions (OWL quests) and their AI review results.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, JSON, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from scribexx.kernel.models.base import Base, generate_uuid


class SubmissionStatus(str, Enum):
    """Lifecycle of a writing submission."""
    SUBMITTED = "submitted"
    REVIEWED = "reviewed"
    APPROVED = "approved"


class WritingSubmission(Base):
    """A piece of writing submitted for a quest."""

    __tablename__ = "writing_submissions"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=generate_uuid,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    quest_id: Mapped[str] = mapped_column(String(100), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[SubmissionStatus] = mapped_column(
        String(20),
        nullable=False,
        default=SubmissionStatus.SUBMITTED,
    )
    feedback: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ai_feedback: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    skills_assessed: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    suggested_exercises: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)

    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_writing_submissions_user_time", "user_id", "submitted_at"),
    )

    def __repr__(self) -> str:
        return f"<WritingSubmission {self.id} quest={self.quest_id} status={self.status}>"
