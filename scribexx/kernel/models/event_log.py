"""
Immutable event log for audit trail.

Every progress transition, submission and sign-in is logged here
in the same session as the state change it describes.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, String, Text, func, Index, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from scribexx.kernel.models.base import Base, generate_uuid


class EventType(str, Enum):
    """All event types for the audit log."""

    # User events
    USER_REGISTERED = "user.registered"
    USER_LOGGED_IN = "user.logged_in"

    # Progress events
    PROGRESS_CREATED = "progress.created"
    PROGRESS_UPDATED = "progress.updated"
    EXERCISE_ATTEMPTED = "progress.exercise_attempted"
    EXERCISE_COMPLETED = "progress.exercise_completed"
    QUEST_COMPLETED = "progress.quest_completed"
    LOCATION_UNLOCKED = "progress.location_unlocked"
    ACHIEVEMENT_UNLOCKED = "progress.achievement_unlocked"
    STREAK_UPDATED = "progress.streak_updated"
    DAILY_CHALLENGE_COMPLETED = "progress.daily_challenge_completed"

    # Writing events
    SUBMISSION_CREATED = "writing.submission_created"
    SUBMISSION_REVIEWED = "writing.submission_reviewed"

    # Roster events
    STUDENT_LINKED = "roster.student_linked"
    CHALLENGE_CREATED = "roster.challenge_created"


class EventLog(Base):
    """
    Immutable audit event log.

    This table is append-only - no updates or deletes allowed.
    """

    __tablename__ = "event_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    event_type: Mapped[EventType] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )
    entity_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    entity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        nullable=False,
        index=True,
    )
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(),
        nullable=True,  # System events may not have a user
        index=True,
    )
    payload: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )
    ip_address: Mapped[Optional[str]] = mapped_column(
        String(45),  # IPv6 max length
        nullable=True,
    )
    user_agent: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        Index("ix_event_logs_entity", "entity_type", "entity_id"),
        Index("ix_event_logs_user_time", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<EventLog {self.event_type} {self.entity_type}:{self.entity_id}>"
