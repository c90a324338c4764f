"""
Progress model - one row per user holding both mastery tracks,
completion sets, currency, achievements and streak bookkeeping.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from scribexx.kernel.models.base import Base, TimestampMixin, generate_uuid


class Progress(Base, TimestampMixin):
    """
    Persisted learner progress.

    Mastery is stored as {"mechanics": int, "sequencing": int, "voice": int}
    JSON objects; ID collections are JSON arrays. The row is only ever
    written as a whole from a ProgressState (see engines.progress).
    """

    __tablename__ = "progress"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=generate_uuid,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    redi_skill_mastery: Mapped[dict] = mapped_column(JSON, nullable=False)
    owl_skill_mastery: Mapped[dict] = mapped_column(JSON, nullable=False)
    redi_level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    owl_level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    completed_exercises: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    completed_quests: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    unlocked_locations: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    achievements: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    currency: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_writing_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    daily_challenge_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    daily_challenge_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    progress_history: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<Progress user={self.user_id} redi={self.redi_level} owl={self.owl_level}>"
