"""
Progress Store - persistence gateway for progress rows (DB-backed).

Rows are converted to ProgressState on the way out and written back as a
whole on the way in. Writes are row-level and last-write-wins.
"""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scribexx.config import get_settings
from scribexx.engines.progress.errors import ProgressNotInitializedError
from scribexx.engines.progress.mastery import SkillMastery
from scribexx.engines.progress.state import ProgressHistoryEntry, ProgressPatch, ProgressState
from scribexx.engines.progress.transitions import merge_patch
from scribexx.kernel.models.progress import Progress


def row_to_state(row: Progress) -> ProgressState:
    """Build the immutable state from a DB row."""
    return ProgressState(
        redi_skill_mastery=SkillMastery.model_validate(row.redi_skill_mastery),
        owl_skill_mastery=SkillMastery.model_validate(row.owl_skill_mastery),
        redi_level=row.redi_level,
        owl_level=row.owl_level,
        completed_exercises=tuple(row.completed_exercises or ()),
        completed_quests=tuple(row.completed_quests or ()),
        unlocked_locations=tuple(row.unlocked_locations or ()),
        achievements=tuple(row.achievements or ()),
        currency=row.currency,
        current_streak=row.current_streak,
        longest_streak=row.longest_streak,
        last_writing_date=row.last_writing_date,
        daily_challenge_id=row.daily_challenge_id,
        daily_challenge_completed=bool(row.daily_challenge_completed),
        progress_history=tuple(
            ProgressHistoryEntry.model_validate(entry) for entry in (row.progress_history or ())
        ),
    )


def apply_state(row: Progress, state: ProgressState) -> Progress:
    """Copy every field of the state onto the row (JSON columns get plain lists/dicts)."""
    data = state.model_dump(mode="json", exclude={"last_writing_date"})
    for name, value in data.items():
        setattr(row, name, value)
    row.last_writing_date = state.last_writing_date
    return row


class ProgressStore:
    """Reads and writes one progress row per user."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings = get_settings()

    async def get(self, user_id: uuid.UUID) -> Optional[Progress]:
        result = await self.session.execute(select(Progress).where(Progress.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_or_create(self, user_id: uuid.UUID) -> tuple[Progress, bool]:
        """
        Fetch the user's row, creating the seeded default on first access.

        Returns:
            Tuple of (row, created)
        """
        row = await self.get(user_id)
        if row is not None:
            return row, False

        seed = ProgressState.seed(
            mastery=self.settings.seed_skill_mastery,
            unlocked_location=self.settings.default_unlocked_location,
        )
        row = apply_state(Progress(user_id=user_id), seed)
        self.session.add(row)
        await self.session.flush()
        await self.session.refresh(row)
        return row, True

    async def load(self, user_id: uuid.UUID) -> tuple[Progress, ProgressState]:
        """Row and state for an existing user; raises when no row exists yet."""
        row = await self.get(user_id)
        if row is None:
            raise ProgressNotInitializedError(user_id)
        return row, row_to_state(row)

    async def save_state(self, row: Progress, state: ProgressState) -> Progress:
        apply_state(row, state)
        await self.session.flush()
        await self.session.refresh(row)
        return row

    async def update(self, user_id: uuid.UUID, patch: ProgressPatch) -> Progress:
        """Merge-patch the stored row and return it."""
        row, state = await self.load(user_id)
        return await self.save_state(row, merge_patch(state, patch))
