"""
Progress Service - runs transitions against stored progress.

Each method loads the row, applies pure transitions, writes the new state
and appends audit events, all inside the caller's session.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from scribexx.config import get_settings
from scribexx.engines.progress import transitions
from scribexx.engines.progress.errors import UnknownCatalogItemError
from scribexx.engines.progress.mastery import SkillDelta, SkillType
from scribexx.engines.progress.progress_store import ProgressStore
from scribexx.engines.progress.state import ProgressPatch, ProgressState
from scribexx.kernel.events.event_store import EventStore
from scribexx.kernel.models.event_log import EventType
from scribexx.kernel.models.progress import Progress
from scribexx.logging_config import get_logger
from scribexx.pedagogy.town import get_quest_by_id

logger = get_logger(__name__)


@dataclass
class TransitionResult:
    """Outcome of a server-side transition."""

    row: Progress
    state: ProgressState
    unlocked_locations: List[str] = field(default_factory=list)
    unlocked_achievements: List[str] = field(default_factory=list)


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


class ProgressService:
    """Progress operations for one request/session."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.store = ProgressStore(session)
        self.event_store = EventStore(session)
        self.settings = get_settings()

    async def get_progress(self, user_id: uuid.UUID) -> Progress:
        """Current progress, seeded on first access."""
        row, created = await self.store.get_or_create(user_id)
        if created:
            await self.event_store.log(
                event_type=EventType.PROGRESS_CREATED,
                entity_type="progress",
                entity_id=row.id,
                user_id=user_id,
                payload={"unlocked_locations": row.unlocked_locations},
            )
            logger.info("Progress seeded", extra={"progress_id": str(row.id)})
        return row

    async def update_progress(self, user_id: uuid.UUID, patch: ProgressPatch) -> TransitionResult:
        """
        Merge-patch progress.

        When the patch changes OWL mastery (directly or via the legacy
        `skill_mastery` field), location unlocks are evaluated before the write.
        """
        row, state = await self.store.load(user_id)
        state = transitions.merge_patch(state, patch)

        newly_unlocked: List[str] = []
        if self.settings.auto_unlock_locations and patch.touches_owl_mastery():
            state, newly_unlocked = transitions.evaluate_location_unlocks(state)

        row = await self.store.save_state(row, state)
        await self._log(row, EventType.PROGRESS_UPDATED, {"fields": sorted(patch.model_fields_set)})
        await self._log_unlocks(row, newly_unlocked)
        return TransitionResult(row=row, state=state, unlocked_locations=newly_unlocked)

    async def complete_exercise(
        self,
        user_id: uuid.UUID,
        exercise_id: str,
        is_correct: bool,
        skill_type: Optional[SkillType] = None,
        node_completion: Optional[bool] = None,
    ) -> TransitionResult:
        row, state = await self.store.load(user_id)
        state = transitions.complete_exercise(state, exercise_id, is_correct, skill_type, node_completion)
        row = await self.store.save_state(row, state)

        event_type = EventType.EXERCISE_COMPLETED if is_correct else EventType.EXERCISE_ATTEMPTED
        await self._log(row, event_type, {
            "exercise_id": exercise_id,
            "is_correct": is_correct,
            "redi_level": state.redi_level,
            "currency": state.currency,
        })
        logger.info(
            "Exercise recorded",
            extra={"exercise_id": exercise_id, "is_correct": is_correct, "redi_level": state.redi_level},
        )
        return TransitionResult(row=row, state=state)

    async def complete_quest(
        self,
        user_id: uuid.UUID,
        quest_id: str,
        skills_gained: Optional[SkillDelta] = None,
    ) -> TransitionResult:
        """Complete a catalog quest, then unlock any locations it opened."""
        if get_quest_by_id(quest_id) is None:
            raise UnknownCatalogItemError("quest", quest_id)

        row, state = await self.store.load(user_id)
        state = transitions.complete_quest(state, quest_id, skills_gained)
        state, newly_unlocked = transitions.evaluate_location_unlocks(state)
        row = await self.store.save_state(row, state)

        await self._log(row, EventType.QUEST_COMPLETED, {
            "quest_id": quest_id,
            "owl_level": state.owl_level,
            "owl_skill_mastery": state.owl_skill_mastery.model_dump(),
            "currency": state.currency,
        })
        await self._log_unlocks(row, newly_unlocked)
        logger.info("Quest completed", extra={"quest_id": quest_id, "owl_level": state.owl_level})
        return TransitionResult(row=row, state=state, unlocked_locations=newly_unlocked)

    async def evaluate_locations(self, user_id: uuid.UUID) -> TransitionResult:
        row, state = await self.store.load(user_id)
        state, newly_unlocked = transitions.evaluate_location_unlocks(state)
        if newly_unlocked:
            row = await self.store.save_state(row, state)
            await self._log_unlocks(row, newly_unlocked)
        return TransitionResult(row=row, state=state, unlocked_locations=newly_unlocked)

    async def evaluate_achievements(self, user_id: uuid.UUID) -> TransitionResult:
        row, state = await self.store.load(user_id)
        state, earned = transitions.evaluate_achievements(state)
        if earned:
            row = await self.store.save_state(row, state)
            for achievement_id in earned:
                await self._log(row, EventType.ACHIEVEMENT_UNLOCKED, {"achievement_id": achievement_id})
            logger.info("Achievements unlocked", extra={"achievement_ids": earned})
        return TransitionResult(row=row, state=state, unlocked_achievements=earned)

    async def record_writing_day(self, user_id: uuid.UUID, day: Optional[date] = None) -> TransitionResult:
        day = day or today_utc()
        row, state = await self.store.load(user_id)
        state = transitions.record_writing_day(state, day, self.settings.progress_history_days)
        row = await self.store.save_state(row, state)
        await self._log(row, EventType.STREAK_UPDATED, {
            "day": day,
            "current_streak": state.current_streak,
            "longest_streak": state.longest_streak,
        })
        return TransitionResult(row=row, state=state)

    async def complete_daily_challenge(
        self,
        user_id: uuid.UUID,
        challenge_id: str,
        day: Optional[date] = None,
    ) -> TransitionResult:
        day = day or today_utc()
        row, state = await self.store.load(user_id)
        state = transitions.complete_daily_challenge(
            state, challenge_id, day, self.settings.progress_history_days
        )
        row = await self.store.save_state(row, state)
        await self._log(row, EventType.DAILY_CHALLENGE_COMPLETED, {
            "challenge_id": challenge_id,
            "current_streak": state.current_streak,
        })
        return TransitionResult(row=row, state=state)

    async def _log(self, row: Progress, event_type: EventType, payload: dict) -> None:
        await self.event_store.log(
            event_type=event_type,
            entity_type="progress",
            entity_id=row.id,
            user_id=row.user_id,
            payload=payload,
        )

    async def _log_unlocks(self, row: Progress, location_ids: List[str]) -> None:
        if not location_ids:
            return
        await self._log(row, EventType.LOCATION_UNLOCKED, {"location_ids": location_ids})
        logger.info("Locations unlocked", extra={"location_ids": location_ids})
