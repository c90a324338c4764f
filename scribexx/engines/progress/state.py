"""
Immutable progress state and the typed patch applied to it.

ProgressState is the in-memory form of a progress row. Transitions never
mutate it; they return a new instance (see transitions.py).
"""

from datetime import datetime
from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from scribexx.engines.progress.level_calculator import MAX_LEVEL, MIN_LEVEL
from scribexx.engines.progress.mastery import SkillMastery, SkillType


def unique_ids(ids: Iterable[str]) -> Tuple[str, ...]:
    """Drop duplicates, keeping first-seen order."""
    return tuple(dict.fromkeys(ids))


class ProgressHistoryEntry(BaseModel):
    """One daily snapshot, keyed by ISO date."""

    model_config = ConfigDict(frozen=True)

    date: str
    redi_skill_mastery: SkillMastery
    owl_skill_mastery: SkillMastery
    redi_level: int
    owl_level: int
    completed_items: int


class ProgressState(BaseModel):
    """Everything the rule layer knows about one learner."""

    model_config = ConfigDict(frozen=True)

    redi_skill_mastery: SkillMastery = SkillMastery()
    owl_skill_mastery: SkillMastery = SkillMastery()
    redi_level: int = Field(MIN_LEVEL, ge=MIN_LEVEL, le=MAX_LEVEL)
    owl_level: int = Field(MIN_LEVEL, ge=MIN_LEVEL, le=MAX_LEVEL)

    completed_exercises: Tuple[str, ...] = ()
    completed_quests: Tuple[str, ...] = ()
    unlocked_locations: Tuple[str, ...] = ()
    achievements: Tuple[str, ...] = ()
    currency: int = Field(0, ge=0)

    current_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)
    last_writing_date: Optional[datetime] = None
    daily_challenge_id: Optional[str] = None
    daily_challenge_completed: bool = False
    progress_history: Tuple[ProgressHistoryEntry, ...] = ()

    @field_validator("completed_exercises", "completed_quests", "unlocked_locations", "achievements")
    @classmethod
    def _dedupe(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        return unique_ids(value)

    @classmethod
    def seed(cls, mastery: int = 10, unlocked_location: str = "townHall") -> "ProgressState":
        """Starting state for a learner who has never been seen before."""
        return cls(
            redi_skill_mastery=SkillMastery.uniform(mastery),
            owl_skill_mastery=SkillMastery.uniform(mastery),
            unlocked_locations=(unlocked_location,),
        )


class SkillMasteryPatch(BaseModel):
    """Partial mastery update; omitted axes keep their current value."""

    model_config = ConfigDict(extra="forbid")

    mechanics: Optional[int] = Field(None, ge=0, le=100)
    sequencing: Optional[int] = Field(None, ge=0, le=100)
    voice: Optional[int] = Field(None, ge=0, le=100)

    def apply_to(self, mastery: SkillMastery) -> SkillMastery:
        values = {skill.value: mastery.get(skill) for skill in SkillType}
        values.update(self.model_dump(exclude_none=True))
        return SkillMastery(**values)


# Progress columns that may legitimately be cleared
NULLABLE_PATCH_FIELDS = frozenset({"last_writing_date", "daily_challenge_id"})


class ProgressPatch(BaseModel):
    """
    Whole-field merge patch for a progress row.

    Only fields present in the request are applied. `skill_mastery` is the
    deprecated single-track field; it is written to both REDI and OWL mastery,
    and an explicit per-mode field in the same patch wins over it.
    """

    model_config = ConfigDict(extra="forbid")

    redi_skill_mastery: Optional[SkillMasteryPatch] = None
    owl_skill_mastery: Optional[SkillMasteryPatch] = None
    skill_mastery: Optional[SkillMasteryPatch] = Field(
        None, description="Deprecated: use redi_skill_mastery / owl_skill_mastery"
    )
    redi_level: Optional[int] = Field(None, ge=MIN_LEVEL, le=MAX_LEVEL)
    owl_level: Optional[int] = Field(None, ge=MIN_LEVEL, le=MAX_LEVEL)

    completed_exercises: Optional[list[str]] = None
    completed_quests: Optional[list[str]] = None
    unlocked_locations: Optional[list[str]] = None
    achievements: Optional[list[str]] = None
    currency: Optional[int] = Field(None, ge=0)

    current_streak: Optional[int] = Field(None, ge=0)
    longest_streak: Optional[int] = Field(None, ge=0)
    last_writing_date: Optional[datetime] = None
    daily_challenge_id: Optional[str] = None
    daily_challenge_completed: Optional[bool] = None

    @field_validator("completed_exercises", "completed_quests", "unlocked_locations", "achievements")
    @classmethod
    def _dedupe(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        return list(unique_ids(value)) if value is not None else None

    @model_validator(mode="after")
    def _reject_null_required(self) -> "ProgressPatch":
        nulls = [
            name for name in self.model_fields_set
            if getattr(self, name) is None and name not in NULLABLE_PATCH_FIELDS
        ]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(sorted(nulls))}")
        return self

    def touches_owl_mastery(self) -> bool:
        return bool({"owl_skill_mastery", "skill_mastery"} & self.model_fields_set)
