"""
Skill mastery: three writing axes scored 0-100.
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

MASTERY_MIN = 0
MASTERY_MAX = 100


class SkillType(str, Enum):
    """The three writing skill axes."""
    MECHANICS = "mechanics"
    SEQUENCING = "sequencing"
    VOICE = "voice"


def clamp_mastery(value: int) -> int:
    return max(MASTERY_MIN, min(MASTERY_MAX, int(value)))


class SkillMastery(BaseModel):
    """Immutable per-axis mastery snapshot."""

    model_config = ConfigDict(frozen=True)

    mechanics: int = Field(0, ge=MASTERY_MIN, le=MASTERY_MAX)
    sequencing: int = Field(0, ge=MASTERY_MIN, le=MASTERY_MAX)
    voice: int = Field(0, ge=MASTERY_MIN, le=MASTERY_MAX)

    @classmethod
    def uniform(cls, value: int) -> "SkillMastery":
        value = clamp_mastery(value)
        return cls(mechanics=value, sequencing=value, voice=value)

    def get(self, skill: SkillType) -> int:
        return getattr(self, SkillType(skill).value)

    def with_delta(self, deltas: Dict[SkillType, int]) -> "SkillMastery":
        """Return a copy with each delta added and every axis clamped to [0, 100]."""
        values = {skill.value: self.get(skill) for skill in SkillType}
        for skill, delta in deltas.items():
            key = SkillType(skill).value
            values[key] = clamp_mastery(values[key] + delta)
        return SkillMastery(**values)

    def average(self) -> float:
        return (self.mechanics + self.sequencing + self.voice) / 3

    def meets(self, required: "SkillMastery") -> bool:
        """True when every axis is at or above the requirement."""
        return all(self.get(skill) >= required.get(skill) for skill in SkillType)

    def weakest(self) -> list[SkillType]:
        """Axes ordered from weakest to strongest (ties keep axis order)."""
        return sorted(SkillType, key=self.get)


class SkillDelta(BaseModel):
    """Caller-supplied mastery gains; absent axes contribute nothing and gains are never negative."""

    model_config = ConfigDict(extra="forbid")

    mechanics: Optional[int] = Field(None, ge=0)
    sequencing: Optional[int] = Field(None, ge=0)
    voice: Optional[int] = Field(None, ge=0)

    def as_deltas(self) -> Dict[SkillType, int]:
        return {
            skill: getattr(self, skill.value)
            for skill in SkillType
            if getattr(self, skill.value) is not None
        }
