"""
Progress Engine - mastery, levels and the pure progress transitions.

Two mastery tracks per learner:
- REDI: structured exercises (level rule K=3, D=10)
- OWL: open-world writing quests (level rule K=2, D=15)

Transitions live in `transitions`, persistence in `progress_store`.
"""

from scribexx.engines.progress.mastery import SkillMastery, SkillType, SkillDelta
from scribexx.engines.progress.level_calculator import (
    calculate_level,
    calculate_owl_level,
    calculate_redi_level,
)
from scribexx.engines.progress.state import ProgressState, ProgressPatch, ProgressHistoryEntry
from scribexx.engines.progress.errors import (
    ProgressError,
    ProgressNotInitializedError,
    UnknownCatalogItemError,
)

__all__ = [
    "SkillMastery",
    "SkillType",
    "SkillDelta",
    "calculate_level",
    "calculate_owl_level",
    "calculate_redi_level",
    "ProgressState",
    "ProgressPatch",
    "ProgressHistoryEntry",
    "ProgressError",
    "ProgressNotInitializedError",
    "UnknownCatalogItemError",
]
