"""Unit tests for the level calculator."""

import pytest

from scribexx.engines.progress.level_calculator import (
    MAX_LEVEL,
    MIN_LEVEL,
    calculate_owl_level,
    calculate_redi_level,
)
from scribexx.engines.progress.mastery import SkillMastery


class TestRediLevel:
    """Exercise mode: K=3 completions per level, D=10 mastery points per level."""

    def test_worked_example(self):
        # 1 + floor(6/3) + floor(60/10) = 9
        assert calculate_redi_level(SkillMastery.uniform(60), 6) == 9

    def test_new_learner_is_level_one(self):
        assert calculate_redi_level(SkillMastery(), 0) == MIN_LEVEL
        assert calculate_redi_level(SkillMastery.uniform(10), 2) == 2

    def test_capped_at_max(self):
        assert calculate_redi_level(SkillMastery.uniform(100), 300) == MAX_LEVEL

    def test_uses_floor_of_average(self):
        # average 19.67 -> factor 1
        mastery = SkillMastery(mechanics=20, sequencing=20, voice=19)
        assert calculate_redi_level(mastery, 0) == 2

    def test_negative_count_treated_as_zero(self):
        assert calculate_redi_level(SkillMastery(), -5) == MIN_LEVEL


class TestOwlLevel:
    """Quest mode: K=2, D=15."""

    def test_quest_rule(self):
        # 1 + floor(4/2) + floor(45/15) = 6
        assert calculate_owl_level(SkillMastery.uniform(45), 4) == 6

    def test_modes_differ_for_same_input(self):
        mastery = SkillMastery.uniform(30)
        assert calculate_redi_level(mastery, 3) == 5
        assert calculate_owl_level(mastery, 3) == 4


@pytest.mark.parametrize("calculate", [calculate_redi_level, calculate_owl_level])
def test_level_never_decreases_with_more_activity_or_mastery(calculate):
    previous = MIN_LEVEL
    for step in range(0, 101, 5):
        level = calculate(SkillMastery.uniform(step), step // 5)
        assert MIN_LEVEL <= level <= MAX_LEVEL
        assert level >= previous
        previous = level
