"""Unit tests for skill mastery values."""

import pytest
from pydantic import ValidationError

from scribexx.engines.progress.mastery import SkillDelta, SkillMastery, SkillType, clamp_mastery


class TestSkillMastery:

    def test_with_delta_clamps_each_axis(self):
        mastery = SkillMastery(mechanics=95, sequencing=3, voice=50)
        updated = mastery.with_delta({
            SkillType.MECHANICS: 20,
            SkillType.SEQUENCING: -10,
            SkillType.VOICE: 5,
        })
        assert updated == SkillMastery(mechanics=100, sequencing=0, voice=55)

    def test_with_delta_does_not_mutate(self):
        mastery = SkillMastery.uniform(40)
        mastery.with_delta({SkillType.VOICE: 10})
        assert mastery.voice == 40

    def test_frozen(self):
        with pytest.raises(ValidationError):
            SkillMastery().mechanics = 5

    def test_rejects_out_of_range(self):
        with pytest.raises(ValidationError):
            SkillMastery(mechanics=101)
        with pytest.raises(ValidationError):
            SkillMastery(voice=-1)

    def test_meets_requires_every_axis(self):
        required = SkillMastery(mechanics=20, sequencing=20, voice=10)
        assert SkillMastery(mechanics=20, sequencing=20, voice=10).meets(required)
        assert not SkillMastery(mechanics=25, sequencing=15, voice=30).meets(required)

    def test_weakest_orders_ascending(self):
        mastery = SkillMastery(mechanics=70, sequencing=40, voice=55)
        assert mastery.weakest() == [SkillType.SEQUENCING, SkillType.VOICE, SkillType.MECHANICS]

    def test_uniform_clamps(self):
        assert SkillMastery.uniform(150) == SkillMastery.uniform(100)


def test_clamp_mastery():
    assert clamp_mastery(-3) == 0
    assert clamp_mastery(42) == 42
    assert clamp_mastery(250) == 100


def test_skill_delta_skips_absent_axes():
    assert SkillDelta(voice=4).as_deltas() == {SkillType.VOICE: 4}


def test_skill_delta_rejects_unknown_axis():
    with pytest.raises(ValidationError):
        SkillDelta(style=5)


def test_skill_delta_rejects_negative_gain():
    with pytest.raises(ValidationError):
        SkillDelta(voice=-5)
    assert SkillDelta(voice=0).as_deltas() == {SkillType.VOICE: 0}
