"""Unit tests for exercise and quest transitions."""

import pytest

from scribexx.engines.progress import transitions
from scribexx.engines.progress.errors import ProgressNotInitializedError
from scribexx.engines.progress.mastery import SkillDelta, SkillMastery, SkillType
from scribexx.engines.progress.state import ProgressPatch, ProgressState


def _state(**kwargs) -> ProgressState:
    return ProgressState.seed().model_copy(update=kwargs)


class TestCompleteExercise:

    def test_node_completion_bumps_mastery(self):
        state = _state(redi_skill_mastery=SkillMastery(mechanics=50, sequencing=10, voice=10))

        result = transitions.complete_exercise(state, "mechanics-3", is_correct=True)

        assert result.redi_skill_mastery.mechanics == 60
        assert result.redi_skill_mastery.sequencing == 10
        assert "mechanics-3" in result.completed_exercises
        assert result.currency == state.currency + 5

    def test_sub_question_gives_no_mastery(self):
        state = _state()

        result = transitions.complete_exercise(state, "mechanics-1-q2", is_correct=True)

        assert result.redi_skill_mastery == state.redi_skill_mastery
        assert result.completed_exercises[-1] == "mechanics-1-q2"
        assert result.currency == 5

    def test_incorrect_answer_only_pays_participation(self):
        state = _state(currency=7)

        result = transitions.complete_exercise(state, "voice-2", is_correct=False)

        assert result.currency == 8
        assert result.completed_exercises == state.completed_exercises
        assert result.redi_skill_mastery == state.redi_skill_mastery

    def test_repeat_completion_keeps_set_but_pays_again(self):
        state = transitions.complete_exercise(_state(), "voice-1", is_correct=True)
        again = transitions.complete_exercise(state, "voice-1", is_correct=True)

        assert again.completed_exercises.count("voice-1") == 1
        assert again.currency == state.currency + 5
        assert again.redi_skill_mastery.voice == state.redi_skill_mastery.voice + 10

    def test_mastery_capped_at_100(self):
        state = _state(redi_skill_mastery=SkillMastery(mechanics=95, sequencing=0, voice=0))
        result = transitions.complete_exercise(state, "mechanics-5", is_correct=True)
        assert result.redi_skill_mastery.mechanics == 100

    def test_level_recomputed(self):
        state = _state(
            redi_skill_mastery=SkillMastery.uniform(50),
            completed_exercises=("mechanics-1", "mechanics-2"),
        )
        result = transitions.complete_exercise(state, "sequencing-1-q1", is_correct=True)
        # 3 completions, average 50 -> 1 + 1 + 5
        assert result.redi_level == 7

    def test_explicit_skill_type_wins(self):
        result = transitions.complete_exercise(
            _state(), "custom-node", is_correct=True, skill_type=SkillType.VOICE
        )
        assert result.redi_skill_mastery.voice == 20
        assert result.redi_skill_mastery.mechanics == 10

    def test_catalog_lookup_for_writing_exercise(self):
        result = transitions.complete_exercise(_state(), "mechanics-writing-1", is_correct=True)
        assert result.redi_skill_mastery.mechanics == 20

    def test_unknown_axis_completes_without_bump(self):
        state = _state()
        result = transitions.complete_exercise(state, "grammar-7", is_correct=True)
        assert result.redi_skill_mastery == state.redi_skill_mastery
        assert "grammar-7" in result.completed_exercises

    def test_node_completion_flag_overrides_id_rule(self):
        result = transitions.complete_exercise(
            _state(), "voice-2-q1", is_correct=True, node_completion=True
        )
        assert result.redi_skill_mastery.voice == 20

    def test_input_not_mutated(self):
        state = _state()
        transitions.complete_exercise(state, "voice-1", is_correct=True)
        assert state.completed_exercises == ()
        assert state.currency == 0


class TestCompleteQuest:

    def test_default_gains(self):
        state = _state(owl_skill_mastery=SkillMastery.uniform(40))

        result = transitions.complete_quest(state, "q1")

        assert result.owl_skill_mastery == SkillMastery(mechanics=45, sequencing=45, voice=55)
        assert result.completed_quests == ("q1",)
        assert result.currency == 15
        # 1 + floor(1/2) + floor(48.33/15)
        assert result.owl_level == 4

    def test_explicit_gains(self):
        result = transitions.complete_quest(
            _state(), "library-1", SkillDelta(mechanics=3, sequencing=8)
        )
        assert result.owl_skill_mastery == SkillMastery(mechanics=13, sequencing=18, voice=10)

    def test_gains_clamped(self):
        state = _state(owl_skill_mastery=SkillMastery.uniform(95))
        result = transitions.complete_quest(state, "park-2", {SkillType.VOICE: 50})
        assert result.owl_skill_mastery.voice == 100

    def test_redi_untouched(self):
        state = _state()
        result = transitions.complete_quest(state, "town-hall-1")
        assert result.redi_skill_mastery == state.redi_skill_mastery
        assert result.redi_level == state.redi_level


class TestMissingState:

    @pytest.mark.parametrize("call", [
        lambda: transitions.complete_exercise(None, "voice-1", True),
        lambda: transitions.complete_quest(None, "town-hall-1"),
        lambda: transitions.determine_locations_to_unlock(None),
        lambda: transitions.unlock_achievement(None, "first-steps"),
    ])
    def test_raises(self, call):
        with pytest.raises(ProgressNotInitializedError):
            call()


class TestApplyEvent:

    def test_folds_events_in_order(self):
        events = [
            transitions.ExerciseCompleted(exercise_id="mechanics-1", is_correct=True),
            transitions.QuestCompleted(quest_id="town-hall-1"),
            transitions.LocationsUnlocked(location_ids=["library"]),
            transitions.AchievementUnlocked(achievement_id="first-steps"),
            transitions.ProgressPatched(patch=ProgressPatch(current_streak=3)),
        ]
        state = ProgressState.seed()
        for event in events:
            state = transitions.apply_event(state, event)

        assert state.completed_exercises == ("mechanics-1",)
        assert state.completed_quests == ("town-hall-1",)
        assert state.unlocked_locations == ("townHall", "library")
        assert state.achievements == ("first-steps",)
        assert state.current_streak == 3
        assert state.currency == 5 + 15 + 10

    def test_unknown_event(self):
        with pytest.raises(TypeError):
            transitions.apply_event(ProgressState.seed(), object())
