"""Unit tests for the static exercise and town catalogs."""

from scribexx.engines.progress.mastery import SkillMastery, SkillType
from scribexx.pedagogy.exercises import (
    EXERCISES,
    ExerciseStatus,
    ExerciseType,
    exercise_map,
    exercise_status,
    get_exercise_by_id,
    get_exercises_for_skill,
)
from scribexx.pedagogy.town import (
    TOWN_LOCATIONS,
    WRITING_QUESTS,
    get_quest_by_id,
    get_quests_for_location,
    is_quest_available,
)


class TestExerciseCatalog:

    def test_sizes(self):
        assert len(EXERCISES) == 17
        assert len({exercise.id for exercise in EXERCISES}) == 17
        assert len(get_exercises_for_skill(SkillType.VOICE)) == 6

    def test_mastery_requirement(self):
        assert get_exercise_by_id("mechanics-1").mastery_requirement == 0
        assert get_exercise_by_id("voice-4").mastery_requirement == 30

    def test_writing_exercises_have_prompts(self):
        writing = [exercise for exercise in EXERCISES if exercise.exercise_type == ExerciseType.WRITING]
        assert {exercise.id for exercise in writing} == {"mechanics-writing-1", "voice-writing-1"}
        assert all(exercise.prompt and exercise.min_word_count for exercise in writing)

    def test_check_answer(self):
        exercise = get_exercise_by_id("mechanics-1")
        assert exercise.check_answer(exercise.correct_option_index)
        assert not exercise.check_answer(exercise.correct_option_index + 1)


class TestExerciseMap:

    def test_seed_learner(self):
        statuses = {exercise.id: status for exercise, status in exercise_map(SkillMastery.uniform(10))}
        assert statuses["mechanics-1"] == ExerciseStatus.CURRENT
        assert statuses["sequencing-1"] == ExerciseStatus.AVAILABLE
        assert statuses["voice-2"] == ExerciseStatus.AVAILABLE
        assert statuses["mechanics-3"] == ExerciseStatus.LOCKED

    def test_current_moves_past_completed(self):
        mastery = SkillMastery.uniform(10)
        completed = ["mechanics-1"]
        assert exercise_status(get_exercise_by_id("mechanics-1"), mastery, completed) == ExerciseStatus.COMPLETED
        assert exercise_status(get_exercise_by_id("sequencing-1"), mastery, completed) == ExerciseStatus.CURRENT

    def test_only_one_current(self):
        statuses = [status for _, status in exercise_map(SkillMastery.uniform(100), ["voice-1"])]
        assert statuses.count(ExerciseStatus.CURRENT) == 1


class TestTown:

    def test_sizes(self):
        assert [location.id for location in TOWN_LOCATIONS] == [
            "townHall", "library", "amphitheater", "cafe", "park",
        ]
        assert len(WRITING_QUESTS) == 12

    def test_location_quest_ids_match_catalog(self):
        for location in TOWN_LOCATIONS:
            assert [quest.id for quest in get_quests_for_location(location.id)] == location.quest_ids

    def test_quest_availability_needs_prerequisites(self):
        quest = get_quest_by_id("town-hall-2")
        mastery = SkillMastery.uniform(50)
        assert not is_quest_available(quest, mastery, [])
        assert is_quest_available(quest, mastery, ["town-hall-1"])

    def test_quest_availability_needs_mastery(self):
        quest = get_quest_by_id("library-1")
        assert not is_quest_available(quest, SkillMastery(mechanics=10, sequencing=5, voice=100))
        assert is_quest_available(quest, SkillMastery(mechanics=10, sequencing=10, voice=0))
