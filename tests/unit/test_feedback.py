"""Unit tests for AI writing feedback and its offline fallbacks."""

import json
import random
from types import SimpleNamespace

import pytest

from scribexx.ai import feedback as feedback_module
from scribexx.ai.feedback import (
    DEFAULT_SUGGESTED_EXERCISES,
    WritingAnalysisError,
    analyze_writing,
    fallback_analysis,
    fallback_suggestions,
    generate_suggested_exercises,
)
from scribexx.engines.progress.mastery import SkillMastery
from scribexx.pedagogy.exercises import get_exercise_by_id


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def fake_openai(monkeypatch):
    """Pretend a key is configured and route calls to a fake client."""

    def install(content=None, error=None) -> FakeCompletions:
        completions = FakeCompletions(content=content, error=error)
        client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
        monkeypatch.setattr(feedback_module, "openai_configured", lambda settings: True)
        monkeypatch.setattr(feedback_module, "_get_client", lambda: client)
        return completions

    return install


class TestAnalyzeWriting:

    async def test_fallback_without_key(self):
        analysis = await analyze_writing("My Day", "I wrote things.", "town-hall-1")
        for score in (
            analysis.feedback.mechanics_score,
            analysis.feedback.sequencing_score,
            analysis.feedback.voice_score,
        ):
            assert 60 <= score < 80
        assert analysis.skills_assessed == analysis.feedback.scores()

    def test_fallback_is_seedable(self):
        assert fallback_analysis(random.Random(3)) == fallback_analysis(random.Random(3))

    async def test_parses_provider_json(self, fake_openai):
        completions = fake_openai(content=json.dumps({
            "overallFeedback": "Strong opening.",
            "mechanics_score": 82,
            "sequencing_score": 140,
            "voiceScore": "75",
            "suggestions": {"voice": ["Vary sentence length"]},
        }))

        analysis = await analyze_writing("Letter", "Dear editor...", "town-hall-1", grade=6)

        assert analysis.feedback.overall_feedback == "Strong opening."
        assert analysis.skills_assessed == SkillMastery(mechanics=82, sequencing=100, voice=75)
        assert analysis.feedback.suggestions.voice == ["Vary sentence length"]
        assert analysis.feedback.suggestions.mechanics  # defaulted
        assert analysis.feedback.next_steps
        assert completions.calls[0]["response_format"] == {"type": "json_object"}
        assert "grade 6" in completions.calls[0]["messages"][0]["content"]

    async def test_missing_scores_default(self, fake_openai):
        fake_openai(content="{}")
        analysis = await analyze_writing("T", "C", "library-1")
        assert analysis.skills_assessed == SkillMastery.uniform(70)

    async def test_list_valued_points_are_joined(self, fake_openai):
        fake_openai(content=json.dumps({
            "overall_feedback": "Good letter.",
            "strengths_analysis": ["Clear thesis", "Vivid verbs"],
            "areas_to_improve": ["Commas"],
            "next_steps": [],
            "suggestions": {"mechanics": "Check comma splices"},
        }))

        analysis = await analyze_writing("Letter", "Dear editor...", "town-hall-1")

        assert analysis.feedback.strengths_analysis == "Clear thesis\nVivid verbs"
        assert analysis.feedback.areas_to_improve == "Commas"
        assert analysis.feedback.next_steps  # empty list defaulted
        assert analysis.feedback.suggestions.mechanics == ["Check comma splices"]

    async def test_zero_scores_are_kept(self, fake_openai):
        fake_openai(content=json.dumps({
            "mechanics_score": 0, "sequencing_score": 0, "voice_score": 0,
        }))
        analysis = await analyze_writing("T", "C", "library-1")
        assert analysis.skills_assessed == SkillMastery.uniform(0)

    async def test_null_scores_default(self, fake_openai):
        fake_openai(content=json.dumps({"mechanics_score": None, "voiceScore": "n/a"}))
        analysis = await analyze_writing("T", "C", "library-1")
        assert analysis.skills_assessed == SkillMastery.uniform(70)

    async def test_provider_error_raises(self, fake_openai):
        fake_openai(error=RuntimeError("boom"))
        with pytest.raises(WritingAnalysisError):
            await analyze_writing("T", "C", "library-1")

    async def test_bad_json_raises(self, fake_openai):
        fake_openai(content="not json")
        with pytest.raises(WritingAnalysisError):
            await analyze_writing("T", "C", "library-1")


class TestSuggestedExercises:

    def test_fallback_targets_weakest_axis(self):
        analysis = fallback_analysis()
        weak_voice = analysis.feedback.model_copy(update={
            "mechanics_score": 80, "sequencing_score": 70, "voice_score": 40,
        })

        picks = fallback_suggestions(weak_voice, SkillMastery.uniform(25))

        assert len(picks) == 4
        assert [get_exercise_by_id(pick).skill_type.value for pick in picks[:2]] == ["voice", "voice"]
        for pick in picks:
            exercise = get_exercise_by_id(pick)
            assert exercise.mastery_requirement <= 25

    async def test_without_key_uses_catalog(self):
        analysis = fallback_analysis()
        picks = await generate_suggested_exercises(analysis.feedback, SkillMastery.uniform(10))
        assert picks
        assert all(get_exercise_by_id(pick) for pick in picks)

    async def test_filters_unknown_ids(self, fake_openai):
        fake_openai(content=json.dumps({"exercises": ["voice-2", "made-up-9", "sequencing-3"]}))
        picks = await generate_suggested_exercises(fallback_analysis().feedback, SkillMastery())
        assert picks == ["voice-2", "sequencing-3"]

    async def test_error_returns_defaults(self, fake_openai):
        fake_openai(error=RuntimeError("rate limited"))
        picks = await generate_suggested_exercises(fallback_analysis().feedback, SkillMastery())
        assert picks == DEFAULT_SUGGESTED_EXERCISES
