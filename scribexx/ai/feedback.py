"""
Writing analysis and exercise suggestions.

Both calls use the OpenAI chat completions API with JSON output. Without a
configured key they fall back to offline results so the rest of the app
keeps working in development and tests.
"""

import json
import random
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from scribexx.config import get_settings, openai_configured
from scribexx.engines.progress.mastery import SkillMastery, clamp_mastery
from scribexx.logging_config import get_logger
from scribexx.pedagogy.exercises import EXERCISES, get_exercise_by_id, get_exercises_for_skill

logger = get_logger(__name__)

DEFAULT_SUGGESTED_EXERCISES = ["mechanics-1", "sequencing-1", "voice-1"]


class WritingAnalysisError(Exception):
    """The AI provider failed to analyze a writing sample."""


class SkillSuggestions(BaseModel):
    mechanics: List[str] = Field(default_factory=list)
    sequencing: List[str] = Field(default_factory=list)
    voice: List[str] = Field(default_factory=list)


class WritingFeedback(BaseModel):
    overall_feedback: str
    strengths_analysis: str
    areas_to_improve: str
    mechanics_score: int = Field(ge=0, le=100)
    sequencing_score: int = Field(ge=0, le=100)
    voice_score: int = Field(ge=0, le=100)
    suggestions: SkillSuggestions = Field(default_factory=SkillSuggestions)
    next_steps: str

    def scores(self) -> SkillMastery:
        return SkillMastery(
            mechanics=self.mechanics_score,
            sequencing=self.sequencing_score,
            voice=self.voice_score,
        )


class WritingAnalysis(BaseModel):
    feedback: WritingFeedback
    skills_assessed: SkillMastery


_ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert middle school writing teacher evaluating student work according to "
    "Common Core standards for grade {grade}.\n\n"
    "Analyze the following student writing sample focusing on three key areas:\n"
    "1. Mechanics: grammar, punctuation, spelling, and sentence structure\n"
    "2. Sequencing: organization, logical flow, transitions, and paragraph structure\n"
    "3. Voice: clarity of purpose, audience awareness, style, tone, and word choice\n\n"
    "Provide thoughtful, encouraging feedback that highlights strengths while offering "
    "specific improvement suggestions."
)

_ANALYSIS_FORMAT = (
    "The response should be a JSON object with these fields:\n"
    "- overall_feedback: A summary of overall assessment (2-3 sentences)\n"
    "- strengths_analysis: Specific strengths identified (2-3 points)\n"
    "- areas_to_improve: Areas needing improvement (2-3 specific points)\n"
    "- mechanics_score: A score from 0-100 for mechanics\n"
    "- sequencing_score: A score from 0-100 for sequencing\n"
    "- voice_score: A score from 0-100 for voice\n"
    "- suggestions: An object with arrays of specific suggestions for each area "
    "(mechanics, sequencing, voice)\n"
    "- next_steps: Recommended follow-up learning activities (1-2 sentences)"
)

_SUGGESTION_SYSTEM_PROMPT = (
    "You are an expert curriculum designer for middle school writing education. "
    "Based on a student's recent writing assessment, recommend specific exercise IDs "
    "from our catalog that would help them improve their weakest areas."
)


def _get_client():
    from openai import AsyncOpenAI
    return AsyncOpenAI(api_key=get_settings().openai_api_key.strip())


def _pick(data: Dict[str, Any], snake: str, camel: str, default: Any) -> Any:
    """Read a field under either naming style; missing or null values get the default."""
    value = data.get(snake, data.get(camel))
    return default if value is None else value


def _text(data: Dict[str, Any], snake: str, camel: str, default: str) -> str:
    """A prose field. Models often answer "2-3 points" with a list; points are joined one per line."""
    value = _pick(data, snake, camel, default)
    if isinstance(value, (list, tuple)):
        value = "\n".join(str(item) for item in value if item)
    return str(value) if value else default


def _points(value: Any, default: List[str]) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return default
    return [str(item) for item in value if item] or default


def _score(data: Dict[str, Any], snake: str, camel: str) -> int:
    try:
        return clamp_mastery(_pick(data, snake, camel, 70))
    except (TypeError, ValueError):
        return 70


def _feedback_from_json(data: Dict[str, Any]) -> WritingFeedback:
    suggestions = data.get("suggestions")
    if not isinstance(suggestions, dict):
        suggestions = {}
    return WritingFeedback(
        overall_feedback=_text(data, "overall_feedback", "overallFeedback",
                               "Overall good work with some areas to improve."),
        strengths_analysis=_text(data, "strengths_analysis", "strengthsAnalysis",
                                 "Strong effort on completing the assignment."),
        areas_to_improve=_text(data, "areas_to_improve", "areasToImprove",
                               "Focus on improving your writing structure."),
        mechanics_score=_score(data, "mechanics_score", "mechanicsScore"),
        sequencing_score=_score(data, "sequencing_score", "sequencingScore"),
        voice_score=_score(data, "voice_score", "voiceScore"),
        suggestions=SkillSuggestions(
            mechanics=_points(suggestions.get("mechanics"), ["Review punctuation rules"]),
            sequencing=_points(suggestions.get("sequencing"), ["Practice paragraph transitions"]),
            voice=_points(suggestions.get("voice"), ["Consider your audience more carefully"]),
        ),
        next_steps=_text(data, "next_steps", "nextSteps",
                         "Practice writing more persuasive paragraphs."),
    )


def fallback_analysis(rng: Optional[random.Random] = None) -> WritingAnalysis:
    """Offline analysis: encouraging boilerplate with scores in [60, 80)."""
    rng = rng or random.Random()
    feedback = WritingFeedback(
        overall_feedback=(
            "Your writing shows good effort and contains some interesting ideas. "
            "There are opportunities to strengthen your mechanics and organization."
        ),
        strengths_analysis=(
            "You've demonstrated creativity in your approach. Your voice is beginning "
            "to develop and you have some strong word choices."
        ),
        areas_to_improve=(
            "Focus on improving sentence structure and grammar. Work on organizing your "
            "paragraphs with clearer transitions and topic sentences."
        ),
        mechanics_score=rng.randrange(60, 80),
        sequencing_score=rng.randrange(60, 80),
        voice_score=rng.randrange(60, 80),
        suggestions=SkillSuggestions(
            mechanics=[
                "Review your use of punctuation, especially commas and periods",
                "Practice writing complete sentences without fragments",
                "Double-check spelling of key vocabulary words",
            ],
            sequencing=[
                "Make sure each paragraph has a clear topic sentence",
                "Use transition words between paragraphs",
                "Organize related ideas together within paragraphs",
            ],
            voice=[
                "Consider your audience when selecting vocabulary",
                "Vary sentence structure to create rhythm",
                "Use descriptive language to enhance your points",
            ],
        ),
        next_steps=(
            "Practice writing structured paragraphs with clear topic sentences. "
            "Review basic grammar rules for sentence construction."
        ),
    )
    return WritingAnalysis(feedback=feedback, skills_assessed=feedback.scores())


async def analyze_writing(
    title: str,
    content: str,
    quest_id: str,
    grade: Optional[int] = None,
) -> WritingAnalysis:
    """
    Score a writing sample on mechanics, sequencing and voice.

    Raises:
        WritingAnalysisError: the provider call or its response failed
    """
    settings = get_settings()
    grade = grade or settings.default_student_grade

    if not openai_configured(settings):
        logger.warning("No OpenAI key; returning fallback writing analysis", extra={"quest_id": quest_id})
        return fallback_analysis()

    user_prompt = (
        "Please analyze this writing sample and provide detailed feedback in JSON format:\n"
        f"Title: {title}\n\n{content}\n\n{_ANALYSIS_FORMAT}"
    )

    try:
        client = _get_client()
        response = await client.chat.completions.create(
            model=settings.openai_model,
            messages=[
                {"role": "system", "content": _ANALYSIS_SYSTEM_PROMPT.format(grade=grade)},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
            temperature=settings.openai_temperature,
        )
        data = json.loads(response.choices[0].message.content or "{}")
        feedback = _feedback_from_json(data)
    except Exception as exc:
        logger.error("Writing analysis failed: %s", exc, extra={"quest_id": quest_id})
        raise WritingAnalysisError("Failed to analyze writing sample") from exc

    logger.info(
        "Writing analyzed",
        extra={"quest_id": quest_id, "scores": feedback.scores().model_dump()},
    )
    return WritingAnalysis(feedback=feedback, skills_assessed=feedback.scores())


def fallback_suggestions(feedback: WritingFeedback, mastery: SkillMastery) -> List[str]:
    """
    Catalog exercises aimed at the weakest scored axes.

    Two exercises for the weakest axis, one each for the others, choosing the
    hardest exercise the learner can currently reach on each axis.
    """
    ranked = feedback.scores().weakest()
    picks: List[str] = []
    for skill, count in zip(ranked, (2, 1, 1)):
        reachable = [
            exercise for exercise in get_exercises_for_skill(skill)
            if mastery.get(skill) >= exercise.mastery_requirement
        ]
        reachable.sort(key=lambda exercise: exercise.level, reverse=True)
        picks.extend(exercise.id for exercise in reachable[:count])
    return picks or list(DEFAULT_SUGGESTED_EXERCISES)


async def generate_suggested_exercises(
    feedback: WritingFeedback,
    mastery: SkillMastery,
) -> List[str]:
    """Exercise IDs to practise next. Never raises."""
    settings = get_settings()
    if not openai_configured(settings):
        logger.warning("No OpenAI key; using catalog exercise suggestions")
        return fallback_suggestions(feedback, mastery)

    catalog_ids = ", ".join(exercise.id for exercise in EXERCISES)
    user_prompt = (
        "A student has received the following feedback on their writing:\n"
        f"- Mechanics score: {feedback.mechanics_score}/100\n"
        f"- Sequencing score: {feedback.sequencing_score}/100\n"
        f"- Voice score: {feedback.voice_score}/100\n\n"
        "Current skill mastery levels:\n"
        f"- Mechanics: {mastery.mechanics}/100\n"
        f"- Sequencing: {mastery.sequencing}/100\n"
        f"- Voice: {mastery.voice}/100\n\n"
        f"Areas to improve: {feedback.areas_to_improve}\n\n"
        "Recommend 3-5 exercise IDs that would help this student improve. Focus on their "
        "weakest areas but provide a balanced approach. Respond with a JSON object "
        '{"exercises": [...]}.\n\n'
        f"Available exercise IDs: {catalog_ids}"
    )

    try:
        client = _get_client()
        response = await client.chat.completions.create(
            model=settings.openai_model,
            messages=[
                {"role": "system", "content": _SUGGESTION_SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
            temperature=settings.openai_temperature,
        )
        data = json.loads(response.choices[0].message.content or "{}")
    except Exception as exc:
        logger.error("Exercise suggestion failed: %s", exc)
        return list(DEFAULT_SUGGESTED_EXERCISES)

    suggested = data.get("exercises") if isinstance(data, dict) else data
    if not isinstance(suggested, list):
        return list(DEFAULT_SUGGESTED_EXERCISES)
    known = [exercise_id for exercise_id in suggested if isinstance(exercise_id, str) and get_exercise_by_id(exercise_id)]
    return known or list(DEFAULT_SUGGESTED_EXERCISES)
