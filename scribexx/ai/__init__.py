"""
AI writing feedback (OpenAI) with offline fallbacks.
"""

from scribexx.ai.feedback import (
    WritingAnalysis,
    WritingAnalysisError,
    WritingFeedback,
    analyze_writing,
    generate_suggested_exercises,
)

__all__ = [
    "WritingAnalysis",
    "WritingAnalysisError",
    "WritingFeedback",
    "analyze_writing",
    "generate_suggested_exercises",
]
