"""
Writing Engine - quest submissions and their AI review.
"""

from scribexx.engines.writing.submission_service import (
    SubmissionAccessError,
    SubmissionNotFoundError,
    SubmissionService,
    review_submission_in_background,
)

__all__ = [
    "SubmissionAccessError",
    "SubmissionNotFoundError",
    "SubmissionService",
    "review_submission_in_background",
]
