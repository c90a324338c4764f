"""
Domain errors raised by the progress engine.
"""

import uuid
from typing import Optional


class ProgressError(Exception):
    """Base class for progress engine errors."""


class ProgressNotInitializedError(ProgressError):
    """A transition was requested before the user's progress row exists."""

    def __init__(self, user_id: Optional[uuid.UUID] = None):
        self.user_id = user_id
        super().__init__(
            f"Progress not initialized for user {user_id}" if user_id else "Progress not initialized"
        )


class UnknownCatalogItemError(ProgressError):
    """An exercise, quest, location or achievement ID is not in the catalog."""

    def __init__(self, kind: str, item_id: str):
        self.kind = kind
        self.item_id = item_id
        super().__init__(f"Unknown {kind}: {item_id}")
