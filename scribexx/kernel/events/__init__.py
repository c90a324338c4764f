"""
Append-only audit logging.
"""

from scribexx.kernel.events.event_store import EventStore

__all__ = ["EventStore"]
