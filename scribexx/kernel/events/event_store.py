"""
Event Store service for append-only audit logging.

State changes are logged in the same session as the write they describe,
so the audit record and the change commit (or roll back) together.
"""

import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select, desc, func
from sqlalchemy.ext.asyncio import AsyncSession

from scribexx.kernel.models.event_log import EventLog, EventType


class EventStore:
    """
    Service for managing the immutable event log.

    Usage:
        event_store = EventStore(session)
        await event_store.log(
            event_type=EventType.QUEST_COMPLETED,
            entity_type="progress",
            entity_id=progress_row.id,
            user_id=current_user.id,
            payload={"quest_id": quest_id, "currency": state.currency},
        )
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def log(
        self,
        event_type: EventType,
        entity_type: str,
        entity_id: uuid.UUID,
        user_id: Optional[uuid.UUID] = None,
        payload: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> EventLog:
        """
        Append an event to the audit log.

        Args:
            event_type: The type of event
            entity_type: The type of entity (user, progress, submission, ...)
            entity_id: The ID of the entity
            user_id: The ID of the user who triggered the event
            payload: Additional event data
            ip_address: Client IP address
            user_agent: Client user agent

        Returns:
            The created EventLog record (flushed by the caller's commit)
        """
        event = EventLog(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            payload=self._serialize_payload(payload) if payload else {},
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self.session.add(event)
        return event

    async def get_user_events(
        self,
        user_id: uuid.UUID,
        event_types: Optional[List[EventType]] = None,
        since: Optional[datetime] = None,
        limit: int = 100,
    ) -> List[EventLog]:
        """Events triggered by a user, newest first."""
        await self.session.flush()
        query = select(EventLog).where(EventLog.user_id == user_id)
        if event_types:
            query = query.where(EventLog.event_type.in_(event_types))
        if since:
            query = query.where(EventLog.created_at >= since)
        query = query.order_by(desc(EventLog.created_at)).limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_events(
        self,
        user_id: Optional[uuid.UUID] = None,
        event_type: Optional[EventType] = None,
    ) -> int:
        await self.session.flush()
        query = select(func.count(EventLog.id))
        if user_id:
            query = query.where(EventLog.user_id == user_id)
        if event_type:
            query = query.where(EventLog.event_type == event_type)
        result = await self.session.execute(query)
        return result.scalar() or 0

    def _serialize_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Convert payload values to JSON-serializable types."""
        return {key: self._serialize_value(value) for key, value in payload.items()}

    def _serialize_value(self, value: Any) -> Any:
        if isinstance(value, uuid.UUID):
            return str(value)
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, dict):
            return self._serialize_payload(value)
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self._serialize_value(v) for v in value]
        if hasattr(value, "value") and isinstance(getattr(value, "value"), str):
            return value.value
        return value
