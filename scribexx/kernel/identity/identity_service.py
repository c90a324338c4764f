"""
Identity service for account registration and sign-in.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scribexx.kernel.models.user import User, UserRole
from scribexx.kernel.models.event_log import EventType
from scribexx.kernel.events.event_store import EventStore
from scribexx.kernel.identity.password import hash_password, verify_password
from scribexx.kernel.identity.jwt import JWTManager
from scribexx.logging_config import get_logger

logger = get_logger(__name__)


class IdentityService:
    """
    Service for user identity operations.

    Handles registration, authentication and user lookups.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.jwt_manager = JWTManager()
        self.event_store = EventStore(session)

    async def register_user(
        self,
        username: str,
        password: str,
        display_name: str,
        role: UserRole = UserRole.STUDENT,
        age: int = 0,
        grade: int = 0,
        avatar_url: str = "",
        ip_address: Optional[str] = None,
    ) -> User:
        """
        Register a new user.

        Raises:
            ValueError: If the username is already taken
        """
        username = username.strip()
        existing = await self.get_user_by_username(username)
        if existing:
            raise ValueError("Username already exists")

        user = User(
            username=username,
            password_hash=hash_password(password),
            display_name=display_name.strip(),
            role=role,
            age=age,
            grade=grade,
            avatar_url=avatar_url,
        )
        self.session.add(user)
        await self.session.flush()  # Get the ID

        await self.event_store.log(
            event_type=EventType.USER_REGISTERED,
            entity_type="user",
            entity_id=user.id,
            user_id=user.id,
            payload={"username": user.username, "role": user.role_value},
            ip_address=ip_address,
        )
        logger.info("User registered", extra={"username": user.username, "role": user.role_value})
        return user

    async def authenticate(
        self,
        username: str,
        password: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[tuple[User, str, datetime]]:
        """
        Check credentials and issue an access token.

        Returns:
            Tuple of (User, token, expires_at) if successful, None otherwise
        """
        user = await self.get_user_by_username(username.strip())
        if not user or not user.is_active:
            return None
        if not verify_password(password, user.password_hash):
            return None

        token, expires_at = self.jwt_manager.create_access_token(
            user_id=user.id,
            username=user.username,
            role=user.role_value,
        )

        await self.event_store.log(
            event_type=EventType.USER_LOGGED_IN,
            entity_type="user",
            entity_id=user.id,
            user_id=user.id,
            payload={"method": "password"},
            ip_address=ip_address,
            user_agent=user_agent,
        )
        return user, token, expires_at

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    @staticmethod
    def expires_in(expires_at: datetime) -> int:
        """Seconds until expiry, for token responses."""
        return max(0, int((expires_at - datetime.now(timezone.utc)).total_seconds()))
