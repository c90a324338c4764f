"""
Pytest fixtures for ScribexX tests.

Tests run against a temp-file SQLite database. The environment is set before
anything from scribexx is imported so the cached settings and the engine
pick it up.
"""

import os
import tempfile
import uuid
from typing import AsyncGenerator

_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_tmp.close()
TEST_DB_PATH = _tmp.name
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["OPENAI_API_KEY"] = ""
os.environ["AUTO_UNLOCK_LOCATIONS"] = "true"

from scribexx.config import get_settings  # noqa: E402

get_settings.cache_clear()

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from scribexx.database import async_session_maker, drop_db, init_db  # noqa: E402
from scribexx.engines.progress.state import ProgressState  # noqa: E402
from scribexx.kernel.identity.jwt import JWTManager  # noqa: E402
from scribexx.kernel.identity.password import hash_password  # noqa: E402
from scribexx.kernel.models.user import User, UserRole  # noqa: E402


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Fresh tables for one test."""
    await drop_db()
    await init_db()
    yield
    await drop_db()


@pytest_asyncio.fixture
async def db_session(database) -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session
        await session.rollback()


async def _make_user(session: AsyncSession, username: str, role: UserRole) -> User:
    user = User(
        id=uuid.uuid4(),
        username=username,
        password_hash=hash_password("TestPassword123", rounds=4),
        display_name=username.title(),
        role=role,
        grade=7,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """A student."""
    return await _make_user(db_session, "student", UserRole.STUDENT)


@pytest_asyncio.fixture
async def test_teacher(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "teacher", UserRole.TEACHER)


@pytest_asyncio.fixture
async def client(database) -> AsyncGenerator[AsyncClient, None]:
    """In-process API client. Lifespan does not run under ASGITransport; the
    database fixture creates the tables instead."""
    from scribexx.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register(client: AsyncClient):
    """Register through the API; the returned coroutine yields bearer headers."""

    async def _register(username: str, role: str = "student", grade: int = 7) -> dict:
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "username": username,
                "password": "SecurePass123",
                "display_name": username.title(),
                "role": role,
                "grade": grade,
            },
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _register


@pytest.fixture
def jwt_manager() -> JWTManager:
    return JWTManager(
        secret_key="test-secret-key-for-testing-only",
        algorithm="HS256",
        access_token_expire_minutes=30,
    )


@pytest.fixture
def seed_state() -> ProgressState:
    """A learner on their first day: 10/10/10 in both modes, Town Hall open."""
    return ProgressState.seed()
