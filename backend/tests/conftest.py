"""
DiaryPlus Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides are applied BEFORE any diaryplus import so the
       settings singleton picks them up; every test gets a fresh in-memory
       SQLite database with the full schema.

Fixture Hierarchy (all function-scoped):
    ├── db_engine:        in-memory aiosqlite engine, tables created
    ├── db_session:       AsyncSession for service-level tests
    ├── mock_db_session:  AsyncMock session (no database at all)
    ├── client:           HTTPX AsyncClient against the real app,
    │                     get_db_session overridden to db_engine
    ├── signup:           factory → (auth headers, user json)
    ├── project_for:      factory → project json for a signed-up user
    └── team:             factory → (project, owner, member) sharing a project
"""

import os
import tempfile
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-jwt-secret-with-enough-length-for-hs256"
os.environ["CRON_SECRET"] = "test-cron-secret"
os.environ["GEMINI_API_KEY"] = ""
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="diaryplus_test_")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["VAULT_KDF_ITERATIONS"] = "1000"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["RETRY_MAX_ATTEMPTS"] = "1"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import diaryplus.models  # noqa: E402,F401
from diaryplus.database import Base, get_db_session  # noqa: E402
from diaryplus.dependencies import feedback_limiter  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """One shared connection (StaticPool) so the in-memory schema survives."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = row
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.get = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# API Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def client(db_engine):
    """
    HTTPX AsyncClient routed straight into the FastAPI app.

    Usage:
        async def test_health(client):
            response = await client.get("/health")
    """
    from diaryplus.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_session
    feedback_limiter.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def signup(client):
    """
    Factory: create an account and return (headers, user).

    Usage:
        headers, user = await signup("ada@example.com")
    """

    async def _signup(email: str = "founder@example.com", password: str = "secret123", name: str = "Founder"):
        response = await client.post(
            "/api/auth/signup", json={"email": email, "password": password, "name": name}
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]

    return _signup


@pytest.fixture
def project_for(client):
    """Factory: create a project as the given user and return its JSON."""

    async def _project_for(headers, name: str = "Acme Rockets"):
        response = await client.post("/api/projects", json={"name": name}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _project_for


@pytest.fixture
def team(client, signup, project_for):
    """Factory: (project, owner headers, member headers) for a shared project."""

    async def _team():
        owner, _ = await signup("owner@example.com")
        project = await project_for(owner)
        member, _ = await signup("member@example.com")
        invite = await client.post(
            f"/api/projects/{project['id']}/invitations", json={"email": "member@example.com"}, headers=owner
        )
        await client.post(f"/api/invitations/{invite.json()['token']}/accept", headers=member)
        return project, owner, member

    return _team
