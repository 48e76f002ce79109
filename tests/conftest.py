"""Shared test fixtures for the lead CRM API tests.

Uses an in-memory SQLite async engine so tests run without PostgreSQL.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["STATUS_SWEEP_ENABLED"] = "false"
os.environ["SEED_STATUS_HIERARCHY"] = "false"

from datetime import datetime, timedelta

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.main import app, build_status_engine

# Import all models to ensure they're registered with Base.metadata
from app.models.activity_log import ActivityLog  # noqa: F401
from app.models.lead import Lead
from app.models.status_definition import StatusDefinition  # noqa: F401
from app.models.user import User
from app.services.auth import create_access_token, hash_password
from app.services.status_hierarchy import initialize_status_hierarchy


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "testpass123"


@pytest_asyncio.fixture
async def session_factory():
    """Fresh in-memory database per test; every session shares one connection."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    """Direct DB session for test setup/assertions."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """Async HTTP test client wired to the test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    previous_engine = app.state.status_engine
    app.dependency_overrides[get_db] = override_get_db
    app.state.status_engine = build_status_engine(session_factory)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    app.state.status_engine = previous_engine


@pytest_asyncio.fixture
async def status_hierarchy(db):
    """The default pipeline."""
    await initialize_status_hierarchy(db)


@pytest_asyncio.fixture
async def make_user(db):
    """Factory: create a user with a role and return (user, auth headers)."""
    async def _make(role="Admin", username=None, created_at=None):
        username = username or f"{role.lower().replace(' ', '_')}_{datetime.utcnow().timestamp()}"
        user = User(
            username=username,
            email=f"{username}@example.com",
            hashed_password=hash_password(TEST_PASSWORD),
            role=role,
            is_active=True,
            created_at=created_at or datetime.utcnow(),
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        token = create_access_token(data={"sub": user.id, "role": user.role})
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest_asyncio.fixture
async def make_lead(db):
    """Factory: create a lead in a status, last updated `idle` ago."""
    async def _make(status="New Lead", idle=timedelta(0), company_name="Acme Grants Pvt Ltd", **fields):
        lead = Lead(
            company_name=company_name,
            founder_name="Asha Rao",
            email="founder@acme.example",
            phone=fields.pop("phone", "+910000000000"),
            current_status=status,
            last_status=fields.pop("last_status", None),
            last_status_updated_date=datetime.utcnow() - idle,
            **fields,
        )
        db.add(lead)
        await db.commit()
        await db.refresh(lead)
        return lead

    return _make
