"""Tests for authentication and user provisioning."""

import pytest
from sqlalchemy import select

from app.models.user import User
from app.scripts.seed_admin import create_or_update_user
from app.services.auth import decode_access_token, hash_password, verify_password


def test_password_hashing():
    """Password hashing should be one-way and verifiable."""
    hashed = hash_password("supersecret123")

    assert hashed != "supersecret123"
    assert verify_password("supersecret123", hashed) is True
    assert verify_password("wrongpassword", hashed) is False


@pytest.mark.asyncio
async def test_login_returns_token(client, make_user):
    user, _ = await make_user("Manager", username="meera")

    resp = await client.post("/api/v1/auth/login", json={"username": "meera", "password": "testpass123"})

    assert resp.status_code == 200
    data = resp.json()
    assert data["user_id"] == user.id
    assert data["role"] == "Manager"
    assert decode_access_token(data["access_token"])["sub"] == user.id


@pytest.mark.asyncio
async def test_login_wrong_password(client, make_user):
    await make_user("Manager", username="meera")

    resp = await client.post("/api/v1/auth/login", json={"username": "meera", "password": "nope"})

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_seed_script_creates_then_updates_user(session_factory):
    created = await create_or_update_user(
        "ops-lead", "ops@example.com", "FirstPass123", role="Operations", session_factory=session_factory
    )
    updated = await create_or_update_user(
        "ops-lead", "ops@example.com", "SecondPass123", role="Admin", session_factory=session_factory
    )

    assert updated.id == created.id
    async with session_factory() as db:
        result = await db.execute(select(User).where(User.username == "ops-lead"))
        user = result.scalar_one()
    assert user.role == "Admin"
    assert verify_password("SecondPass123", user.hashed_password)
