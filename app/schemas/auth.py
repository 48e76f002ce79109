"""Pydantic schemas for authentication endpoints."""

from pydantic import BaseModel


class UserLogin(BaseModel):
    """Request schema for user login."""
    username: str
    password: str


class Token(BaseModel):
    """Response schema for login with the JWT access token."""
    access_token: str
    token_type: str = "bearer"
    user_id: str | None = None
    role: str | None = None
    username: str | None = None


class MessageResponse(BaseModel):
    """Generic success message response."""
    message: str
