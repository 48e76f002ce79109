"""User model for staff members who work the lead pipeline."""

from sqlalchemy import Column, String, DateTime, Boolean
import uuid
from datetime import datetime
from app.core.database import Base

ROLES = ("Admin", "Customer success officer", "Analyst", "Operations", "Manager")


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(50), nullable=True)
    hashed_password = Column(String, nullable=False)
    role = Column(String(50), nullable=False, default="Operations", index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_login_at = Column(DateTime, nullable=True)
