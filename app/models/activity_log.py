"""Append-only activity log for lead changes."""

from sqlalchemy import Column, String, Text, DateTime
import uuid
from datetime import datetime
from app.core.database import Base

SYSTEM_USER_ID = "system"


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    user_id = Column(String(36), nullable=False, index=True)  # user id or "system"
    action = Column(String(50), nullable=False)  # status_change, auto_status_change, auto_assign
    entity = Column(String(50), nullable=False, default="lead")
    entity_id = Column(String(36), nullable=False, index=True)
    details = Column(Text, nullable=False, default="")
