"""Status hierarchy rows, the persisted form of the status graph."""

from sqlalchemy import Column, String, Integer, Text
import uuid
from app.core.database import Base

NEXT_STATUS_SEPARATOR = ";"


class StatusDefinition(Base):
    __tablename__ = "status_hierarchy"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    status_name = Column(String(100), unique=True, index=True, nullable=False)
    next_statuses = Column(Text, nullable=False, default="")  # semicolon-separated
    days_limit = Column(Integer, nullable=True)
    auto_move_to = Column(String(100), nullable=True)
