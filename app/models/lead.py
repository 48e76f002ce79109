"""Lead model for the partner CRM."""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from app.core.database import Base

NEW_LEAD_STATUS = "New Lead"


class Lead(Base):
    """Lead model.

    `current_status` references `StatusDefinition.status_name` by value, not by
    foreign key, so edits to the status graph never cascade into leads.
    """
    __tablename__ = "leads"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    company_name = Column(String(255), nullable=False)
    founder_name = Column(String(255), nullable=True)
    owner_name = Column(String(255), nullable=True)
    contact = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True, index=True)
    delivery_type = Column(String(20), nullable=True)  # Grant | Equity
    service_type = Column(String(20), nullable=True)  # Grant | Equity
    form_data_json = Column(Text, nullable=True)
    partner_id = Column(String(36), nullable=True, index=True)
    partner_name = Column(String(255), nullable=True)
    created_by_user_id = Column(String(36), nullable=True)
    assigned_to_user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    current_status = Column(String(100), nullable=False, default=NEW_LEAD_STATUS, index=True)
    last_status = Column(String(100), nullable=True)
    last_status_updated_date = Column(DateTime, nullable=False, default=datetime.utcnow)

    created_on_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
