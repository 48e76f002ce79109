"""Pydantic schemas for leads and status changes."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class LeadOut(BaseModel):
    """Schema for returning lead details."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    company_name: str = Field(serialization_alias="companyName")
    founder_name: Optional[str] = Field(None, serialization_alias="founderName")
    owner_name: Optional[str] = Field(None, serialization_alias="ownerName")
    contact: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    delivery_type: Optional[str] = Field(None, serialization_alias="deliveryType")
    service_type: Optional[str] = Field(None, serialization_alias="serviceType")
    partner_id: Optional[str] = Field(None, serialization_alias="partnerId")
    partner_name: Optional[str] = Field(None, serialization_alias="partnerName")
    created_by_user_id: Optional[str] = Field(None, serialization_alias="createdByUserId")
    assigned_to_user_id: Optional[str] = Field(None, serialization_alias="assignedToUserId")
    current_status: str = Field(serialization_alias="currentStatus")
    last_status: Optional[str] = Field(None, serialization_alias="lastStatus")
    last_status_updated_date: datetime = Field(serialization_alias="lastStatusUpdatedDate")
    created_on_date: datetime = Field(serialization_alias="createdOnDate")


class StatusChangeRequest(BaseModel):
    """Body of POST /leads/{id}/change-status."""
    new_status: Optional[str] = Field(None, alias="newStatus")


class StatusChangeResponse(BaseModel):
    message: str
    lead: LeadOut


class AvailableTransitionsResponse(BaseModel):
    available_transitions: List[str] = Field(serialization_alias="availableTransitions")


class AttentionLeadOut(LeadOut):
    """A lead close to (or past) its automatic status change."""
    days_since_update: int = Field(serialization_alias="daysSinceUpdate")
    suggested_action: str = Field(serialization_alias="suggestedAction")
