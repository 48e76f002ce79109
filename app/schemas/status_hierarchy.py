"""Pydantic schemas for the status hierarchy endpoints."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.services.status_graph import parse_next_statuses


class StatusDefinitionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    status_name: str = Field(serialization_alias="statusName")
    next_statuses: List[str] = Field(serialization_alias="nextStatuses")
    days_limit: Optional[int] = Field(None, serialization_alias="daysLimit")
    auto_move_to: Optional[str] = Field(None, serialization_alias="autoMoveTo")

    @field_validator("next_statuses", mode="before")
    @classmethod
    def split_next_statuses(cls, value):
        if isinstance(value, str) or value is None:
            return list(parse_next_statuses(value))
        return value


class StatusDefinitionCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status_name: str = Field(alias="statusName", min_length=1)
    next_statuses: List[str] = Field(default_factory=list, alias="nextStatuses")
    days_limit: Optional[int] = Field(None, alias="daysLimit")
    auto_move_to: Optional[str] = Field(None, alias="autoMoveTo")

    @field_validator("next_statuses", mode="before")
    @classmethod
    def accept_delimited(cls, value):
        if isinstance(value, str):
            return list(parse_next_statuses(value))
        return value


class StatusDefinitionUpdate(StatusDefinitionCreate):
    status_name: Optional[str] = Field(None, alias="statusName", min_length=1)
    next_statuses: Optional[List[str]] = Field(None, alias="nextStatuses")


class StatusHierarchyReset(BaseModel):
    message: str
    status_hierarchy: List[StatusDefinitionOut] = Field(serialization_alias="statusHierarchy")
