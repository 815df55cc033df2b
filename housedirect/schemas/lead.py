"""Lead CRM schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, model_validator

from housedirect.schemas.base import BaseSchema, IDMixin, TimestampMixin
from housedirect.models.enums import (
    LeadStatus,
    LeadPriority,
    LeadInterestType,
    LeadSource,
    LeadActivityType,
    LeadActivityStatus,
)


class LeadCreate(BaseSchema):
    """Create a lead manually."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    property_id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    source: LeadSource = LeadSource.OTHER
    interest_type: LeadInterestType = LeadInterestType.BUY
    budget_min: Optional[Decimal] = Field(None, ge=0)
    budget_max: Optional[Decimal] = Field(None, ge=0)
    preferred_location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    priority: LeadPriority = LeadPriority.MEDIUM
    lead_score: int = Field(default=50, ge=0, le=100)

    @model_validator(mode="after")
    def check_budget_range(self):
        if (
            self.budget_min is not None
            and self.budget_max is not None
            and self.budget_min > self.budget_max
        ):
            raise ValueError("budget_min cannot exceed budget_max")
        return self


class LeadFromInquiry(BaseSchema):
    """Create or refresh a lead from a property inquiry message."""

    message_id: UUID
    property_id: UUID
    sender_id: Optional[UUID] = None
    sender_name: str = Field(..., min_length=1, max_length=255)
    sender_email: EmailStr
    sender_phone: Optional[str] = Field(None, max_length=50)
    message: Optional[str] = None


class LeadStatusUpdate(BaseSchema):
    status: LeadStatus


class LeadActivityCreate(BaseSchema):
    """Log an interaction with a lead."""

    activity_type: LeadActivityType
    subject: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(None, ge=0)


class LeadNoteCreate(BaseSchema):
    note: str = Field(..., min_length=1)
    is_important: bool = False
    is_private: bool = False


class LeadResponse(BaseSchema, IDMixin, TimestampMixin):
    """Lead response."""

    agent_id: UUID
    property_id: Optional[UUID] = None
    property_title: Optional[str] = None
    user_id: Optional[UUID] = None
    name: str
    email: str
    phone: Optional[str] = None
    source: str
    status: LeadStatus
    interest_type: LeadInterestType
    budget_min: Optional[Decimal] = None
    budget_max: Optional[Decimal] = None
    preferred_location: Optional[str] = None
    notes: Optional[str] = None
    priority: LeadPriority
    lead_score: int
    first_contact_at: Optional[datetime] = None
    last_contact_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None


class LeadActivityResponse(BaseSchema, IDMixin):
    lead_id: UUID
    agent_id: UUID
    activity_type: LeadActivityType
    subject: Optional[str] = None
    description: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    status: LeadActivityStatus
    completed_at: Optional[datetime] = None
    message_id: Optional[UUID] = None
    property_id: Optional[UUID] = None
    created_at: datetime


class LeadNoteResponse(BaseSchema, IDMixin):
    lead_id: UUID
    agent_id: UUID
    note: str
    is_important: bool
    is_private: bool
    created_at: datetime


class LeadDetailResponse(BaseSchema):
    """Lead with its timeline and notes, newest first."""

    lead: LeadResponse
    activities: list[LeadActivityResponse]
    notes: list[LeadNoteResponse]
