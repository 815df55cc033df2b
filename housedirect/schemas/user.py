"""User administration schemas."""

from typing import Optional
from uuid import UUID

from pydantic import Field

from housedirect.schemas.base import BaseSchema, IDMixin, TimestampMixin
from housedirect.models.enums import UserType, EntityVerificationStatus


class UserUpdate(BaseSchema):
    """Admin edit of a profile."""

    full_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    user_type: Optional[UserType] = None
    is_verified: Optional[bool] = None


class UserResponse(BaseSchema, IDMixin, TimestampMixin):
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    user_type: UserType
    is_verified: bool


class AgentProfileResponse(BaseSchema, IDMixin):
    user_id: UUID
    agency_name: Optional[str] = None
    license_number: Optional[str] = None
    verification_status: EntityVerificationStatus
    is_active: bool


class UserDetailResponse(BaseSchema):
    user: UserResponse
    properties_count: int
    agent_profile: Optional[AgentProfileResponse] = None


class DashboardStats(BaseSchema):
    """Admin dashboard counters (camelCase keys are part of the API)."""

    totalUsers: int
    totalProperties: int
    totalAgents: int
    pendingVerifications: int
    pendingReports: int
    activeProperties: int
    verifiedAgents: int
    verifiedProperties: int
