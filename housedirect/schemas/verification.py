"""Verification schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from housedirect.schemas.base import ActionResponse, BaseSchema, IDMixin, TimestampMixin
from housedirect.models.enums import VerificationEntityType, VerificationStatus


class VerificationSubmit(BaseSchema):
    """Submit a document for verification of an agent account or a listing."""

    entity_type: VerificationEntityType
    entity_id: UUID
    document_type: str = Field(..., min_length=2, max_length=100)
    document_url: str = Field(..., min_length=1)


class VerificationApprove(BaseSchema):
    """Approve a pending verification request."""

    verification_id: UUID
    review_notes: Optional[str] = None


class VerificationReject(BaseSchema):
    """Reject a pending verification request; the reason is mandatory."""

    verification_id: UUID
    review_notes: str = Field(..., min_length=10, description="Review notes required")


class ReviewerSummary(BaseSchema):
    full_name: Optional[str] = None
    email: str


class VerificationResponse(BaseSchema, IDMixin, TimestampMixin):
    """Verification request response."""

    entity_type: VerificationEntityType
    entity_id: UUID
    document_type: str
    document_url: str
    status: VerificationStatus
    review_notes: Optional[str] = None
    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None
    submitted_by: Optional[UUID] = None
    reviewer: Optional[ReviewerSummary] = None


class VerificationDecisionResponse(ActionResponse):
    """Outcome of approve/reject."""

    verification: VerificationResponse
    email_sent: bool


class VerificationListResponse(BaseSchema):
    verifications: list[VerificationResponse]
