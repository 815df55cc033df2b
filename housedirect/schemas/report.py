"""Report (dispute) schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from housedirect.schemas.base import BaseSchema, IDMixin, TimestampMixin
from housedirect.models.enums import ReportEntityType, ReportStatus


class ReportCreate(BaseSchema):
    """File a report against a property, an agent or a user."""

    entity_type: ReportEntityType
    entity_id: UUID
    reason: str = Field(..., min_length=10, max_length=500)
    description: str = Field(..., min_length=20, max_length=2000)


class ReportStatusUpdate(BaseSchema):
    """Admin status change."""

    status: ReportStatus
    admin_notes: Optional[str] = None


class ReporterSummary(BaseSchema):
    full_name: Optional[str] = None
    email: str


class ReportResponse(BaseSchema, IDMixin, TimestampMixin):
    """Report response."""

    entity_type: ReportEntityType
    entity_id: UUID
    reporter_id: UUID
    reason: str
    description: str
    status: ReportStatus
    admin_notes: Optional[str] = None
    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None
    reporter: Optional[ReporterSummary] = None
