"""Shared bases for request and response schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Reads ORM rows directly and strips surrounding whitespace from strings."""

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
    )


class IDMixin(BaseModel):
    id: UUID


class TimestampMixin(BaseModel):
    """Append-only rows have no updated_at."""

    created_at: datetime
    updated_at: Optional[datetime] = None


class ActionResponse(BaseSchema):
    """Envelope for mutations: ``{"success": true, "message": ...}`` plus payload fields."""

    success: bool = True
    message: str
