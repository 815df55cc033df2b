"""Admin message email schemas."""

from uuid import UUID

from pydantic import Field

from housedirect.schemas.base import ActionResponse, BaseSchema


class SendMessageEmail(BaseSchema):
    """Email the admin's conversation about a property to a user."""

    recipientId: UUID
    propertyId: UUID
    messageId: UUID = Field(..., description="Message that triggered the email")


class SendMessageEmailResponse(ActionResponse):
    message: str = "Email notification sent successfully"
