"""Admin message email router."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.database import get_db
from housedirect.core.security import require_admin, AuthenticatedUser
from housedirect.schemas.message import SendMessageEmail, SendMessageEmailResponse
from housedirect.services.messages import AdminMessageService
from housedirect.services.notifications import EmailService, get_email_service

router = APIRouter(prefix="/admin/messages", tags=["admin", "messages"])


@router.post("/send-email", response_model=SendMessageEmailResponse)
async def send_message_email(
    data: SendMessageEmail,
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Email the recipient the admin's conversation about a property."""
    service = AdminMessageService(db, email_service)
    await service.send_conversation_email(
        admin_id=current_user.profile_id,
        recipient_id=data.recipientId,
        property_id=data.propertyId,
        message_id=data.messageId,
    )
    return SendMessageEmailResponse()
