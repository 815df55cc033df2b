"""Admin conversation emails."""

import logging
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from housedirect.core.errors import HouseDirectError, NotFoundError
from housedirect.models.enums import AuditAction
from housedirect.models.message import Message
from housedirect.models.property import Property
from housedirect.models.user import Profile
from housedirect.services.audit import AuditService
from housedirect.services.notifications import DeliveryResult, EmailService

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%b %d, %Y, %I:%M %p"


class AdminMessageService:
    """Sends a user the transcript of an admin's conversation about a property."""

    def __init__(self, db: AsyncSession, email_service: EmailService):
        self.db = db
        self.email = email_service
        self.audit = AuditService(db)

    async def _profile(self, profile_id: UUID) -> Profile:
        result = await self.db.execute(select(Profile).where(Profile.id == profile_id))
        profile = result.scalar_one_or_none()
        if profile is None:
            raise NotFoundError("Recipient not found")
        return profile

    async def transcript(
        self,
        admin_id: UUID,
        admin_name: str,
        property_id: UUID,
    ) -> list[dict]:
        """Messages on the property sent or received by the admin, oldest first."""
        sender = aliased(Profile)
        result = await self.db.execute(
            select(Message, sender.full_name)
            .join(sender, sender.id == Message.sender_id)
            .where(
                Message.property_id == property_id,
                or_(Message.sender_id == admin_id, Message.recipient_id == admin_id),
            )
            .order_by(Message.created_at)
        )
        entries = []
        for message, sender_name in result.all():
            is_admin = message.sender_id == admin_id
            entries.append(
                {
                    "is_admin": is_admin,
                    "sender_name": admin_name if is_admin else (sender_name or "Property Owner"),
                    "sent_at": message.created_at.strftime(TIMESTAMP_FORMAT),
                    "message": message.message,
                }
            )
        return entries

    async def send_conversation_email(
        self,
        admin_id: UUID,
        recipient_id: UUID,
        property_id: UUID,
        message_id: UUID,
    ) -> DeliveryResult:
        recipient = await self._profile(recipient_id)

        result = await self.db.execute(select(Property).where(Property.id == property_id))
        listing = result.scalar_one_or_none()
        if listing is None:
            raise NotFoundError("Property not found")

        admin = await self.db.get(Profile, admin_id)
        admin_name = (admin.full_name if admin else None) or "Admin"

        entries = await self.transcript(admin_id, admin_name, property_id)
        delivery = await self.email.send_admin_message(
            to=recipient.email,
            recipient_name=recipient.full_name or "there",
            admin_name=admin_name,
            property_title=listing.title,
            property_id=listing.id,
            transcript=entries,
        )
        if not delivery.ok:
            logger.error(
                f"[EMAIL] Admin message email to {recipient.email} failed: {delivery.error}"
            )
            raise HouseDirectError("Failed to send email notification")

        await self.audit.log(
            action=AuditAction.ADMIN_MESSAGE_EMAILED,
            resource_type="message",
            resource_id=message_id,
            user_id=admin_id,
            details={"recipient_id": str(recipient_id), "property_id": str(property_id)},
        )
        await self.db.commit()
        return delivery
