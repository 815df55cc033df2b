"""Reminder emails for agents and sellers who have not completed verification."""

import asyncio
import logging
from dataclasses import asdict, dataclass, field
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.config import get_settings
from housedirect.core.errors import error_message
from housedirect.models.agent import Agent
from housedirect.models.enums import EntityVerificationStatus, UserType
from housedirect.models.property import Property
from housedirect.models.user import Profile
from housedirect.services.notifications import EmailService

logger = logging.getLogger(__name__)


@dataclass
class ReminderStats:
    agents_contacted: int = 0
    sellers_contacted: int = 0
    agents_failed: int = 0
    sellers_failed: int = 0
    errors: list[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        return asdict(self)


class VerificationReminderService:
    """Emails every unverified active agent and every seller with unverified active listings."""

    def __init__(
        self,
        db: AsyncSession,
        email_service: EmailService,
        delay_seconds: Optional[float] = None,
    ):
        self.db = db
        self.email = email_service
        self.delay_seconds = (
            get_settings().reminder_delay_seconds if delay_seconds is None else delay_seconds
        )

    async def unverified_agents(self) -> list[Profile]:
        result = await self.db.execute(
            select(Profile)
            .join(Agent, Agent.user_id == Profile.id)
            .where(
                Agent.is_active.is_(True),
                Agent.verification_status != EntityVerificationStatus.VERIFIED,
                Profile.user_type == UserType.AGENT,
            )
            .order_by(Profile.created_at)
        )
        return list(result.scalars().unique().all())

    async def sellers_with_unverified_listings(self) -> list[Profile]:
        has_unverified = (
            select(Property.id)
            .where(
                Property.created_by == Profile.id,
                Property.is_active.is_(True),
                Property.verification_status != EntityVerificationStatus.VERIFIED,
            )
            .exists()
        )
        result = await self.db.execute(
            select(Profile)
            .where(Profile.user_type == UserType.SELLER, has_unverified)
            .order_by(Profile.created_at)
        )
        return list(result.scalars().all())

    async def _throttle(self) -> None:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

    async def send_verification_reminders(self) -> ReminderStats:
        stats = ReminderStats()

        for profile in await self.unverified_agents():
            if not profile.email:
                continue
            try:
                result = await self.email.send_agent_verification_reminder(
                    profile.email, profile.full_name or "Agent"
                )
            except Exception as exc:
                stats.agents_failed += 1
                stats.errors.append(f"Error sending email to {profile.email}: {error_message(exc)}")
                continue
            if result.ok:
                stats.agents_contacted += 1
            else:
                stats.agents_failed += 1
                stats.errors.append(
                    f"Failed to send email to agent {profile.email}: {result.error}"
                )
            await self._throttle()

        for profile in await self.sellers_with_unverified_listings():
            if not profile.email:
                continue
            try:
                result = await self.email.send_seller_verification_reminder(
                    profile.email, profile.full_name or "Seller"
                )
            except Exception as exc:
                stats.sellers_failed += 1
                stats.errors.append(
                    f"Error sending email to seller {profile.email}: {error_message(exc)}"
                )
                continue
            if result.ok:
                stats.sellers_contacted += 1
            else:
                stats.sellers_failed += 1
                stats.errors.append(
                    f"Failed to send email to seller {profile.email}: {result.error}"
                )
            await self._throttle()

        logger.info(
            f"[REMINDERS] agents contacted={stats.agents_contacted} failed={stats.agents_failed}, "
            f"sellers contacted={stats.sellers_contacted} failed={stats.sellers_failed}"
        )
        return stats
