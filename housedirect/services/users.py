"""Admin management of user profiles."""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.errors import NotFoundError
from housedirect.models.agent import Agent
from housedirect.models.enums import AuditAction
from housedirect.models.property import Property
from housedirect.models.user import Profile
from housedirect.schemas.user import UserUpdate
from housedirect.services.audit import AuditService


@dataclass
class UserDetail:
    user: Profile
    properties_count: int
    agent_profile: Optional[Agent]


class UserAdminService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def list_users(self) -> list[Profile]:
        result = await self.db.execute(select(Profile).order_by(Profile.created_at.desc()))
        return list(result.scalars().all())

    async def _get(self, user_id: UUID) -> Profile:
        result = await self.db.execute(select(Profile).where(Profile.id == user_id))
        profile = result.scalar_one_or_none()
        if profile is None:
            raise NotFoundError("User not found")
        return profile

    async def get_user(self, user_id: UUID) -> UserDetail:
        """Profile plus number of listings created and the agent account, if any."""
        profile = await self._get(user_id)
        properties_count = await self.db.scalar(
            select(func.count(Property.id)).where(Property.created_by == user_id)
        )
        agent_result = await self.db.execute(select(Agent).where(Agent.user_id == user_id))
        return UserDetail(
            user=profile,
            properties_count=properties_count or 0,
            agent_profile=agent_result.scalar_one_or_none(),
        )

    async def update_user(self, user_id: UUID, data: UserUpdate, admin_id: UUID) -> Profile:
        profile = await self._get(user_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        for field_name, value in changes.items():
            setattr(profile, field_name, value)

        await self.audit.log(
            action=AuditAction.USER_UPDATED,
            resource_type="profile",
            resource_id=profile.id,
            user_id=admin_id,
            details={key: getattr(value, "value", value) for key, value in changes.items()},
        )
        await self.db.commit()
        return profile
