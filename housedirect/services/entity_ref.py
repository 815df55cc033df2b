"""Typed reference to the agent or property a verification request is about."""

from dataclasses import dataclass
from typing import Optional, Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.models.agent import Agent
from housedirect.models.enums import VerificationEntityType
from housedirect.models.property import Property
from housedirect.models.user import Profile


@dataclass(frozen=True)
class AgentRef:
    agent_id: UUID

    entity_type = VerificationEntityType.AGENT
    label = "Agent Account"

    @property
    def entity_id(self) -> UUID:
        return self.agent_id


@dataclass(frozen=True)
class PropertyRef:
    property_id: UUID

    entity_type = VerificationEntityType.PROPERTY
    label = "Property Listing"

    @property
    def entity_id(self) -> UUID:
        return self.property_id


EntityRef = Union[AgentRef, PropertyRef]
VerifiableEntity = Union[Agent, Property]


def entity_ref_from(entity_type: Union[VerificationEntityType, str], entity_id: UUID) -> EntityRef:
    """Build an EntityRef from the (entity_type, entity_id) pair stored on a request."""
    entity_type = VerificationEntityType(entity_type)
    if entity_type == VerificationEntityType.AGENT:
        return AgentRef(entity_id)
    if entity_type == VerificationEntityType.PROPERTY:
        return PropertyRef(entity_id)
    raise ValueError(f"Unsupported verification entity type: {entity_type}")


class EntityResolver:
    """Loads the row behind an EntityRef and the profile that owns it."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load(self, ref: EntityRef, for_update: bool = False) -> Optional[VerifiableEntity]:
        if isinstance(ref, AgentRef):
            query = select(Agent).where(Agent.id == ref.agent_id)
        elif isinstance(ref, PropertyRef):
            query = select(Property).where(Property.id == ref.property_id)
        else:
            raise TypeError(f"Unknown entity reference: {ref!r}")

        if for_update:
            query = query.with_for_update()

        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def owner(self, ref: EntityRef) -> Optional[Profile]:
        """Profile to notify about the entity: the agent's user or the listing's creator."""
        if isinstance(ref, AgentRef):
            query = (
                select(Profile)
                .join(Agent, Agent.user_id == Profile.id)
                .where(Agent.id == ref.agent_id)
            )
        elif isinstance(ref, PropertyRef):
            query = (
                select(Profile)
                .join(Property, Property.created_by == Profile.id)
                .where(Property.id == ref.property_id)
            )
        else:
            raise TypeError(f"Unknown entity reference: {ref!r}")

        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    @staticmethod
    def owner_id(ref: EntityRef, entity: VerifiableEntity) -> UUID:
        if isinstance(ref, AgentRef):
            return entity.user_id
        return entity.created_by
