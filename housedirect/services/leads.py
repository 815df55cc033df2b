"""Lead pipeline tracking for agents."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.errors import NotFoundError
from housedirect.models.enums import (
    LeadActivityStatus,
    LeadActivityType,
    LeadPriority,
    LeadSource,
    LeadStatus,
)
from housedirect.models.lead import Lead, LeadActivity, LeadNote
from housedirect.schemas.lead import (
    LeadActivityCreate,
    LeadCreate,
    LeadFromInquiry,
    LeadNoteCreate,
)
from housedirect.services.transitions import (
    LEAD_CLOSED_STATUSES,
    LEAD_TRANSITIONS,
    ensure_transition,
)

logger = logging.getLogger(__name__)


@dataclass
class LeadDetail:
    lead: Lead
    activities: list[LeadActivity]
    notes: list[LeadNote]


class LeadService:
    """Every operation is scoped to the acting agent; other agents' leads are not found."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_owned(self, agent_id: UUID, lead_id: UUID, for_update: bool = False) -> Lead:
        query = select(Lead).where(Lead.id == lead_id, Lead.agent_id == agent_id)
        if for_update:
            query = query.with_for_update(of=Lead)
        result = await self.db.execute(query)
        lead = result.scalar_one_or_none()
        if lead is None:
            raise NotFoundError("Lead not found")
        return lead

    async def create(self, agent_id: UUID, data: LeadCreate) -> Lead:
        now = datetime.utcnow()
        lead = Lead(
            agent_id=agent_id,
            property_id=data.property_id,
            user_id=data.user_id,
            name=data.name,
            email=str(data.email),
            phone=data.phone,
            source=data.source.value,
            status=LeadStatus.NEW,
            interest_type=data.interest_type,
            budget_min=data.budget_min,
            budget_max=data.budget_max,
            preferred_location=data.preferred_location,
            notes=data.notes,
            priority=data.priority,
            lead_score=data.lead_score,
            first_contact_at=now,
            last_contact_at=now,
        )
        self.db.add(lead)
        await self.db.commit()
        await self.db.refresh(lead, ["listing"])
        return lead

    async def create_from_inquiry(
        self,
        agent_id: UUID,
        data: LeadFromInquiry,
    ) -> tuple[Lead, bool]:
        """Turn a property inquiry into a lead, or log it against the existing one.

        Returns the lead and whether it was newly created.
        """
        now = datetime.utcnow()
        email = str(data.sender_email)

        result = await self.db.execute(
            select(Lead).where(
                Lead.agent_id == agent_id,
                Lead.email == email,
                Lead.property_id == data.property_id,
            )
        )
        lead = result.scalars().first()
        created = lead is None

        if created:
            lead = Lead(
                agent_id=agent_id,
                property_id=data.property_id,
                user_id=data.sender_id,
                name=data.sender_name,
                email=email,
                phone=data.sender_phone,
                source=LeadSource.PROPERTY_INQUIRY.value,
                status=LeadStatus.NEW,
                priority=LeadPriority.MEDIUM,
                lead_score=50,
                notes=data.message,
                first_contact_at=now,
                last_contact_at=now,
            )
            self.db.add(lead)
            await self.db.flush()
        else:
            lead.last_contact_at = now

        self.db.add(
            LeadActivity(
                lead_id=lead.id,
                agent_id=agent_id,
                activity_type=LeadActivityType.MESSAGE,
                description="Initial inquiry message" if created else "New message received",
                message_id=data.message_id,
                property_id=data.property_id,
                status=LeadActivityStatus.COMPLETED,
                completed_at=now,
            )
        )
        await self.db.commit()
        await self.db.refresh(lead, ["listing"])
        return lead, created

    async def list_leads(
        self,
        agent_id: UUID,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Lead]:
        query = select(Lead).where(Lead.agent_id == agent_id)
        if status and status != "all":
            query = query.where(Lead.status == LeadStatus(status))
        if search:
            # % and _ in the search text match literally
            query = query.where(
                or_(
                    Lead.name.icontains(search, autoescape=True),
                    Lead.email.icontains(search, autoescape=True),
                    Lead.phone.contains(search, autoescape=True),
                )
            )
        result = await self.db.execute(query.order_by(Lead.created_at.desc()))
        return list(result.scalars().all())

    async def status_counts(self, agent_id: UUID) -> dict[str, int]:
        """Number of leads per status, plus ``all``."""
        result = await self.db.execute(
            select(Lead.status, func.count(Lead.id))
            .where(Lead.agent_id == agent_id)
            .group_by(Lead.status)
        )
        counts = {status.value: 0 for status in LeadStatus}
        for status, count in result.all():
            counts[LeadStatus(status).value] = count
        counts["all"] = sum(counts.values())
        return counts

    async def get_detail(self, agent_id: UUID, lead_id: UUID) -> LeadDetail:
        lead = await self._get_owned(agent_id, lead_id)
        activities = await self.db.execute(
            select(LeadActivity)
            .where(LeadActivity.lead_id == lead.id)
            .order_by(LeadActivity.created_at.desc())
        )
        notes = await self.db.execute(
            select(LeadNote)
            .where(LeadNote.lead_id == lead.id)
            .order_by(LeadNote.created_at.desc())
        )
        return LeadDetail(
            lead=lead,
            activities=list(activities.scalars().all()),
            notes=list(notes.scalars().all()),
        )

    async def update_status(self, agent_id: UUID, lead_id: UUID, new_status: LeadStatus) -> Lead:
        """Move a lead along the pipeline.

        Closing (won or lost) stamps closed_at. Other moves keep the previous
        closed_at, so a re-opened lead still shows when it was last closed.
        """
        try:
            lead = await self._get_owned(agent_id, lead_id, for_update=True)
            previous = lead.status
            ensure_transition("lead", LEAD_TRANSITIONS, previous, new_status)

            lead.status = new_status
            if new_status in LEAD_CLOSED_STATUSES:
                lead.closed_at = datetime.utcnow()
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"[LEADS] {lead.id} {previous.value} -> {new_status.value}")
        return lead

    async def add_activity(
        self,
        agent_id: UUID,
        lead_id: UUID,
        data: LeadActivityCreate,
    ) -> LeadActivity:
        """Append a timeline entry; scheduled when it has a date, completed otherwise."""
        lead = await self._get_owned(agent_id, lead_id)
        now = datetime.utcnow()
        scheduled = data.scheduled_at is not None

        activity = LeadActivity(
            lead_id=lead.id,
            agent_id=agent_id,
            activity_type=data.activity_type,
            subject=data.subject,
            description=data.description,
            scheduled_at=data.scheduled_at,
            duration_minutes=data.duration_minutes,
            status=LeadActivityStatus.SCHEDULED if scheduled else LeadActivityStatus.COMPLETED,
            completed_at=None if scheduled else now,
        )
        self.db.add(activity)
        if not scheduled:
            lead.last_contact_at = now
        await self.db.commit()
        return activity

    async def add_note(self, agent_id: UUID, lead_id: UUID, data: LeadNoteCreate) -> LeadNote:
        lead = await self._get_owned(agent_id, lead_id)
        note = LeadNote(
            lead_id=lead.id,
            agent_id=agent_id,
            note=data.note,
            is_important=data.is_important,
            is_private=data.is_private,
        )
        self.db.add(note)
        await self.db.commit()
        return note
