"""Lead, LeadActivity and LeadNote models."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, ForeignKey, Text, Integer, Boolean, Numeric, Uuid, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from housedirect.core.database import Base
from housedirect.models.enums import (
    LeadStatus,
    LeadPriority,
    LeadInterestType,
    LeadActivityType,
    LeadActivityStatus,
    db_enum,
)

if TYPE_CHECKING:
    from housedirect.models.property import Property


class Lead(Base):
    """A prospective client tracked by one agent."""

    __tablename__ = "leads"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("agents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    property_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="SET NULL"),
        nullable=True,
    )
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    source: Mapped[str] = mapped_column(String(50), default="property_inquiry", nullable=False)

    status: Mapped[LeadStatus] = mapped_column(
        db_enum(LeadStatus),
        default=LeadStatus.NEW,
        nullable=False,
        index=True,
    )
    interest_type: Mapped[LeadInterestType] = mapped_column(
        db_enum(LeadInterestType),
        default=LeadInterestType.BUY,
        nullable=False,
    )
    budget_min: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    budget_max: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    preferred_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    priority: Mapped[LeadPriority] = mapped_column(
        db_enum(LeadPriority),
        default=LeadPriority.MEDIUM,
        nullable=False,
    )
    lead_score: Mapped[int] = mapped_column(Integer, default=50, nullable=False)

    first_contact_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    last_contact_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    closed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    listing: Mapped[Optional["Property"]] = relationship("Property", lazy="joined")

    @property
    def property_title(self) -> Optional[str]:
        return self.listing.title if self.listing else None

    __table_args__ = (
        CheckConstraint("lead_score BETWEEN 0 AND 100", name="ck_leads_score_range"),
    )


class LeadActivity(Base):
    """Append-only timeline entry for a lead."""

    __tablename__ = "lead_activities"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    lead_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("agents.id", ondelete="CASCADE"),
        nullable=False,
    )

    activity_type: Mapped[LeadActivityType] = mapped_column(
        db_enum(LeadActivityType),
        nullable=False,
    )
    subject: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    scheduled_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    status: Mapped[LeadActivityStatus] = mapped_column(
        db_enum(LeadActivityStatus),
        default=LeadActivityStatus.COMPLETED,
        nullable=False,
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Set when the activity was generated from an inquiry message
    message_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    property_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class LeadNote(Base):
    """Free-text note attached to a lead."""

    __tablename__ = "lead_notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    lead_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("agents.id", ondelete="CASCADE"),
        nullable=False,
    )

    note: Mapped[str] = mapped_column(Text, nullable=False)
    is_important: Mapped[bool] = mapped_column(Boolean, default=False)
    is_private: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
