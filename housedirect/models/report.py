"""Report (dispute) model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, ForeignKey, Text, Uuid, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from housedirect.core.database import Base
from housedirect.models.enums import ReportEntityType, ReportStatus, db_enum

if TYPE_CHECKING:
    from housedirect.models.user import Profile


class Report(Base):
    """A user's report against a property, an agent or another user."""

    __tablename__ = "reports"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    entity_type: Mapped[ReportEntityType] = mapped_column(
        db_enum(ReportEntityType),
        nullable=False,
    )
    entity_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    reporter_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    reason: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[ReportStatus] = mapped_column(
        db_enum(ReportStatus),
        default=ReportStatus.NEW,
        nullable=False,
        index=True,
    )
    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    reporter: Mapped["Profile"] = relationship(
        "Profile", foreign_keys=[reporter_id], lazy="joined"
    )

    __table_args__ = (
        Index("ix_reports_target", "entity_type", "entity_id"),
        UniqueConstraint(
            "reporter_id", "entity_type", "entity_id", name="uq_reports_reporter_target"
        ),
    )
