"""VerificationRequest model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from housedirect.core.database import Base
from housedirect.models.enums import VerificationEntityType, VerificationStatus, db_enum

if TYPE_CHECKING:
    from housedirect.models.user import Profile


class VerificationRequest(Base):
    """A document submitted for admin review of an agent or a property.

    ``entity_id`` points at ``agents.id`` or ``properties.id`` depending on
    ``entity_type``; the database does not enforce the reference, so the
    service layer resolves it through ``EntityRef``.
    """

    __tablename__ = "verifications"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    entity_type: Mapped[VerificationEntityType] = mapped_column(
        db_enum(VerificationEntityType),
        nullable=False,
    )
    entity_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    document_type: Mapped[str] = mapped_column(String(100), nullable=False)
    document_url: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[VerificationStatus] = mapped_column(
        db_enum(VerificationStatus),
        default=VerificationStatus.PENDING,
        nullable=False,
        index=True,
    )
    review_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    submitted_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    reviewer: Mapped[Optional["Profile"]] = relationship(
        "Profile", foreign_keys=[reviewed_by], lazy="joined"
    )
