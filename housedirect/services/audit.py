"""Audit logging service."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.models.audit import AuditLog
from housedirect.models.enums import AuditAction, ReportStatus, VerificationEntityType


class AuditService:
    """Service for creating audit log entries."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def log(
        self,
        action: AuditAction,
        resource_type: str,
        resource_id: UUID,
        user_id: Optional[UUID] = None,
        details: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        """Create an audit log entry."""
        entry = AuditLog(
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            user_id=user_id,
            details=details or {},
            ip_address=ip_address,
        )
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def log_verification_decision(
        self,
        verification_id: UUID,
        approved: bool,
        reviewer_id: UUID,
        entity_type: VerificationEntityType,
        entity_id: UUID,
        review_notes: Optional[str] = None,
    ) -> AuditLog:
        """Log an admin approving or rejecting a verification document."""
        return await self.log(
            action=(
                AuditAction.VERIFICATION_APPROVED
                if approved
                else AuditAction.VERIFICATION_REJECTED
            ),
            resource_type="verification",
            resource_id=verification_id,
            user_id=reviewer_id,
            details={
                "entity_type": entity_type.value,
                "entity_id": str(entity_id),
                "review_notes": review_notes,
            },
        )

    async def log_verification_submitted(
        self,
        verification_id: UUID,
        user_id: UUID,
        entity_type: VerificationEntityType,
        entity_id: UUID,
        document_type: str,
    ) -> AuditLog:
        return await self.log(
            action=AuditAction.VERIFICATION_SUBMITTED,
            resource_type="verification",
            resource_id=verification_id,
            user_id=user_id,
            details={
                "entity_type": entity_type.value,
                "entity_id": str(entity_id),
                "document_type": document_type,
            },
        )

    async def log_report_status_changed(
        self,
        report_id: UUID,
        reviewer_id: UUID,
        previous: ReportStatus,
        new: ReportStatus,
    ) -> AuditLog:
        """Log a report moving through the review workflow."""
        return await self.log(
            action=AuditAction.REPORT_STATUS_CHANGED,
            resource_type="report",
            resource_id=report_id,
            user_id=reviewer_id,
            details={"from": previous.value, "to": new.value},
        )
