"""Verification decision handling.

Approve/reject update the request and the agent or property it refers to in a
single transaction, together with an audit entry and the outbox job for the
owner's email. The email is delivered after commit; a failed send never rolls
the decision back and the job stays queued for retry.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.errors import EntityMissingError, ForbiddenError, NotFoundError
from housedirect.models.enums import (
    EntityVerificationStatus,
    VerificationStatus,
)
from housedirect.models.verification import VerificationRequest
from housedirect.services.audit import AuditService
from housedirect.services.entity_ref import EntityRef, EntityResolver, entity_ref_from
from housedirect.services.jobs import JobsService
from housedirect.services.notifications import EmailService, NotificationDispatcher
from housedirect.services.transitions import VERIFICATION_TRANSITIONS, ensure_transition

logger = logging.getLogger(__name__)

# Entity status written for each decision
ENTITY_STATUS_FOR_DECISION = {
    VerificationStatus.APPROVED: EntityVerificationStatus.VERIFIED,
    VerificationStatus.REJECTED: EntityVerificationStatus.REJECTED,
}


@dataclass
class DecisionOutcome:
    verification: VerificationRequest
    email_sent: bool


class VerificationService:
    """Admin review of verification documents."""

    def __init__(self, db: AsyncSession, email_service: EmailService):
        self.db = db
        self.email_service = email_service
        self.resolver = EntityResolver(db)
        self.audit = AuditService(db)
        self.jobs = JobsService(db)

    async def list_requests(self, status: Optional[str] = None) -> list[VerificationRequest]:
        """All requests newest first; ``status`` of None or "all" means no filter."""
        query = select(VerificationRequest).order_by(VerificationRequest.created_at.desc())
        if status and status != "all":
            query = query.where(VerificationRequest.status == VerificationStatus(status))
        result = await self.db.execute(query)
        return list(result.unique().scalars().all())

    async def list_pending(self) -> list[VerificationRequest]:
        return await self.list_requests(VerificationStatus.PENDING.value)

    async def get(self, verification_id: UUID) -> VerificationRequest:
        result = await self.db.execute(
            select(VerificationRequest).where(VerificationRequest.id == verification_id)
        )
        verification = result.unique().scalar_one_or_none()
        if verification is None:
            raise NotFoundError("Verification not found")
        return verification

    async def submit(
        self,
        ref: EntityRef,
        document_type: str,
        document_url: str,
        submitted_by: UUID,
    ) -> DecisionOutcome:
        """Create a pending request for an entity the submitter owns."""
        try:
            entity = await self.resolver.load(ref)
            if entity is None:
                raise NotFoundError(f"{ref.label} not found")
            if self.resolver.owner_id(ref, entity) != submitted_by:
                raise ForbiddenError(f"You can only submit documents for your own {ref.label}")

            verification = VerificationRequest(
                entity_type=ref.entity_type,
                entity_id=ref.entity_id,
                document_type=document_type,
                document_url=document_url,
                status=VerificationStatus.PENDING,
                submitted_by=submitted_by,
            )
            self.db.add(verification)
            await self.db.flush()

            await self.audit.log_verification_submitted(
                verification.id,
                submitted_by,
                ref.entity_type,
                ref.entity_id,
                document_type,
            )

            job_id = None
            owner = await self.resolver.owner(ref)
            if owner and owner.email:
                job_id = await self.jobs.enqueue_notification(
                    kind="document_submitted",
                    to=owner.email,
                    params={"document_type": document_type},
                    unique_scope=f"notify:verification:{verification.id}:submitted",
                )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            f"[VERIFICATION] {ref.entity_type.value} {ref.entity_id} submitted "
            f"{document_type} as {verification.id}"
        )
        email_sent = await self._deliver(job_id)
        await self.db.refresh(verification, ["reviewer"])
        return DecisionOutcome(verification=verification, email_sent=email_sent)

    async def approve(
        self,
        verification_id: UUID,
        reviewer_id: UUID,
        review_notes: Optional[str] = None,
    ) -> DecisionOutcome:
        return await self._decide(
            verification_id, VerificationStatus.APPROVED, reviewer_id, review_notes
        )

    async def reject(
        self,
        verification_id: UUID,
        reviewer_id: UUID,
        review_notes: str,
    ) -> DecisionOutcome:
        return await self._decide(
            verification_id, VerificationStatus.REJECTED, reviewer_id, review_notes
        )

    async def _decide(
        self,
        verification_id: UUID,
        decision: VerificationStatus,
        reviewer_id: UUID,
        review_notes: Optional[str],
    ) -> DecisionOutcome:
        try:
            # Row lock serializes concurrent decisions on the same request
            result = await self.db.execute(
                select(VerificationRequest)
                .where(VerificationRequest.id == verification_id)
                .with_for_update(of=VerificationRequest)
            )
            verification = result.unique().scalar_one_or_none()
            if verification is None:
                raise NotFoundError("Verification not found")

            ensure_transition(
                "verification", VERIFICATION_TRANSITIONS, verification.status, decision
            )

            ref = entity_ref_from(verification.entity_type, verification.entity_id)
            entity = await self.resolver.load(ref, for_update=True)
            if entity is None:
                raise EntityMissingError(
                    f"{ref.label} for this verification no longer exists",
                    entity_type=ref.entity_type.value,
                    entity_id=str(ref.entity_id),
                )

            verification.status = decision
            verification.reviewed_by = reviewer_id
            verification.review_notes = review_notes or None
            verification.reviewed_at = datetime.utcnow()
            entity.verification_status = ENTITY_STATUS_FOR_DECISION[decision]

            await self.audit.log_verification_decision(
                verification.id,
                approved=decision == VerificationStatus.APPROVED,
                reviewer_id=reviewer_id,
                entity_type=ref.entity_type,
                entity_id=ref.entity_id,
                review_notes=review_notes,
            )

            job_id = await self._queue_decision_email(verification, ref, decision)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            f"[VERIFICATION] {verification.id} {decision.value} by {reviewer_id} "
            f"({ref.entity_type.value} {ref.entity_id})"
        )

        email_sent = await self._deliver(job_id)
        await self.db.refresh(verification, ["reviewer"])
        return DecisionOutcome(verification=verification, email_sent=email_sent)

    async def _queue_decision_email(
        self,
        verification: VerificationRequest,
        ref: EntityRef,
        decision: VerificationStatus,
    ) -> Optional[UUID]:
        owner = await self.resolver.owner(ref)
        if owner is None or not owner.email:
            logger.warning(
                f"[VERIFICATION] No owner email for {ref.entity_type.value} {ref.entity_id}, "
                "skipping notification"
            )
            return None

        kind = (
            "verification_approved"
            if decision == VerificationStatus.APPROVED
            else "verification_rejected"
        )
        return await self.jobs.enqueue_notification(
            kind=kind,
            to=owner.email,
            params={
                "entity_type": ref.entity_type.value,
                "review_notes": verification.review_notes,
            },
            unique_scope=f"notify:verification:{verification.id}:{decision.value}",
        )

    async def _deliver(self, job_id: Optional[UUID]) -> bool:
        if job_id is None:
            return False
        dispatcher = NotificationDispatcher(self.db, self.email_service)
        result = await dispatcher.dispatch(job_id)
        return result.ok
