"""Jobs outbox service for async side effects.

Every notification is written to jobs_outbox in the same transaction as the
change that caused it, then delivered by NotificationDispatcher.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.config import get_settings
from housedirect.models.enums import JobStatus
from housedirect.models.jobs import JobsOutbox

logger = logging.getLogger(__name__)

SEND_NOTIFICATION = "send_notification"


class JobsService:
    """Service for managing async jobs via outbox pattern."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _insert(self):
        dialect = self.db.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite.insert(JobsOutbox)
        return postgresql.insert(JobsOutbox)

    async def enqueue(
        self,
        job_type: str,
        payload: dict[str, Any],
        unique_scope: str,
        run_after: Optional[datetime] = None,
    ) -> Optional[uuid.UUID]:
        """Enqueue a job with unique_scope de-duplication.

        If a job with the same unique_scope already exists, returns None.
        Otherwise returns the new job ID.
        """
        job_id = uuid.uuid4()
        now = datetime.utcnow()

        # INSERT ... ON CONFLICT DO NOTHING keeps enqueue idempotent
        stmt = self._insert().values(
            id=job_id,
            type=job_type,
            payload=payload,
            status=JobStatus.PENDING,
            unique_scope=unique_scope,
            attempts=0,
            max_attempts=get_settings().notification_max_attempts,
            run_after=run_after or now,
            created_at=now,
        ).on_conflict_do_nothing(index_elements=["unique_scope"])

        result = await self.db.execute(stmt)

        # rowcount will be 0 if conflict occurred
        if result.rowcount == 0:
            return None

        return job_id

    async def enqueue_notification(
        self,
        kind: str,
        to: str,
        params: dict[str, Any],
        unique_scope: str,
    ) -> Optional[uuid.UUID]:
        """Queue one templated email for delivery after commit."""
        return await self.enqueue(
            job_type=SEND_NOTIFICATION,
            payload={"kind": kind, "to": to, "params": params},
            unique_scope=unique_scope,
        )

    def _mark_processing(self, job: JobsOutbox) -> None:
        job.status = JobStatus.PROCESSING
        job.started_at = datetime.utcnow()
        job.attempts = (job.attempts or 0) + 1

    async def claim_job(self, job_id: uuid.UUID) -> Optional[JobsOutbox]:
        """Claim a single pending job; None if it is gone or already claimed."""
        result = await self.db.execute(
            select(JobsOutbox)
            .where(
                JobsOutbox.id == job_id,
                JobsOutbox.status == JobStatus.PENDING,
            )
            .with_for_update(skip_locked=True)
        )
        job = result.scalar_one_or_none()
        if job is None:
            return None

        self._mark_processing(job)
        await self.db.flush()
        return job

    async def claim_pending_jobs(
        self,
        job_type: Optional[str] = None,
        limit: int = 10,
    ) -> list[JobsOutbox]:
        """Claim pending jobs for processing.

        Also reclaims PROCESSING jobs whose lease expired without an outcome
        being recorded. Claimed jobs are marked PROCESSING with attempts bumped;
        a reclaimed job with no attempts left goes to DEAD_LETTER instead.
        """
        now = datetime.utcnow()
        lease_expired = now - timedelta(seconds=get_settings().notification_lease_seconds)
        query = (
            select(JobsOutbox)
            .where(
                or_(
                    and_(
                        JobsOutbox.status == JobStatus.PENDING,
                        JobsOutbox.run_after <= now,
                    ),
                    and_(
                        JobsOutbox.status == JobStatus.PROCESSING,
                        JobsOutbox.started_at < lease_expired,
                    ),
                )
            )
        )

        if job_type:
            query = query.where(JobsOutbox.type == job_type)

        query = (
            query.order_by(JobsOutbox.run_after)
            .limit(limit)
            .with_for_update(skip_locked=True)
        )

        result = await self.db.execute(query)

        claimed = []
        for job in result.scalars().all():
            if job.status == JobStatus.PROCESSING:
                logger.warning(
                    f"[OUTBOX] Job {job.id} lease expired after attempt "
                    f"{job.attempts}/{job.max_attempts}"
                )
                if job.attempts >= job.max_attempts:
                    job.status = JobStatus.DEAD_LETTER
                    job.last_error = job.last_error or "Delivery lease expired"
                    continue
            self._mark_processing(job)
            claimed.append(job)
        await self.db.flush()

        return claimed

    async def complete_job(self, job: JobsOutbox) -> None:
        """Mark job as completed."""
        job.status = JobStatus.COMPLETED
        job.completed_at = datetime.utcnow()
        job.last_error = None
        await self.db.flush()

    async def fail_job(
        self,
        job: JobsOutbox,
        error: str,
        dead_letter: bool = False,
    ) -> None:
        """Mark job as failed.

        If dead_letter=True or max attempts reached, moves to DEAD_LETTER.
        Otherwise, resets to PENDING for retry.
        """
        if dead_letter or job.attempts >= job.max_attempts:
            job.status = JobStatus.DEAD_LETTER
        else:
            job.status = JobStatus.PENDING
        job.last_error = error
        await self.db.flush()
