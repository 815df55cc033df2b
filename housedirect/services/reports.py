"""User reports (disputes) and their admin review workflow."""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.errors import DuplicateReportError, NotFoundError
from housedirect.models.agent import Agent
from housedirect.models.enums import AuditAction, ReportEntityType, ReportStatus
from housedirect.models.property import Property
from housedirect.models.report import Report
from housedirect.models.user import Profile
from housedirect.services.audit import AuditService
from housedirect.services.transitions import REPORT_TRANSITIONS, ensure_transition

logger = logging.getLogger(__name__)

REPORT_TARGETS = {
    ReportEntityType.PROPERTY: Property,
    ReportEntityType.AGENT: Agent,
    ReportEntityType.USER: Profile,
}


class ReportService:
    """Report submission for users and status handling for admins."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def _target_exists(self, entity_type: ReportEntityType, entity_id: UUID) -> bool:
        model = REPORT_TARGETS[entity_type]
        result = await self.db.execute(select(model.id).where(model.id == entity_id))
        return result.scalar_one_or_none() is not None

    async def _existing_report_id(
        self,
        reporter_id: UUID,
        entity_type: ReportEntityType,
        entity_id: UUID,
    ) -> Optional[UUID]:
        result = await self.db.execute(
            select(Report.id).where(
                Report.reporter_id == reporter_id,
                Report.entity_type == entity_type,
                Report.entity_id == entity_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        reporter_id: UUID,
        entity_type: ReportEntityType,
        entity_id: UUID,
        reason: str,
        description: str,
    ) -> Report:
        """File a new report; one per reporter per target."""
        if not await self._target_exists(entity_type, entity_id):
            raise NotFoundError(f"{entity_type.value} not found")

        existing_id = await self._existing_report_id(reporter_id, entity_type, entity_id)
        if existing_id:
            raise DuplicateReportError(
                "You have already reported this entity", report_id=str(existing_id)
            )

        report = Report(
            reporter_id=reporter_id,
            entity_type=entity_type,
            entity_id=entity_id,
            reason=reason,
            description=description,
            status=ReportStatus.NEW,
        )
        self.db.add(report)
        try:
            await self.db.flush()
        except IntegrityError:
            # Lost a race with a concurrent submission of the same report
            await self.db.rollback()
            existing_id = await self._existing_report_id(reporter_id, entity_type, entity_id)
            raise DuplicateReportError(
                "You have already reported this entity",
                report_id=str(existing_id) if existing_id else None,
            )

        await self.audit.log(
            action=AuditAction.REPORT_CREATED,
            resource_type="report",
            resource_id=report.id,
            user_id=reporter_id,
            details={"entity_type": entity_type.value, "entity_id": str(entity_id)},
        )
        await self.db.commit()
        await self.db.refresh(report, ["reporter"])
        return report

    async def list_for_reporter(self, reporter_id: UUID) -> list[Report]:
        result = await self.db.execute(
            select(Report)
            .where(Report.reporter_id == reporter_id)
            .order_by(Report.created_at.desc())
        )
        return list(result.unique().scalars().all())

    async def get_for_reporter(self, report_id: UUID, reporter_id: UUID) -> Report:
        """A report is only visible to the user who filed it."""
        result = await self.db.execute(
            select(Report).where(Report.id == report_id, Report.reporter_id == reporter_id)
        )
        report = result.unique().scalar_one_or_none()
        if report is None:
            raise NotFoundError("Report not found")
        return report

    async def list_reports(
        self,
        status: Optional[str] = None,
        limit: int = 100,
    ) -> list[Report]:
        query = select(Report).order_by(Report.created_at.desc()).limit(limit)
        if status and status != "all":
            query = query.where(Report.status == ReportStatus(status))
        result = await self.db.execute(query)
        return list(result.unique().scalars().all())

    async def get(self, report_id: UUID) -> Report:
        result = await self.db.execute(select(Report).where(Report.id == report_id))
        report = result.unique().scalar_one_or_none()
        if report is None:
            raise NotFoundError("Report not found")
        return report

    async def set_status(
        self,
        report_id: UUID,
        status: ReportStatus,
        reviewer_id: UUID,
        admin_notes: Optional[str] = None,
    ) -> Report:
        """Move a report through the review workflow. Sends no email."""
        try:
            result = await self.db.execute(
                select(Report)
                .where(Report.id == report_id)
                .with_for_update(of=Report)
            )
            report = result.unique().scalar_one_or_none()
            if report is None:
                raise NotFoundError("Report not found")

            previous = report.status
            ensure_transition("report", REPORT_TRANSITIONS, previous, status)

            report.status = status
            if admin_notes is not None:
                report.admin_notes = admin_notes
            report.reviewed_by = reviewer_id
            report.reviewed_at = datetime.utcnow()

            await self.audit.log_report_status_changed(report.id, reviewer_id, previous, status)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"[REPORTS] {report.id} {previous.value} -> {status.value} by {reviewer_id}")
        return report
