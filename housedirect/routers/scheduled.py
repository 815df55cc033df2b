"""Endpoints triggered by the external scheduler (cron)."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from housedirect.core.database import get_db
from housedirect.core.security import verify_cron_secret
from housedirect.services.notifications import (
    EmailService,
    NotificationDispatcher,
    get_email_service,
)
from housedirect.services.reminders import VerificationReminderService

router = APIRouter(
    prefix="/scheduled",
    tags=["scheduled"],
    dependencies=[Depends(verify_cron_secret)],
)


@router.post("/verification-reminders")
async def send_verification_reminders(
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Remind unverified agents and sellers with unverified listings."""
    service = VerificationReminderService(db, email_service)
    stats = await service.send_verification_reminders()
    return {
        "success": True,
        "message": "Verification reminders sent",
        "stats": stats.as_dict(),
    }


@router.post("/process-notifications")
async def process_notifications(
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Retry queued notification emails that have not been delivered yet."""
    stats = await NotificationDispatcher(db, email_service).process_pending(limit)
    return {"success": True, "stats": stats}
